from datetime import datetime
from typing import List, Literal
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
import logging

from utils.database import get_db
from utils.http_errors import to_http_exception
from utils.timeutils import get_now
from models.recap import RecapStatus
from models.user import AdminUser
from schemas.recap import RecapCreate, RecapDetailResponse, RecapReject, RecapResponse
from services import recap as recap_service
from services.errors import DomainError
from services.export import (
    PDF_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    build_report_rows,
    report_filename,
    write_pdf,
    write_xlsx,
)
from utils.auth import get_current_admin, get_current_manager, get_current_staff
from routes.notifications import notify_recap_event

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/recaps", tags=["recaps"])


@router.post("", response_model=RecapResponse, status_code=status.HTTP_201_CREATED)
async def request_recap(
    recap: RecapCreate,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_user: AdminUser = Depends(get_current_admin)
):
    try:
        db_recap = recap_service.request_recap(
            db,
            recap.period,
            now,
            requested_by=current_user.id,
            start_date=recap.start_date,
            end_date=recap.end_date,
        )
    except DomainError as e:
        db.rollback()
        logger.warning(f"Recap request by user {current_user.id} failed: {e.message}")
        raise to_http_exception(e, "Terjadi kesalahan saat membuat rekap")

    await notify_recap_event("recap_requested", db_recap.id, db_recap.status.value)
    return db_recap


@router.get("", response_model=List[RecapResponse])
async def list_recaps(db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_staff)):
    try:
        return recap_service.list_recaps(db)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{recap_id}", response_model=RecapDetailResponse)
async def get_recap_detail(recap_id: int, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_staff)):
    try:
        recap = recap_service.get_recap(db, recap_id)
        orders = recap_service.recap_orders(db, recap)
    except DomainError as e:
        raise to_http_exception(e)

    # Live figures are informational; the recap's stored totals are the approved ones
    live_revenue, live_orders = recap_service.summarize(orders)
    return {"recap": recap, "orders": orders, "live_revenue": live_revenue, "live_orders": live_orders}


async def _review(db: Session, recap_id: int, decision: RecapStatus, reviewer: AdminUser, reason: str = None):
    try:
        recap = recap_service.review_recap(db, recap_id, decision, reviewer.id, rejection_reason=reason)
    except DomainError as e:
        db.rollback()
        logger.warning(f"Review of recap {recap_id} by user {reviewer.id} failed: {e.message}")
        raise to_http_exception(e, "Terjadi kesalahan saat mengupdate status")

    await notify_recap_event("recap_reviewed", recap.id, recap.status.value)
    return recap


@router.post("/{recap_id}/approve", response_model=RecapResponse)
async def approve_recap(recap_id: int, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_manager)):
    return await _review(db, recap_id, RecapStatus.APPROVED, current_user)


@router.post("/{recap_id}/reject", response_model=RecapResponse)
async def reject_recap(
    recap_id: int,
    rejection: RecapReject = None,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_manager)
):
    reason = rejection.reason if rejection else None
    return await _review(db, recap_id, RecapStatus.REJECTED, current_user, reason)


@router.get("/{recap_id}/export")
async def export_recap(
    recap_id: int,
    format: Literal["xlsx", "pdf"] = Query("xlsx"),
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_admin)
):
    try:
        recap = recap_service.get_recap(db, recap_id)
        if recap.status != RecapStatus.APPROVED:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Only approved recaps can be exported")
        rows = build_report_rows(recap_service.recap_orders(db, recap))
    except DomainError as e:
        raise to_http_exception(e)

    if format == "pdf":
        buffer, media_type = write_pdf(recap, rows), PDF_MEDIA_TYPE
    else:
        buffer, media_type = write_xlsx(rows), XLSX_MEDIA_TYPE

    filename = report_filename(recap, format)
    logger.info(f"Recap {recap_id} exported as {format} by user {current_user.id}")
    return StreamingResponse(
        buffer,
        media_type=media_type,
        headers={'Content-Disposition': f'attachment; filename="{filename}"'}
    )


@router.delete("/{recap_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recap(recap_id: int, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_staff)):
    try:
        recap_service.delete_recap(db, recap_id)
    except DomainError as e:
        db.rollback()
        raise to_http_exception(e, "Terjadi kesalahan saat menghapus rekap")

    logger.info(f"Recap {recap_id} deleted by user {current_user.id}")
    await notify_recap_event("recap_deleted", recap_id)
