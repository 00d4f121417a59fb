import enum
import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from models.order_management import Order, OrderStatus
from models.recap import Recap, RecapStatus
from services.errors import InvalidTransitionError, NotFoundError, ValidationError
from utils.repository import Repository
from utils.timeutils import days_ago, end_of_day, start_of_day, start_of_month

logger = logging.getLogger(__name__)

# period_start recorded for an all-time recap
ALL_TIME_START = date(2020, 1, 1)


class RecapPeriod(str, enum.Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"
    CUSTOM = "custom"


RECAP_TRANSITIONS = {
    RecapStatus.PENDING: {RecapStatus.APPROVED, RecapStatus.REJECTED},
    RecapStatus.APPROVED: set(),
    RecapStatus.REJECTED: set(),
}


@dataclass
class RecapWindow:
    period_start: date
    period_end: date
    since: Optional[datetime] = None
    until: Optional[datetime] = None

    def contains(self, moment: datetime) -> bool:
        if self.since is not None and moment < self.since:
            return False
        if self.until is not None and moment > self.until:
            return False
        return True

    def criteria(self) -> list:
        criteria = []
        if self.since is not None:
            criteria.append(Order.created_at >= self.since)
        if self.until is not None:
            criteria.append(Order.created_at <= self.until)
        return criteria


def resolve_period(
    period: RecapPeriod,
    now: datetime,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> RecapWindow:
    today = now.date()
    if period == RecapPeriod.TODAY:
        return RecapWindow(today, today, since=start_of_day(now))
    if period == RecapPeriod.WEEK:
        # Rolling 7x24h; the stored start date is the day that window opens on
        week_ago = days_ago(now, 7)
        return RecapWindow(week_ago.date(), today, since=week_ago)
    if period == RecapPeriod.MONTH:
        month_start = start_of_month(now)
        return RecapWindow(month_start.date(), today, since=month_start)
    if period == RecapPeriod.CUSTOM:
        if start_date is None or end_date is None:
            raise ValidationError("start_date and end_date are required for a custom period")
        if start_date > end_date:
            raise ValidationError("start_date must not be after end_date")
        return RecapWindow(start_date, end_date, since=datetime.combine(start_date, time.min), until=end_of_day(end_date))
    return RecapWindow(ALL_TIME_START, today)


def summarize(orders) -> Tuple[int, int]:
    orders = list(orders)
    return sum(order.total_amount for order in orders), len(orders)


def completed_orders_in(db: Session, window: RecapWindow) -> List[Order]:
    filters = [Order.status == OrderStatus.COMPLETED] + window.criteria()
    return Repository(db, Order).list(filters=filters, order_by=[Order.created_at.asc(), Order.id.asc()])


def request_recap(
    db: Session,
    period: RecapPeriod,
    now: datetime,
    requested_by: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Recap:
    """
    Snapshot revenue and order count of completed orders in the period into a
    new pending recap. The stored figures never change afterwards.
    """
    window = resolve_period(period, now, start_date, end_date)
    total_revenue, total_orders = summarize(completed_orders_in(db, window))

    recaps = Repository(db, Recap)
    recap = recaps.insert(Recap(
        period_start=window.period_start,
        period_end=window.period_end,
        total_revenue=total_revenue,
        total_orders=total_orders,
        status=RecapStatus.PENDING,
        notes=f"Rekap {period.value}",
        created_by=requested_by,
    ))
    recaps.commit()
    db.refresh(recap)
    logger.info(
        f"Recap {recap.id} requested by {requested_by} for {window.period_start}..{window.period_end}: "
        f"{total_orders} orders, revenue {total_revenue}"
    )
    return recap


def list_recaps(db: Session) -> List[Recap]:
    return Repository(db, Recap).list(order_by=[Recap.created_at.desc(), Recap.id.desc()])


def validate_recap_transition(current: RecapStatus, new: RecapStatus) -> None:
    if new not in RECAP_TRANSITIONS[RecapStatus(current)]:
        raise InvalidTransitionError(f"Recap is already {RecapStatus(current).value}")


def review_recap(
    db: Session,
    recap_id: int,
    decision: RecapStatus,
    reviewer_id: int,
    rejection_reason: Optional[str] = None,
) -> Recap:
    """
    Approve or reject a pending recap, exactly once.

    The update only matches while the row is still pending, so a second
    review (from a stale screen or a concurrent manager) fails with
    ``InvalidTransitionError`` instead of overwriting the first one.
    """
    recaps = Repository(db, Recap)
    recap = recaps.get_or_404(recap_id)
    validate_recap_transition(recap.status, decision)

    changes = {"status": decision, "approved_by": reviewer_id}
    if decision == RecapStatus.REJECTED:
        changes["rejection_reason"] = rejection_reason or None

    matched = recaps.update_where([Recap.id == recap_id, Recap.status == RecapStatus.PENDING], changes)
    if matched == 0:
        recaps.rollback()
        db.refresh(recap)
        raise InvalidTransitionError(f"Recap is already {recap.status.value}")

    recaps.commit()
    db.refresh(recap)
    logger.info(f"Recap {recap_id} {decision.value} by user {reviewer_id}")
    return recap


def recap_window(recap: Recap) -> RecapWindow:
    return RecapWindow(
        recap.period_start,
        recap.period_end,
        since=datetime.combine(recap.period_start, time.min),
        until=end_of_day(recap.period_end),
    )


def recap_orders(db: Session, recap: Recap) -> List[Order]:
    """Completed orders currently inside the recap's date range, for display and export."""
    return completed_orders_in(db, recap_window(recap))


def get_recap(db: Session, recap_id: int) -> Recap:
    recap = Repository(db, Recap).get(recap_id)
    if recap is None:
        raise NotFoundError(f"Recap {recap_id} not found")
    return recap


def delete_recap(db: Session, recap_id: int) -> None:
    recaps = Repository(db, Recap)
    recaps.delete(recap_id)
    recaps.commit()
    logger.info(f"Recap {recap_id} deleted")
