from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from sqlalchemy.orm import Session
from typing import List, Optional

from utils.database import get_db
from utils.repository import Repository
from utils.storage import FileStorage, get_storage, build_object_name
from utils.http_errors import to_http_exception
from models.menu_management import MenuItem, MenuCategory
from models.user import AdminUser
from schemas.menu_management import MenuItemCreate, MenuItemUpdate, MenuItemResponse, ImageUploadResponse
from services.errors import DomainError
from utils.auth import get_current_admin
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/menu", tags=["menu"])

MENU_ORDER = [MenuItem.category, MenuItem.name]


@router.get("", response_model=List[MenuItemResponse])
async def list_available_menu_items(category: Optional[MenuCategory] = None, db: Session = Depends(get_db)):
    filters = [MenuItem.is_available.is_(True)]
    if category:
        filters.append(MenuItem.category == category)
    return Repository(db, MenuItem).list(filters=filters, order_by=MENU_ORDER)


@router.get("/all", response_model=List[MenuItemResponse])
async def list_all_menu_items(db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    return Repository(db, MenuItem).list(order_by=MENU_ORDER)


@router.get("/{item_id}", response_model=MenuItemResponse)
async def get_menu_item(item_id: int, db: Session = Depends(get_db)):
    try:
        return Repository(db, MenuItem).get_or_404(item_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
async def create_menu_item(item: MenuItemCreate, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    items = Repository(db, MenuItem)
    try:
        db_item = items.insert(MenuItem(**item.model_dump()))
        items.commit()
    except DomainError as e:
        items.rollback()
        raise to_http_exception(e, "Terjadi kesalahan saat menyimpan menu")
    db.refresh(db_item)
    logger.info(f"Menu item {db_item.id} created by user {current_user.id}")
    return db_item


@router.put("/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    item_id: int,
    item_update: MenuItemUpdate,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_admin)
):
    items = Repository(db, MenuItem)
    try:
        db_item = items.update(item_id, item_update.model_dump(exclude_unset=True))
        items.commit()
    except DomainError as e:
        items.rollback()
        raise to_http_exception(e, "Terjadi kesalahan saat menyimpan menu")
    db.refresh(db_item)
    logger.info(f"Menu item {item_id} updated by user {current_user.id}")
    return db_item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_menu_item(item_id: int, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    # Past order lines keep their price snapshot and the now dangling id
    items = Repository(db, MenuItem)
    try:
        items.delete(item_id)
        items.commit()
    except DomainError as e:
        items.rollback()
        raise to_http_exception(e, "Terjadi kesalahan saat menghapus menu")
    logger.info(f"Menu item {item_id} deleted by user {current_user.id}")


@router.post("/images", response_model=ImageUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_menu_image(
    file: UploadFile = File(...),
    storage: FileStorage = Depends(get_storage),
    current_user: AdminUser = Depends(get_current_admin)
):
    if file.content_type and not file.content_type.startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only image uploads are accepted")
    data = await file.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty file")
    try:
        url = storage.upload(build_object_name(file.filename or "upload.bin"), data)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to store menu image {file.filename}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to upload image")
    logger.info(f"Menu image uploaded by user {current_user.id}: {url}")
    return {"url": url}
