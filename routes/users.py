from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from models.user import AdminUser
from utils.auth import get_current_user, sign_in, sign_up
from utils.database import get_db
from schemas.user import UserCreate, UserResponse, Token, LoginRequest
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(user: UserCreate, db: Session = Depends(get_db)):
    try:
        logger.info(f"Attempting to register user with email: {user.email}")
        return sign_up(db, user.email, user.password, user.full_name, user.role)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error registering user {user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Terjadi kesalahan saat membuat admin"
        )


@router.post("/login", response_model=Token)
async def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    return sign_in(db, login_data.email, login_data.password)


@router.get("/me", response_model=UserResponse)
async def read_current_user(current_user: AdminUser = Depends(get_current_user)):
    return current_user
