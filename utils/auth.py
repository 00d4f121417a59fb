from datetime import timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from utils.database import get_db
from utils.timeutils import utcnow
from models.user import AdminUser, UserRole
from schemas.user import TokenData
import logging
import os

logger = logging.getLogger(__name__)

# JWT Configuration
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 1440))

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Use HTTPBearer for simpler JWT token authentication
bearer_scheme = HTTPBearer()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def sign_up(db: Session, email: str, password: str, full_name: str, role: UserRole) -> AdminUser:
    """Create a staff account. Raises 400 when the email is already taken."""
    existing_user = db.query(AdminUser).filter(AdminUser.email == email).first()
    if existing_user:
        logger.warning(f"Sign-up failed: email already registered: {email}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    db_user = AdminUser(
        email=email,
        full_name=full_name,
        hashed_password=get_password_hash(password),
        role=role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"Admin user registered: {db_user.email} (ID: {db_user.id}, Role: {db_user.role.value})")
    return db_user


def sign_in(db: Session, email: str, password: str) -> dict:
    """
    Check credentials and open a session.

    The role is resolved here, once, and carried in both the token and the
    returned session so callers never have to look it up again.
    """
    user = db.query(AdminUser).filter(AdminUser.email == email).first()
    if not user or not verify_password(password, user.hashed_password):
        logger.warning(f"Failed login attempt for {email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email atau password salah",
            headers={"WWW-Authenticate": "Bearer"},
        )

    role = UserRole(user.role)
    access_token = create_access_token({"sub": user.email, "role": role.value})
    logger.info(f"User {user.id} logged in as {role.value}")
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "role": role,
        "dashboard": role.dashboard,
    }


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme), db: Session = Depends(get_db)) -> AdminUser:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        token = credentials.credentials
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email: str = payload.get("sub")
        if email is None:
            raise credentials_exception
        token_data = TokenData(email=email, role=payload.get("role"))
    except JWTError as e:
        if "expired" in str(e).lower():
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"},
            )
        raise credentials_exception

    user = db.query(AdminUser).filter(AdminUser.email == token_data.email).first()
    if user is None:
        raise credentials_exception
    return user


def require_role(*allowed_roles: UserRole):
    async def role_dependency(current_user: AdminUser = Depends(get_current_user)) -> AdminUser:
        if current_user.role not in allowed_roles:
            logger.warning(f"User {current_user.id} with role {current_user.role.value} denied access")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return current_user
    return role_dependency


get_current_admin = require_role(UserRole.ADMIN)
get_current_manager = require_role(UserRole.MANAGER)
get_current_staff = require_role(UserRole.ADMIN, UserRole.MANAGER)
