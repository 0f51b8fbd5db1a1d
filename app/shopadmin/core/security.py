from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi.security import OAuth2PasswordBearer
from jose import jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from app.shopadmin.core.config import Settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = OAuth2PasswordBearer(tokenUrl="/admin/login", auto_error=False)


class TokenData(BaseModel):
    sub: str
    store_id: str | None = None
    role: str
    exp: int | None = None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict[str, Any], settings: Settings, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str, settings: Settings) -> dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])


def create_admin_access_token(admin, settings: Settings, expires_delta: timedelta | None = None) -> str:
    # Only identifies the admin; role/store/status are re-read on every request.
    return create_access_token(
        {
            "sub": str(admin.id),
            "store_id": str(admin.store_id) if admin.store_id else None,
            "role": admin.role,
        },
        settings,
        expires_delta=expires_delta,
    )
