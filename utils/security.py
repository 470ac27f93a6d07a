from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional, Union
from jose import JWTError, jwt
from passlib.context import CryptContext

from config import Settings, get_settings


@lru_cache
def _pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str) -> str:
    return _pwd_context(get_settings().bcrypt_rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return _pwd_context(get_settings().bcrypt_rounds).verify(plain_password, hashed_password)


def _encode(claims: dict, secret: str, expires_delta: timedelta, now: Optional[datetime] = None) -> str:
    issued = now or datetime.now(timezone.utc)
    to_encode = claims.copy()
    to_encode.update({"iat": issued, "exp": issued + expires_delta})
    return jwt.encode(to_encode, secret, algorithm=Settings.ALGORITHM)


def create_access_token(user_id: int, role: str, now: Optional[datetime] = None) -> str:
    settings = get_settings()
    return _encode(
        {"userId": user_id, "role": role},
        settings.jwt_access_secret,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        now,
    )


def create_refresh_token(user_id: int, role: str, now: Optional[datetime] = None) -> str:
    settings = get_settings()
    return _encode(
        {"userId": user_id, "role": role},
        settings.jwt_refresh_secret,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        now,
    )


def _decode(token: str, secret: str) -> Union[dict, None]:
    try:
        payload = jwt.decode(token, secret, algorithms=[Settings.ALGORITHM])
    except JWTError:
        return None
    if "userId" not in payload or "role" not in payload:
        return None
    return payload


def decode_access_token(token: str) -> Union[dict, None]:
    return _decode(token, get_settings().jwt_access_secret)


def decode_refresh_token(token: str) -> Union[dict, None]:
    return _decode(token, get_settings().jwt_refresh_secret)
