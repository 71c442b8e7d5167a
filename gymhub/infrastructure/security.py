"""JWT helpers for the authentication boundary."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from gymhub.config import get_settings

ALGORITHM = "HS256"


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    return jwt.encode({**data, "exp": expire}, settings.secret_key, algorithm=ALGORITHM)


def create_user_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Issue a token whose ``sub`` claim carries ``user_id``."""

    return create_access_token({"sub": str(user_id)}, expires_delta)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc


__all__ = [
    "ALGORITHM",
    "create_access_token",
    "create_user_token",
    "decode_access_token",
]
