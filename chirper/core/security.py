import base64
import binascii
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from chirper.core.errors import EntropySourceError, HashingError, InvalidInput

# Контекст для хеширования паролей (bcrypt, стоимость по умолчанию)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

REMEMBER_TOKEN_BYTES = 32
# bcrypt читает только первые 72 байта входа
BCRYPT_MAX_BYTES = 72
STATE_TOKEN_ALGORITHM = "HS256"
STATE_TOKEN_TTL = timedelta(minutes=10)


def peppered_length(password: str, pepper: str) -> int:
    return len((password + pepper).encode())


def hash_password(password: str, pepper: str) -> str:
    """Хеширование пароля с перцем"""
    if peppered_length(password, pepper) > BCRYPT_MAX_BYTES:
        raise InvalidInput("The password is too long.")
    try:
        return pwd_context.hash(password + pepper)
    except (ValueError, RuntimeError, OSError) as e:
        raise HashingError(f"bcrypt failed to hash password: {e}") from e


def verify_password(password_hash: str, password: str, pepper: str) -> bool:
    """Проверка пароля против сохраненного хеша"""
    # Такой пароль не мог быть захеширован
    if peppered_length(password, pepper) > BCRYPT_MAX_BYTES:
        return False
    try:
        return pwd_context.verify(password + pepper, password_hash)
    except (ValueError, TypeError) as e:
        raise HashingError(f"stored password hash is unusable: {e}") from e


def keyed_hash(key: str, value: str) -> str:
    """Детерминированный HMAC-SHA256 в URL-safe base64 (только для remember-токенов)"""
    digest = hmac.new(key.encode(), value.encode(), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).decode()


def generate_token(n_bytes: int = REMEMBER_TOKEN_BYTES) -> str:
    """Случайный токен из криптографически стойкого источника"""
    try:
        raw = secrets.token_bytes(n_bytes)
    except (OSError, NotImplementedError) as e:
        raise EntropySourceError(f"random source unavailable: {e}") from e
    return base64.urlsafe_b64encode(raw).decode()


def decoded_byte_length(token: str) -> int:
    """Количество байт в токене после base64-декодирования"""
    try:
        return len(base64.b64decode(token.encode(), altchars=b"-_", validate=True))
    except (binascii.Error, ValueError) as e:
        raise InvalidInput("The remember token is invalid.") from e


def create_state_token(key: str, expires_delta: Optional[timedelta] = None) -> tuple[str, str]:
    """Создание OAuth state и его подписанной копии для cookie"""
    state = secrets.token_urlsafe(32)
    expire = datetime.now(timezone.utc) + (expires_delta or STATE_TOKEN_TTL)
    signed = jwt.encode({"state": state, "exp": expire}, key, algorithm=STATE_TOKEN_ALGORITHM)
    return state, signed


def verify_state_token(signed: str, state: str, key: str) -> bool:
    """Проверка state, вернувшегося от провайдера"""
    if not signed or not state:
        return False
    try:
        payload = jwt.decode(signed, key, algorithms=[STATE_TOKEN_ALGORITHM])
    except JWTError:
        return False
    return hmac.compare_digest(payload.get("state", ""), state)
