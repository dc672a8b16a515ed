"""
Hash de contraseñas y tokens de sesion.

Forma del token (HS256, firmado con SECRET_KEY):
    {"sub": "<id>", "id": <id>, "username": "<username>", "iat": ..., "exp": ...}
"sub" es el id como texto porque python-jose exige string en ese claim.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from agrokit.core.config import Settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

CLAIMS_IDENTIDAD = ("sub", "id", "username")


def generar_hash_password(password_plain: str) -> str:
    return pwd_context.hash(password_plain)


def verificar_password(password_plain: str, password_hash: str) -> bool:
    return pwd_context.verify(password_plain, password_hash)


def emitir_token(
    settings: Settings,
    usuario_id: int,
    username: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    ahora = datetime.now(timezone.utc)
    vence = ahora + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": str(usuario_id),
        "id": usuario_id,
        "username": username,
        "iat": int(ahora.timestamp()),
        "exp": int(vence.timestamp()),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def leer_token(settings: Settings, token: str) -> Optional[dict]:
    """Claims de un token valido y vigente; None si la firma falla, vencio o le falta identidad."""
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if any(clave not in claims for clave in CLAIMS_IDENTIDAD):
        return None
    return claims
