from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from starlette.requests import HTTPConnection

from agrokit.core.config import Settings
from agrokit.core.errors import Unauthorized
from agrokit.db.store import SnapshotStore
from agrokit.services.broadcast import ViewerHub
from agrokit.services.credenciales import verificar_token

# auto_error=False: sin token -> 401 propio; token invalido -> 403 en verificar_token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

def get_settings(conn: HTTPConnection) -> Settings:
    return conn.app.state.settings

def get_store(conn: HTTPConnection) -> SnapshotStore:
    return conn.app.state.store

def get_hub(conn: HTTPConnection) -> ViewerHub:
    return conn.app.state.hub

def get_usuario_actual(
    token: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
) -> dict:
    """Claims del token (id, username) para los endpoints protegidos."""
    if not token:
        raise Unauthorized("No token")
    return verificar_token(settings, token)
