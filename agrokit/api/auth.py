from fastapi import APIRouter, Depends

from agrokit.core.config import Settings
from agrokit.core.deps import get_settings, get_store
from agrokit.core.errors import BadRequest
from agrokit.db.store import SnapshotStore
from agrokit.schemas.usuario import Credenciales, MensajeOut, TokenOut
from agrokit.services.credenciales import autenticar, registrar_usuario

router = APIRouter(prefix="/api/auth", tags=["auth"])

@router.post("/register", response_model=MensajeOut)
async def register(body: Credenciales, store: SnapshotStore = Depends(get_store)):
    if not body.username or not body.password:
        raise BadRequest()
    await registrar_usuario(store, body.username, body.password)
    return {"msg": "Usuario registrado"}

@router.post("/login", response_model=TokenOut)
async def login(
    body: Credenciales,
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    if not body.username or not body.password:
        raise BadRequest()
    token = await autenticar(store, settings, body.username, body.password)
    return {"token": token}
