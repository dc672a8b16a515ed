from typing import List

from fastapi import APIRouter, Depends

from agrokit.core.deps import get_store, get_usuario_actual
from agrokit.db.store import SnapshotStore
from agrokit.schemas.dispositivo import AgrokitOut
from agrokit.services.consultas import listar_agrokits

router = APIRouter(prefix="/api/agrokits", tags=["agrokits"])

@router.get("", response_model=List[AgrokitOut])
async def listar(
    store: SnapshotStore = Depends(get_store),
    usuario: dict = Depends(get_usuario_actual),
):
    return listar_agrokits(store)
