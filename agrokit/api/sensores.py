from typing import List

from fastapi import APIRouter, Depends

from agrokit.core.config import Settings
from agrokit.core.deps import get_hub, get_settings, get_store
from agrokit.db.store import SnapshotStore
from agrokit.schemas.lectura import LecturaIn, LecturaOut
from agrokit.services.broadcast import ViewerHub
from agrokit.services.consultas import listar_recientes
from agrokit.services.ingesta import ingerir_lectura

router = APIRouter(prefix="/api/sensores", tags=["sensores"])


# Publico: lo llama el ESP32 (sin token)
@router.post("")
async def recibir_lectura(
    lectura: LecturaIn,
    store: SnapshotStore = Depends(get_store),
    hub: ViewerHub = Depends(get_hub),
):
    return await ingerir_lectura(store, hub, lectura)


# Salida basica: sin gps ni bateria
@router.get("/{id_agrokit}", response_model=List[LecturaOut])
async def lecturas_recientes(
    id_agrokit: str,
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    return listar_recientes(store, id_agrokit, limite=settings.RECENT_LIMIT)
