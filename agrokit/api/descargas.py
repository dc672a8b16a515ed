from io import BytesIO

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from agrokit.core.deps import get_store, get_usuario_actual
from agrokit.db.store import SnapshotStore
from agrokit.services.consultas import historial_completo
from agrokit.services.exportacion import XLSX_MEDIA_TYPE, generar_excel, nombre_archivo

router = APIRouter(prefix="/api/download", tags=["descargas"])


@router.get("/{id_agrokit}")
async def descargar_excel(
    id_agrokit: str,
    store: SnapshotStore = Depends(get_store),
    usuario: dict = Depends(get_usuario_actual),
):
    """
    Historial completo del agrokit (mas nuevo primero) en .xlsx.
    Mismas columnas que el listado publico: sin gps ni bateria.
    """
    filas = historial_completo(store, id_agrokit)
    contenido = await run_in_threadpool(generar_excel, filas)

    filename = nombre_archivo(id_agrokit)
    return StreamingResponse(
        BytesIO(contenido),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
