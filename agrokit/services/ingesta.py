import json
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from agrokit.core.errors import BadRequest, ServerError
from agrokit.db.store import SnapshotStore
from agrokit.models.dispositivo import Agrokit
from agrokit.models.lectura import Lectura
from agrokit.schemas.lectura import LecturaIn, RegistroOut
from agrokit.services.broadcast import EVENTO_NUEVO_REGISTRO, ViewerHub

logger = logging.getLogger(__name__)

CAMPOS_SENSOR = (
    "humedad_tierra",
    "temp_aire",
    "humedad_aire",
    "temp_suelo",
    "luz",
    "presion",
    "agua",
)


def _es_numero(valor: Any) -> bool:
    return isinstance(valor, (int, float)) and not isinstance(valor, bool)


def normalizar_lectura(lectura: LecturaIn) -> Dict[str, Any]:
    """
    Valores listos para la fila de "sensores":
      - campos ausentes -> None (nunca 0)
      - gps -> JSON compacto, solo si viene con valor
      - bateria -> solo si es numerica
      - fechaHora -> "fecha" tal cual; si no viene, la pone la base
    """
    valores: Dict[str, Any] = {"id_agrokit": lectura.id_agrokit}
    for campo in CAMPOS_SENSOR:
        valores[campo] = getattr(lectura, campo)

    valores["gps"] = json.dumps(lectura.gps, separators=(",", ":")) if lectura.gps else None
    valores["bateria"] = lectura.bateria if _es_numero(lectura.bateria) else None

    if lectura.fechaHora:
        valores["fecha"] = lectura.fechaHora
    return valores


def _releer(store: SnapshotStore, lectura_id: int) -> Optional[Dict[str, Any]]:
    try:
        with store.session() as db:
            fila = db.get(Lectura, lectura_id)
            if fila is None:
                return None
            return RegistroOut.model_validate(fila).model_dump()
    except (SQLAlchemyError, ValidationError) as e:
        logger.warning("No se pudo recuperar la lectura %s: %s", lectura_id, e)
        return None


async def ingerir_lectura(store: SnapshotStore, hub: ViewerHub, lectura: LecturaIn) -> Dict[str, Any]:
    """
    Guarda una lectura, registra el agrokit si es nuevo (nunca pisa el nombre),
    persiste el snapshot y publica el evento a los visores.

    Devuelve {"success", "id", "registro"}; si la fila no se puede releer,
    solo {"success", "id"}.
    """
    if not lectura.id_agrokit:
        raise BadRequest("Falta id_agrokit")

    valores = normalizar_lectura(lectura)
    id_agrokit = valores["id_agrokit"]

    registro_agrokit = (
        sqlite_insert(Agrokit)
        .values(id_agrokit=id_agrokit, name=id_agrokit)
        .on_conflict_do_nothing(index_elements=["id_agrokit"])
    )

    async with store.write_lock:
        try:
            with store.session() as db:
                fila = Lectura(**valores)
                db.add(fila)
                db.flush()
                lectura_id = fila.id
                nuevo_agrokit = db.execute(registro_agrokit).rowcount == 1
                db.commit()
        except SQLAlchemyError:
            logger.exception("Error al insertar lectura de %s", id_agrokit)
            raise ServerError("Error al insertar")

        await run_in_threadpool(store.flush)

    if nuevo_agrokit:
        logger.info("Nuevo agrokit registrado: %s", id_agrokit)
    logger.info("Lectura %s guardada para %s", lectura_id, id_agrokit)

    registro = _releer(store, lectura_id)
    if registro is None:
        evento = {k: v for k, v in valores.items() if k != "fecha"}
        evento.update(id=lectura_id, timestamp=valores.get("fecha"))
        respuesta = {"success": True, "id": lectura_id}
    else:
        evento = registro
        respuesta = {"success": True, "id": lectura_id, "registro": registro}

    await hub.broadcast(EVENTO_NUEVO_REGISTRO, evento)
    return respuesta
