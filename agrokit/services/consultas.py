import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from agrokit.core.errors import ServerError
from agrokit.db.store import SnapshotStore
from agrokit.models.dispositivo import Agrokit
from agrokit.models.lectura import Lectura
from agrokit.schemas.dispositivo import AgrokitOut
from agrokit.schemas.lectura import LecturaOut

logger = logging.getLogger(__name__)


def _lecturas(store: SnapshotStore, id_agrokit: str, limite: Optional[int]) -> List[Dict[str, Any]]:
    # mas nuevas primero; el id desempata lecturas del mismo segundo
    try:
        with store.session() as db:
            q = (
                db.query(Lectura)
                .filter(Lectura.id_agrokit == id_agrokit)
                .order_by(Lectura.fecha.desc(), Lectura.id.desc())
            )
            if limite is not None:
                q = q.limit(limite)
            return [LecturaOut.model_validate(fila).model_dump() for fila in q.all()]
    except (SQLAlchemyError, ValidationError):
        # ValidationError: filas heredadas con texto en columnas numericas
        logger.exception("DB select error (%s)", id_agrokit)
        raise ServerError("Error DB")


def listar_recientes(store: SnapshotStore, id_agrokit: str, limite: int = 100) -> List[Dict[str, Any]]:
    """Ultimas ``limite`` lecturas, sin gps ni bateria."""
    return _lecturas(store, id_agrokit, limite)


def historial_completo(store: SnapshotStore, id_agrokit: str) -> List[Dict[str, Any]]:
    return _lecturas(store, id_agrokit, None)


def listar_agrokits(store: SnapshotStore) -> List[Dict[str, Any]]:
    try:
        with store.session() as db:
            return [AgrokitOut.model_validate(a).model_dump() for a in db.query(Agrokit).order_by(Agrokit.id).all()]
    except (SQLAlchemyError, ValidationError):
        logger.exception("Error listando agrokits")
        raise ServerError("DB error")
