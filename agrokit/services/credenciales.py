import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from agrokit.core.config import Settings
from agrokit.core.errors import Conflict, Forbidden, ServerError, Unauthorized
from agrokit.core.security import (
    emitir_token,
    generar_hash_password,
    leer_token,
    verificar_password,
)
from agrokit.db.store import SnapshotStore
from agrokit.models.usuario import Usuario

logger = logging.getLogger(__name__)


async def registrar_usuario(store: SnapshotStore, username: str, password: str) -> None:
    """
    Crea el usuario con el hash bcrypt de la contraseña.
    Falla con Conflict si el username ya existe.
    """
    # bcrypt es lento: se calcula fuera del event loop
    password_hash = await run_in_threadpool(generar_hash_password, password)

    async with store.write_lock:
        try:
            with store.session() as db:
                if db.query(Usuario).filter(Usuario.username == username).first():
                    raise Conflict()
                db.add(Usuario(username=username, password_hash=password_hash))
                db.commit()
        except IntegrityError:
            raise Conflict()
        except SQLAlchemyError:
            logger.exception("Error registrando usuario %s", username)
            raise ServerError()

        await run_in_threadpool(store.flush)
    logger.info("Usuario registrado: %s", username)


async def autenticar(store: SnapshotStore, settings: Settings, username: str, password: str) -> str:
    """Devuelve un token firmado (12h por defecto) con id y username."""
    usuario_id = password_hash = None
    try:
        with store.session() as db:
            usuario = db.query(Usuario).filter(Usuario.username == username).first()
            if usuario is not None:
                usuario_id, password_hash = usuario.id, usuario.password_hash
    except SQLAlchemyError:
        logger.exception("Error consultando usuario %s", username)
        raise ServerError("DB error")

    if password_hash is None or not await run_in_threadpool(verificar_password, password, password_hash):
        raise Unauthorized()

    return emitir_token(settings, usuario_id, username)


def verificar_token(settings: Settings, token: str) -> dict:
    claims = leer_token(settings, token)
    if claims is None:
        raise Forbidden()
    return claims
