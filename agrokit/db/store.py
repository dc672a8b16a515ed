"""
Almacen relacional embebido con snapshot en disco.

La base vive en memoria (SQLite, una sola conexion compartida). Al construir
el store se copia el snapshot del disco a memoria; ``flush()`` hace el camino
inverso y reescribe el archivo completo. Cada escritura confirmada debe ir
seguida de un ``flush()``: el costo es proporcional al total de datos.
Desde los servicios el flush corre en el threadpool, bajo ``write_lock``,
para no frenar el event loop mientras se copia la base.
"""
import asyncio
import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from agrokit.db.init_db import init_db

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """No se pudo leer o escribir el snapshot en disco."""


class SnapshotStore:
    def __init__(self, db_file: str):
        self.db_file = db_file
        self.ready = False
        # serializa "escribir + flush"; las lecturas no lo toman
        self.write_lock = asyncio.Lock()

        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False)

        self._cargar_snapshot()
        init_db(self.engine)
        self.ready = True

    @contextmanager
    def _conexion(self) -> Iterator[sqlite3.Connection]:
        proxy = self.engine.raw_connection()
        try:
            yield proxy.driver_connection
        finally:
            proxy.close()

    def _cargar_snapshot(self) -> None:
        if not os.path.exists(self.db_file):
            logger.info("Sin snapshot en %s, se inicia con base vacía", self.db_file)
            return

        try:
            origen = sqlite3.connect(self.db_file)
            try:
                with self._conexion() as destino:
                    origen.backup(destino)
            finally:
                origen.close()
        except sqlite3.Error as e:
            raise SnapshotError(f"No se pudo cargar {self.db_file}: {e}") from e
        logger.info("Snapshot cargado desde %s", self.db_file)

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def flush(self) -> None:
        """Reescribe el snapshot completo en disco (escritura atomica via archivo temporal)."""
        tmp = f"{self.db_file}.tmp"
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.db_file)), exist_ok=True)
            destino = sqlite3.connect(tmp)
            try:
                with self._conexion() as origen:
                    origen.backup(destino)
            finally:
                destino.close()
            os.replace(tmp, self.db_file)
        except (OSError, sqlite3.Error) as e:
            raise SnapshotError(f"No se pudo guardar {self.db_file}: {e}") from e
        logger.debug("Snapshot guardado en %s", self.db_file)

    def close(self) -> None:
        self.ready = False
        self.engine.dispose()
