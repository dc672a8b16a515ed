import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from agrokit.api import agrokits, auth, descargas, sensores, tiempo_real
from agrokit.core.config import Settings
from agrokit.core.logs import configure_logging
from agrokit.db.store import SnapshotError, SnapshotStore
from agrokit.services.broadcast import ViewerHub

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[SnapshotStore] = None) -> FastAPI:
    """
    Arma la aplicacion. El store se crea al arrancar (salvo que venga
    inyectado) y al apagar se guarda el snapshot una ultima vez.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)
        if settings.usa_secreto_por_defecto:
            logger.warning("SECRET_KEY sin configurar: se usa el valor por defecto (inseguro)")

        app.state.store = store or SnapshotStore(settings.DB_FILE)
        logger.info("Servidor listo, snapshot en %s", app.state.store.db_file)

        yield

        logger.info("Apagando: guardando snapshot final")
        try:
            app.state.store.flush()
        finally:
            app.state.store.close()

    app = FastAPI(title="AgroKit API", lifespan=lifespan)
    app.state.settings = settings
    app.state.hub = ViewerHub()
    app.state.store = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def datos_invalidos(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": "Datos inválidos"})

    @app.exception_handler(SnapshotError)
    @app.exception_handler(SQLAlchemyError)
    async def error_almacenamiento(request: Request, exc: Exception):
        logger.error("Error de almacenamiento en %s: %s", request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Error servidor"})

    app.include_router(auth.router)
    app.include_router(sensores.router)
    app.include_router(descargas.router)
    app.include_router(agrokits.router)
    app.include_router(tiempo_real.router)

    @app.get("/api/health", tags=["health"])
    async def health():
        store_actual = app.state.store
        return {
            "status": "ok",
            "server_time": datetime.now(timezone.utc).isoformat(),
            "db_ready": bool(store_actual is not None and store_actual.ready),
        }

    # visor web estatico; se monta al final para no tapar /api ni /ws
    if os.path.isdir(settings.PUBLIC_DIR):
        app.mount("/", StaticFiles(directory=settings.PUBLIC_DIR, html=True), name="public")

    return app


app = create_app()


def run():
    settings = app.state.settings
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
