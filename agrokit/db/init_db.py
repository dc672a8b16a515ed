from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from agrokit.db.base import Base
# importados para registrar las tablas en Base.metadata
from agrokit.models import dispositivo, lectura, usuario  # noqa: F401

# columnas agregadas despues de la primera version de "sensores"
COLUMNAS_TARDIAS = {"gps": "TEXT", "bateria": "REAL"}

def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)

    existentes = {c["name"] for c in inspect(engine).get_columns("sensores")}
    with engine.begin() as conn:
        for nombre, tipo in COLUMNAS_TARDIAS.items():
            if nombre not in existentes:
                conn.execute(text(f"ALTER TABLE sensores ADD COLUMN {nombre} {tipo}"))
