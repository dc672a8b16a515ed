from sqlalchemy import Column, Float, Integer, String, text
from agrokit.db.base import Base

class Lectura(Base):
    __tablename__ = "sensores"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # sin FK: la lectura puede llegar antes de que exista el agrokit en el registro
    id_agrokit = Column(String, nullable=False, index=True)

    humedad_tierra = Column(Float, nullable=True)
    temp_aire = Column(Float, nullable=True)
    humedad_aire = Column(Float, nullable=True)
    temp_suelo = Column(Float, nullable=True)
    luz = Column(Float, nullable=True)
    presion = Column(Float, nullable=True)
    agua = Column(Integer, nullable=True)            # 0 / 1
    gps = Column(String, nullable=True)              # JSON serializado, ej: {"lat": -12.1, "lon": -76.1}
    bateria = Column(Float, nullable=True)

    # texto "YYYY-MM-DD HH:MM:SS"; si el equipo manda fechaHora se guarda tal cual
    fecha = Column(String, nullable=False, server_default=text("CURRENT_TIMESTAMP"), index=True)
