from sqlalchemy import Column, Integer, String
from agrokit.db.base import Base

class Agrokit(Base):
    """Registro de dispositivos: se crea con la primera lectura recibida."""

    __tablename__ = "agrokits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    id_agrokit = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=True)
    api_key = Column(String, nullable=True)          # reservado, hoy sin uso
