from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field

class LecturaIn(BaseModel):
    """
    Lectura enviada por el ESP32. Todo es opcional salvo id_agrokit
    (se valida en el servicio para responder 400). Ejemplo:

      {"id_agrokit": "KIT123", "humedad_tierra": 20, "temp_aire": 27,
       "agua": 1, "gps": {"lat": -12.12, "lon": -76.12}, "bateria": 92.5,
       "fechaHora": "2025-08-18 00:12:34"}
    """
    id_agrokit: Optional[str] = None
    humedad_tierra: Optional[float] = None
    temp_aire: Optional[float] = None
    humedad_aire: Optional[float] = None
    temp_suelo: Optional[float] = None
    luz: Optional[float] = None
    presion: Optional[float] = None
    agua: Optional[int] = None
    gps: Optional[Any] = None
    bateria: Optional[Any] = None   # solo se guarda si es numerico
    fechaHora: Optional[str] = None

    class Config:
        # el firmware puede mandar id_agrokit numerico: {"id_agrokit": 123}
        coerce_numbers_to_str = True

class LecturaOut(BaseModel):
    """Salida reducida (listado publico y Excel): sin gps ni bateria."""
    id: int
    id_agrokit: str
    humedad_tierra: Optional[float] = None
    temp_aire: Optional[float] = None
    humedad_aire: Optional[float] = None
    temp_suelo: Optional[float] = None
    luz: Optional[float] = None
    presion: Optional[float] = None
    agua: Optional[int] = None
    timestamp: str = Field(validation_alias=AliasChoices("fecha", "timestamp"))

    class Config:
        from_attributes = True

class RegistroOut(LecturaOut):
    """Fila completa tal como quedo guardada."""
    gps: Optional[str] = None
    bateria: Optional[float] = None
