from pydantic import BaseModel
from typing import Optional

class Credenciales(BaseModel):
    # opcionales para responder 400 "Faltan datos" en vez del 422 de validacion
    username: Optional[str] = None
    password: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True

class TokenOut(BaseModel):
    token: str

class MensajeOut(BaseModel):
    msg: str
