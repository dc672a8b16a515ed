from pydantic import BaseModel
from typing import Optional

class AgrokitOut(BaseModel):
    id_agrokit: str
    name: Optional[str] = None

    class Config:
        from_attributes = True
