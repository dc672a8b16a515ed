from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import List

DEFAULT_SECRET_KEY = "cambiame_por_algo_muy_secreto"


class Settings(BaseSettings):
    # JWT_SECRET es el nombre que usan los despliegues existentes
    SECRET_KEY: str = Field(
        DEFAULT_SECRET_KEY,
        validation_alias=AliasChoices("JWT_SECRET", "SECRET_KEY"),
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 12 * 60

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    DB_FILE: str = "agrokit.db"
    PUBLIC_DIR: str = "public"
    CORS_ORIGINS: List[str] = ["*"]
    RECENT_LIMIT: int = 100

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def usa_secreto_por_defecto(self) -> bool:
        return self.SECRET_KEY == DEFAULT_SECRET_KEY
