from functools import lru_cache
from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # APP
    APP_NAME: str = "Painel de Lojas API"
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: Optional[str] = None

    # Banco de Dados
    DATABASE_URL: str
    QUERY_TIMEOUT_MS: int = 5000

    # JWT (tokens emitidos pelo provedor de identidade)
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_MINUTES: int = 60

    # CORS (aceita string separada por vírgulas no .env)
    CORS_ORIGINS: Optional[str] = None

    # Dashboard
    ANALISTA_MAX_TENTATIVAS: int = 3
    ANALISTA_INTERVALO_RETRY: float = 1.0  # segundos entre tentativas
    RECONEXAO_INTERVALO: float = 5.0  # segundos até nova tentativa sem conexão

    @field_validator("JWT_SECRET")
    @classmethod
    def _jwt_min_length(cls, v: str) -> str:
        if v is None or len(v) < 32:
            raise ValueError("JWT secret deve ter pelo menos 32 caracteres.")
        return v

    @field_validator("ANALISTA_MAX_TENTATIVAS")
    @classmethod
    def _at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("ANALISTA_MAX_TENTATIVAS deve ser >= 1.")
        return v

    @property
    def CORS_ORIGINS_LIST(self) -> List[str]:
        v = self.CORS_ORIGINS
        if not v:
            return []
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignora chaves extras no .env
    )

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
