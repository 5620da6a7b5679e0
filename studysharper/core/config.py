from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Base
    APP_ENV: str = "dev"  # dev | staging | prod
    APP_NAME: str = "StudySharper Web Edge"
    APP_VERSION: str = "0.1.0"

    # Serveur (python -m studysharper)
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Backend distant
    BACKEND_API_URL: str = "https://study-sharper-backend-production.up.railway.app"
    BACKEND_TIMEOUT_SECONDS: float = 30.0

    # Client (même origine que le proxy)
    CLIENT_BASE_URL: str = "http://localhost:3000"

    # Retry par défaut du client
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_INITIAL_DELAY: float = 0.5
    RETRY_BACKOFF_FACTOR: float = 2.0
    RETRY_MAX_DELAY: float = 8.0

    # Workflows
    REDIRECT_DELAY_SECONDS: float = 1.0

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
