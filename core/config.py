from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "FieldHub Operations API"
    ENV: str = "development"
    LOG_LEVEL: str = Field("INFO", env="LOG_LEVEL")

    # Shown as the sender company on hub messages written by staff
    COMPANY_NAME: str = Field("Tops Lighting", env="COMPANY_NAME")

    # -------------------------------------------------
    # Frontend Domains
    # -------------------------------------------------
    FRONTEND_DOMAINS: List[str] = [
        "http://localhost:3000",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Realtime fan-out (work order events)
    # -------------------------------------------------
    HUB_WEBHOOK_URL: Optional[str] = Field(None, env="HUB_WEBHOOK_URL")
    HUB_WEBHOOK_TIMEOUT_SECONDS: float = Field(5.0, env="HUB_WEBHOOK_TIMEOUT_SECONDS")
    # A single worker keeps events of a work order in the order they happened
    NOTIFY_WORKERS: int = Field(1, env="NOTIFY_WORKERS")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = [d.rstrip("/") for d in settings.FRONTEND_DOMAINS]

# remove duplicates
settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
