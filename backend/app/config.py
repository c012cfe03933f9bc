# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Tasks API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend (comma separated)
    CORS_ORIGINS: list[str] = _csv(os.getenv("CORS_ORIGINS", "*"))

    # Create tables on startup instead of running Aerich migrations (local development)
    generate_schemas: bool = os.getenv("GENERATE_SCHEMAS", "false").lower() in ("true", "1", "yes")


settings = Settings()  # Instantiate configuration
