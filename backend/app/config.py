# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    return float(raw) if raw else None


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = os.getenv("APP_NAME", "Media Share API")
    env: str = os.getenv("ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # CORS origins for frontend (comma separated; "*" allows any origin)
    CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite://./media_share.sqlite3")
    generate_schemas: bool = os.getenv("GENERATE_SCHEMAS", "true").lower() in ("true", "1", "yes")

    # Session tokens
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret")  # Use a strong secret in production
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = int(os.getenv("JWT_EXPIRE_DAYS", "7"))

    # Cloudinary object storage
    cloudinary_cloud_name: str | None = os.getenv("CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = os.getenv("CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = os.getenv("CLOUDINARY_API_SECRET")
    cloudinary_api_base: str = os.getenv("CLOUDINARY_API_BASE", "https://api.cloudinary.com/v1_1")
    storage_namespace: str = os.getenv("STORAGE_NAMESPACE", "tiktokclone")
    # No timeout unless configured: a hung upload hangs the request
    storage_timeout_sec: float | None = _optional_float("STORAGE_TIMEOUT_SEC")

settings = Settings()  # Instantiate configuration
