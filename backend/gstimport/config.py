# backend/gstimport/config.py
from pydantic import BaseModel
import os

class Settings(BaseModel):
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:8501")
    LOG_LEVEL: str = os.getenv("GSTIMPORT_LOG_LEVEL", "INFO")
    MAX_UPLOAD_MB: int = int(os.getenv("MAX_UPLOAD_MB", "50"))
    SHARE_LIMIT: int = int(os.getenv("SHARE_LIMIT", "200"))

settings = Settings()
