from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_TITLE: str = "HRIS API"
    PRODUCTION_MODE: bool = False
    PORT: int = 3001
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24
    DATABASE_FILE: str = "database.json"
    UPLOAD_DIR: str = "uploads/documents"
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB
    DOCUMENT_EXPIRY_WARNING_DAYS: int = 30
    DEFAULT_EMPLOYEE_PASSWORD: str = "defaultPassword123"
    ENABLE_SCHEDULER: bool = True
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    class Config:
        env_file = ".env"

settings = Settings()
