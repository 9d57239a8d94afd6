from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "LabGuard Print"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:8080"]

    # Laboratory used when the caller sends no X-Laboratory-ID header
    DEFAULT_LABORATORY_ID: str = "demo-lab"

    # Print jobs
    PRINT_JOBS_DIR: str = "storage/mobile-print-jobs"
    PRINT_JOB_RETENTION_HOURS: int = 72
    MAX_LABELS_PER_JOB: int = 100
    MAX_COPIES: int = 10
    LABEL_LOGO_TEXT: str = "LabGuard"
    PRINTER_EMAIL_ADDRESS: str = ""

    # Email / SMTP
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_FROM_NAME: str = "LabGuard Print"
    SMTP_USE_TLS: bool = True

    # Redis / Celery
    REDIS_URL: str = "redis://redis:6379"
    CELERY_BROKER_URL: str = "redis://redis:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://redis:6379/1"

    # Print client
    PRINT_SERVICE_URL: str = "http://localhost:8000"
    CLIENT_TIMEOUT_SECONDS: float = 30.0
    DOWNLOAD_DIR: str = "~/Downloads"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


settings = Settings()
