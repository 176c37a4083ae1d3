import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


load_dotenv()

DEFAULT_JWT_SECRET_KEY = "change-me"


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: tuple[str, ...] = ()) -> tuple[str, ...]:
    if value is None:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_env: str = "development"
    database_url: str = "sqlite:///./modulehub.db"

    jwt_secret_key: str = DEFAULT_JWT_SECRET_KEY
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 24 * 60

    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 4

    activation_base_url: str = "http://localhost:8000"

    smtp_host: str = ""
    smtp_port: int = 25
    smtp_sender: str = "no-reply@modulehub.local"
    smtp_timeout_seconds: float = 10.0

    moduleinfo_public_reads: bool = True
    cors_origins: tuple[str, ...] = field(default=("http://localhost:4200",))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            app_env=os.getenv("APP_ENV", "development"),
            database_url=os.getenv("DATABASE_URL", "sqlite:///./modulehub.db"),
            jwt_secret_key=os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET_KEY),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expires_minutes=int(os.getenv("JWT_EXPIRES_MINUTES", "1440")),
            argon2_time_cost=int(os.getenv("ARGON2_TIME_COST", "3")),
            argon2_memory_cost=int(os.getenv("ARGON2_MEMORY_COST", "65536")),
            argon2_parallelism=int(os.getenv("ARGON2_PARALLELISM", "4")),
            activation_base_url=os.getenv("ACTIVATION_BASE_URL", "http://localhost:8000"),
            smtp_host=os.getenv("SMTP_HOST", ""),
            smtp_port=int(os.getenv("SMTP_PORT", "25")),
            smtp_sender=os.getenv("SMTP_SENDER", "no-reply@modulehub.local"),
            smtp_timeout_seconds=float(os.getenv("SMTP_TIMEOUT_SECONDS", "10")),
            moduleinfo_public_reads=_get_bool(os.getenv("MODULEINFO_PUBLIC_READS"), default=True),
            cors_origins=_get_list(os.getenv("CORS_ORIGINS"), default=("http://localhost:4200",)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def validate_runtime_config(settings: Settings) -> None:
    if settings.app_env.lower() == "production" and settings.jwt_secret_key == DEFAULT_JWT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if settings.jwt_expires_minutes <= 0:
        raise RuntimeError("JWT_EXPIRES_MINUTES must be positive.")
