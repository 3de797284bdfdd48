# config.py
import os
import tempfile
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# .env 読み込み
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    store_backend: str = "memory"  # memory / session / sql
    database_url: str = "sqlite:///./plantpal.db"
    sql_echo: bool = False
    session_store_dir: str = os.path.join(tempfile.gettempdir(), "plantpal-session")
    seed_demo_data: bool = True

    auth_token_mode: str = "opaque"  # opaque / jwt
    jwt_secret: str = "plantpal-dev-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"

    upload_dir: str = "./uploads"
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        origins = os.getenv("CORS_ORIGINS")
        return cls(
            store_backend=os.getenv("STORE_BACKEND", defaults.store_backend).lower(),
            database_url=os.getenv("DATABASE_URL", defaults.database_url),
            sql_echo=_env_bool("SQL_ECHO", defaults.sql_echo),
            session_store_dir=os.getenv("SESSION_STORE_DIR", defaults.session_store_dir),
            seed_demo_data=_env_bool("SEED_DEMO_DATA", defaults.seed_demo_data),
            auth_token_mode=os.getenv("AUTH_TOKEN_MODE", defaults.auth_token_mode).lower(),
            jwt_secret=os.getenv("JWT_SECRET", defaults.jwt_secret),
            jwt_expire_minutes=int(os.getenv("JWT_EXPIRE_MINUTES", defaults.jwt_expire_minutes)),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            openai_model=os.getenv("OPENAI_MODEL", defaults.openai_model),
            upload_dir=os.getenv("UPLOAD_DIR", defaults.upload_dir),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()] if origins else defaults.cors_origins,
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
