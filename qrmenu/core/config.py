import os
from functools import lru_cache
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Storage
    database_backend: Literal["sqlite", "cloud"] = "sqlite"
    database_url: Optional[str] = None  # cloud backend, e.g. postgresql+asyncpg://...
    sqlite_path: str = os.path.join("database", "qrmenu.db")
    sql_echo: bool = False

    # Auth
    jwt_secret: str = "qrmenu-super-secret-key"  # 🔐 override in production
    jwt_lifetime_seconds: int = 7 * 24 * 3600
    jwt_audience: str = "qrmenu:auth"
    admin_email: str = "admin@qrmenu.com"
    admin_password: str = "admin123"

    # Deployment
    base_url: str = "http://localhost:8000"
    deploy_mode: Optional[Literal["filesystem", "serverless"]] = None
    deploy_root: str = "deployed"
    upload_root: str = "uploads"
    vercel: Optional[str] = None

    log_level: str = "INFO"

    @property
    def resolved_deploy_mode(self) -> str:
        """Serverless hosts have a read-only filesystem, so nothing is written there."""
        if self.deploy_mode:
            return self.deploy_mode
        return "serverless" if self.vercel else "filesystem"

    @property
    def is_serverless(self) -> bool:
        return self.resolved_deploy_mode == "serverless"


@lru_cache
def get_settings() -> Settings:
    return Settings()
