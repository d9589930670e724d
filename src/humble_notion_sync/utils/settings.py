from pydantic import BaseModel, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from humble_notion_sync.errors import ConfigError
from humble_notion_sync.utils.logging_utils import set_level


class StorefrontCredentials(BaseModel):
    email: str
    password: str


class Settings(BaseSettings):
    NOTION_TOKEN: str
    NOTION_VERSION: str = "2022-06-28"
    NOTION_TIMEOUT: float = 60.0
    BUNDLES_DB_ID: str | None = None
    BOOKS_DB_ID: str | None = None
    HUMBLE_EMAIL: str | None = None
    HUMBLE_PASSWORD: str | None = None
    HUMBLE_HEADLESS: bool = False
    BACKUP_DIR: str = "backups"
    DEBUG_DIR: str = "debug"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=(".env", ".env.humble"), extra="ignore")

    @field_validator("NOTION_TOKEN")
    @classmethod
    def _token_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("BUNDLES_DB_ID", "BOOKS_DB_ID", "HUMBLE_EMAIL", "HUMBLE_PASSWORD", mode="before")
    @classmethod
    def _blank_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    def require_bundles_db(self, override: str | None = None) -> str:
        db_id = (override or "").strip() or self.BUNDLES_DB_ID
        if not db_id:
            raise ConfigError("Missing bundles database id: pass it as an argument or set BUNDLES_DB_ID")
        return db_id

    def require_books_db(self, override: str | None = None) -> str:
        db_id = (override or "").strip() or self.BOOKS_DB_ID
        if not db_id:
            raise ConfigError("Missing books database id: pass it as an argument or set BOOKS_DB_ID")
        return db_id

    def storefront_credentials(self) -> StorefrontCredentials:
        missing = [
            name for name, value in (("HUMBLE_EMAIL", self.HUMBLE_EMAIL), ("HUMBLE_PASSWORD", self.HUMBLE_PASSWORD))
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing env {', '.join(missing)}")
        return StorefrontCredentials(email=self.HUMBLE_EMAIL, password=self.HUMBLE_PASSWORD)


def load_settings(**overrides) -> Settings:
    """Build the process configuration once; every failure becomes a ConfigError."""
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        names = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        raise ConfigError(f"Missing or invalid env {names}") from exc
    set_level(settings.LOG_LEVEL)
    return settings
