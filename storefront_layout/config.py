from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_project_root = Path(__file__).resolve().parents[1]
load_dotenv(_project_root / ".env", override=False)


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"

    STOREFRONT_DB_URL: str = "sqlite:///./storefront_layout.db"

    # Feature flag for the block-tree public renderer.
    BLOCK_TREE_RENDERER_ENABLED: bool = False

    DEFAULT_LAYOUT_FAMILY: str = "catalog"
    DEFAULT_TEMPLATE_ID: str = "minimal"

    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    @field_validator("DEFAULT_LAYOUT_FAMILY", "DEFAULT_TEMPLATE_ID")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Layout family and template identifiers must not be empty")
        return cleaned

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
