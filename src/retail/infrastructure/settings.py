"""Runtime settings, read from ``RETAIL_*`` environment variables or ``.env``."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class RetailSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RETAIL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    data_dir: Path = _DEFAULT_DATA_DIR

    # Catalog service; unset means the local JSON catalog in data_dir
    catalog_url: Optional[str] = Field(
        default=None,
        description="Base URL of the catalog service, e.g. http://product-service",
    )
    catalog_timeout: float = Field(default=5.0, gt=0)

    # How long request ids and stock idempotency keys are remembered
    request_ttl_seconds: float = Field(default=24 * 60 * 60, gt=0)

    log_level: str = "INFO"
    log_json: bool = False
