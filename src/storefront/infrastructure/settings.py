"""Runtime configuration, read from ``STOREFRONT_*`` environment variables
(or a ``.env`` file in the working directory)."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money
from storefront.domain.service.catalog_resolver import PLACEHOLDER_IMAGE
from storefront.domain.service.pricing import Jurisdiction

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    data_dir: Path = _DEFAULT_DATA_DIR
    log_level: Optional[str] = None

    # --- Pricing (amounts in minor units) ---
    jurisdiction_code: str = "KE"
    currency: str = DEFAULT_CURRENCY
    tax_rate: Decimal = Field(default=Decimal("0.16"), ge=0)
    free_shipping_threshold: int = Field(default=10_000_000, ge=0)
    flat_shipping_rate: int = Field(default=1_500_000, ge=0)

    # --- Order intake ---
    placeholder_image: str = PLACEHOLDER_IMAGE
    order_number_source: Literal["sequence", "count"] = "sequence"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def jurisdiction(self) -> Jurisdiction:
        return Jurisdiction(
            code=self.jurisdiction_code,
            tax_rate=self.tax_rate,
            free_shipping_threshold=Money(self.free_shipping_threshold, self.currency),
            flat_shipping_rate=Money(self.flat_shipping_rate, self.currency),
        )
