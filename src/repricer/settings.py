"""Runtime settings for the repricing run, overridable via REPRICER_* env vars."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RepricingSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REPRICER_",
        env_file=".env",
        extra="ignore",
    )

    standard_tax_rate: float = 21.0
    reduced_tax_rate: float = 0.0
    # Czech inflections of "book"; substring match, so "notebook"-style hits are accepted
    reduced_tax_keywords: tuple[str, ...] = ("kniha", "knihy", "knížka", "knížky")

    floor_markup: float = 1.0
    ladder_size: int = Field(default=19, ge=1, le=19)
    price_decimals: int = Field(default=2, ge=0)

    default_listings_path: str = "heureka.xlsx"
    default_stock_path: str = "sklad.xlsx"
    default_output_path: str = "vysledek.xlsx"
    empty_result_placeholder: str = "No data to display"

    max_workers: int = Field(default=1, ge=1)
    log_level: str = "INFO"
