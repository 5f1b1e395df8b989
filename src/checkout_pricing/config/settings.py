"""
Centralized settings for the checkout pricing engine.
"""
import logging
import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "CHECKOUT_PRICING_"


def get_package_root() -> Path:
    """Get the checkout_pricing package directory."""
    return Path(__file__).resolve().parent.parent


def _env_amount(name: str, default: float) -> float:
    """Read a non-negative amount from the environment, falling back to default."""
    raw = os.environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s%s=%r: not a number", ENV_PREFIX, name, raw)
        return default
    if value != value or value < 0 or value in (float("inf"), float("-inf")):
        logger.warning("Ignoring %s%s=%r: must be a finite non-negative amount", ENV_PREFIX, name, raw)
        return default
    return value


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Fallback fees used by the scenario strategy when no matching addon is selected
    default_cover_fee: float = 45_000.0
    default_formatting_fee: float = 35_000.0

    # Provider metadata field limit in bytes
    metadata_byte_limit: int = 500

    # "selected" or "scenario"
    strategy: str = "selected"

    currency: str = "NGN"

    # Directory holding packages.csv / addons.csv
    catalog_dir: Optional[Path] = None

    def __post_init__(self):
        if self.catalog_dir is None:
            self.catalog_dir = get_package_root() / 'data'

    @property
    def packages_csv(self) -> Path:
        return self.catalog_dir / 'packages.csv'

    @property
    def addons_csv(self) -> Path:
        return self.catalog_dir / 'addons.csv'

    @classmethod
    def load(cls) -> 'Settings':
        """Load settings from the environment."""
        limit = int(_env_amount("METADATA_LIMIT", 500))

        strategy = os.environ.get(ENV_PREFIX + "STRATEGY", "selected").strip().lower()
        if strategy not in ("selected", "scenario"):
            logger.warning("Unknown pricing strategy %r, using 'selected'", strategy)
            strategy = "selected"

        catalog_dir = os.environ.get(ENV_PREFIX + "CATALOG_DIR")

        return cls(
            default_cover_fee=_env_amount("DEFAULT_COVER_FEE", 45_000.0),
            default_formatting_fee=_env_amount("DEFAULT_FORMATTING_FEE", 35_000.0),
            metadata_byte_limit=limit,
            strategy=strategy,
            currency=os.environ.get(ENV_PREFIX + "CURRENCY", "NGN").strip().upper() or "NGN",
            catalog_dir=Path(catalog_dir) if catalog_dir else get_package_root() / 'data',
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
