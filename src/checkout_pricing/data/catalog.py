"""
Catalog - package and addon reference data for the pricing engine.

Reads packages.csv and addons.csv (exports of the catalog service) with
pandas and converts each active row into a Package / Addon record.
"""
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..engine.classifier import is_isbn_addon
from ..engine.models import Addon, Package
from ..errors import CatalogError, UnknownCatalogItemError

logger = logging.getLogger(__name__)

PACKAGE_COLUMNS = ('id', 'name', 'slug', 'base_price', 'includes_isbn')
ADDON_COLUMNS = ('id', 'slug', 'name', 'price')


def _read_csv(path: Path, required: tuple) -> pd.DataFrame:
    """Load a catalog CSV as stripped strings, keeping active rows in sort order."""
    if not path.exists():
        raise CatalogError(str(path), "file not found")

    try:
        df = pd.read_csv(path, dtype=str).fillna('')
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise CatalogError(str(path), str(e)) from e

    df.columns = [c.strip() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise CatalogError(str(path), f"missing columns: {', '.join(missing)}")

    if 'active' in df.columns:
        df = df[df['active'].str.lower() != 'false']

    if 'sort_order' in df.columns:
        df = df.assign(_order=pd.to_numeric(df['sort_order'], errors='coerce').fillna(0))
        df = df.sort_values('_order', kind='stable').drop(columns='_order')

    return df


def _row_dict(row: pd.Series) -> dict:
    # Empty cells mean "not set"
    return {key: (value if value != '' else None) for key, value in row.items()}


class Catalog:
    """
    In-memory catalog of packages and addons.

    Lookups accept either the record id or its slug.
    """

    def __init__(self, packages: list[Package], addons: list[Addon]):
        self.packages = list(packages)
        self.addons = list(addons)

    @classmethod
    def load(cls, settings: Optional[Settings] = None) -> 'Catalog':
        """Load the catalog from the configured CSV directory."""
        settings = settings or get_settings()

        packages_df = _read_csv(settings.packages_csv, PACKAGE_COLUMNS)
        addons_df = _read_csv(settings.addons_csv, ADDON_COLUMNS)

        packages = [Package.from_dict(_row_dict(row)) for _, row in packages_df.iterrows()]
        addons = [Addon.from_dict(_row_dict(row)) for _, row in addons_df.iterrows()]

        logger.info(
            "Loaded catalog from %s: %d packages, %d addons",
            settings.catalog_dir, len(packages), len(addons),
        )
        return cls(packages, addons)

    def get_package(self, key: str) -> Package:
        for package in self.packages:
            if key in (package.id, package.slug):
                return package
        raise UnknownCatalogItemError('package', key)

    def get_addon(self, key: str) -> Addon:
        for addon in self.addons:
            if key in (addon.id, addon.slug):
                return addon
        raise UnknownCatalogItemError('addon', key)

    def selection_record(self, addon: Addon) -> Addon:
        """
        The record to store in an engine selection.

        The auto-included flag from addons_for() describes one package only,
        so selections always hold the plain catalog record and the engine's
        own ISBN rule decides whether it is charged.
        """
        return self.get_addon(addon.id)

    def addons_for(self, package: Optional[Package]) -> list[Addon]:
        """
        Addons as offered alongside a package.

        When the package bundles ISBN registration, the ISBN addon is
        returned flagged as auto-included so it is shown but never charged.
        """
        if package is None or not package.includes_isbn:
            return list(self.addons)
        return [
            replace(addon, is_auto_included=True) if is_isbn_addon(addon) else addon
            for addon in self.addons
        ]
