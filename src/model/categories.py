"""Closed category tags and their default rates.

Free-text category and property names are resolved by exact match
(case-insensitive, surrounding whitespace ignored) against the enums
below. A name that matches no tag has no default; the caller must
supply a rate. Defaults live in reference/category-defaults.json and
every tag must have an entry there.
"""

import json
import os
from enum import Enum
from typing import Dict, Optional, Type, TypeVar

DEFAULTS_PATH = os.path.normpath(
    os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'category-defaults.json')
)


class AssetCategory(Enum):
    RETIREMENT_401K = "401k"
    IRA = "IRA"
    ROTH_IRA = "Roth IRA"
    BROKERAGE = "Brokerage"
    TFSA = "TFSA"
    RRSP = "RRSP"
    RESP = "RESP"
    FHSA = "FHSA"
    LIRA = "LIRA"
    COLLEGE_529 = "529"
    HSA = "HSA"
    SAVINGS = "Savings"
    SAVINGS_ACCOUNT = "Savings Account"
    CHECKING = "Checking"


class PropertyKind(Enum):
    HOME = "home"
    HOUSE = "house"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    APARTMENT = "apartment"
    DUPLEX = "duplex"
    TRIPLEX = "triplex"
    RENTAL = "rental"
    COTTAGE = "cottage"
    CABIN = "cabin"
    CAR = "car"
    VEHICLE = "vehicle"
    TRUCK = "truck"
    SUV = "suv"
    VAN = "van"
    MOTORCYCLE = "motorcycle"
    BOAT = "boat"


E = TypeVar("E", bound=Enum)


def _parse_tag(enum_cls: Type[E], name: Optional[str]) -> Optional[E]:
    if not name:
        return None
    key = name.strip().lower()
    for member in enum_cls:
        if member.value.lower() == key:
            return member
    return None


def parse_asset_category(name: Optional[str]) -> Optional[AssetCategory]:
    return _parse_tag(AssetCategory, name)


def parse_property_kind(name: Optional[str]) -> Optional[PropertyKind]:
    return _parse_tag(PropertyKind, name)


def _load_table(enum_cls: Type[E], raw: Dict[str, float], section: str) -> Dict[E, float]:
    table = {}
    for key, rate in raw.items():
        member = _parse_tag(enum_cls, key)
        if member is None:
            raise ValueError(f"category-defaults.json: unknown {section} tag '{key}'")
        table[member] = float(rate)
    missing = [m.value for m in enum_cls if m not in table]
    if missing:
        raise ValueError(f"category-defaults.json: {section} has no default for {', '.join(missing)}")
    return table


with open(DEFAULTS_PATH, 'r') as _f:
    _defaults = json.load(_f)

DEFAULT_ROI: Dict[AssetCategory, float] = _load_table(AssetCategory, _defaults["assetRoi"], "assetRoi")
DEFAULT_APPRECIATION: Dict[PropertyKind, float] = _load_table(
    PropertyKind, _defaults["propertyAppreciation"], "propertyAppreciation"
)
DEFAULT_MORTGAGE_RATE: float = float(_defaults["mortgage"]["defaultInterestRate"])
DEFAULT_AMORTIZATION_YEARS: int = int(_defaults["mortgage"]["defaultAmortizationYears"])


def default_roi(category: Optional[str]) -> Optional[float]:
    """Suggested annual ROI % for an asset category, or None if the category is not a known tag."""
    tag = parse_asset_category(category)
    return DEFAULT_ROI[tag] if tag is not None else None


def default_appreciation(name: Optional[str]) -> Optional[float]:
    """Suggested annual appreciation % for a property name, or None if the name is not a known tag."""
    tag = parse_property_kind(name)
    return DEFAULT_APPRECIATION[tag] if tag is not None else None


def resolve_roi(roi: Optional[float], category: Optional[str]) -> float:
    """Explicit ROI wins (including 0), then the category default, then 0."""
    if roi is not None:
        return roi
    fallback = default_roi(category)
    return fallback if fallback is not None else 0.0


def resolve_appreciation(rate: Optional[float], name: Optional[str]) -> float:
    """Explicit appreciation wins (including 0), then the property-kind default, then no change."""
    if rate is not None:
        return rate
    fallback = default_appreciation(name)
    return fallback if fallback is not None else 0.0
