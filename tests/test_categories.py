import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import pytest

from model.categories import (
    DEFAULT_AMORTIZATION_YEARS,
    DEFAULT_APPRECIATION,
    DEFAULT_MORTGAGE_RATE,
    DEFAULT_ROI,
    AssetCategory,
    PropertyKind,
    default_appreciation,
    default_roi,
    parse_asset_category,
    parse_property_kind,
    resolve_appreciation,
    resolve_roi,
)


def test_every_tag_has_a_default():
    assert set(DEFAULT_ROI) == set(AssetCategory)
    assert set(DEFAULT_APPRECIATION) == set(PropertyKind)


def test_mortgage_defaults():
    assert DEFAULT_MORTGAGE_RATE == 5
    assert DEFAULT_AMORTIZATION_YEARS == 25


@pytest.mark.parametrize("name,expected", [
    ("TFSA", AssetCategory.TFSA),
    ("tfsa", AssetCategory.TFSA),
    ("  Roth IRA ", AssetCategory.ROTH_IRA),
    ("401k", AssetCategory.RETIREMENT_401K),
    ("Savings Account", AssetCategory.SAVINGS_ACCOUNT),
    ("My TFSA", None),
    ("", None),
    (None, None),
])
def test_parse_asset_category(name, expected):
    assert parse_asset_category(name) == expected


def test_parse_property_kind():
    assert parse_property_kind("Condo") == PropertyKind.CONDO
    assert parse_property_kind("Beach House") is None


def test_default_roi():
    assert default_roi("Brokerage") == 7
    assert default_roi("Checking") == 0.5
    assert default_roi("Crypto") is None


def test_default_appreciation():
    assert default_appreciation("home") == 3
    assert default_appreciation("Car") == -15
    assert default_appreciation("Painting") is None


class TestResolve:
    def test_explicit_wins(self):
        assert resolve_roi(4.5, "TFSA") == 4.5

    def test_explicit_zero_wins(self):
        assert resolve_roi(0, "Brokerage") == 0
        assert resolve_appreciation(0, "car") == 0

    def test_falls_back_to_category(self):
        assert resolve_roi(None, "TFSA") == 5
        assert resolve_appreciation(None, "truck") == -15

    def test_unknown_category_has_no_growth(self):
        assert resolve_roi(None, "Gold") == 0.0
        assert resolve_appreciation(None, "Yacht Club") == 0.0
