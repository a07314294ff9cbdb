"""Errors raised by the tax table lookups."""

from typing import Iterable


class UnknownJurisdictionError(ValueError):
    """Raised when a province/state code is not in the country's tables."""

    def __init__(self, country: str, code: str, valid_codes: Iterable[str]):
        self.country = country
        self.code = code
        self.valid_codes = list(valid_codes)
        super().__init__(
            f"Unknown {country} jurisdiction code: '{code}'. "
            f"Valid codes: {', '.join(self.valid_codes)}"
        )


class UnsupportedTaxYearError(ValueError):
    """Raised when brackets are requested for a year with no reference data."""

    def __init__(self, year: int, supported_years: Iterable[int]):
        self.year = year
        self.supported_years = sorted(supported_years)
        super().__init__(
            f"Tax year {year} is not supported. "
            f"Available years: {', '.join(str(y) for y in self.supported_years)}"
        )
