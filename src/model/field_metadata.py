"""Field metadata for ProjectionPoint fields.

This module provides descriptions and short names for the fields of a
projection point. Short names are used as column headers in tables and
the shell 'get' command.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Column header (unique, concise)
    description: str  # Full description of the field
    is_currency: bool = True


FIELD_METADATA: Dict[str, FieldInfo] = {
    # Time
    "month": FieldInfo("Month", "Months from the snapshot date", is_currency=False),
    "year": FieldInfo("Year", "Years from the snapshot date", is_currency=False),

    # Headline
    "net_worth": FieldInfo("Net Worth", "Assets plus stocks plus property equity, minus consumer debts"),

    # Assets
    "total_assets": FieldInfo("Total Assets", "Liquid assets plus stock holdings"),
    "total_property_equity": FieldInfo("Property Equity", "Property values minus remaining mortgages"),

    # Debts
    "total_debts": FieldInfo("Total Debts", "Consumer debts plus mortgages"),
    "consumer_debts": FieldInfo("Consumer Debts", "Remaining balance on loans and credit cards"),
    "mortgage_debts": FieldInfo("Mortgages", "Remaining mortgage balances"),
}


def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name


def get_description(field_name: str) -> str:
    """Get the description for a field, or empty string if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.description if info else ""


def get_field_info(field_name: str) -> FieldInfo | None:
    return FIELD_METADATA.get(field_name)


def wrap_header(text: str, max_width: int) -> list[str]:
    """Wrap a header text into multiple lines to fit within max_width.

    Words are split on spaces and distributed across lines, filling each
    line before starting the next.
    """
    if len(text) <= max_width:
        return [text]

    lines = []
    current_line = ""
    for word in text.split():
        if not current_line:
            current_line = word
        elif len(current_line) + 1 + len(word) <= max_width:
            current_line += " " + word
        else:
            lines.append(current_line)
            current_line = word

    if current_line:
        lines.append(current_line)

    return lines
