"""Australian Business Number helpers - normalisation, checksum and registration age"""

import re
from datetime import date
from typing import Optional

from assetmx_gateway.domain.models import EntityType
from assetmx_gateway.utils.date_utils import months_between

ABN_WEIGHTS = (10, 1, 3, 5, 7, 9, 11, 13, 15, 17, 19)

# Business register entity descriptions, matched as case-insensitive substrings in order
_ENTITY_TYPE_MAP = (
    ("Australian Private Company", EntityType.COMPANY),
    ("Australian Public Company", EntityType.COMPANY),
    ("Private Company", EntityType.COMPANY),
    ("Public Company", EntityType.COMPANY),
    ("Discretionary Trading Trust", EntityType.TRUST),
    ("Family Trust", EntityType.TRUST),
    ("Unit Trust", EntityType.TRUST),
    ("Fixed Trust", EntityType.TRUST),
    ("Hybrid Trust", EntityType.TRUST),
    ("Trust", EntityType.TRUST),
    ("Sole Trader", EntityType.SOLE_TRADER),
    ("Individual/Sole Trader", EntityType.SOLE_TRADER),
    ("Partnership", EntityType.PARTNERSHIP),
    ("Limited Partnership", EntityType.PARTNERSHIP),
)


def clean_abn(abn: str) -> str:
    """Strip spaces and any other non-digit characters"""
    return re.sub(r"\D", "", abn)


def format_abn(abn: str) -> str:
    """XX XXX XXX XXX; input returned unchanged if it is not 11 digits"""
    clean = clean_abn(abn)
    if len(clean) != 11:
        return abn
    return f"{clean[0:2]} {clean[2:5]} {clean[5:8]} {clean[8:11]}"


def validate_abn(abn: str) -> bool:
    """
    Official ABN checksum.

    Subtract 1 from the first digit, weight each digit, and the weighted sum
    must be divisible by 89.
    """
    clean = clean_abn(abn)
    if len(clean) != 11:
        return False

    digits = [int(d) for d in clean]
    digits[0] -= 1
    total = sum(d * w for d, w in zip(digits, ABN_WEIGHTS))
    return total % 89 == 0


def map_entity_type(description: str) -> EntityType:
    """Map a register entity description to EntityType (company when unknown)"""
    lowered = description.lower()
    for key, entity_type in _ENTITY_TYPE_MAP:
        if key.lower() in lowered:
            return entity_type
    return EntityType.COMPANY


def abn_age_months(registered: date, as_of: Optional[date] = None) -> int:
    return months_between(registered, as_of)


def format_abn_age(registered: date, as_of: Optional[date] = None) -> str:
    """'7 months', '2 years', '2 years, 3 months'"""
    months = abn_age_months(registered, as_of)
    years, remaining = divmod(months, 12)

    def plural(n: int, unit: str) -> str:
        return f"{n} {unit}{'' if n == 1 else 's'}"

    if years == 0:
        return plural(months, "month")
    if remaining == 0:
        return plural(years, "year")
    return f"{plural(years, 'year')}, {plural(remaining, 'month')}"
