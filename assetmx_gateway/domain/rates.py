"""Rate table and fee schedule - term-keyed base rates with floor-bracket lookup"""

from bisect import bisect_right
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from assetmx_gateway.domain.exceptions import ConfigError
from assetmx_gateway.domain.models import FeeCondition, FeeContext, FeeItem, RateConfig
from assetmx_gateway.utils.date_utils import term_years

# Lender rate sheet: 1-5 years 6.45%, over 5 years 7.15%; the 61 month key
# makes 61-71 month terms floor to the long rate
BASE_RATE_SHORT = Decimal("6.45")
BASE_RATE_LONG = Decimal("7.15")

DEFAULT_RATES: Dict[int, Decimal] = {
    12: BASE_RATE_SHORT,
    24: BASE_RATE_SHORT,
    36: BASE_RATE_SHORT,
    48: BASE_RATE_SHORT,
    60: BASE_RATE_SHORT,
    61: BASE_RATE_LONG,
    72: BASE_RATE_LONG,
    84: BASE_RATE_LONG,
}

PLATFORM_FEE = "platform_fee"

DEFAULT_FEES = (
    FeeItem(
        name=PLATFORM_FEE,
        amount_cents=80_000,  # $800
        description="Flat platform fee, disclosed upfront",
    ),
    FeeItem(
        name="lender_establishment_fee",
        amount_cents=50_000,  # $500
        description="Lender establishment fee",
    ),
    FeeItem(
        name="ppsr_fee",
        amount_cents=740,  # $7.40
        description="PPSR government registration fee",
    ),
    FeeItem(
        name="inspection_fee",
        amount_cents=25_000,  # $250
        description="Asset inspection for private sales",
        applies_when=FeeCondition.PRIVATE_SALE_ONLY,
    ),
)

# Lender guidance on maximum balloon by term in whole years; 5+ years caps at 30%
MAX_BALLOON_BY_TERM_YEARS: Dict[int, int] = {1: 65, 2: 60, 3: 50, 4: 40, 5: 30, 6: 30, 7: 30}


def max_balloon_for_term(term_months: int) -> int:
    """Maximum balloon percentage lenders accept for a term (rounded up to whole years)"""
    return MAX_BALLOON_BY_TERM_YEARS.get(term_years(term_months), 30)


def default_rate_config() -> RateConfig:
    return RateConfig(rates=dict(DEFAULT_RATES), fees=DEFAULT_FEES, source="defaults")


class RateTable:
    """
    Immutable snapshot of term-keyed base rates and the fee schedule.

    Rates are flat per bracket: a term between configured keys takes the
    rate of the nearest configured term below it, never an interpolation.
    """

    def __init__(
        self,
        rates: Mapping[int, Decimal],
        fees: Iterable[FeeItem] = DEFAULT_FEES,
        source: str = "defaults",
    ):
        validated: Dict[int, Decimal] = {}
        for term, rate in rates.items():
            if isinstance(term, bool) or not isinstance(term, int) or term <= 0:
                raise ConfigError(f"Rate term must be a positive integer, got {term!r}")
            rate = Decimal(str(rate))
            if rate < 0:
                raise ConfigError(f"Rate for {term} months must be non-negative, got {rate}")
            validated[term] = rate

        fee_items = tuple(fees)
        seen = set()
        for fee in fee_items:
            if fee.amount_cents < 0:
                raise ConfigError(f"Fee {fee.name} must be non-negative")
            if not isinstance(fee.applies_when, FeeCondition):
                raise ConfigError(f"Fee {fee.name} has unknown condition {fee.applies_when!r}")
            if fee.name in seen:
                raise ConfigError(f"Duplicate fee {fee.name}")
            seen.add(fee.name)

        self._rates = MappingProxyType(validated)
        self._terms = sorted(validated)
        self._fees = fee_items
        self.source = source

    @classmethod
    def from_config(cls, config: RateConfig) -> "RateTable":
        return cls(config.rates, config.fees, source=config.source)

    @classmethod
    def default(cls) -> "RateTable":
        return cls.from_config(default_rate_config())

    @property
    def terms(self) -> List[int]:
        return list(self._terms)

    @property
    def fees(self) -> tuple:
        return self._fees

    def as_dict(self) -> Dict[int, Decimal]:
        return dict(self._rates)

    def rate_for_term(self, term_months: int) -> Decimal:
        """
        Resolve a term to its base annual rate (percent).

        Exact key if configured, otherwise the nearest configured term not
        exceeding the request; below the lowest key, the lowest key's rate.

        Raises:
            ConfigError: If no rates are configured
        """
        if not self._terms:
            raise ConfigError("Rate table is empty")

        if term_months in self._rates:
            return self._rates[term_months]

        idx = bisect_right(self._terms, term_months)
        bracket = self._terms[idx - 1] if idx > 0 else self._terms[0]
        return self._rates[bracket]

    def fee_schedule(self, context: Optional[FeeContext] = None) -> List[FeeItem]:
        """Fees applicable to a quote; conditional fees only when their predicate holds"""
        context = context or FeeContext()
        return [fee for fee in self._fees if _fee_applies(fee, context)]


def _fee_applies(fee: FeeItem, context: FeeContext) -> bool:
    if fee.applies_when == FeeCondition.PRIVATE_SALE_ONLY:
        return context.private_sale
    return True
