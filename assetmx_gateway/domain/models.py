"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class AssetType(str, Enum):
    """Asset classes the lender panel finances"""

    VEHICLE = "vehicle"
    TRUCK = "truck"
    EQUIPMENT = "equipment"
    TECHNOLOGY = "technology"


class AssetCondition(str, Enum):
    """Asset condition brackets"""

    NEW = "new"
    DEMO = "demo"
    USED_0_3 = "used_0_3"
    USED_4_7 = "used_4_7"
    USED_8_PLUS = "used_8_plus"

    @property
    def is_used(self) -> bool:
        return self.value.startswith("used")


class EntityType(str, Enum):
    """Business entity structures"""

    COMPANY = "company"
    TRUST = "trust"
    SOLE_TRADER = "sole_trader"
    PARTNERSHIP = "partnership"


class FeeCondition(str, Enum):
    """Predicate tag deciding when a fee applies to a quote"""

    ALWAYS = "always"
    PRIVATE_SALE_ONLY = "private-sale-only"


@dataclass(frozen=True)
class FeeItem:
    """Single line in the fee schedule"""

    name: str
    amount_cents: int
    description: str
    applies_when: FeeCondition = FeeCondition.ALWAYS
    financed: bool = False  # True = added to the amortized balance

    @property
    def amount(self) -> Decimal:
        return Decimal(self.amount_cents) / 100


@dataclass(frozen=True)
class FeeContext:
    """Predicate inputs for conditional fees"""

    private_sale: bool = False


@dataclass(frozen=True)
class RateConfig:
    """One configuration snapshot as supplied by the rate store"""

    rates: Dict[int, Decimal]
    fees: Tuple[FeeItem, ...]
    source: str = "defaults"


@dataclass(frozen=True)
class LoanRequest:
    """Calculator input for a single quote"""

    asset_type: AssetType
    asset_condition: AssetCondition
    loan_amount: Decimal
    term_months: int
    balloon_percent: Decimal = Decimal("0")
    private_sale: bool = False


@dataclass(frozen=True)
class Quote:
    """Priced quote derived from a LoanRequest and a RateTable snapshot"""

    indicative_rate_percent: Decimal
    monthly_repayment: Decimal
    weekly_repayment: Decimal
    fortnightly_repayment: Decimal
    balloon_amount: Decimal
    total_interest: Decimal
    total_repayments: Decimal
    total_fees_financed: Decimal
    total_fees_upfront: Decimal
    total_cost: Decimal
    reference_rate_percent: Decimal
    reference_total_cost: Decimal
    estimated_saving: Decimal
    fees: Tuple[FeeItem, ...] = ()


@dataclass
class AbnLookupResult:
    """Business register lookup result attached to an application"""

    abn: str
    abn_status: str  # "Active" or "Cancelled"
    abn_registered_date: Optional[date] = None
    entity_name: str = ""
    gst_registered: bool = False
    entity_type_description: str = ""  # e.g. "Australian Private Company"


@dataclass
class BusinessDetails:
    abn: str
    entity_name: str = ""
    entity_type: EntityType = EntityType.COMPANY
    gst_registered: bool = False
    abn_registered_date: Optional[date] = None
    abn_lookup: Optional[AbnLookupResult] = None


@dataclass
class Director:
    """Director or guarantor with financial position"""

    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    email: str = ""
    phone: str = ""
    is_homeowner: bool = False
    net_assets: Decimal = Decimal("0")
    monthly_commitments: Decimal = Decimal("0")


@dataclass
class AssetDetails:
    asset_type: AssetType
    asset_condition: AssetCondition
    asset_year: Optional[int] = None
    purchase_price: Decimal = Decimal("0")


@dataclass
class LoanDetails:
    loan_amount: Decimal
    term_months: int
    balloon_percentage: Decimal = Decimal("0")
    business_use_percentage: Decimal = Decimal("100")
    deposit_amount: Decimal = Decimal("0")


@dataclass
class Application:
    """Wizard-assembled application; read-only to the engine"""

    business: BusinessDetails
    asset: AssetDetails
    loan: LoanDetails
    directors: List[Director] = field(default_factory=list)


CheckValue = Union[str, int, bool, Decimal, None]


@dataclass
class EligibilityCheck:
    """Outcome of one eligibility rule"""

    passed: bool
    value: CheckValue
    required: CheckValue
    message: str = ""


@dataclass
class EligibilityResult:
    """Full output of one eligibility pass"""

    passed: bool
    checks: Dict[str, EligibilityCheck]
    fail_reasons: List[str]


@dataclass
class QuickCheckResult:
    """Calculator-level pre-check outcome"""

    passed: bool
    issues: List[str]
