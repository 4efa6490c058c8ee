"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from assetmx_gateway.domain.abn import format_abn, map_entity_type, validate_abn
from assetmx_gateway.domain.models import (
    AbnLookupResult,
    Application,
    AssetCondition,
    AssetDetails,
    AssetType,
    BusinessDetails,
    Director,
    EntityType,
    FeeItem,
    LoanDetails,
    LoanRequest,
    Quote,
)


class QuoteRequest(BaseModel):
    """Request body for POST /v1/quote; bounds are enforced by the engine"""

    asset_type: AssetType
    asset_condition: AssetCondition
    loan_amount: Decimal = Field(..., gt=0, description="Amount financed in AUD")
    term_months: int = Field(..., description="Loan term in months")
    balloon_percent: Decimal = Field(Decimal("0"), description="Balloon/residual as % of loan amount")
    private_sale: bool = False

    # Lead contact, only used for the notification
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None

    def to_domain(self) -> LoanRequest:
        return LoanRequest(
            asset_type=self.asset_type,
            asset_condition=self.asset_condition,
            loan_amount=self.loan_amount,
            term_months=self.term_months,
            balloon_percent=self.balloon_percent,
            private_sale=self.private_sale,
        )


class FeeSchema(BaseModel):
    name: str
    amount: Decimal
    description: str
    applies_when: str
    financed: bool

    @classmethod
    def from_domain(cls, fee: FeeItem) -> "FeeSchema":
        return cls(
            name=fee.name,
            amount=fee.amount,
            description=fee.description,
            applies_when=fee.applies_when.value,
            financed=fee.financed,
        )


class QuoteResponse(BaseModel):
    """Response for POST /v1/quote"""

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
    fees: List[FeeSchema]

    @classmethod
    def from_domain(cls, quote: Quote) -> "QuoteResponse":
        return cls(
            indicative_rate_percent=quote.indicative_rate_percent,
            monthly_repayment=quote.monthly_repayment,
            weekly_repayment=quote.weekly_repayment,
            fortnightly_repayment=quote.fortnightly_repayment,
            balloon_amount=quote.balloon_amount,
            total_interest=quote.total_interest,
            total_repayments=quote.total_repayments,
            total_fees_financed=quote.total_fees_financed,
            total_fees_upfront=quote.total_fees_upfront,
            total_cost=quote.total_cost,
            reference_rate_percent=quote.reference_rate_percent,
            reference_total_cost=quote.reference_total_cost,
            estimated_saving=quote.estimated_saving,
            fees=[FeeSchema.from_domain(f) for f in quote.fees],
        )


class AbnLookupSchema(BaseModel):
    abn: str
    abn_status: str
    abn_registered_date: Optional[date] = None
    entity_name: str = ""
    gst_registered: bool = False
    entity_type_description: str = ""


class BusinessSchema(BaseModel):
    abn: str
    entity_name: str = ""
    entity_type: Optional[EntityType] = None  # derived from the lookup when omitted
    gst_registered: bool = False
    abn_registered_date: Optional[date] = None
    abn_lookup: Optional[AbnLookupSchema] = None

    @field_validator("abn")
    @classmethod
    def validate_abn_checksum(cls, v: str) -> str:
        """Reject mistyped ABNs and normalise to XX XXX XXX XXX"""
        if not validate_abn(v):
            raise ValueError("ABN must be 11 digits with a valid checksum")
        return format_abn(v)

    def resolved_entity_type(self) -> EntityType:
        if self.entity_type is not None:
            return self.entity_type
        if self.abn_lookup and self.abn_lookup.entity_type_description:
            return map_entity_type(self.abn_lookup.entity_type_description)
        return EntityType.COMPANY


class DirectorSchema(BaseModel):
    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    email: str = ""
    phone: str = ""
    is_homeowner: bool = False
    net_assets: Decimal = Decimal("0")
    monthly_commitments: Decimal = Decimal("0")


class AssetSchema(BaseModel):
    asset_type: AssetType
    asset_condition: AssetCondition
    asset_year: Optional[int] = None
    purchase_price: Decimal = Decimal("0")


class LoanSchema(BaseModel):
    loan_amount: Decimal
    term_months: int
    balloon_percentage: Decimal = Decimal("0")
    business_use_percentage: Decimal = Decimal("100")
    deposit_amount: Decimal = Decimal("0")


class ApplicationRequest(BaseModel):
    """Request body for POST /v1/eligibility"""

    business: BusinessSchema
    directors: List[DirectorSchema] = Field(default_factory=list)
    asset: AssetSchema
    loan: LoanSchema

    def to_domain(self) -> Application:
        business = self.business
        lookup = business.abn_lookup
        return Application(
            business=BusinessDetails(
                abn=business.abn,
                entity_name=business.entity_name,
                entity_type=business.resolved_entity_type(),
                gst_registered=business.gst_registered,
                abn_registered_date=business.abn_registered_date,
                abn_lookup=AbnLookupResult(**lookup.model_dump()) if lookup else None,
            ),
            directors=[Director(**d.model_dump()) for d in self.directors],
            asset=AssetDetails(**self.asset.model_dump()),
            loan=LoanDetails(**self.loan.model_dump()),
        )


class EligibilityCheckSchema(BaseModel):
    passed: bool
    value: Any = None
    required: Any = None
    message: str = ""


class CheckDisplay(BaseModel):
    label: str
    passed: bool
    message: str


class EligibilityResponse(BaseModel):
    """Response for POST /v1/eligibility"""

    passed: bool
    checks: Dict[str, EligibilityCheckSchema]
    fail_reasons: List[str]
    explanation: str
    display_checks: List[CheckDisplay]
    abn_age: Optional[str] = None  # "2 years, 3 months"


class QuickCheckRequest(BaseModel):
    loan_amount: Decimal
    term_months: int
    balloon_percent: Decimal = Decimal("0")


class QuickCheckResponse(BaseModel):
    passed: bool
    issues: List[str]


class RateEntrySchema(BaseModel):
    term_months: int
    base_rate_percent: Decimal
    max_balloon_percent: int


class RatesResponse(BaseModel):
    """Response for GET /v1/rates"""

    source: str
    reference_markup_percent: Decimal
    rates: List[RateEntrySchema]
    fees: List[FeeSchema]


class ReloadResponse(BaseModel):
    reloaded: bool
    source: str
