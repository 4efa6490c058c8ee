"""Quote engine - amortized repayments, fee composition and broker comparison"""

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from typing import List, Optional, Union

from assetmx_gateway.domain.exceptions import InvalidRequestError
from assetmx_gateway.domain.models import FeeContext, FeeItem, LoanRequest, Quote
from assetmx_gateway.domain.rates import PLATFORM_FEE, RateTable

MIN_LOAN_AMOUNT = Decimal("5000")
MAX_LOAN_AMOUNT = Decimal("500000")
MIN_TERM_MONTHS = 12
MAX_TERM_MONTHS = 84

# Typical margin a commission-based broker adds to the lender rate
DEFAULT_REFERENCE_MARKUP_PERCENT = Decimal("2.00")

CENTS = Decimal("0.01")

Number = Union[int, float, Decimal]


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_repayment(
    principal: Decimal,
    annual_rate_percent: Decimal,
    term_months: int,
    balloon_amount: Decimal = Decimal("0"),
) -> Decimal:
    """
    Monthly repayment for an amortizing loan with a balloon due at term end.

    Standard PMT over the principal less the present value of the balloon:

        payment = (P - B / (1 + i)^n) * i(1 + i)^n / ((1 + i)^n - 1)

    where i is the annual rate / 12, rounded half-up to the cent. At 0% the
    schedule is straight-line: (P - B) / n, rounded up so the repayments never
    fall short of the principal.
    """
    if term_months <= 0:
        raise ValueError("Term must be positive")

    monthly_rate = annual_rate_percent / Decimal(100) / Decimal(12)
    if monthly_rate == 0:
        payment = (principal - balloon_amount) / Decimal(term_months)
        return payment.quantize(CENTS, rounding=ROUND_CEILING)

    factor = (1 + monthly_rate) ** term_months
    pv_balloon = balloon_amount / factor
    payment = (principal - pv_balloon) * (monthly_rate * factor) / (factor - 1)
    return _money(payment)


def validate_request(request: LoanRequest) -> None:
    """
    Check request bounds; the engine never clamps.

    Raises:
        InvalidRequestError: Naming the first offending field
    """
    amount = Decimal(str(request.loan_amount))
    if amount < MIN_LOAN_AMOUNT or amount > MAX_LOAN_AMOUNT:
        raise InvalidRequestError(
            "Loan amount must be between $5,000 and $500,000", field="loan_amount"
        )
    if request.term_months < MIN_TERM_MONTHS or request.term_months > MAX_TERM_MONTHS:
        raise InvalidRequestError(
            "Loan term must be between 12 and 84 months", field="term_months"
        )
    balloon = Decimal(str(request.balloon_percent))
    if balloon < 0 or balloon > 100:
        raise InvalidRequestError(
            "Balloon percentage must be between 0% and 100%", field="balloon_percent"
        )


class QuoteEngine:
    """Prices LoanRequests against one RateTable snapshot"""

    def __init__(
        self,
        rate_table: RateTable,
        reference_markup_percent: Number = DEFAULT_REFERENCE_MARKUP_PERCENT,
    ):
        self.rate_table = rate_table
        self.reference_markup_percent = Decimal(str(reference_markup_percent))

    def compute_quote(self, request: LoanRequest) -> Quote:
        """
        Convert a LoanRequest into a priced Quote.

        Raises:
            InvalidRequestError: Amount, term or balloon out of bounds
            ConfigError: No rates configured
        """
        validate_request(request)

        loan_amount = Decimal(str(request.loan_amount))
        balloon_percent = Decimal(str(request.balloon_percent))
        term = request.term_months

        rate = self.rate_table.rate_for_term(term)
        balloon_amount = _money(loan_amount * balloon_percent / 100)

        fees = self.rate_table.fee_schedule(FeeContext(private_sale=request.private_sale))
        fees_financed = _money(sum((f.amount for f in fees if f.financed), Decimal("0")))
        fees_upfront = _money(sum((f.amount for f in fees if not f.financed), Decimal("0")))

        # Financed fees are amortized with the loan; the balloon stays on the asset value
        principal = loan_amount + fees_financed

        monthly = calculate_repayment(principal, rate, term, balloon_amount)
        total_repayments = monthly * term + balloon_amount
        total_interest = total_repayments - principal
        total_cost = total_repayments + fees_upfront

        reference_rate = rate + self.reference_markup_percent
        reference_total_cost = self._reference_cost(
            principal, reference_rate, term, balloon_amount, fees
        )
        saving = max(reference_total_cost - total_cost, Decimal("0.00"))

        return Quote(
            indicative_rate_percent=_money(rate),
            monthly_repayment=monthly,
            weekly_repayment=_money(monthly * 12 / 52),
            fortnightly_repayment=_money(monthly * 12 / 26),
            balloon_amount=balloon_amount,
            total_interest=total_interest,
            total_repayments=total_repayments,
            total_fees_financed=fees_financed,
            total_fees_upfront=fees_upfront,
            total_cost=total_cost,
            reference_rate_percent=_money(reference_rate),
            reference_total_cost=reference_total_cost,
            estimated_saving=saving,
            fees=tuple(fees),
        )

    def _reference_cost(
        self,
        principal: Decimal,
        reference_rate: Decimal,
        term: int,
        balloon_amount: Decimal,
        fees: List[FeeItem],
    ) -> Decimal:
        """Cost of the same loan through a commission broker: higher rate, no platform fee"""
        monthly = calculate_repayment(principal, reference_rate, term, balloon_amount)
        passed_on_fees = sum(
            (f.amount for f in fees if not f.financed and f.name != PLATFORM_FEE),
            Decimal("0"),
        )
        return monthly * term + balloon_amount + passed_on_fees


def compute_quote(
    request: LoanRequest,
    rate_table: Optional[RateTable] = None,
    reference_markup_percent: Optional[Number] = None,
) -> Quote:
    """Price a request against the given table, or the default lender sheet"""
    engine = QuoteEngine(
        rate_table or RateTable.default(),
        DEFAULT_REFERENCE_MARKUP_PERCENT
        if reference_markup_percent is None
        else reference_markup_percent,
    )
    return engine.compute_quote(request)
