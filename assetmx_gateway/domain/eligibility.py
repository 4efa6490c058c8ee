"""Pre-eligibility gate - hard declines and soft warnings evaluated before document collection"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from assetmx_gateway.domain.exceptions import InvalidApplicationError
from assetmx_gateway.domain.models import (
    Application,
    EligibilityCheck,
    EligibilityResult,
    QuickCheckResult,
)
from assetmx_gateway.utils.date_utils import months_between, term_years
from assetmx_gateway.utils.formatting import format_number

MIN_ABN_AGE_MONTHS = 24
MIN_LOAN_AMOUNT = Decimal("5000")
MAX_LOAN_AMOUNT = Decimal("500000")
MIN_TERM_MONTHS = 12
MAX_TERM_MONTHS = 84
MAX_BALLOON_PERCENT = Decimal("50")
MAX_ASSET_AGE_AT_TERM_END = 15
MIN_BUSINESS_USE_PERCENT = Decimal("50")

# Hard checks block the application; absent conditional checks pass vacuously
HARD_CHECKS = (
    "abn_age",
    "gst_registered",
    "abn_status",
    "loan_amount",
    "term_months",
    "balloon_percentage",
    "director_required",
    "asset_age_at_term_end",
)
SOFT_CHECKS = ("business_use_percentage",)

CHECK_LABELS: Dict[str, str] = {
    "abn_age": "ABN Age",
    "gst_registered": "GST Registration",
    "abn_status": "ABN Status",
    "loan_amount": "Loan Amount",
    "term_months": "Loan Term",
    "balloon_percentage": "Balloon/Residual",
    "director_required": "Director Details",
    "asset_age_at_term_end": "Asset Age",
    "business_use_percentage": "Business Use",
}

PASSED_EXPLANATION = (
    "Great news! Based on the information provided, you meet our initial eligibility "
    "criteria. The next step is to upload your documents for verification."
)
DECLINED_INTRO = "Unfortunately, we're unable to proceed with your application at this time."
DECLINED_OUTRO = (
    "If you believe this is an error or your circumstances have changed, please contact us."
)


def check_eligibility(application: Application, as_of: Optional[date] = None) -> EligibilityResult:
    """
    Run the full rule battery against an application.

    Rules run in display order; the order only affects fail_reasons. The
    overall result passes iff every evaluated hard check passed. Business use
    is a soft check: recorded, never a fail reason.

    Raises:
        InvalidApplicationError: If the application or one of its sections is missing
    """
    if application is None:
        raise InvalidApplicationError("Application is required")
    for section in ("business", "asset", "loan"):
        if getattr(application, section, None) is None:
            raise InvalidApplicationError(f"Application is missing {section} details")

    as_of = as_of or date.today()
    business = application.business
    loan = application.loan
    asset = application.asset
    directors = application.directors or []

    checks: Dict[str, EligibilityCheck] = {}
    fail_reasons: List[str] = []

    # ===== HARD DECLINES =====

    # ABN age; a missing registration date counts as zero months
    abn_age_months = (
        months_between(business.abn_registered_date, as_of)
        if business.abn_registered_date
        else 0
    )
    abn_age_ok = abn_age_months >= MIN_ABN_AGE_MONTHS
    checks["abn_age"] = EligibilityCheck(
        passed=abn_age_ok,
        value=abn_age_months,
        required=MIN_ABN_AGE_MONTHS,
        message=(
            f"ABN registered {abn_age_months} months ({abn_age_months // 12} years)"
            if abn_age_ok
            else f"ABN must be at least 24 months old. Yours is {abn_age_months} months."
        ),
    )
    if not abn_age_ok:
        fail_reasons.append(
            f"Your ABN was registered {abn_age_months} months ago. "
            "We require at least 24 months trading history."
        )

    gst_ok = business.gst_registered is True
    checks["gst_registered"] = EligibilityCheck(
        passed=gst_ok,
        value=business.gst_registered,
        required=True,
        message="GST registered" if gst_ok else "Business must be GST registered",
    )
    if not gst_ok:
        fail_reasons.append(
            "Your business must be registered for GST. "
            "This is a requirement for our lender panel."
        )

    # ABN status is only known after a register lookup
    if business.abn_lookup is not None:
        status = business.abn_lookup.abn_status or "Unknown"
        active = status == "Active"
        checks["abn_status"] = EligibilityCheck(
            passed=active,
            value=status,
            required="Active",
            message="ABN is active" if active else "ABN must be active",
        )
        if not active:
            fail_reasons.append(
                f'Your ABN status is "{status}". Only active ABNs are eligible.'
            )

    loan_amount = Decimal(str(loan.loan_amount))
    amount_ok = MIN_LOAN_AMOUNT <= loan_amount <= MAX_LOAN_AMOUNT
    checks["loan_amount"] = EligibilityCheck(
        passed=amount_ok,
        value=loan_amount,
        required="$5,000 - $500,000",
        message=(
            f"Loan amount ${format_number(loan_amount)} is within range"
            if amount_ok
            else "Loan amount must be between $5,000 and $500,000"
        ),
    )
    if not amount_ok:
        bound = "Minimum loan amount is $5,000" if loan_amount < MIN_LOAN_AMOUNT else (
            "Maximum loan amount is $500,000"
        )
        fail_reasons.append(f"{bound}. You've requested ${format_number(loan_amount)}.")

    term_months = loan.term_months
    term_ok = MIN_TERM_MONTHS <= term_months <= MAX_TERM_MONTHS
    checks["term_months"] = EligibilityCheck(
        passed=term_ok,
        value=term_months,
        required="12-84 months",
        message=(
            f"Term of {term_months} months is acceptable"
            if term_ok
            else "Term must be between 12 and 84 months"
        ),
    )
    if not term_ok:
        fail_reasons.append(
            f"Loan term must be between 12 and 84 months. You've selected {term_months} months."
        )

    balloon = Decimal(str(loan.balloon_percentage))
    balloon_ok = Decimal("0") <= balloon <= MAX_BALLOON_PERCENT
    checks["balloon_percentage"] = EligibilityCheck(
        passed=balloon_ok,
        value=balloon,
        required="0-50%",
        message=(
            f"Balloon of {format_number(balloon)}% is acceptable"
            if balloon_ok
            else "Balloon/residual must be between 0% and 50%"
        ),
    )
    if not balloon_ok:
        fail_reasons.append(
            f"Maximum balloon/residual is 50%. You've selected {format_number(balloon)}%."
        )

    has_director = len(directors) >= 1
    checks["director_required"] = EligibilityCheck(
        passed=has_director,
        value=len(directors),
        required=1,
        message=(
            f"{len(directors)} director(s) provided"
            if has_director
            else "At least one director/guarantor is required"
        ),
    )
    if not has_director:
        fail_reasons.append("At least one director or guarantor must be provided.")

    # Asset age at term end; only for used assets with a known year
    if asset.asset_year and asset.asset_condition.is_used:
        age_at_term_end = (as_of.year - asset.asset_year) + term_years(term_months)
        age_ok = age_at_term_end <= MAX_ASSET_AGE_AT_TERM_END
        checks["asset_age_at_term_end"] = EligibilityCheck(
            passed=age_ok,
            value=age_at_term_end,
            required="15 years max",
            message=(
                f"Asset will be {age_at_term_end} years old at term end"
                if age_ok
                else f"Asset will be {age_at_term_end} years old at term end (max 15 years)"
            ),
        )
        if not age_ok:
            fail_reasons.append(
                f"The asset will be {age_at_term_end} years old at the end of the loan term. "
                "Maximum asset age at term end is 15 years. Consider a shorter term."
            )

    # ===== SOFT CHECKS =====

    business_use = Decimal(str(loan.business_use_percentage))
    business_use_ok = business_use >= MIN_BUSINESS_USE_PERCENT
    checks["business_use_percentage"] = EligibilityCheck(
        passed=business_use_ok,
        value=business_use,
        required="50%+",
        message=(
            f"{format_number(business_use)}% business use qualifies for best rates"
            if business_use_ok
            else "Business use under 50% may affect available rates"
        ),
    )

    passed = all(checks[rule].passed for rule in HARD_CHECKS if rule in checks)

    return EligibilityResult(passed=passed, checks=checks, fail_reasons=fail_reasons)


def failed_hard_checks(result: EligibilityResult) -> List[str]:
    """Rule ids of the hard checks that failed, in evaluation order"""
    return [
        rule for rule, check in result.checks.items()
        if rule in HARD_CHECKS and not check.passed
    ]


def quick_eligibility_check(
    loan_amount: Decimal,
    term_months: int,
    balloon_percent: Decimal,
) -> QuickCheckResult:
    """
    Calculator-level pre-check: amount bounds, term bounds, balloon ceiling.

    A subset of the full gate; never a substitute for check_eligibility
    before submission.
    """
    amount = Decimal(str(loan_amount))
    balloon = Decimal(str(balloon_percent))
    issues: List[str] = []

    if amount < MIN_LOAN_AMOUNT:
        issues.append("Minimum loan amount is $5,000")
    if amount > MAX_LOAN_AMOUNT:
        issues.append("Maximum loan amount is $500,000")
    if term_months < MIN_TERM_MONTHS:
        issues.append("Minimum term is 12 months")
    if term_months > MAX_TERM_MONTHS:
        issues.append("Maximum term is 84 months")
    if balloon > MAX_BALLOON_PERCENT:
        issues.append("Maximum balloon/residual is 50%")

    return QuickCheckResult(passed=not issues, issues=issues)


def get_eligibility_explanation(result: EligibilityResult) -> str:
    """Customer-facing summary: acceptance sentence, or intro plus numbered reasons"""
    if result.passed:
        return PASSED_EXPLANATION

    reasons = "\n".join(f"{i}. {reason}" for i, reason in enumerate(result.fail_reasons, 1))
    return f"{DECLINED_INTRO}\n\n{reasons}\n\n{DECLINED_OUTRO}"


def format_eligibility_checks(checks: Dict[str, EligibilityCheck]) -> List[Dict[str, object]]:
    return [
        {
            "label": CHECK_LABELS.get(rule, rule),
            "passed": check.passed,
            "message": check.message or "",
        }
        for rule, check in checks.items()
    ]
