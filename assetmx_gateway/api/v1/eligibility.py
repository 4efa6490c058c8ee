"""POST /v1/eligibility - pre-eligibility gate; POST /v1/eligibility/quick - calculator pre-check"""

import logging
import time
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from assetmx_gateway.api.dependencies import get_request_id
from assetmx_gateway.api.v1.schemas import (
    ApplicationRequest,
    CheckDisplay,
    EligibilityCheckSchema,
    EligibilityResponse,
    QuickCheckRequest,
    QuickCheckResponse,
)
from assetmx_gateway.domain.abn import format_abn_age
from assetmx_gateway.domain.eligibility import (
    check_eligibility,
    failed_hard_checks,
    format_eligibility_checks,
    get_eligibility_explanation,
    quick_eligibility_check,
)
from assetmx_gateway.domain.exceptions import InvalidApplicationError
from assetmx_gateway.infrastructure.observability.logging import log_eligibility
from assetmx_gateway.infrastructure.observability.metrics import record_eligibility

router = APIRouter()


@router.post("/eligibility", response_model=EligibilityResponse)
def evaluate_eligibility(
    request_body: ApplicationRequest,
    request: Request,
    as_of: Optional[date] = Query(None, description="Reference date for ABN and asset age (default today)"),
):
    """
    Run the full hard/soft rule battery against an application.

    Ineligibility is a normal 200 response with fail reasons, not an error.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    registered = request_body.business.abn_registered_date

    try:
        result = check_eligibility(request_body.to_domain(), as_of=as_of)
    except InvalidApplicationError as e:
        logging.warning(f"Malformed application: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    failed_rules = failed_hard_checks(result)
    duration_ms = (time.time() - start_time) * 1000
    record_eligibility(result.passed, failed_rules)
    log_eligibility(request_id, result.passed, failed_rules, duration_ms)

    return EligibilityResponse(
        passed=result.passed,
        checks={
            rule: EligibilityCheckSchema(
                passed=check.passed,
                value=check.value,
                required=check.required,
                message=check.message,
            )
            for rule, check in result.checks.items()
        },
        fail_reasons=result.fail_reasons,
        explanation=get_eligibility_explanation(result),
        display_checks=[CheckDisplay(**item) for item in format_eligibility_checks(result.checks)],
        abn_age=format_abn_age(registered, as_of) if registered else None,
    )


@router.post("/eligibility/quick", response_model=QuickCheckResponse)
def quick_check(request_body: QuickCheckRequest):
    """Bounds-only pre-check from calculator inputs; not a substitute for the full gate"""
    result = quick_eligibility_check(
        request_body.loan_amount,
        request_body.term_months,
        request_body.balloon_percent,
    )
    return QuickCheckResponse(passed=result.passed, issues=result.issues)
