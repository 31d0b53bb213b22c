"""POST /api/v1/tax/calculate and GET /api/v1/tax/get-calculation/{userID}"""

import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request

from tax_gateway.api.v1.schemas import CalculationRequest, CalculationResponse, CalculationSchema
from tax_gateway.api.dependencies import get_optional_result_store, get_request_id
from tax_gateway.config import settings
from tax_gateway.domain.engine import calculate
from tax_gateway.domain.exceptions import ResultStoreError
from tax_gateway.domain.identifiers import new_calculation_id
from tax_gateway.domain.models import CalculationResult
from tax_gateway.domain.store import ResultStore
from tax_gateway.infrastructure.observability.logging import log_calculation
from tax_gateway.infrastructure.observability.metrics import (
    calculation_lookup_counter,
    record_calculation,
    store_failures_counter,
)

router = APIRouter()

SAVED_MESSAGE = "Calculation successful!"
UNSAVED_MESSAGE = "Calculation successful! (Note: Unable to save for later retrieval)"


async def save_result(
    store: Optional[ResultStore],
    calculation_id: str,
    result: CalculationResult,
    request_id: str,
) -> bool:
    """Save once, no retries. Failures are logged and reported as False."""
    if store is None:
        store_failures_counter.labels(operation="save").inc()
        logging.warning("Result not saved: no result store configured", extra={"request_id": request_id})
        return False

    try:
        await store.save(calculation_id, result, settings.calculation_ttl_seconds)
    except ResultStoreError as e:
        store_failures_counter.labels(operation="save").inc()
        logging.warning(f"Result not saved: {e}", extra={"request_id": request_id})
        return False
    return True


@router.post("/calculate", response_model=CalculationResponse)
async def calculate_tax(
    request_body: CalculationRequest,
    request: Request,
    store: Optional[ResultStore] = Depends(get_optional_result_store),
):
    """
    Compute PAYE for the submitted income and deductions.

    Flow:
    1. Run the tax engine on the validated input
    2. Save the result under a fresh identifier for 24 hours
    3. Return the result; a failed save only drops the identifier
    """
    start_time = time.time()
    request_id = get_request_id(request)

    result = calculate(request_body.to_domain())

    calculation_id: Optional[str] = new_calculation_id()
    message = SAVED_MESSAGE
    if not await save_result(store, calculation_id, result, request_id):
        calculation_id = None
        message = UNSAVED_MESSAGE

    duration_ms = (time.time() - start_time) * 1000
    record_calculation(calculation_id is not None, result.effective_tax_rate)
    log_calculation(
        request_id,
        calculation_id,
        result.gross_income,
        result.tax_owed,
        result.effective_tax_rate,
        duration_ms,
    )

    return CalculationResponse(
        success=True,
        message=message,
        user_id=calculation_id,
        calculation=CalculationSchema.from_result(result),
    )


@router.get("/get-calculation/{user_id}", response_model=CalculationResponse)
async def get_calculation(
    user_id: str,
    request: Request,
    store: Optional[ResultStore] = Depends(get_optional_result_store),
):
    """
    Retrieve a calculation saved within the last 24 hours.

    Returns:
        The stored figures; 404 when the identifier is unknown or expired
    """
    request_id = get_request_id(request)
    calculation_id = user_id.strip()
    if not calculation_id:
        logging.warning("Invalid user ID.", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail="Valid user ID is required!")

    if store is None:
        calculation_lookup_counter.labels(outcome="error").inc()
        logging.error("Result store not configured", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Result store unavailable")

    try:
        result = await store.get(calculation_id)
    except ResultStoreError as e:
        store_failures_counter.labels(operation="get").inc()
        calculation_lookup_counter.labels(outcome="error").inc()
        logging.error(f"Result store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Result store unavailable")

    if result is None:
        calculation_lookup_counter.labels(outcome="not_found").inc()
        raise HTTPException(status_code=404, detail="Calculation not found or expired!")

    calculation_lookup_counter.labels(outcome="found").inc()
    return CalculationResponse(
        success=True,
        message="Calculation retrieved successfully!",
        user_id=calculation_id,
        calculation=CalculationSchema.from_result(result),
    )
