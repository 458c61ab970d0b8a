"""GET /v1/rates - published monthly rate lookup"""

import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from rmc_recalc.api.v1.schemas import RateResponse
from rmc_recalc.api.dependencies import get_rate_client, get_request_id
from rmc_recalc.infrastructure.clients.rates import RateClient
from rmc_recalc.domain.exceptions import RateProviderError

router = APIRouter()


@router.get("/rates", response_model=RateResponse)
async def get_rate(
    request: Request,
    reference_date: date = Query(..., description="Any day of the contract month"),
    rate_client: RateClient = Depends(get_rate_client),
):
    """
    Monthly rate published for the reference month.

    monthly_rate is null when the series has no value, so the user types it in.
    """
    request_id = get_request_id(request)

    try:
        monthly_rate = await rate_client.get_monthly_rate(reference_date)
    except RateProviderError as e:
        logging.error(f"Rate provider error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Rate service unavailable")

    return RateResponse(
        reference_date=reference_date,
        series_code=rate_client.series_code,
        monthly_rate=monthly_rate,
    )
