"""Banco Central SGS client for the published monthly interest rate"""

import httpx
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional
from rmc_recalc.domain.exceptions import RateProviderError
from rmc_recalc.config import settings
from rmc_recalc.utils.date_utils import add_months, first_of_month
from rmc_recalc.infrastructure.observability.metrics import rate_lookup_failures_counter


class RateClient:
    """Client for the SGS time-series API"""

    def __init__(
        self,
        base_url: str | None = None,
        series_code: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.rate_api_base
        self.series_code = series_code or settings.rate_series_code
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_monthly_rate(self, reference_date: date) -> Optional[Decimal]:
        """
        Fetch the monthly rate (percentage) published for the reference month.

        Returns None when the series has no value for that month, leaving the
        rate for manual entry.

        Raises:
            RateProviderError: On timeout, HTTP errors, or invalid response
        """
        start = first_of_month(reference_date)
        end = date.fromordinal(add_months(start, 1).toordinal() - 1)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/dados/serie/bcdata.sgs.{self.series_code}/dados",
                    params={
                        "formato": "json",
                        "dataInicial": start.strftime("%d/%m/%Y"),
                        "dataFinal": end.strftime("%d/%m/%Y"),
                    },
                )
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                data = response.json()

                if not data:
                    return None
                return Decimal(str(data[-1]["valor"]))

            except httpx.TimeoutException as e:
                rate_lookup_failures_counter.inc()
                raise RateProviderError(f"Rate API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                rate_lookup_failures_counter.inc()
                raise RateProviderError(f"Rate API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                rate_lookup_failures_counter.inc()
                raise RateProviderError(f"Rate API unreachable: {e}") from e
            except (KeyError, IndexError, TypeError, ValueError, InvalidOperation) as e:
                rate_lookup_failures_counter.inc()
                raise RateProviderError(f"Invalid rate data from provider: {e}") from e
