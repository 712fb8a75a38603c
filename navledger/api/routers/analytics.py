"""Performance analytics API routes."""

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from typing_extensions import Annotated

from navledger.api.dependencies import CommonDependencies, get_common_deps
from navledger.api.models import BenchmarkRequest, FlowsRequest, to_events
from navledger.config.ranges import start_date_for_range

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("/benchmark")
async def get_benchmark_comparison(
    request: BenchmarkRequest,
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
) -> dict[str, Any]:
    """Daily NAV series of the posted ledger alongside a normalized benchmark."""
    try:
        events = to_events(request.events)
        start_date = request.start_date or start_date_for_range(request.time_range)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = await deps.analytics.calculate_comparison_history(
            events,
            benchmark_symbol=request.benchmark_symbol,
            start_date=start_date,
            target_currency=request.target_currency,
        )
    except asyncio.TimeoutError:
        logger.error("Benchmark analytics timed out fetching market data")
        raise HTTPException(status_code=504, detail="Timed out fetching market data")

    return result.to_dict()


@router.post("/flows")
async def get_flows(
    request: FlowsRequest,
    deps: Annotated[CommonDependencies, Depends(get_common_deps)],
) -> dict[str, Any]:
    """Contributions and dividends bucketed by week, month and year."""
    try:
        events = to_events(request.events)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        report = await deps.analytics.calculate_flows(events, target_currency=request.target_currency)
    except asyncio.TimeoutError:
        logger.error("Flow analytics timed out fetching FX history")
        raise HTTPException(status_code=504, detail="Timed out fetching FX history")

    return report.to_dict()
