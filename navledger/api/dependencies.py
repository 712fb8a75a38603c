"""FastAPI dependencies for API routers.

Provides common dependencies that can be injected into route handlers.
"""

from dataclasses import dataclass

from navledger.analytics import PortfolioAnalytics
from navledger.settings import Settings


@dataclass
class CommonDependencies:
    """Common dependencies used across API routes.

    Usage:
        @router.post("/endpoint")
        async def my_endpoint(deps: Annotated[CommonDependencies, Depends(get_common_deps)]):
            result = await deps.analytics.calculate_flows(events)
    """

    settings: Settings
    analytics: PortfolioAnalytics


async def get_common_deps() -> CommonDependencies:
    """Factory for common dependencies.

    Each request gets its own PortfolioAnalytics; simulation state never
    outlives a single call.
    """
    settings = Settings()
    return CommonDependencies(
        settings=settings,
        analytics=PortfolioAnalytics(settings=settings),
    )
