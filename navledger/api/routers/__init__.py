"""API routers for navledger.

Each router handles a specific domain of the API.
"""

from navledger.api.routers.analytics import router as analytics_router

__all__ = [
    "analytics_router",
]
