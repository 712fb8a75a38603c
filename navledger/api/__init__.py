"""navledger API package.

Contains FastAPI routers for the web API.
"""

from navledger.api.dependencies import CommonDependencies

__all__ = ["CommonDependencies"]
