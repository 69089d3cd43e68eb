"""HTTP routers."""

from shopledger.api.routes.assistant import router as assistant_router
from shopledger.api.routes.auth import router as auth_router
from shopledger.api.routes.stats import router as stats_router
from shopledger.api.routes.transactions import router as transactions_router

__all__ = [
    "assistant_router",
    "auth_router",
    "stats_router",
    "transactions_router",
]
