from cardledger.api.cards import router as cards_router
from cardledger.api.grading import router as grading_router
from cardledger.api.health import router as health_router
from cardledger.api.ownership import router as ownership_router

__all__ = [
    "cards_router",
    "grading_router",
    "health_router",
    "ownership_router",
]
