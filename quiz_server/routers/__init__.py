from .questions_router import router as questions_router
from .scores_router import router as scores_router
from .system_router import router as system_router

__all__ = ["questions_router", "scores_router", "system_router"]
