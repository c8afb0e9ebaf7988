from .build import router as build_router
from .flight_log import router as flight_log_router
from .appearance import router as appearance_router
from .debug import router as debug_router

__all__ = [
    "build_router", "flight_log_router", "appearance_router", "debug_router"
]
