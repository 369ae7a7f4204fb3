from shopdesk.routers.health import router as health_router
from shopdesk.routers.rpc import router as rpc_router

__all__ = ["health_router", "rpc_router"]
