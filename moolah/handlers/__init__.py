"""aiogram routers of the Moolah bot."""

from aiogram import Router

from . import add, last, settings, start, stats, today


def setup_routers() -> Router:
    """Combine the command routers; the free-text router must stay last."""

    router = Router()
    router.include_router(start.router)
    router.include_router(stats.router)
    router.include_router(today.router)
    router.include_router(last.router)
    router.include_router(settings.router)
    router.include_router(add.router)
    return router


__all__ = ["setup_routers"]
