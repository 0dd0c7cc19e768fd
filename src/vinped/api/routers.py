from fastapi import FastAPI

from vinped.auth.api import router as auth_router
from vinped.health.api import router as health_router
from vinped.wallets.api import router as wallets_router


def configure_routers(app: FastAPI) -> FastAPI:
    app.include_router(auth_router)
    app.include_router(health_router)
    app.include_router(wallets_router)
    return app
