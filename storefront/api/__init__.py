# storefront/api/__init__.py
from fastapi import FastAPI

from storefront.api.errors import register_error_handlers
from storefront.api.gate import SessionGate
from storefront.api.routers import auth, cart, users, items, dataset, health
from storefront.utils.settings import API_PREFIX


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
    )

    register_error_handlers(app)

    # gate przed routerami - handlery widza tylko VerifiedIdentity
    app.add_middleware(SessionGate)

    app.include_router(health.router)
    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(cart.router, prefix=API_PREFIX)
    app.include_router(users.router, prefix=API_PREFIX)
    app.include_router(items.router, prefix=API_PREFIX)
    app.include_router(dataset.router, prefix=API_PREFIX)

    return app
