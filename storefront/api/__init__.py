# storefront/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from storefront.api.routers import admin, carts, health, orders, payments, session, wishlist


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Missing required fields", "detail": jsonable_encoder(exc.errors())},
    )


def create_app() -> FastAPI:
    app = FastAPI(title="Storefront Service", version="1.0.0")
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(wishlist.router)
    app.include_router(session.router)
    app.include_router(orders.router)
    app.include_router(payments.router)
    app.include_router(admin.router)
    return app
