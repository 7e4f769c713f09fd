# app/api/__init__.py
from fastapi import FastAPI
from app.api.routers import health, users, products, orders, sales


def include_routers(app: FastAPI) -> FastAPI:
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(orders.router)
    app.include_router(sales.router)
    return app
