# app/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from app.api.deps import get_notifier, get_view_cache
from app.data.database import get_db
from app.domain.errors import ComboCompositionError, ProductNotFoundError
from app.domain.schemas import (
    CategoryCreate,
    CategoryRead,
    ProductCreate,
    ProductDeleteOut,
    ProductOut,
    ProductUpdate,
)
from app.services.notification_service import NotificationService
from app.services.product_service import ProductService
from app.services.view_cache import ViewCache, INVENTORY_VIEW
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["products"])


def get_service(db: Session, notifier: NotificationService):
    return ProductService(db, notifier=notifier)


@router.get("/products", response_model=List[ProductOut])
def list_products(
    active_only: bool = False,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    return get_service(db, notifier).list_products(active_only=active_only)


@router.get("/products/catalog", response_model=List[ProductOut])
def get_catalog(
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
    cache: ViewCache = Depends(get_view_cache),
):
    """
    Katalog dla kelnera (aktywne produkty, combo ze stanem wyliczonym z komponentow).
    Cache w redis, uniewazniany sygnalem "inventory".
    """
    try:
        cached = cache.get(INVENTORY_VIEW, "catalog")
    except RedisError as e:
        logger.warning(f"Catalog cache unavailable: {e}")
        cached = None
    if cached is not None:
        return cached

    catalog = get_service(db, notifier).get_catalog()
    try:
        cache.set(INVENTORY_VIEW, catalog, "catalog")
    except RedisError as e:
        logger.warning(f"Could not store catalog in cache: {e}")
    return catalog


@router.get("/products/low-stock", response_model=List[ProductOut])
def low_stock(
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    return get_service(db, notifier).low_stock()


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    try:
        return get_service(db, notifier).get_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    try:
        return get_service(db, notifier).create_product(payload)
    except (ComboCompositionError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/products/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    try:
        return get_service(db, notifier).update_product(product_id, payload)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (ComboCompositionError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/products/{product_id}", response_model=ProductDeleteOut)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    """Produkt z historia sprzedazy jest dezaktywowany zamiast usuniety."""
    try:
        return get_service(db, notifier).delete_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/categories", response_model=List[CategoryRead])
def list_categories(
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    return get_service(db, notifier).list_categories()


@router.post("/categories", response_model=CategoryRead, status_code=201)
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
):
    return get_service(db, notifier).create_category(payload)
