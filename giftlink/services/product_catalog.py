from __future__ import annotations

from collections.abc import Iterable

from giftlink.schemas.product import Product

CATALOG: tuple[Product, ...] = (
    Product(
        id="p1",
        title="Vintage Leather Jacket",
        price=650,
        image="https://images.unsplash.com/photo-1551028919-ac669d6301dd?auto=format&fit=crop&q=80&w=300",
    ),
    Product(
        id="p2",
        title="Performance Energy Drink",
        price=45,
        image="https://images.unsplash.com/photo-1622483767028-3f66f32aef97?auto=format&fit=crop&q=80&w=300",
    ),
    Product(
        id="p3",
        title="Hydrating Face Cream",
        price=120,
        image="https://images.unsplash.com/photo-1620916566398-39f1143ab7be?auto=format&fit=crop&q=80&w=300",
    ),
    Product(
        id="p4",
        title="Ceramic Diffuser",
        price=55,
        image="https://images.unsplash.com/photo-1616486029423-aaa478965c97?auto=format&fit=crop&q=80&w=300",
    ),
    Product(
        id="p5",
        title="Silk Pillowcase",
        price=85,
        image="https://images.unsplash.com/photo-1576014131795-d4c3a283033f?auto=format&fit=crop&q=80&w=300",
    ),
    Product(
        id="p6",
        title="Matcha Kit",
        price=40,
        image="https://images.unsplash.com/photo-1563822249548-9a72b6353cd1?auto=format&fit=crop&q=80&w=300",
    ),
)

_BY_ID: dict[str, Product] = {product.id: product for product in CATALOG}


def list_products() -> list[Product]:
    return list(CATALOG)


def get_product(product_id: str) -> Product | None:
    return _BY_ID.get(product_id)


def products_for_ids(product_ids: Iterable[str]) -> list[Product]:
    products: list[Product] = []
    for product_id in product_ids:
        product = _BY_ID.get(product_id)
        if product is not None and product not in products:
            products.append(product)
    return products


def unknown_product_ids(product_ids: Iterable[str]) -> list[str]:
    return [product_id for product_id in product_ids if product_id not in _BY_ID]
