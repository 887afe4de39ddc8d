"""
In-memory product store.

Lives for the lifetime of the runtime process. The runtime invokes the
handler strictly one event at a time, so no locking is done here.
"""

import uuid
from typing import Dict, List, Optional

from .models import Product, ProductInput

SEED_PRODUCTS = [
    ("prod-001", "Wireless Mouse", "Ergonomic wireless mouse with USB-C", 29.99, "Electronics"),
    ("prod-002", "Mechanical Keyboard", "Cherry MX Blue switches, RGB backlit", 89.99, "Electronics"),
    ("prod-003", "USB-C Hub", "7-in-1 USB-C hub with HDMI and Ethernet", 45.00, "Accessories"),
    ("prod-004", "Monitor Stand", "Adjustable aluminum monitor stand", 59.99, "Furniture"),
    ("prod-005", "Desk Lamp", "LED desk lamp with wireless charging base", 39.99, "Lighting"),
]


class ProductStore:
    def __init__(self, seed: bool = True):
        self._items: Dict[str, Product] = {}
        if seed:
            for product_id, name, description, price, category in SEED_PRODUCTS:
                self._items[product_id] = Product(
                    id=product_id,
                    name=name,
                    description=description,
                    price=price,
                    category=category,
                )

    def list_all(self) -> List[Product]:
        return list(self._items.values())

    def get(self, product_id: str) -> Optional[Product]:
        return self._items.get(product_id)

    def search_by_category(self, category: str) -> List[Product]:
        wanted = category.lower()
        return [p for p in self._items.values() if p.category and p.category.lower() == wanted]

    def create(self, data: ProductInput) -> Product:
        product = Product(id=f"prod-{uuid.uuid4().hex[:8]}", **data.model_dump())
        self._items[product.id] = product
        return product

    def delete(self, product_id: str) -> Optional[Product]:
        return self._items.pop(product_id, None)
