"""Mock product catalog"""

from datetime import datetime
from typing import Iterable, Optional

from ..models.product import Product, ProductImage, Category

_PUBLISHED = datetime(2024, 11, 4, 9, 30)


def _product(
    product_id: int,
    document_id: str,
    name: str,
    slug: str,
    description: str,
    price: float,
    categories: list[str],
) -> Product:
    return Product(
        id=product_id,
        document_id=document_id,
        name=name,
        slug=slug,
        description=description,
        price=price,
        categories=categories,
        image=ProductImage(url=f"/uploads/{slug}.jpg", alternative_text=name),
        published_at=_PUBLISHED,
    )


# Mock catalog, keyed by document id
PRODUCTS: dict[str, Product] = {
    p.document_id: p
    for p in [
        _product(
            1, "h3k2m9x0c1v8b7n6", "Linen Overshirt", "linen-overshirt",
            "Loose-fit overshirt in washed European linen.", 89.0, ["Clothing"],
        ),
        _product(
            2, "q8w7e6r5t4y3u2i1", "Merino Crew Sweater", "merino-crew-sweater",
            "Fine-gauge merino wool, machine washable.", 120.0, ["Clothing"],
        ),
        _product(
            3, "a1s2d3f4g5h6j7k8", "Canvas Tote", "canvas-tote",
            "Heavyweight organic cotton canvas with leather handles.", 35.5, ["Accessories"],
        ),
        _product(
            4, "z9x8c7v6b5n4m3l2", "Leather Card Holder", "leather-card-holder",
            "Vegetable-tanned leather, four card slots.", 42.0, ["Accessories"],
        ),
        _product(
            5, "p0o9i8u7y6t5r4e3", "Stoneware Mug", "stoneware-mug",
            "Hand-glazed 350 ml mug, dishwasher safe.", 18.0, ["Home"],
        ),
        _product(
            6, "m1n2b3v4c5x6z7a8", "Wool Throw", "wool-throw",
            "Recycled wool throw blanket, 130 x 180 cm.", 145.0, ["Home"],
        ),
        _product(
            7, "k9j8h7g6f5d4s3a2", "Field Notebook", "field-notebook",
            "A5 dot-grid notebook, 192 pages.", 14.9, ["Stationery"],
        ),
        _product(
            8, "l2k3j4h5g6f7d8s9", "Brass Pen", "brass-pen",
            "Solid brass ballpoint that ages with use.", 56.0, ["Stationery"],
        ),
    ]
}


class ProductDatabase:
    """In-memory product catalog"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        """Restore the seeded catalog"""
        self.products = {doc_id: p.model_copy(deep=True) for doc_id, p in PRODUCTS.items()}

    def get_product(self, document_id: str) -> Optional[Product]:
        return self.products.get(document_id)

    def get_by_id(self, product_id: int) -> Optional[Product]:
        return next((p for p in self.products.values() if p.id == product_id), None)

    def get_by_slug(self, slug: str) -> Optional[Product]:
        return next((p for p in self.products.values() if p.slug == slug), None)

    def find_products(
        self,
        document_ids: Optional[Iterable[str]] = None,
        category: Optional[str] = None,
    ) -> list[Product]:
        """
        Filter the catalog.

        Args:
            document_ids: Restrict to these document ids (unknown ids are skipped)
            category: Case-insensitive category name

        Returns:
            Matching products, newest id first
        """
        results = list(self.products.values())

        if document_ids is not None:
            wanted = set(document_ids)
            results = [p for p in results if p.document_id in wanted]

        if category:
            category_lower = category.lower()
            results = [
                p for p in results
                if any(c.lower() == category_lower for c in p.categories)
            ]

        results.sort(key=lambda p: p.id, reverse=True)
        return results

    def list_categories(self) -> list[Category]:
        names = sorted({c for p in self.products.values() for c in p.categories})
        return [Category(name=name) for name in names]

    def update_price(self, document_id: str, price: float) -> Optional[Product]:
        """Change a product's authoritative price"""
        product = self.products.get(document_id)
        if not product:
            return None
        product.price = price
        return product


# Singleton instance
product_db = ProductDatabase()
