"""Stock status and margin derivations.

Pure functions over anything shaped like a product (ORM rows, schemas,
test doubles): they read ``quantity``, ``min_quantity``, ``price``,
``cost``, ``name``, ``description`` and ``category`` and never write.
"""

from typing import Iterable, List, Optional, TypeVar

P = TypeVar("P")

STOCK_FILTERS = ("all", "low", "out", "normal")
SORT_FIELDS = ("name", "category", "quantity", "price")


def is_low_stock(product) -> bool:
    """Threshold-inclusive; an empty shelf is also low."""
    return product.quantity <= product.min_quantity


def is_out_of_stock(product) -> bool:
    return product.quantity == 0


def low_stock(products: Iterable[P]) -> List[P]:
    return [p for p in products if is_low_stock(p)]


def out_of_stock(products: Iterable[P]) -> List[P]:
    return [p for p in products if is_out_of_stock(p)]


def normal_stock(products: Iterable[P]) -> List[P]:
    return [p for p in products if p.quantity > p.min_quantity]


def profit_margin(product) -> Optional[float]:
    """Per-unit margin as a percentage of price, or None when price is 0."""
    if product.price == 0:
        return None
    return (product.price - product.cost) / product.price * 100


def _matches_stock(product, stock_filter: str) -> bool:
    if stock_filter == "low":
        return is_low_stock(product)
    if stock_filter == "out":
        return is_out_of_stock(product)
    if stock_filter == "normal":
        return product.quantity > product.min_quantity
    return True


def filter_products(
    products: Iterable[P],
    search: str = "",
    category: str = "",
    stock_filter: str = "all",
) -> List[P]:
    """Search name/description, then narrow by category and stock status."""
    if stock_filter not in STOCK_FILTERS:
        raise ValueError(f"Unknown stock filter: {stock_filter!r}")

    needle = search.lower()
    result = []
    for product in products:
        if needle and needle not in product.name.lower() and needle not in (product.description or "").lower():
            continue
        if category and product.category != category:
            continue
        if not _matches_stock(product, stock_filter):
            continue
        result.append(product)
    return result


def sort_products(products: Iterable[P], field: str = "name", order: str = "asc") -> List[P]:
    if field not in SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {field!r}")

    def key(product):
        value = getattr(product, field)
        return value.lower() if isinstance(value, str) else value

    return sorted(products, key=key, reverse=(order == "desc"))


def inventory_totals(products: Iterable) -> dict:
    products = list(products)
    return {
        "total_items": sum(p.quantity for p in products),
        "low_stock": len(low_stock(products)),
        "out_of_stock": len(out_of_stock(products)),
    }


def category_options(in_use: Iterable[str], suggested: Iterable[str] = ()) -> List[str]:
    """Suggested categories first, then any free-text ones in use, alphabetically."""
    suggested = list(suggested)
    in_use = {c for c in in_use if c} - set(suggested)
    return suggested + sorted(in_use)
