from typing import Callable, Dict, List, Sequence
import logging

from app.domain.models.product import Product, ProductSummary, ScoredProduct
from app.domain.models.search import SearchFilters
from app.domain.services.constants import (
    SORT_NAME,
    SORT_PRICE_HIGH,
    SORT_PRICE_LOW,
    SORT_RELEVANCE,
)
from app.domain.services.formatter_svc import format_product, parse_price

logger = logging.getLogger(__name__)

ProductPredicate = Callable[[Product], bool]


def _category_filter(categories: Sequence[str]) -> ProductPredicate:
    wanted = [c.lower() for c in categories]
    return lambda p: any(c in p.product_type.lower() for c in wanted)


def _price_filter(lo, hi) -> ProductPredicate:
    """
    Inclusive [lo, hi]. Either bound may be None (unbounded).
    Products with a missing or unparseable price never pass.
    """
    def _check(p: Product) -> bool:
        price = parse_price(p.price)
        if price is None:
            return False
        if lo is not None and price < lo:
            return False
        if hi is not None and price > hi:
            return False
        return True
    return _check


def _scent_filter(families: Sequence[str]) -> ProductPredicate:
    wanted = [f.lower() for f in families]
    return lambda p: any(f in note.lower() for note in p.scent_notes for f in wanted)


def build_predicates(filters: SearchFilters) -> List[ProductPredicate]:
    """Translate the active search options into a list of product predicates."""
    predicates: List[ProductPredicate] = []

    if filters.availability:
        predicates.append(lambda p: p.available)

    if filters.categories:
        predicates.append(_category_filter(filters.categories))

    if filters.price_range is not None:
        predicates.append(_price_filter(filters.price_range.min, filters.price_range.max))

    if filters.scent_families:
        predicates.append(_scent_filter(filters.scent_families))

    return predicates


def _price_or_zero(p: Product) -> float:
    price = parse_price(p.price)
    return price if price is not None else 0.0


# relevance = keep input order
SORTERS: Dict[str, Callable[[List[Product]], List[Product]]] = {
    SORT_RELEVANCE: lambda items: items,
    SORT_PRICE_LOW: lambda items: sorted(items, key=_price_or_zero),
    SORT_PRICE_HIGH: lambda items: sorted(items, key=_price_or_zero, reverse=True),
    SORT_NAME: lambda items: sorted(items, key=lambda p: p.title.casefold()),
}


def search_advanced(products: Sequence[Product], filters: SearchFilters) -> List[ProductSummary]:
    """
    Filter/sort query path, independent of the relevance scorer.
    Summaries carry relevance_score=0.
    """
    predicates = build_predicates(filters)
    matched = [p for p in products if all(check(p) for check in predicates)]

    sorter = SORTERS.get(filters.sort_by)
    if sorter is None:
        logger.debug(f"Unknown sortBy={filters.sort_by!r}, keeping relevance order")
        sorter = SORTERS[SORT_RELEVANCE]
    ordered = sorter(matched)

    logger.info(
        f"Advanced search matched={len(ordered)}/{len(products)} sort_by={filters.sort_by} "
        f"categories={filters.categories} scent_families={filters.scent_families}"
    )
    return [format_product(ScoredProduct(product=p, score=0)) for p in ordered]
