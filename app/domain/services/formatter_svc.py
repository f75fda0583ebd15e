import math
from typing import Optional

from app.domain.models.product import ProductSummary, ScoredProduct
from app.domain.services.constants import DESCRIPTION_MAX_LENGTH, TOP_SCENT_NOTES


def truncate_description(description: Optional[str], max_length: int = DESCRIPTION_MAX_LENGTH) -> str:
    """Cut at the raw max_length-th char (not a word boundary), trim, add '...'."""
    if not description:
        return ""
    if len(description) <= max_length:
        return description
    return description[:max_length].strip() + "..."


def parse_price(price: Optional[str]) -> Optional[float]:
    """Numeric value of a decimal price string, or None if absent/unparseable."""
    if price is None:
        return None
    try:
        value = float(str(price).strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def format_price(price: Optional[str]) -> Optional[str]:
    """en-US currency string ("$1,234.50"), or None if absent or non-numeric."""
    value = parse_price(price)
    if value is None:
        return None
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_product(scored: ScoredProduct) -> ProductSummary:
    p = scored.product
    return ProductSummary(
        id=p.id,
        title=p.title,
        description=truncate_description(p.description),
        price=format_price(p.price),
        image_url=p.image_url,
        url=p.url,
        vendor=p.vendor,
        scent_notes=list(p.scent_notes[:TOP_SCENT_NOTES]),
        product_type=p.product_type,
        relevance_score=round(scored.score),  # diagnostic only
    )
