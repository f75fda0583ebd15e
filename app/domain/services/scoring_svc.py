# app/domain/services/scoring_svc.py

from __future__ import annotations
from typing import Callable, Dict, Optional, Sequence

from app.domain.models.product import Product
from app.domain.services.constants import (
    SCORE_TITLE,
    SCORE_DESCRIPTION,
    SCORE_PRODUCT_TYPE,
    SCORE_TAG,
    SCORE_SCENT_NOTE,
    SCORE_PREFERENCE_TEXT,
    SCORE_PREFERENCE_SCENT,
    SCORE_TOKEN,
    SCORE_TOKEN_PARTIAL,
    SCORE_PROMOTED,
    MIN_TOKEN_LENGTH,
    MIN_PARTIAL_LENGTH,
    PROMOTED_TAGS,
)

# ---------- Partial-match strategies -----------------------------------------

PartialMatchStrategy = Callable[[str, str], int]

def suffix_trim_match(word: str, text: str) -> int:
    """
    Crude suffix tolerance: "citrusy" still hits "citrus" once the last
    character is dropped. Only applies to words longer than 4 chars.
    """
    if len(word) < MIN_PARTIAL_LENGTH:
        return 0
    return SCORE_TOKEN_PARTIAL if word[:-1] in text else 0

def no_partial_match(word: str, text: str) -> int:
    return 0

# Swap in a different strategy (edit distance, n-grams...) without touching score_product().
PARTIAL_MATCHERS: Dict[str, PartialMatchStrategy] = {
    "suffix_trim": suffix_trim_match,
    "none": no_partial_match,
}
DEFAULT_PARTIAL_MATCHER = "suffix_trim"

# ---------- Helpers ----------------------------------------------------------

def _overlaps(a: str, b: str) -> bool:
    """Substring match in either direction (inputs already lowercased)."""
    return a in b or b in a

def token_bonus(text: str, query: str, partial: Optional[PartialMatchStrategy] = None) -> int:
    """
    Per-word bonus: +15 for each query word (len > 2) present in `text`,
    plus whatever the partial strategy awards for that word.
    """
    partial = partial or PARTIAL_MATCHERS[DEFAULT_PARTIAL_MATCHER]
    score = 0
    for word in query.split():
        if len(word) < MIN_TOKEN_LENGTH:
            continue
        if word in text:
            score += SCORE_TOKEN
        score += partial(word, text)
    return score

# ---------- Public API -------------------------------------------------------

def score_product(
    product: Product,
    query: str,
    preferences: Sequence[str] = (),
    *,
    partial: Optional[PartialMatchStrategy] = None,
) -> float:
    """
    Additive relevance score of one product for a query + free-text preferences.
    Case-insensitive throughout; absent fields simply never match.
    Returns 0 when no signal is found, never a negative value.
    """
    score = 0
    q = query.lower()
    text = product.searchable_text

    if q in product.title.lower():
        score += SCORE_TITLE
    if product.description and q in product.description.lower():
        score += SCORE_DESCRIPTION
    if product.product_type and q in product.product_type.lower():
        score += SCORE_PRODUCT_TYPE

    score += SCORE_TAG * sum(1 for tag in product.tags if _overlaps(tag.lower(), q))

    notes = [n.lower() for n in product.scent_notes]
    score += SCORE_SCENT_NOTE * sum(1 for n in notes if _overlaps(n, q))

    for pref in preferences:
        p = pref.strip().lower()
        if not p:
            continue
        if p in text:
            score += SCORE_PREFERENCE_TEXT
        if any(_overlaps(n, p) for n in notes):
            score += SCORE_PREFERENCE_SCENT

    score += token_bonus(text, q, partial)

    if any(tag in product.tags for tag in PROMOTED_TAGS):
        score += SCORE_PROMOTED

    return float(score)
