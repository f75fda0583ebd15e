from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from app.domain.services.constants import DEFAULT_MAX_RESULTS, SORT_RELEVANCE


class RecommendationRequest(BaseModel):
    query: str = Field(..., min_length=1)
    preferences: List[str] = Field(default_factory=list)
    max_results: int = Field(DEFAULT_MAX_RESULTS, alias="maxResults")

    model_config = ConfigDict(populate_by_name=True)


class PriceRange(BaseModel):
    # None = unbounded on that side
    min: Optional[float] = None
    max: Optional[float] = None


class SearchFilters(BaseModel):
    """
    Options for the advanced (filter/sort) search path.
    Accepts both the camelCase keys used by the storefront widget and snake_case.
    Unknown keys are ignored.
    """
    categories: List[str] = Field(default_factory=list)
    price_range: Optional[PriceRange] = Field(None, alias="priceRange")
    scent_families: List[str] = Field(default_factory=list, alias="scentFamilies")
    availability: bool = True
    # free string: unknown values fall back to relevance ordering
    sort_by: str = Field(SORT_RELEVANCE, alias="sortBy")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
