from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Any


def build_searchable_text(
    title: str,
    description: str,
    product_type: str,
    vendor: str,
    tags: List[str],
    scent_notes: List[str],
) -> str:
    """Lowercase, space-joined concatenation of every textual field."""
    return " ".join([title, description, product_type, vendor, *tags, *scent_notes]).lower()


class Product(BaseModel):
    """
    Normalized catalog record. Immutable within one catalog snapshot.
    `searchable_text` is always derived from the source fields at validation time,
    so use `with_updates()` (never `model_copy(update=...)`) to change a field.
    """
    id: str
    title: str
    handle: str = ""
    description: str = ""
    product_type: str = ""
    vendor: str = ""
    tags: List[str] = []
    price: Optional[str] = None
    available: bool = False
    image_url: Optional[str] = None
    image_alt: Optional[str] = None
    url: Optional[str] = None
    scent_notes: List[str] = []
    searchable_text: str = ""

    model_config = {"frozen": True}  # immuable = safe

    @field_validator("description", "product_type", "vendor", "handle", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("tags", "scent_notes", mode="before")
    @classmethod
    def _none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_str(cls, v: Any) -> Any:
        # Shopify sends "19.99"; fixtures sometimes pass numbers
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @model_validator(mode="after")
    def _derive_searchable_text(self) -> "Product":
        text = build_searchable_text(
            self.title, self.description, self.product_type,
            self.vendor, self.tags, self.scent_notes,
        )
        # frozen model: write through __dict__ once, during construction only
        self.__dict__["searchable_text"] = text
        return self

    def with_updates(self, **changes: Any) -> "Product":
        """Return a re-validated copy so the derived text is rebuilt."""
        data = self.model_dump(exclude={"searchable_text"})
        data.update(changes)
        return Product.model_validate(data)


class ScoredProduct(BaseModel):
    product: Product
    score: float = Field(ge=0)
    model_config = {"frozen": True}


class ProductSummary(BaseModel):
    """Public projection of a product returned to chat/search callers."""
    id: str
    title: str
    description: str
    price: Optional[str] = None
    image_url: Optional[str] = None
    url: Optional[str] = None
    vendor: str = ""
    scent_notes: List[str] = []
    product_type: str = ""
    relevance_score: int = 0
    model_config = {"frozen": True}
