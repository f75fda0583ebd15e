from typing import Iterable, List

from app.domain.models.product import Product
from app.domain.services.constants import DEFAULT_MAX_RESULTS, TOOL_RECOMMEND_PRODUCTS


def unique_categories(products: Iterable[Product]) -> List[str]:
    """Non-empty product types in first-seen order."""
    return list(dict.fromkeys(p.product_type for p in products if p.product_type))


def system_prompt(products: Iterable[Product]) -> str:
    categories = ", ".join(unique_categories(products))
    return (
        "You are a helpful product recommendation assistant for a fragrance/cosmetics store.\n\n"
        "Your role:\n"
        "- Help users find products based on their preferences\n"
        "- Ask clarifying questions when needed\n"
        f"- Use the {TOOL_RECOMMEND_PRODUCTS} function when you have enough information\n"
        "- Be conversational and friendly\n\n"
        f"Available product categories: {categories}\n\n"
        "Key guidelines:\n"
        "- Always use the function to make specific recommendations\n"
        "- Keep responses concise but helpful\n"
        "- Focus on scent profiles, ingredients, and use cases\n"
        "- Ask about preferences like: scent families, occasions, skin type, etc."
    )


RECOMMEND_PRODUCTS_TOOL = {
    "type": "function",
    "function": {
        "name": TOOL_RECOMMEND_PRODUCTS,
        "description": "Recommend specific products based on user preferences",
        "parameters": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query to match products",
                },
                "preferences": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "User preferences like scent notes, product types",
                },
                "max_results": {
                    "type": "integer",
                    "description": "Maximum number of products to recommend",
                    "default": DEFAULT_MAX_RESULTS,
                },
            },
            "required": ["query"],
        },
    },
}
