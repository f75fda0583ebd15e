# Point values for the relevance scorer (additive).
SCORE_TITLE = 100
SCORE_DESCRIPTION = 50
SCORE_PRODUCT_TYPE = 75
SCORE_TAG = 30            # per matching tag
SCORE_SCENT_NOTE = 40     # per matching scent note
SCORE_PREFERENCE_TEXT = 35
SCORE_PREFERENCE_SCENT = 45
SCORE_TOKEN = 15          # per query word found in searchable text
SCORE_TOKEN_PARTIAL = 8   # per long query word found minus its last char
SCORE_PROMOTED = 20       # flat, featured/bestseller

MIN_TOKEN_LENGTH = 3      # words must be longer than 2 chars
MIN_PARTIAL_LENGTH = 5    # partial check only for words longer than 4 chars

PROMOTED_TAGS = ("featured", "bestseller")

# Result sizes
DEFAULT_MAX_RESULTS = 3
DESCRIPTION_MAX_LENGTH = 150
TOP_SCENT_NOTES = 3

# Tag fragments that qualify a tag as a scent note
SCENT_VOCABULARY = (
    "citrus", "floral", "woody", "fresh", "spicy", "sweet",
    "vanilla", "bergamot", "rose", "sandalwood", "musk", "amber",
)

# Advanced search sort keys
SORT_RELEVANCE = "relevance"
SORT_PRICE_LOW = "price_low"
SORT_PRICE_HIGH = "price_high"
SORT_NAME = "name"

ALL_SORTS = {SORT_RELEVANCE, SORT_PRICE_LOW, SORT_PRICE_HIGH, SORT_NAME}

# Tool exposed to the chat model
TOOL_RECOMMEND_PRODUCTS = "recommend_products"

DEFAULT_REPLY = "Here are my recommendations:"
ERROR_REPLY = "Sorry, I encountered an error. Please try again."
