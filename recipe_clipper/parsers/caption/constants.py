"""
Pattern tables for caption-based recipe extraction.
"""

import re

# ---------------------------------------------------------------------------
# Defaults for fields the caption does not state
# ---------------------------------------------------------------------------

DEFAULT_TITLE = "Delicious Recipe"
DEFAULT_PREP_TIME = "15 min"
DEFAULT_COOK_TIME = "25 min"
DEFAULT_TOTAL_TIME = "40 min"
DEFAULT_SERVINGS = "4"
DEFAULT_DIFFICULTY = "Medium"
PLACEHOLDER_NUTRITION = "N/A"

INSTAGRAM_IMAGE_SENTINEL = "instagram-video"
FACEBOOK_IMAGE_SENTINEL = "facebook-video"

# ---------------------------------------------------------------------------
# Instruction presence in a caption
# ---------------------------------------------------------------------------

INSTRUCTION_SECTION_MARKERS = [
    'instructions:', 'directions:', 'method:', 'steps:', 'preparation:',
    'how to make', 'how to cook',
]

NOTES_ONLY_MARKERS = ['additional notes:', 'notes:', 'tips:', 'suggestions:']

NUMBERED_STEP_PATTERN = re.compile(
    r'\d+[.)]\s*(?:heat|add|mix|stir|cook|bake|fry|boil|simmer|season|preheat|combine|whisk|beat|fold|pour|drain|serve)\b',
    re.IGNORECASE
)
MIN_NUMBERED_STEPS = 3

IMPERATIVE_START_PATTERN = re.compile(
    r'(?:^|[.!?\n]\s*|[-•*]\s*)(?:then\s+|now\s+|next,?\s+|first,?\s+|finally,?\s+)?'
    r'(?:heat|add|mix|stir|cook|bake|fry|boil|simmer|season|preheat|combine|whisk|beat|fold|pour|'
    r'drain|serve|place|toss|roast|grill|blend|chop|slice|dice|melt|spread|transfer|cover|bring)\b',
    re.IGNORECASE
)

# Cooking vocabulary of other languages seen in captions
FOREIGN_INSTRUCTION_WORDS = {
    'spanish': ['cocinar', 'agregar', 'mezclar', 'freír', 'hervir', 'hornear', 'saltear',
                'revolver', 'cortar', 'pelar', 'batir', 'minutos', 'horno', 'sartén'],
    'french': ['cuire', 'ajouter', 'mélanger', 'bouillir', 'rôtir', 'remuer', 'couper',
               'éplucher', 'battre', 'heures', 'degrés', 'poêle', 'casserole'],
    'bulgarian': ['изпече', 'задуши', 'добави', 'запържи', 'оставете', 'нарежете', 'смесете',
                  'разбъркайте', 'загрейте', 'намажете', 'покрийте', 'сложете', 'сварете',
                  'запечете', 'минути', 'градуса', 'фурна', 'тиган', 'капак'],
}

FOREIGN_INSTRUCTION_PATTERN = re.compile(
    r'(?<!\w)(?:' + '|'.join(
        re.escape(word) for words in FOREIGN_INSTRUCTION_WORDS.values() for word in words
    ) + r')',
    re.IGNORECASE
)

# ---------------------------------------------------------------------------
# Timing / servings lines in a caption
# ---------------------------------------------------------------------------

_DURATION = r'(\d+(?:\s*-\s*\d+)?\s*(?:min|mins|minute|minutes|hr|hrs|hour|hours))\b'

TIMING_PATTERNS = [
    ('prep_time', re.compile(r'\bprep(?:aration)?(?:\s+time)?\s*:?\s*' + _DURATION, re.IGNORECASE)),
    ('cook_time', re.compile(r'\bcook(?:ing)?(?:\s+time)?\s*:?\s*' + _DURATION, re.IGNORECASE)),
    ('total_time', re.compile(r'\btotal(?:\s+time)?\s*:?\s*' + _DURATION, re.IGNORECASE)),
    ('servings', re.compile(r'\bserves?\s*:?\s*(\d+(?:\s*-\s*\d+)?)', re.IGNORECASE)),
    ('servings', re.compile(r'\bservings?\s*:?\s*(\d+(?:\s*-\s*\d+)?)', re.IGNORECASE)),
    ('servings', re.compile(r'\bmakes?\s*:?\s*(\d+(?:\s*-\s*\d+)?)\s*(?:servings?|portions?)?', re.IGNORECASE)),
    ('servings', re.compile(r'\byield\s*:?\s*(\d+(?:\s*-\s*\d+)?)', re.IGNORECASE)),
]

COMBINED_TIME_PATTERN = re.compile(
    r'(\d+)\s*(?:min|mins|minute|minutes)\s*prep.*?(\d+)\s*(?:min|mins|minute|minutes)\s*cook',
    re.IGNORECASE | re.DOTALL
)

# Duplicated or long-form units in model output ("20 minutes minutes")
TIME_UNIT_REWRITES = [
    (re.compile(r'\bminutes\s+minutes\b', re.IGNORECASE), 'minutes'),
    (re.compile(r'\bmins?\s+minutes\b', re.IGNORECASE), 'minutes'),
    (re.compile(r'\bminutes\s+mins?\b', re.IGNORECASE), 'minutes'),
    (re.compile(r'\bmin\s+min\b', re.IGNORECASE), 'min'),
    (re.compile(r'\bhours?\s+hours?\b', re.IGNORECASE), 'hours'),
    (re.compile(r'\bhrs?\s+hours?\b', re.IGNORECASE), 'hour'),
    (re.compile(r'\bhours?\s+hrs?\b', re.IGNORECASE), 'hour'),
    (re.compile(r'\bminutes\b', re.IGNORECASE), 'min'),
    (re.compile(r'\bhours?\b', re.IGNORECASE), 'hr'),
]
BARE_NUMBER_PATTERN = re.compile(r'^\d+(?:\s*-\s*\d+)?$')

# ---------------------------------------------------------------------------
# Heuristic ingredient mining
# ---------------------------------------------------------------------------

QUANTITY_UNIT_INGREDIENT_PATTERN = re.compile(
    r'\b\d+(?:[.,/]\d+)?\s*(?:g|kg|ml|l|tbsp|tsp|cups?|oz|lbs?|pounds?)\b\.?\s+[^,.;:!?\n#@()]{2,40}',
    re.IGNORECASE
)

FOOD_CATEGORY_WORDS = [
    'breast', 'breasts', 'thigh', 'thighs', 'sauce', 'oil', 'flour', 'cheese', 'butter',
    'cream', 'milk', 'sugar', 'salt', 'pepper', 'garlic', 'onion', 'onions', 'rice',
    'pasta', 'noodles', 'beef', 'chicken', 'pork', 'salmon', 'shrimp', 'eggs', 'egg',
    'tomatoes', 'tomato', 'potatoes', 'potato', 'beans', 'spinach', 'broccoli', 'carrots',
    'vinegar', 'honey', 'yogurt', 'paste', 'powder', 'seeds', 'juice', 'stock', 'broth',
    'leaves', 'herbs', 'spices', 'mince', 'tofu', 'lemon', 'lime', 'parsley', 'basil',
]

FOOD_PHRASE_PATTERN = re.compile(
    r'\b(?:[A-Za-z][A-Za-z\'-]*\s+){0,3}(?:' + '|'.join(FOOD_CATEGORY_WORDS) + r')\b',
    re.IGNORECASE
)

INGREDIENT_BLOCKLIST = [
    'serves', 'serving', 'calories', 'calorie', 'protein', 'carbs', 'fat', 'dm', 'link',
    'recipe', 'follow', 'comment', 'subscribe', 'bio', 'save', 'share', 'like', 'tag',
    'click', 'video', 'minutes', 'min', 'hour', 'hours',
]
INGREDIENT_BLOCKLIST_PATTERN = re.compile(r'\b(?:' + '|'.join(INGREDIENT_BLOCKLIST) + r')\b', re.IGNORECASE)
MIN_INGREDIENT_LENGTH = 3
MAX_HEURISTIC_INGREDIENTS = 30

DISH_TYPE_NOUNS = [
    'pasta', 'salad', 'curry', 'soup', 'stew', 'tacos', 'taco', 'burger', 'burgers', 'pizza',
    'bowl', 'bowls', 'cake', 'cookies', 'bread', 'stir fry', 'stir-fry', 'sandwich', 'wrap',
    'wraps', 'pie', 'risotto', 'lasagna', 'noodles', 'chili', 'casserole', 'omelette',
    'pancakes', 'muffins', 'brownies', 'skewers', 'dumplings', 'fried rice', 'traybake',
]

DISH_NOUN_PATTERN = re.compile(
    r'\b(?:' + '|'.join(re.escape(noun) for noun in DISH_TYPE_NOUNS) + r')\b',
    re.IGNORECASE
)
FRAGMENT_SPLIT_PATTERN = re.compile(r'[.!?\n|]+')
LEADING_NON_LETTERS_PATTERN = re.compile(r'^[^A-Za-z]+')
MAX_TITLE_WORDS = 8

# ---------------------------------------------------------------------------
# Generated-instruction cleanup
# ---------------------------------------------------------------------------

STEP_NUMBER_PREFIX_PATTERN = re.compile(r'^\s*(?:step\s*)?\d+\s*[.):-]\s*', re.IGNORECASE)
MIN_GENERATED_STEPS = 1
MAX_GENERATED_STEPS = 8
INSTRUCTION_CONTEXT_LENGTH = 1000
