"""
Keyword and pattern tables for recipe web page parsing.
"""

import re

# Browser-like headers for recipe site requests
SITE_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
}

COOKING_VERBS = [
    'steam', 'melt', 'add', 'stir', 'cook', 'bake', 'mix', 'combine', 'heat', 'place',
    'sprinkle', 'season', 'drain', 'remove', 'return', 'gradually', 'continue', 'crumble',
    'dot', 'brown', 'grill', 'preheat', 'roast',
    'whisk', 'pour', 'simmer', 'boil', 'fry', 'saute', 'sauté', 'chop', 'slice', 'serve',
    'transfer', 'spread', 'fold', 'knead', 'blend', 'toss', 'cover', 'let', 'bring',
    'reduce', 'arrange', 'beat', 'cut', 'dice', 'marinate', 'garnish', 'top', 'allow',
]

COOKING_VERB_PATTERN = re.compile(r'\b(?:' + '|'.join(COOKING_VERBS) + r')\b', re.IGNORECASE)
TEMPERATURE_PATTERN = re.compile(r'\d+\s?°\s?[CF]\b')
DURATION_PATTERN = re.compile(r'\d+\s*(?:minutes?|mins?|hours?|hrs?)\b', re.IGNORECASE)

MEASUREMENT_UNITS = [
    'cups?', 'tablespoons?', 'teaspoons?', 'tbsp', 'tsp', 'ounces?', 'oz', 'pounds?', 'lbs?',
    'grams?', 'g', 'kg', 'ml', 'l', 'liters?', 'litres?', 'pinch(?:es)?', 'cloves?',
    'cans?', 'sticks?', 'slices?', 'inch(?:es)?', 'quarts?', 'pints?', 'dash(?:es)?',
]
UNIT_PATTERN = re.compile(r'\b(?:' + '|'.join(MEASUREMENT_UNITS) + r')\b', re.IGNORECASE)
NUMBER_PATTERN = re.compile(r'\d')

# "2 cups flour", "1/2 tsp salt", "½ cup sugar", "3 eggs"
QUANTITY = r'(?:\d+(?:[./]\d+)?(?:\s+\d+/\d+)?|[½¼¾⅓⅔⅛])'
INGREDIENT_LINE_PATTERN = re.compile(
    r'^\s*' + QUANTITY + r'\s*(?:-\s*' + QUANTITY + r'\s*)?(?:' + '|'.join(MEASUREMENT_UNITS) + r')\b\.?\s+\S',
    re.IGNORECASE
)

MIN_INSTRUCTION_LENGTH = 15
MAX_INSTRUCTION_LENGTH = 1000
MIN_MINED_SENTENCE_LENGTH = 20
MAX_MINED_SENTENCES = 20

TITLE_SELECTORS = ['h1', '.recipe-title', '.entry-title', '[class*="title"]']

INGREDIENT_SELECTORS = [
    '[itemprop="recipeIngredient"]',
    '.wprm-recipe-ingredient',
    '.recipe-ingredient',
    '.ingredient',
    'li[class*="ingredient"]',
    '[class*="ingredient"] li',
]

INSTRUCTION_LIST_SELECTORS = [
    '[itemprop="recipeInstructions"] li',
    '.wprm-recipe-instruction',
    '.recipe-instructions li',
    '.instructions li',
    '.method li',
    '.directions li',
    '[class*="instruction"] li',
    '[class*="direction"] li',
    '[class*="step"] li',
]

INSTRUCTION_CONTAINER_KEYWORDS = ['instruction', 'direction', 'method', 'step', 'preparation']

INSTRUCTION_HEADING_PATTERN = re.compile(
    r'^\s*(?:instructions?|directions?|method|steps?|preparation|how to make(?: it)?)\s*:?\s*$',
    re.IGNORECASE
)

# Enhancement pass: footnotes and asides that look like steps
FOOTNOTE_PATTERNS = [
    re.compile(r'misnomer', re.IGNORECASE),
    re.compile(r'best made using bread that is beginning', re.IGNORECASE),
    re.compile(r'fresh bread\s?crumbs?\b.*\b(?:instead|rather than|store[- ]bought|dried)', re.IGNORECASE),
    re.compile(r'\b(?:store[- ]bought|dried)\b.*\bfresh bread\s?crumbs?', re.IGNORECASE),
]

INCOMPLETE_HEADING_PREFIXES = ['to make the', 'for the', 'to prepare', 'for serving']
SHORT_HEADING_PATTERN = re.compile(r'^(?:to|for)\b', re.IGNORECASE)
SHORT_HEADING_MAX_LENGTH = 40

# Targeted scan for steps missing after an incomplete heading
MISSING_STEP_PATTERN = re.compile(
    r'\b(?:stir|stirring|transfer|pour into|spoon into)\b|\d+\s?°\s?[CF]\b',
    re.IGNORECASE
)

SENTENCE_SPLIT_PATTERN = re.compile(r'(?<=[.!?])\s+')

# ISO-8601 duration: P[nD]T[nH][nM][nS]
ISO_DURATION_PATTERN = re.compile(
    r'^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$',
    re.IGNORECASE
)
