"""
Tier 3: heuristic DOM scanning for pages without schema markup.

Instructions are searched in successively broader scopes:
    1. list items inside instruction-classed containers
    2. list items anywhere that read like a cooking step
    3. p/span/div leaves inside instruction-labeled containers
    4. sentence mining over the whole page text
"""

from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from ...models import Recipe
from ..coercion import clean_text
from .constants import (
    COOKING_VERB_PATTERN,
    DURATION_PATTERN,
    INGREDIENT_LINE_PATTERN,
    INGREDIENT_SELECTORS,
    INSTRUCTION_CONTAINER_KEYWORDS,
    INSTRUCTION_HEADING_PATTERN,
    INSTRUCTION_LIST_SELECTORS,
    MAX_INSTRUCTION_LENGTH,
    MAX_MINED_SENTENCES,
    MIN_INSTRUCTION_LENGTH,
    MIN_MINED_SENTENCE_LENGTH,
    NUMBER_PATTERN,
    SENTENCE_SPLIT_PATTERN,
    TEMPERATURE_PATTERN,
    TITLE_SELECTORS,
    UNIT_PATTERN,
)

HEADING_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6']
LEAF_TAGS = ['p', 'span', 'div', 'li']
BLOCK_TAGS = ['p', 'li', 'div', 'td', 'dd', 'section', 'article', 'blockquote']
NON_CONTENT_TAGS = {'script', 'style', 'noscript', 'template', 'head', 'title'}


# ---------------------------------------------------------------------------
# Text predicates
# ---------------------------------------------------------------------------

def is_ingredient_line(text: str) -> bool:
    """A line that starts with a quantity and a unit ("2 cups flour")."""
    return bool(INGREDIENT_LINE_PATTERN.match(text))


def has_cooking_cue(text: str) -> bool:
    return bool(
        COOKING_VERB_PATTERN.search(text)
        or TEMPERATURE_PATTERN.search(text)
        or DURATION_PATTERN.search(text)
    )


def looks_like_instruction(text: str) -> bool:
    if not text or not (MIN_INSTRUCTION_LENGTH <= len(text) <= MAX_INSTRUCTION_LENGTH):
        return False
    if is_ingredient_line(text):
        return False
    return has_cooking_cue(text)


def dedupe(texts: Iterable[str]) -> List[str]:
    """Drop exact repeats (case-insensitive), keeping first occurrence order."""
    seen = set()
    result = []
    for text in texts:
        key = text.lower()
        if text and key not in seen:
            seen.add(key)
            result.append(text)
    return result


# ---------------------------------------------------------------------------
# DOM helpers
# ---------------------------------------------------------------------------

def element_text(element: Tag) -> str:
    return clean_text(element.get_text(' ', strip=True))


def leaf_elements(container: Tag, tags: List[str] = None) -> List[Tag]:
    """Elements of ``tags`` inside container that hold no nested element of ``tags``."""
    tags = tags or LEAF_TAGS
    return [el for el in container.find_all(tags) if el.find(tags) is None]


def find_instruction_headings(soup: BeautifulSoup) -> List[Tag]:
    """Headings (or bold labels) that read "Instructions", "Directions", "Method", ..."""
    candidates = soup.find_all(HEADING_TAGS + ['strong', 'b'])
    return [el for el in candidates if INSTRUCTION_HEADING_PATTERN.match(el.get_text(' ', strip=True))]


def _class_and_id(element: Tag) -> str:
    classes = element.get('class') or []
    if isinstance(classes, str):
        classes = [classes]
    return ' '.join(classes + [element.get('id') or '']).lower()


def find_instruction_containers(soup: BeautifulSoup) -> List[Tag]:
    """Containers labeled as instructions by class/id, or the section under an Instructions heading."""
    containers = [
        el for el in soup.find_all(True)
        if el.name not in NON_CONTENT_TAGS
        and any(keyword in _class_and_id(el) for keyword in INSTRUCTION_CONTAINER_KEYWORDS)
    ]
    for heading in find_instruction_headings(soup):
        if heading.parent is not None and heading.parent not in containers:
            containers.append(heading.parent)
    return containers


def page_text_blocks(soup: BeautifulSoup) -> List[str]:
    """Text of innermost block elements, in document order (inline markup merged)."""
    blocks = []
    for element in leaf_elements(soup, BLOCK_TAGS):
        if element.find_parent(list(NON_CONTENT_TAGS)) is not None:
            continue
        text = element_text(element)
        if text:
            blocks.append(text)
    if not blocks and soup.body is not None:
        text = element_text(soup.body)
        if text:
            blocks.append(text)
    return blocks


# ---------------------------------------------------------------------------
# Field scans
# ---------------------------------------------------------------------------

def find_title(soup: BeautifulSoup) -> str:
    for selector in TITLE_SELECTORS:
        element = soup.select_one(selector)
        if element is not None:
            text = element_text(element)
            if text:
                return text

    og_title = soup.find('meta', attrs={'property': 'og:title'})
    if og_title and og_title.get('content'):
        return clean_text(og_title['content'])

    if soup.title and soup.title.string:
        return clean_text(soup.title.string)
    return ""


def find_ingredients(soup: BeautifulSoup) -> List[str]:
    for selector in INGREDIENT_SELECTORS:
        texts = [element_text(el) for el in soup.select(selector)]
        texts = [text for text in texts if text]
        if texts:
            return texts

    # No ingredient markup: list items that start with quantity + unit
    return [text for text in (element_text(li) for li in soup.find_all('li')) if is_ingredient_line(text)]


def scan_instruction_lists(soup: BeautifulSoup) -> List[str]:
    """Scope 1: class-labeled instruction lists. Three or more steps wins outright."""
    best: List[str] = []
    for selector in INSTRUCTION_LIST_SELECTORS:
        texts = [element_text(el) for el in soup.select(selector)]
        texts = [text for text in texts if len(text) > 10]
        if len(texts) >= 3:
            return texts
        if len(texts) > len(best):
            best = texts
    return best


def scan_list_items(soup: BeautifulSoup) -> List[str]:
    """Scope 2: any list item that reads like a cooking step."""
    return dedupe(text for text in (element_text(li) for li in soup.find_all('li')) if looks_like_instruction(text))


def scan_instruction_containers(soup: BeautifulSoup) -> List[str]:
    """Scope 3: p/span/div leaves inside instruction-labeled containers."""
    texts = []
    for container in find_instruction_containers(soup):
        for leaf in leaf_elements(container, ['p', 'span', 'div']):
            text = element_text(leaf)
            if looks_like_instruction(text):
                texts.append(text)
        # A container with no child elements holds the step text itself
        if container.find(['p', 'span', 'div']) is None and container.name in ('p', 'span', 'div'):
            text = element_text(container)
            if looks_like_instruction(text):
                texts.append(text)
    return dedupe(texts)


def mine_sentences(soup: BeautifulSoup) -> List[str]:
    """Scope 4: sentences with a cooking verb and a number or unit."""
    sentences = []
    for block in page_text_blocks(soup):
        for sentence in SENTENCE_SPLIT_PATTERN.split(block):
            sentence = sentence.strip()
            if len(sentence) < MIN_MINED_SENTENCE_LENGTH or len(sentence) > MAX_INSTRUCTION_LENGTH:
                continue
            if is_ingredient_line(sentence):
                continue
            if COOKING_VERB_PATTERN.search(sentence) and (
                NUMBER_PATTERN.search(sentence) or UNIT_PATTERN.search(sentence)
            ):
                sentences.append(sentence)
    return dedupe(sentences)[:MAX_MINED_SENTENCES]


INSTRUCTION_SCOPES = [
    scan_instruction_lists,
    scan_list_items,
    scan_instruction_containers,
    mine_sentences,
]


def find_instructions(soup: BeautifulSoup) -> List[str]:
    for scope in INSTRUCTION_SCOPES:
        instructions = scope(soup)
        if instructions:
            return instructions
    return []


class HeuristicStrategy:
    """Tier 3: keyword/pattern DOM scan. A page title alone is not a recipe."""

    name = "heuristic_dom"

    def attempt(self, soup: BeautifulSoup) -> Optional[Recipe]:
        ingredients = find_ingredients(soup)
        instructions = find_instructions(soup)
        if not ingredients and not instructions:
            return None

        image = None
        og_image = soup.find('meta', attrs={'property': 'og:image'})
        if og_image and og_image.get('content'):
            image = og_image['content'].strip()

        return Recipe(
            title=find_title(soup),
            image=image,
            ingredients=ingredients,
            instructions=instructions,
        )
