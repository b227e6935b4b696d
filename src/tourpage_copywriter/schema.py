"""
Content Tree schema and spreadsheet addressing.

This module defines the nested content structure exchanged with the model,
the section-marker vocabulary of the spreadsheet template, and the single
(section, item code) -> field table shared by the reader and both writers.
"""

from dataclasses import dataclass, replace
from typing import Iterator, NamedTuple, Optional, Sequence, TypedDict


# Suffix of the Chinese translation counterpart of a field (e.g. "title_zh")
TRANSLATION_SUFFIX = "_zh"


class HeroSection(TypedDict, total=False):
    title: str
    description: str
    ctaButtonText: str
    ctaButtonLink: str
    title_zh: str
    description_zh: str
    ctaButtonText_zh: str


class AboutSection(TypedDict, total=False):
    badge: str
    title: str
    description: str
    image: str
    badge_zh: str
    title_zh: str
    description_zh: str


class SolutionBlock(TypedDict, total=False):
    badge: str
    title: str
    description: str
    badge_zh: str
    title_zh: str
    description_zh: str


class ProductBlock(TypedDict, total=False):
    title: str
    shortDescription: str
    completeDescription: str
    title_zh: str
    shortDescription_zh: str
    completeDescription_zh: str


class ContactSection(TypedDict, total=False):
    badge: str
    title: str
    description: str
    badge_zh: str
    title_zh: str
    description_zh: str


class KeywordDensity(TypedDict, total=False):
    keyword: str
    density: float
    recommendation: str


class SeoSection(TypedDict, total=False):
    metaDescription: str
    metaDescription_zh: str
    metaKeywords: str
    metaKeywords_zh: str
    ogTitle: str
    ogTitle_zh: str
    ogDescription: str
    ogDescription_zh: str
    ogType: str
    h2Suggestions: list[str]
    h2Suggestions_zh: list[str]
    h3Suggestions: list[str]
    h3Suggestions_zh: list[str]
    primaryKeywords: list[str]
    primaryKeywords_zh: list[str]
    longTailKeywords: list[str]
    longTailKeywords_zh: list[str]
    keywordDensity: list[KeywordDensity]
    competitorAnalysis: dict
    uspAnalysis: dict
    contentOptimization: dict


class StructuredDataSection(TypedDict, total=False):
    organization: dict
    products: list[dict]
    website: dict


class ContentTree(TypedDict, total=False):
    """Nested representation of all generated content for one request."""
    hero: HeroSection
    about: AboutSection
    solutions: list[SolutionBlock]
    products: list[ProductBlock]
    contact: ContactSection
    seo: SeoSection
    structuredData: StructuredDataSection


# Section identifiers used by the row cursor
HERO = "hero"
ABOUT = "about"
PRODUCT = "product"
CONTACT = "contact"

# Template section keywords, matched with str.startswith on trimmed column 0.
# These strings are part of the spreadsheet template format.
SECTION_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("Hero", HERO),
    ("About Us", ABOUT),
    ("carousel", PRODUCT),
    ("Contact Us", CONTACT),
)

# Tree key holding the blocks of each array section
ARRAY_SECTIONS = {PRODUCT: "products"}


@dataclass(frozen=True)
class FieldSpec:
    """One addressable field of a section."""
    field: str
    label: str
    translated: bool = True

    @property
    def translation_field(self) -> str:
        return f"{self.field}{TRANSLATION_SUFFIX}"


# (section, item code) -> field. Shared verbatim by the reader and the writers.
FIELD_MAP: dict[str, dict[str, FieldSpec]] = {
    HERO: {
        "A": FieldSpec("title", "主標題"),
        "B": FieldSpec("description", "副標題描述"),
        "C": FieldSpec("ctaButtonText", "CTA 按鈕文字"),
        "D": FieldSpec("ctaButtonLink", "CTA 連結", translated=False),
    },
    ABOUT: {
        "A": FieldSpec("badge", "標籤"),
        "B": FieldSpec("title", "標題"),
        "C": FieldSpec("description", "描述內容"),
        "D": FieldSpec("image", "圖片 (URL)", translated=False),
    },
    PRODUCT: {
        "A": FieldSpec("title", "產品標題"),
        "B": FieldSpec("shortDescription", "簡短描述"),
        "C": FieldSpec("completeDescription", "完整描述"),
    },
    CONTACT: {
        "A": FieldSpec("badge", "標籤"),
        "B": FieldSpec("title", "標題"),
        "C": FieldSpec("description", "描述"),
    },
}

# Column positions in the template
SECTION_COLUMN = 0
ITEM_CODE_COLUMN = 1
VALUE_COLUMN = 4


def lookup_field(section: Optional[str], item_code: str) -> Optional[FieldSpec]:
    """Return the field addressed by an item code, or None if unmapped."""
    if section is None:
        return None
    return FIELD_MAP.get(section, {}).get(item_code)


def cell(row: Sequence[Optional[str]], index: int) -> str:
    """Return the trimmed cell at index, treating missing cells as empty."""
    if index >= len(row) or row[index] is None:
        return ""
    return str(row[index]).strip()


def match_section(header: str) -> Optional[str]:
    """Match a trimmed column-0 value against the section keywords."""
    for keyword, section in SECTION_KEYWORDS:
        if header.startswith(keyword):
            return section
    return None


def is_item_code(value: str) -> bool:
    """Check if a cell holds a single-letter item code."""
    return len(value) == 1 and "A" <= value <= "Z"


@dataclass(frozen=True)
class SectionCursor:
    """Position of the row scanner: current section and array block index."""
    section: Optional[str] = None
    index: int = -1
    last_code: Optional[str] = None  # last item code seen in the current array block

    def enter(self, section: str) -> "SectionCursor":
        """Start a section. Array sections open a new block."""
        if section in ARRAY_SECTIONS:
            return SectionCursor(section, self.index + 1)
        return SectionCursor(section, self.index)


class RowStep(NamedTuple):
    """Result of advancing the cursor over one row."""
    cursor: SectionCursor
    item_code: Optional[str]  # None when the row carries no field data


def advance_cursor(cursor: SectionCursor, row: Sequence[Optional[str]]) -> RowStep:
    """
    Advance the section cursor over a single row.

    A row whose column 0 starts with a section keyword opens that section. If
    its column 1 holds an item code it also carries data for that section;
    otherwise it is a pure section-start row. Inside an array section, a keyword
    row whose item code does not follow the previous code opens the next block.
    A non-empty column 0 matching no keyword closes the current section.
    """
    header = cell(row, SECTION_COLUMN)
    item_code = cell(row, ITEM_CODE_COLUMN)

    if header:
        section = match_section(header)
        if section is None:
            return RowStep(SectionCursor(None, cursor.index), None)
        if not is_item_code(item_code):
            return RowStep(cursor.enter(section), None)
        if cursor.section != section or _restarts_block(cursor, item_code):
            cursor = cursor.enter(section)

    if cursor.section is None or not item_code:
        return RowStep(cursor, None)
    if cursor.section in ARRAY_SECTIONS and is_item_code(item_code):
        cursor = replace(cursor, last_code=item_code)
    return RowStep(cursor, item_code)


def _restarts_block(cursor: SectionCursor, item_code: str) -> bool:
    """A keyword row whose code does not follow the last one starts the next array block."""
    return (
        cursor.section in ARRAY_SECTIONS
        and cursor.last_code is not None
        and item_code <= cursor.last_code
    )


class ScannedRow(NamedTuple):
    row_index: int
    cursor: SectionCursor
    item_code: Optional[str]


def walk_rows(rows: Sequence[Sequence[Optional[str]]]) -> Iterator[ScannedRow]:
    """Fold the cursor over rows, yielding every row with the cursor after it."""
    cursor = SectionCursor()
    for row_index, row in enumerate(rows):
        cursor, item_code = advance_cursor(cursor, row)
        yield ScannedRow(row_index, cursor, item_code)
