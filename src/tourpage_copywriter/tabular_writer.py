"""
Projection of a Content Tree back into spreadsheet rows.

Two layouts are produced:

- Overlay: the customer's original template rows are copied and the generated
  copy is written beside the original text (column 5, translation in column 6).
  Sections that have no place in the template (solutions, SEO, structured data)
  are appended after the last row.
- Fresh: a complete canonical layout built from scratch, used when the content
  came from free text and there is no template to overlay.

Every tree access is fail-soft: absent objects and fields render as "".
"""

import logging
from typing import Any, Optional, Sequence

from .config import is_chinese_language, resolve_language_name
from .schema import (
    ABOUT,
    ARRAY_SECTIONS,
    CONTACT,
    FIELD_MAP,
    HERO,
    PRODUCT,
    TRANSLATION_SUFFIX,
    ContentTree,
    lookup_field,
    walk_rows,
)

logger = logging.getLogger(__name__)

# Substring identifying the customer-input column header of the template
TEMPLATE_HEADER_MARKER = "客戶填寫"

# Overlay column positions
ORIGINAL_COLUMN = 4
GENERATED_COLUMN = 5
TRANSLATION_COLUMN = 6

OVERLAY_WIDTH = 6

# Template keyword written in column 0 for each section
SECTION_LABELS = {
    HERO: "Hero",
    ABOUT: "About Us",
    PRODUCT: "carousel",
    CONTACT: "Contact Us",
}

SOLUTION_LABEL = "Solution"
SOLUTION_FIELDS = (
    ("A", "badge", "標籤"),
    ("B", "title", "標題"),
    ("C", "description", "敘述"),
)

ORGANIZATION_FIELDS = (
    ("A", ("type",), "類型"),
    ("B", ("name",), "名稱"),
    ("C", ("description",), "描述"),
    ("D", ("url",), "網址"),
    ("E", ("contactPoint", "telephone"), "聯絡電話"),
    ("F", ("contactPoint", "contactType"), "聯絡類型"),
)

WEBSITE_FIELDS = (
    ("A", "type", "類型"),
    ("B", "url", "網址"),
    ("C", "name", "名稱"),
    ("D", "description", "描述"),
)

PRODUCT_DATA_FIELDS = (
    ("A", "type", "類型"),
    ("B", "name", "名稱"),
    ("C", "description", "描述"),
    ("D", "brand", "品牌"),
    ("E", "category", "類別"),
)


SEO_HEADER = "=== SEO 優化分析 ==="
STRUCTURED_DATA_HEADER = "=== 結構化資料 (Schema.org) ==="
CONTENT_HEADER = "=== 網站內容區塊 ==="


def _get(obj: Any, *path: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    for key in path:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _text(value: Any) -> str:
    """Render a tree value as a cell string."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _join(values: Any, separator: str) -> str:
    """Join a list of strings; anything that is not a list renders as ""."""
    if not isinstance(values, list):
        return ""
    return separator.join(_text(v) for v in values if _text(v))


def _number(value: Any) -> str:
    """Render a numeric field, defaulting to 0 when absent."""
    return _text(value) or "0"


def position_code(index: int) -> str:
    """Spreadsheet-style letter code for a 0-based position: A..Z, AA, AB, ..."""
    code = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        code = chr(ord("A") + remainder) + code
    return code


def _put(row: list, index: int, value: str) -> None:
    """Set a cell, padding the row with empty cells as needed."""
    while len(row) <= index:
        row.append("")
    row[index] = value


class RowBuilder:
    """Accumulates rows in the section / item code / description / value layout."""

    def __init__(self, chinese: bool, width: int):
        self.chinese = chinese
        self.width = width
        self.rows: list[list[str]] = []

    def blank(self) -> None:
        self.rows.append([""] * self.width)

    def label(self, text: str, note: str = "") -> None:
        """Add a row naming a section, optionally with a note in column 3."""
        row = [text] + [""] * (self.width - 1)
        if note:
            row[3] = note
        self.rows.append(row)

    def field(
        self,
        section: str,
        code: str,
        description: str,
        value: str,
        translation: Optional[str] = None,
    ) -> None:
        """Add a field row. The translation cell is only written for non-Chinese targets."""
        row = [section, code, description, "", value]
        if translation is not None and not self.chinese:
            row.append(translation)
        self.rows.append(row)

    def translated(self, section: str, code: str, description: str, obj: Any, field: str) -> None:
        """Add a row for a field and its _zh counterpart."""
        self.field(
            section,
            code,
            description,
            _text(_get(obj, field)),
            _text(_get(obj, f"{field}{TRANSLATION_SUFFIX}")),
        )

    def translated_list(
        self, section: str, code: str, description: str, obj: Any, field: str, separator: str
    ) -> None:
        """Add a row for a list field joined into one cell, with its _zh counterpart."""
        self.field(
            section,
            code,
            description,
            _join(_get(obj, field), separator),
            _join(_get(obj, f"{field}{TRANSLATION_SUFFIX}"), separator),
        )


# ============================================================================
# Overlay writer
# ============================================================================

def write_overlay(
    original_rows: Sequence[Sequence[Optional[str]]],
    tree: ContentTree,
    language: str,
    language_name: Optional[str] = None,
) -> list[list[str]]:
    """
    Write generated copy onto a copy of the original template rows.

    Args:
        original_rows: Rows as read from the customer's template. Not modified.
        tree: Content Tree recovered from the model response.
        language: Target language code; Chinese targets get no translation column.
        language_name: Display name for the header. Resolved from the code if None.

    Returns:
        New rows: the overlaid template followed by the appended sections.
    """
    chinese = is_chinese_language(language)
    language_name = language_name or resolve_language_name(language)

    rows = [["" if c is None else str(c) for c in row] for row in original_rows]

    _rewrite_template_header(rows, language_name, chinese)

    for scanned in walk_rows(rows):
        if scanned.item_code is None:
            continue
        field_spec = lookup_field(scanned.cursor.section, scanned.item_code)
        if field_spec is None:
            continue
        source = _overlay_source(tree, scanned.cursor.section, scanned.cursor.index)
        if source is None:
            continue

        row = rows[scanned.row_index]
        _put(row, GENERATED_COLUMN, _text(source.get(field_spec.field)))
        if field_spec.translated and not chinese:
            _put(row, TRANSLATION_COLUMN, _text(source.get(field_spec.translation_field)))

    builder = RowBuilder(chinese, OVERLAY_WIDTH)
    _overlay_solutions(builder, tree)
    if tree.get("seo") or tree.get("structuredData"):
        builder.blank()
        builder.blank()
        if tree.get("seo"):
            _overlay_seo(builder, tree["seo"])
        if tree.get("structuredData"):
            _overlay_structured_data(builder, tree["structuredData"])

    rows.extend(builder.rows)
    logger.info(f"Overlay export: {len(original_rows)} template rows, {len(builder.rows)} appended")
    return rows


def _rewrite_template_header(rows: list[list[str]], language_name: str, chinese: bool) -> None:
    """Relabel the customer-input header as original / generated / translation."""
    for row in rows:
        if len(row) > ORIGINAL_COLUMN and TEMPLATE_HEADER_MARKER in row[ORIGINAL_COLUMN]:
            row[ORIGINAL_COLUMN] = "客戶原文 (Original)"
            _put(row, GENERATED_COLUMN, f"AI 生成文案 ({language_name})")
            if not chinese:
                _put(row, TRANSLATION_COLUMN, "中文翻譯 (Chinese Translation)")
            return


def _overlay_source(tree: ContentTree, section: str, index: int) -> Optional[dict]:
    """
    Return the tree object feeding a template section.

    Object sections fall back to {} so their rows render as "". An array block
    with no generated counterpart returns None and its rows pass through.
    """
    if section in ARRAY_SECTIONS:
        blocks = tree.get(ARRAY_SECTIONS[section])
        if isinstance(blocks, list) and 0 <= index < len(blocks) and isinstance(blocks[index], dict):
            return blocks[index]
        return None
    source = tree.get(section)
    return source if isinstance(source, dict) else {}


def _overlay_solutions(builder: RowBuilder, tree: ContentTree) -> None:
    solutions = tree.get("solutions")
    if not isinstance(solutions, list) or not solutions:
        return
    builder.blank()
    builder.label(SOLUTION_LABEL)
    for index, solution in enumerate(solutions):
        builder.rows.append([SOLUTION_LABEL, "", f"方案 {index + 1}", "", "", ""])
        for code, field, description in SOLUTION_FIELDS:
            builder.translated(SOLUTION_LABEL, code, description, solution, field)
        builder.blank()


def _overlay_seo(builder: RowBuilder, seo: dict) -> None:
    builder.label(SEO_HEADER)
    builder.blank()

    builder.label("SEO Meta Tags")
    builder.translated("SEO Meta Tags", "A", "網站描述 (Meta Description)", seo, "metaDescription")
    builder.translated("SEO Meta Tags", "B", "關鍵字 (Meta Keywords)", seo, "metaKeywords")
    builder.translated("SEO Meta Tags", "C", "社群分享標題 (OG Title)", seo, "ogTitle")
    builder.blank()

    builder.label("關鍵字策略")
    builder.translated_list("關鍵字策略", "A", "主要關鍵字", seo, "primaryKeywords", ", ")
    builder.translated_list("關鍵字策略", "B", "長尾關鍵字", seo, "longTailKeywords", ", ")
    builder.blank()

    competitor = _get(seo, "competitorAnalysis")
    if competitor:
        builder.label("競爭分析")
        builder.translated("競爭分析", "A", "行業分類", competitor, "industry")
        builder.translated("競爭分析", "B", "市場機會分析", competitor, "gapAnalysis")
        builder.translated("競爭分析", "C", "競爭策略建議", competitor, "recommendations")
        builder.blank()

    usp = _get(seo, "uspAnalysis")
    if usp:
        builder.label("USP差異化分析")
        builder.translated_list("USP差異化分析", "A", "獨特賣點", usp, "uniqueSellingPoints", " | ")
        builder.translated("USP差異化分析", "B", "差異化策略", usp, "differentiationStrategy")
        builder.blank()

    optimization = _get(seo, "contentOptimization")
    if optimization:
        builder.label("內容優化建議")
        builder.field(
            "內容優化建議", "A", "標題長度建議",
            _text(_get(optimization, "titleLength", "recommended")),
            _text(_get(optimization, "titleLength", "recommendation_zh")),
        )
        builder.field(
            "內容優化建議", "B", "描述長度建議",
            _text(_get(optimization, "descriptionLength", "recommended")),
            _text(_get(optimization, "descriptionLength", "recommendation_zh")),
        )
        builder.field(
            "內容優化建議", "C", "可讀性建議",
            _text(_get(optimization, "readabilityScore", "suggestions")),
            _text(_get(optimization, "readabilityScore", "suggestions_zh")),
        )
        builder.blank()


def _overlay_structured_data(builder: RowBuilder, data: dict) -> None:
    # Product descriptors are only part of the fresh layout
    builder.label(STRUCTURED_DATA_HEADER)
    builder.blank()

    organization = _get(data, "organization")
    builder.label("組織資訊")
    for code, field, description in ORGANIZATION_FIELDS[:4]:
        builder.field("組織資訊", code, description, _text(_get(organization, *field)))
    builder.blank()

    website = _get(data, "website")
    builder.label("網站資訊")
    for code, field, description in WEBSITE_FIELDS:
        builder.field("網站資訊", code, description, _text(_get(website, field)))
    builder.blank()


# ============================================================================
# Fresh writer
# ============================================================================

def fresh_header(language: str, language_name: Optional[str] = None) -> list[str]:
    """Header row of the fresh layout; non-Chinese targets add a translation column."""
    language_name = language_name or resolve_language_name(language)
    header = ["區塊名稱", "項目代碼", "項目說明", "備註", f"AI 生成文案 ({language_name})"]
    if not is_chinese_language(language):
        header.append("中文翻譯")
    return header


def write_fresh(
    tree: ContentTree,
    language: str,
    language_name: Optional[str] = None,
) -> list[list[str]]:
    """
    Build a complete export layout from a Content Tree.

    Field rows use the template's column positions (generated value in
    column 4), so the website sections read back with read_content_tree.
    The header therefore keeps the template's blank 備註 column: 5 columns
    for Chinese targets and 6 with the translation column otherwise.

    Args:
        tree: Content Tree recovered from the model response.
        language: Target language code; Chinese targets get no translation column.
        language_name: Display name for the header. Resolved from the code if None.

    Returns:
        Rows starting with the header row.
    """
    chinese = is_chinese_language(language)
    header = fresh_header(language, language_name)
    builder = RowBuilder(chinese, len(header))
    builder.rows.append(header)
    builder.blank()

    builder.label(CONTENT_HEADER)
    builder.blank()
    _fresh_section(builder, HERO, tree.get(HERO))
    builder.blank()
    _fresh_section(builder, ABOUT, tree.get(ABOUT))
    builder.blank()

    products = tree.get("products")
    if isinstance(products, list):
        for index, product in enumerate(products):
            builder.label(SECTION_LABELS[PRODUCT], note=f"產品 {index + 1}")
            _fresh_fields(builder, PRODUCT, product)
            builder.blank()

    solutions = tree.get("solutions")
    if isinstance(solutions, list) and solutions:
        builder.label(SOLUTION_LABEL)
        for index, solution in enumerate(solutions):
            builder.label(SOLUTION_LABEL, note=f"方案 {index + 1}")
            for code, field, description in SOLUTION_FIELDS:
                builder.translated(SOLUTION_LABEL, code, description, solution, field)
            builder.blank()

    _fresh_section(builder, CONTACT, tree.get(CONTACT))
    builder.blank()
    builder.blank()

    if tree.get("seo"):
        _fresh_seo(builder, tree["seo"])
    if tree.get("structuredData"):
        _fresh_structured_data(builder, tree["structuredData"])

    logger.info(f"Fresh export: {len(builder.rows)} rows")
    return builder.rows


def _fresh_section(builder: RowBuilder, section: str, obj: Any) -> None:
    builder.label(SECTION_LABELS[section])
    _fresh_fields(builder, section, obj)


def _fresh_fields(builder: RowBuilder, section: str, obj: Any) -> None:
    label = SECTION_LABELS[section]
    for code, field_spec in FIELD_MAP[section].items():
        value = _text(_get(obj, field_spec.field))
        translation = _text(_get(obj, field_spec.translation_field)) if field_spec.translated else None
        builder.field(label, code, field_spec.label, value, translation)


def _fresh_seo(builder: RowBuilder, seo: dict) -> None:
    builder.label(SEO_HEADER)
    builder.blank()

    builder.label("SEO Meta Tags")
    builder.translated("SEO Meta Tags", "A", "網站描述 (Meta Description)", seo, "metaDescription")
    builder.translated("SEO Meta Tags", "B", "關鍵字 (Meta Keywords)", seo, "metaKeywords")
    builder.translated("SEO Meta Tags", "C", "社群分享標題 (OG Title)", seo, "ogTitle")
    builder.translated("SEO Meta Tags", "D", "社群分享描述 (OG Description)", seo, "ogDescription")
    builder.blank()

    builder.label("SEO 內容結構")
    builder.translated_list("SEO 內容結構", "A", "建議H2標題", seo, "h2Suggestions", " | ")
    builder.translated_list("SEO 內容結構", "B", "建議H3標題", seo, "h3Suggestions", " | ")
    builder.blank()

    builder.label("關鍵字策略")
    builder.translated_list("關鍵字策略", "A", "主要關鍵字", seo, "primaryKeywords", ", ")
    builder.translated_list("關鍵字策略", "B", "長尾關鍵字", seo, "longTailKeywords", ", ")
    builder.blank()

    densities = _get(seo, "keywordDensity")
    if isinstance(densities, list) and densities:
        builder.label("關鍵字密度分析")
        for index, entry in enumerate(densities):
            code = position_code(index)
            description = f"{_text(_get(entry, 'keyword'))} ({_text(_get(entry, 'density'))}%)"
            recommendation = _text(_get(entry, "recommendation"))
            # No separate translated recommendation exists; the primary text is repeated
            builder.field("關鍵字密度分析", code, description, recommendation, recommendation)
        builder.blank()

    competitor = _get(seo, "competitorAnalysis")
    if competitor:
        builder.label("競爭分析")
        builder.translated("競爭分析", "A", "行業分類", competitor, "industry")
        builder.translated_list("競爭分析", "B", "競爭對手關鍵字", competitor, "competitorKeywords", ", ")
        builder.translated("競爭分析", "C", "市場機會分析", competitor, "gapAnalysis")
        builder.translated("競爭分析", "D", "競爭策略建議", competitor, "recommendations")
        builder.blank()

    usp = _get(seo, "uspAnalysis")
    if usp:
        builder.label("USP差異化分析")
        builder.translated_list("USP差異化分析", "A", "獨特賣點", usp, "uniqueSellingPoints", " | ")
        builder.translated("USP差異化分析", "B", "差異化策略", usp, "differentiationStrategy")
        builder.translated("USP差異化分析", "C", "品牌定位陳述", usp, "positioningStatement")
        builder.blank()

    optimization = _get(seo, "contentOptimization")
    if optimization:
        builder.label("內容優化建議")
        builder.field(
            "內容優化建議", "A",
            f"標題長度 (目前: {_number(_get(optimization, 'titleLength', 'current'))})",
            _text(_get(optimization, "titleLength", "recommended")),
            _text(_get(optimization, "titleLength", "recommendation_zh")),
        )
        builder.field(
            "內容優化建議", "B",
            f"描述長度 (目前: {_number(_get(optimization, 'descriptionLength', 'current'))})",
            _text(_get(optimization, "descriptionLength", "recommended")),
            _text(_get(optimization, "descriptionLength", "recommendation_zh")),
        )
        builder.field(
            "內容優化建議", "C",
            f"可讀性評分 ({_number(_get(optimization, 'readabilityScore', 'score'))})",
            _text(_get(optimization, "readabilityScore", "suggestions")),
            _text(_get(optimization, "readabilityScore", "suggestions_zh")),
        )
        builder.blank()


def _fresh_structured_data(builder: RowBuilder, data: dict) -> None:
    builder.label(STRUCTURED_DATA_HEADER)
    builder.blank()

    organization = _get(data, "organization")
    builder.label("組織資訊 (Organization)")
    for code, path, description in ORGANIZATION_FIELDS:
        builder.field("組織資訊", code, description, _text(_get(organization, *path)))
    builder.blank()

    website = _get(data, "website")
    builder.label("網站資訊 (WebSite)")
    for code, field, description in WEBSITE_FIELDS:
        builder.field("網站資訊", code, description, _text(_get(website, field)))
    builder.blank()

    products = _get(data, "products")
    if isinstance(products, list) and products:
        builder.label("產品結構化資料")
        for index, product in enumerate(products):
            section = f"產品 {index + 1}"
            for code, field, description in PRODUCT_DATA_FIELDS:
                builder.field(section, code, description, _text(_get(product, field)))
            builder.blank()
