"""
Spreadsheet template parsing.

Turns the rows of a filled-in content template into a Content Tree. Rows are
routed into fields by their section marker (column 0) and item code
(column 1); the customer-supplied value lives in column 4.
"""

import logging
from typing import Optional, Sequence

from .errors import EmptyResultError
from .schema import (
    ABOUT,
    ARRAY_SECTIONS,
    CONTACT,
    HERO,
    VALUE_COLUMN,
    ContentTree,
    cell,
    lookup_field,
    walk_rows,
)

logger = logging.getLogger(__name__)

# Object sections, in tree order
OBJECT_SECTIONS = (HERO, ABOUT, CONTACT)


def read_content_tree(rows: Sequence[Sequence[Optional[str]]]) -> ContentTree:
    """
    Parse template rows into a Content Tree.

    Args:
        rows: Spreadsheet rows as sequences of string cells. Ragged rows are
            allowed; missing cells read as empty strings.

    Returns:
        Content Tree holding only the sections that received data.

    Raises:
        EmptyResultError: If no recognized section received any value.
    """
    tree: dict = {HERO: {}, ABOUT: {}, "products": [], CONTACT: {}}

    for scanned in walk_rows(rows):
        section = scanned.cursor.section

        if section in ARRAY_SECTIONS:
            blocks = tree[ARRAY_SECTIONS[section]]
            while len(blocks) <= scanned.cursor.index:
                blocks.append({})

        if scanned.item_code is None:
            continue
        field_spec = lookup_field(section, scanned.item_code)
        if field_spec is None:
            continue

        value = cell(rows[scanned.row_index], VALUE_COLUMN)
        if not value:
            continue

        if section in ARRAY_SECTIONS:
            tree[ARRAY_SECTIONS[section]][scanned.cursor.index][field_spec.field] = value
        else:
            tree[section][field_spec.field] = value

    tree = _drop_empty_sections(tree)
    if not tree:
        raise EmptyResultError(
            "No content sections found in the spreadsheet (expected rows such as "
            "'Hero' or 'About Us'). Check that the file follows the template."
        )

    logger.info(f"Parsed template sections: {', '.join(tree)}")
    return tree


def _drop_empty_sections(tree: dict) -> ContentTree:
    """Remove sections without any populated field."""
    for section in OBJECT_SECTIONS:
        if not tree.get(section):
            tree.pop(section, None)

    for data_key in ARRAY_SECTIONS.values():
        # All-or-nothing: a sequence with some populated block keeps its empty ones
        if all(not block for block in tree.get(data_key, [])):
            tree.pop(data_key, None)

    return tree
