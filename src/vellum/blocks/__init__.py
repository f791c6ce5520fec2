"""Block formatters for lists and ASCII tables."""

from vellum.blocks.lists import (
    ListFrame,
    ListStack,
    ListType,
    format_list_block,
    format_lists,
)
from vellum.blocks.table import TABLE_PATTERN, format_row, format_table, split_cells

__all__ = [
    "TABLE_PATTERN",
    "ListFrame",
    "ListStack",
    "ListType",
    "format_list_block",
    "format_lists",
    "format_row",
    "format_table",
    "split_cells",
]
