"""Geometry-first table reconstruction stages.

Public API
----------
- :func:`extract_rows`: cluster fragments into rows
- :func:`split_tables`: split rows into table blocks on vertical gaps
- :func:`infer_column_bands`: sweep a block for column bands
- :func:`assign_cells`: map row fragments onto bands
- :func:`merge_title_columns`: repair title-split column pairs
- :func:`extract_tables`: run all stages for one page
"""

from .cells import assign_cells, assign_row
from .columns import coalesce_bands, infer_column_bands
from .merge import find_title_row, merge_title_columns
from .normalize import extract_tables, normalize_table
from .rows import extract_next_row, extract_rows, sort_fragments
from .tables import split_tables, starts_new_table

__all__ = [
    "assign_cells",
    "assign_row",
    "coalesce_bands",
    "extract_next_row",
    "extract_rows",
    "extract_tables",
    "find_title_row",
    "infer_column_bands",
    "merge_title_columns",
    "normalize_table",
    "sort_fragments",
    "split_tables",
    "starts_new_table",
]
