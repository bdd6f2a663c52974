from .overlay import COLUMN_COLORS, draw_table_overlay
from .table_export import (
    EXPORT_FORMATS,
    export_document_json,
    export_document_summary_csv,
    export_table_files,
    table_file_stem,
)

__all__ = [
    "COLUMN_COLORS",
    "EXPORT_FORMATS",
    "draw_table_overlay",
    "export_document_json",
    "export_document_summary_csv",
    "export_table_files",
    "table_file_stem",
]
