"""Export package - output table of parsed sample records."""
from .table import COLUMNS, HEADERS, records_to_frame, write_table

__all__ = ["COLUMNS", "HEADERS", "records_to_frame", "write_table"]
