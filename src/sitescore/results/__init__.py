"""Result export helpers."""

from .assemblers import result_row, result_rows, write_csv, write_json

__all__ = ["result_row", "result_rows", "write_csv", "write_json"]
