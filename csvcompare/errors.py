"""
Errors - Classified failures raised while loading and comparing CSV files.
"""

from typing import List, Optional


class CompareError(Exception):
    """Base class for every failure the comparison core reports."""
    pass


class ParseError(CompareError):
    """The input is not a readable CSV file or the parser failed on it."""
    pass


class EmptyFileError(CompareError):
    """No data row survived filtering."""

    def __init__(self, message: str = "File contains no data"):
        super().__init__(message)


class NoColumnsError(CompareError):
    """The file has no usable header."""

    def __init__(self, message: str = "No valid columns found in file"):
        super().__init__(message)


class SchemaMismatchError(CompareError):
    """The two files do not share the same set of column names."""

    def __init__(self, only_in_first: Optional[List[str]] = None,
                 only_in_second: Optional[List[str]] = None,
                 message: str = "Files have different column structures"):
        super().__init__(message)
        self.only_in_first = list(only_in_first or [])
        self.only_in_second = list(only_in_second or [])
