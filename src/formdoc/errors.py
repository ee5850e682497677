"""
Exceptions and warning categories raised while converting a form.

Fatal problems derive from FormError and stop the run before any output
unit is written. Data-quality problems are reported with
``warnings.warn(msg, FormDataWarning)`` and never interrupt control flow.
"""

from typing import Dict, List


class FormError(Exception):
    """Base class for every fatal conversion error."""
    pass


class SchemaError(FormError):
    """Raised when a required sheet or column is missing."""
    pass


class DuplicateNameError(FormError):
    """
    Raised when two or more non-marker fields share a name.

    Properties:
        duplicates: name -> list of offending row indexes
    """

    def __init__(self, duplicates: Dict[str, List[int]]):
        self.duplicates = duplicates
        details = "; ".join(
            f"'{name}' (rows {', '.join(str(r) for r in rows)})"
            for name, rows in sorted(duplicates.items())
        )
        super().__init__(f"Duplicate field names: {details}")


class UnresolvedListError(FormError):
    """Raised when select fields reference list names missing from the choices sheet."""

    def __init__(self, list_names: List[str]):
        self.list_names = sorted(set(list_names))
        super().__init__(f"Unresolved choice lists: {', '.join(self.list_names)}")


class NestingError(FormError):
    """Raised for malformed begin/end group or repeat structure."""
    pass


class ConfigError(FormError):
    """Raised when conversion options are invalid."""
    pass


class MergeError(FormError):
    """Raised when part files cannot be concatenated."""
    pass


class FormDataWarning(UserWarning):
    """Non-fatal data-quality problem (count mismatch, truncation, translation fallback)."""
    pass


__all__ = [
    "FormError",
    "SchemaError",
    "DuplicateNameError",
    "UnresolvedListError",
    "NestingError",
    "ConfigError",
    "MergeError",
    "FormDataWarning",
]
