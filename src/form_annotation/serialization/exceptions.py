"""Exceptions raised while decoding and encoding form annotations."""

import json
from dataclasses import dataclass, field, replace
from typing import List, Optional


@dataclass
class DecodeError(Exception):
    """
    Raised when annotation text cannot be decoded.

    Covers malformed JSON as well as values whose type does not match the
    declared attribute type. File-system failures are not wrapped: they
    surface as the ``OSError`` raised by the underlying call.

    Attributes:
        message: Human-readable error description.
        path: Key path of the offending value, e.g.
            ``pages[0].fields[1].position.x``; ``$`` for the top level.
        line: 1-based line of a JSON syntax error.
        column: 1-based column of a JSON syntax error.
        file_path: Path of the file being loaded, if any.
        allowed_values: Valid tags when an enumeration tag was not recognized.
    """
    message: str
    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    file_path: Optional[str] = None
    allowed_values: List[str] = field(default_factory=list)

    def __post_init__(self):
        super().__init__(str(self))

    @classmethod
    def from_json_error(cls, error: json.JSONDecodeError) -> "DecodeError":
        """Build a DecodeError pointing at a JSON syntax error."""
        return cls(f"Invalid JSON: {error.msg}", line=error.lineno, column=error.colno)

    @property
    def location(self) -> Optional[str]:
        """Key path, or ``line L column C`` for syntax errors."""
        if self.path:
            return self.path
        if self.line is not None:
            return f"line {self.line} column {self.column}"
        return None

    def with_file(self, file_path: str) -> "DecodeError":
        """Return a copy of this error attributed to a file."""
        return replace(self, file_path=file_path)

    def __str__(self) -> str:
        parts = [self.message]
        if self.file_path:
            parts.append(f"File: {self.file_path}")
        if self.location:
            parts.append(f"Location: {self.location}")
        return " | ".join(parts)


class EncodeError(ValueError):
    """
    Raised when an in-memory annotation cannot be written as JSON.

    This happens for values a caller assigned directly: an enumeration tag
    that is not recognized, a non-finite number, or text the configured
    encoding cannot represent.
    """

    def __init__(self, message: str, field_id: Optional[str] = None):
        super().__init__(message if field_id is None else f"{message} (field '{field_id}')")
        self.message = message
        self.field_id = field_id
