"""Data models for serialization configuration."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class SerializationSettings:
    """
    Settings for encoding and writing form annotations.

    Defaults produce the canonical representation: two-space indentation,
    UTF-8 text, and owner read-write / group and other read-only files.
    """
    indent: int = 2
    ensure_ascii: bool = False
    encoding: str = "utf-8"
    file_mode: int = 0o644


@dataclass
class ValidationResult:
    """
    Errors and warnings collected by a validation pass.

    The result is valid while no error has been recorded; warnings never
    affect validity.
    """
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)


class ConfigurationError(Exception):
    """Raised when serialization settings cannot be loaded or are invalid."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        validation_result: Optional[ValidationResult] = None,
    ):
        self.message = message
        self.source = source
        self.validation_result = validation_result
        details = [message]
        if source:
            details.append(f"Source: {source}")
        if validation_result and validation_result.errors:
            details.append("; ".join(validation_result.errors))
        super().__init__(" | ".join(details))
