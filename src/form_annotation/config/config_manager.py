"""Configuration Manager for form annotation serialization.

Loads and validates the settings used when encoding annotations and writing
them to disk.
"""

import codecs
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .models import ConfigurationError, SerializationSettings, ValidationResult


class ConfigurationManager:
    """
    Manager for serialization settings.

    Settings can come from a JSON file or a dictionary. Unknown keys are
    reported as warnings, invalid values as errors.
    """

    def __init__(self, settings: Optional[SerializationSettings] = None):
        self._settings = settings or SerializationSettings()
        self._is_loaded = settings is not None

    @property
    def settings(self) -> SerializationSettings:
        """Get the current serialization settings."""
        return self._settings

    @property
    def is_loaded(self) -> bool:
        """Check if settings have been loaded."""
        return self._is_loaded

    def load_settings(self, source: Union[str, Path, Dict[str, Any]]) -> ValidationResult:
        """
        Load and validate serialization settings.

        Args:
            source: JSON file path or dictionary. A dictionary may hold the
                values directly or under a "serialization" key.

        Returns:
            ValidationResult with any warnings.

        Raises:
            ConfigurationError: If validation fails; current settings are kept.
        """
        raw_data = self._parse_source(source)
        if isinstance(raw_data, dict) and "serialization" in raw_data:
            raw_data = raw_data["serialization"]

        result, settings = self._validate_settings(raw_data)
        if not result.is_valid or settings is None:
            raise ConfigurationError(
                "Serialization settings validation failed",
                source=str(source) if isinstance(source, (str, Path)) else None,
                validation_result=result
            )

        self._settings = settings
        self._is_loaded = True
        return result

    def _validate_settings(
        self,
        data: Any
    ) -> tuple[ValidationResult, Optional[SerializationSettings]]:
        """Validate a settings dictionary."""
        result = ValidationResult()
        prefix = "Serialization settings"

        if not isinstance(data, dict):
            result.add_error(f"{prefix}: expected a dictionary")
            return result, None

        known = {"indent", "ensure_ascii", "encoding", "file_mode"}
        for key in data:
            if key not in known:
                result.add_warning(f"{prefix}: unknown key '{key}' ignored")

        defaults = SerializationSettings()

        indent = data.get("indent", defaults.indent)
        if isinstance(indent, bool) or not isinstance(indent, int):
            result.add_error(f"{prefix}: 'indent' must be an integer")
        elif indent < 0:
            result.add_error(f"{prefix}: 'indent' must be non-negative")

        ensure_ascii = data.get("ensure_ascii", defaults.ensure_ascii)
        if not isinstance(ensure_ascii, bool):
            result.add_error(f"{prefix}: 'ensure_ascii' must be a boolean")

        encoding = data.get("encoding", defaults.encoding)
        if not isinstance(encoding, str) or not encoding.strip():
            result.add_error(f"{prefix}: 'encoding' must be a non-empty string")
        else:
            try:
                codec = codecs.lookup(encoding)
            except LookupError:
                result.add_error(f"{prefix}: unknown encoding '{encoding}'")
            else:
                # Only UTF codecs can hold every character json.dumps leaves unescaped
                if ensure_ascii is False and not codec.name.startswith("utf"):
                    result.add_error(
                        f"{prefix}: encoding '{encoding}' requires 'ensure_ascii' to be true"
                    )

        # Accept octal strings such as "644" or "0o644" from JSON files
        file_mode = data.get("file_mode", defaults.file_mode)
        if isinstance(file_mode, str):
            try:
                file_mode = int(file_mode, 8)
            except ValueError:
                result.add_error(f"{prefix}: 'file_mode' is not a valid octal string")
        if isinstance(file_mode, bool) or not isinstance(file_mode, (int, str)):
            result.add_error(f"{prefix}: 'file_mode' must be an integer or octal string")
        elif isinstance(file_mode, int) and not 0 <= file_mode <= 0o777:
            result.add_error(f"{prefix}: 'file_mode' must be between 0 and 0o777")

        if not result.is_valid:
            return result, None

        settings = SerializationSettings(
            indent=indent,
            ensure_ascii=ensure_ascii,
            encoding=encoding.strip(),
            file_mode=file_mode,
        )
        return result, settings

    def _parse_source(
        self,
        source: Union[str, Path, Dict[str, Any]]
    ) -> Any:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError("Configuration file not found", source=str(path))

            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON: {e.msg}", source=str(path)) from e

        return source
