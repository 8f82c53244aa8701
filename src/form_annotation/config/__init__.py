"""Configuration management for form annotation serialization."""

from .config_manager import ConfigurationManager
from .models import (
    ConfigurationError,
    SerializationSettings,
    ValidationResult,
)

__all__ = [
    "ConfigurationManager",
    "ConfigurationError",
    "SerializationSettings",
    "ValidationResult",
]
