"""Consistency reporting for form annotations."""

from .checker import IntegrityChecker, check_integrity

__all__ = ["IntegrityChecker", "check_integrity"]
