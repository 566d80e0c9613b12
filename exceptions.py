"""Custom exception classes for SKU generation."""

from __future__ import annotations


class AppError(Exception):
    """Base application error with an associated CLI exit code."""

    exit_code: int = 1

    def __init__(self, message: str = "SKU generation failed") -> None:
        super().__init__(message)


class ConfigurationError(AppError):
    """An enum-valued setting holds a value outside its recognised set."""

    exit_code = 2


class DataError(AppError):
    """Product data cannot satisfy the requested generation."""

    exit_code = 3


class ProductNotFoundError(AppError):
    exit_code = 4
