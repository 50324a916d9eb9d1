from .client import (
    MemosClientError,
    MemosContractError,
    MemosHTTPError,
    MemosModelValidationError,
    MemosParseError,
)

__all__ = [
    "MemosClientError",
    "MemosHTTPError",
    "MemosParseError",
    "MemosModelValidationError",
    "MemosContractError",
]
