"""Automancy: ability text to structured automation artifacts."""

__version__ = "0.2.0"

from .converter import (  # noqa: E402
    AbilityConverter, ConversionResult, convert_ability, convert_multiple, get_capabilities,
)
from .validate import ValidationReport, validate_result  # noqa: E402

__all__ = [
    "__version__",
    "AbilityConverter",
    "ConversionResult",
    "convert_ability",
    "convert_multiple",
    "get_capabilities",
    "ValidationReport",
    "validate_result",
]
