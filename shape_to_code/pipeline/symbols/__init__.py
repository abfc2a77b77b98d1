"""
Symbol resolution module.
"""

from __future__ import annotations

from .provider import (
    ERROR_MODULE,
    INPUT_MODULE,
    MODEL_MODULE,
    OUTPUT_MODULE,
    NumericClass,
    Symbol,
    SymbolProvider,
)

__all__ = [
    "ERROR_MODULE",
    "INPUT_MODULE",
    "MODEL_MODULE",
    "NumericClass",
    "OUTPUT_MODULE",
    "Symbol",
    "SymbolProvider",
]
