"""
Taichi field pooling for PyConvection.

Author: B. Gailleton
"""

from .pool import TPField, FieldPool

__all__ = [
    "TPField",
    "FieldPool",
]
