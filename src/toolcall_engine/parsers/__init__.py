"""Parser implementations."""

from .base import BaseParser
from .tag_parser import DEFAULT_END_TAG, DEFAULT_START_TAG, TagParser

__all__ = [
    "BaseParser",
    "TagParser",
    "DEFAULT_START_TAG",
    "DEFAULT_END_TAG",
]
