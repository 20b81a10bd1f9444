"""Schema extraction and same-file symbol resolution."""

from .extractor import ExtractResult, SchemaExtractor
from .symbols import SymbolTable

__all__ = ["ExtractResult", "SchemaExtractor", "SymbolTable"]
