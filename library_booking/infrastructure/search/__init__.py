# Search infrastructure package
"""
Search infrastructure adapters.

This package contains:
- BM25TextSearchRepository: relevance-ranked full-text search using BM25
"""

from .bm25_text_search_repository import BM25TextSearchRepository

__all__ = ["BM25TextSearchRepository"]
