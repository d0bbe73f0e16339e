"""
Query & Pagination Engine.

Read-only, joined, sorted and paginated views over the entity store.
Each module builds its views from the stages in `queries.pipeline`.
"""

from queries.pipeline import Page, PageRequest, Pipeline

__all__ = ["Page", "PageRequest", "Pipeline"]
