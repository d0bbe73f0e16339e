"""
Composable query stages and pagination.

Read views are built as a pipeline of stages over a SQLAlchemy `Select`:

    match   -> WHERE criteria
    lookup  -> LEFT JOIN another entity, pulling only named columns
    sort    -> ORDER BY
    reshape -> map each result row to a response dict

then executed with `all`, `first` or `paginate`. Pipelines only ever
issue SELECT statements; nothing here writes to the store.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from api.errors import ValidationError

logger = logging.getLogger(__name__)

Stage = Callable[[Select], Select]
Reshape = Callable[[Row], dict[str, Any]]


# =============================================================================
# Stages
# =============================================================================

def match(*criteria: Any) -> Stage:
    """Filter rows. `None` criteria are skipped so optional filters compose."""
    active = [c for c in criteria if c is not None]

    def stage(statement: Select) -> Select:
        return statement.where(*active) if active else statement

    return stage


def lookup(target: Any, onclause: Any, *columns: Any) -> Stage:
    """Left-join `target` and add only the given (labeled) columns."""

    def stage(statement: Select) -> Select:
        return statement.outerjoin(target, onclause).add_columns(*columns)

    return stage


def inner_join(target: Any, onclause: Any) -> Stage:
    def stage(statement: Select) -> Select:
        return statement.join(target, onclause)

    return stage


def with_columns(*columns: Any) -> Stage:
    """Add derived columns, e.g. correlated counts."""

    def stage(statement: Select) -> Select:
        return statement.add_columns(*columns)

    return stage


def sort(*order_by: Any) -> Stage:
    def stage(statement: Select) -> Select:
        return statement.order_by(*order_by)

    return stage


# =============================================================================
# Pagination
# =============================================================================

@dataclass
class PageRequest:
    """Validated 1-based page coordinates."""

    page: int = 1
    page_size: int = 10

    @classmethod
    def parse(cls, page: Any, page_size: Any, max_page_size: Optional[int] = None) -> "PageRequest":
        """
        Build a PageRequest from raw query values.

        Raises:
            ValidationError: Non-integer values, page < 1, page_size < 1 or
                page_size above max_page_size.
        """
        try:
            page_number = int(page)
            size = int(page_size)
        except (TypeError, ValueError):
            raise ValidationError("page and limit must be integers")

        if page_number < 1:
            raise ValidationError("page must be at least 1")
        if size < 1:
            raise ValidationError("limit must be at least 1")
        if max_page_size is not None and size > max_page_size:
            raise ValidationError(f"limit must not exceed {max_page_size}")
        return cls(page=page_number, page_size=size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass
class Page:
    """One page of a sorted listing."""

    items: list[dict[str, Any]] = field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.page_size) if self.total_items else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": self.items,
            "page": self.page,
            "pageSize": self.page_size,
            "totalItems": self.total_items,
            "totalPages": self.total_pages,
            "hasNextPage": self.page < self.total_pages,
            "hasPrevPage": self.page > 1,
        }


# =============================================================================
# Pipeline
# =============================================================================

def _default_reshape(row: Row) -> dict[str, Any]:
    return dict(row._mapping)


class Pipeline:
    """
    Immutable chain of stages over a root entity.

    Usage:
        page = (
            Pipeline(Video)
            .pipe(match(Video.is_published.is_(True)), sort(Video.created_at.desc()))
            .reshape(video_card)
            .paginate(db, PageRequest(page=1, page_size=10))
        )
    """

    def __init__(
        self,
        *entities: Any,
        statement: Optional[Select] = None,
        reshaper: Reshape = _default_reshape,
    ) -> None:
        self._statement = statement if statement is not None else select(*entities)
        self._reshaper = reshaper

    @property
    def statement(self) -> Select:
        return self._statement

    def pipe(self, *stages: Stage) -> "Pipeline":
        statement = self._statement
        for stage in stages:
            statement = stage(statement)
        return Pipeline(statement=statement, reshaper=self._reshaper)

    def reshape(self, reshaper: Reshape) -> "Pipeline":
        return Pipeline(statement=self._statement, reshaper=reshaper)

    def all(self, db: Session) -> list[dict[str, Any]]:
        rows = db.execute(self._statement).all()
        return [self._reshaper(row) for row in rows]

    def first(self, db: Session) -> Optional[dict[str, Any]]:
        row = db.execute(self._statement.limit(1)).first()
        return self._reshaper(row) if row is not None else None

    def count(self, db: Session) -> int:
        counted = select(func.count()).select_from(
            self._statement.order_by(None).subquery()
        )
        return db.execute(counted).scalar_one()

    def paginate(self, db: Session, request: PageRequest) -> Page:
        """Count the full match set, then fetch one page of it."""
        total = self.count(db)
        rows = db.execute(
            self._statement.offset(request.offset).limit(request.page_size)
        ).all()
        logger.debug(
            f"Paginated query: page={request.page} size={request.page_size} total={total}"
        )
        return Page(
            items=[self._reshaper(row) for row in rows],
            page=request.page,
            page_size=request.page_size,
            total_items=total,
        )
