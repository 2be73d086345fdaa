from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, List

from . import settings
from .errors import UnparseableTimestamp
from .options import FieldSelection, RatingFilter
from .records import STAR_RATING_MAP, Review

logger = logging.getLogger(__name__)

MISSING_PREVIEW_VALUE = "-"


def filter_reviews(collection: Iterable[Review], rating_filter: RatingFilter) -> List[Review]:
    """Reviews matching the filter, in collection order. Never mutates the collection."""
    if collection is None:
        return []
    if rating_filter.is_all:
        return list(collection)
    return [review for review in collection if rating_filter.matches(review)]


def quote_field(value: Any) -> str:
    """Always-quoted CSV cell; csv.writer cannot mix forced and bare quoting per column."""
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def quote_if_needed(text: str) -> str:
    if any(ch in text for ch in (',', '"', '\n', '\r')):
        return quote_field(text)
    return text


def star_rating_value(review: Review) -> str:
    rating = review.star_rating
    if rating is None or rating == "":
        return ""
    if isinstance(rating, str) and rating in STAR_RATING_MAP:
        return STAR_RATING_MAP[rating]
    return str(rating)


def parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise UnparseableTimestamp(value)
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise UnparseableTimestamp(value) from e


def format_date(value: Any) -> str:
    """Calendar date (no time of day) of an ISO-8601 timestamp, '' if unusable."""
    if value is None:
        return ""
    try:
        parsed = parse_timestamp(value)
    except UnparseableTimestamp as e:
        logger.debug(str(e))
        return ""
    return parsed.date().strftime(settings.DATE_FORMAT)


def csv_cell(review: Review, name: str) -> str:
    if name == "starRating":
        return quote_if_needed(star_rating_value(review))
    if name == "createTime":
        return quote_if_needed(format_date(review.create_time))
    # comment, reviewer and any other field are always quoted
    return quote_field(review.get(name, ""))


def preview_cell(review: Review, name: str) -> str:
    if name == "starRating":
        value = star_rating_value(review)
    elif name == "createTime":
        value = format_date(review.create_time)
    else:
        value = review.get(name, "")
        value = "" if value is None else str(value)
    return value if value else MISSING_PREVIEW_VALUE


def flatten_reviews_for_export(
    reviews: Iterable[Review],
    fields: FieldSelection,
) -> List[List[str]]:
    """CSV-ready cells, one list per review, selected columns only."""
    columns = fields.columns
    return [[csv_cell(review, name) for name in columns] for review in reviews]


def flatten_reviews_for_preview(
    reviews: Iterable[Review],
    fields: FieldSelection,
    limit: int = 5,
) -> List[List[str]]:
    columns = fields.columns
    if not columns:
        return []

    rows: List[List[str]] = []
    for review in reviews:
        rows.append([preview_cell(review, name) for name in columns])
        if len(rows) >= max(1, int(limit)):
            break
    return rows
