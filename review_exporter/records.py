from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .accessors import get_value_by_path

RATING_TOKENS = ("ONE", "TWO", "THREE", "FOUR", "FIVE")

STAR_RATING_MAP: Mapping[str, str] = MappingProxyType({
    "ONE": "1",
    "TWO": "2",
    "THREE": "3",
    "FOUR": "4",
    "FIVE": "5",
})

# External record keys -> Review attributes.
FIELD_ATTRIBUTES: Mapping[str, str] = MappingProxyType({
    "starRating": "star_rating",
    "comment": "comment",
    "reviewer": "reviewer_name",
    "createTime": "create_time",
})

SAMPLE_DOCUMENT: Dict[str, Any] = {
    "reviews": [
        {
            "reviewer": {"displayName": "Sample User 1"},
            "starRating": "FIVE",
            "comment": "Great service!",
            "createTime": "2025-02-15T07:45:54.637925Z",
        },
        {
            "reviewer": {"displayName": "Sample User 2"},
            "starRating": "FOUR",
            "comment": "Good product but delivery was slow",
            "createTime": "2025-02-14T13:48:44.102355Z",
        },
        {
            "reviewer": {"displayName": "Sample User 3"},
            "starRating": "FIVE",
            "createTime": "2025-02-13T12:45:28.141593Z",
        },
    ],
}


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


@dataclass(frozen=True)
class Review:
    """One customer review. Every field is optional; None means absent."""

    reviewer_name: Optional[str] = None
    star_rating: Optional[Any] = None
    comment: Optional[str] = None
    create_time: Optional[str] = None
    extras: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @classmethod
    def from_dict(cls, record: Any) -> "Review":
        if not isinstance(record, dict):
            return cls()

        extras = {k: v for k, v in record.items() if k not in FIELD_ATTRIBUTES}
        return cls(
            reviewer_name=_optional_text(get_value_by_path(record, "reviewer.displayName")),
            star_rating=record.get("starRating"),
            comment=_optional_text(record.get("comment")),
            create_time=_optional_text(record.get("createTime")),
            extras=extras,
        )

    def get(self, name: str, default: Any = None) -> Any:
        """Look up a field by its external name ('starRating', 'reviewer', ...)."""
        attr = FIELD_ATTRIBUTES.get(name)
        if attr is not None:
            value = getattr(self, attr)
        else:
            value = get_value_by_path(self.extras, name)
        return default if value is None else value


class ReviewCollection(Sequence):
    """Ordered, immutable sequence of reviews produced by one ingest."""

    __slots__ = ("_reviews",)

    def __init__(self, reviews: Iterable[Review] = ()):
        self._reviews = tuple(reviews)

    @classmethod
    def from_records(cls, records: Iterable[Any]) -> "ReviewCollection":
        return cls(Review.from_dict(r) for r in records)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ReviewCollection(self._reviews[index])
        return self._reviews[index]

    def __len__(self) -> int:
        return len(self._reviews)

    def __eq__(self, other) -> bool:
        if isinstance(other, ReviewCollection):
            return self._reviews == other._reviews
        return NotImplemented

    def __repr__(self) -> str:
        return f"ReviewCollection({len(self._reviews)} reviews)"


def resolve_review_items(data: Any) -> List[Any]:
    """Return the `reviews` array of a parsed document, or [] when there is none."""
    if not isinstance(data, dict):
        return []
    items = data.get("reviews")
    if isinstance(items, list):
        return items
    return []


def sample_collection() -> ReviewCollection:
    return ReviewCollection.from_records(SAMPLE_DOCUMENT["reviews"])


def rating_counts(collection: Iterable[Review]) -> Dict[str, int]:
    """Count reviews per rating token; unrecognized values are counted verbatim."""
    counts: Counter = Counter()
    for review in collection:
        rating = review.star_rating
        counts["(none)" if rating is None else str(rating)] += 1

    ordered: Dict[str, int] = {token: counts.pop(token, 0) for token in reversed(RATING_TOKENS)}
    ordered.update(sorted(counts.items()))
    return ordered
