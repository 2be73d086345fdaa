from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Optional

from .records import RATING_TOKENS, STAR_RATING_MAP

# Declaration order fixes the column order of every export.
FIELD_ORDER = ("starRating", "comment", "reviewer", "createTime")

FIELD_LABELS = MappingProxyType({
    "starRating": "Star Rating",
    "comment": "Comment",
    "reviewer": "Reviewer Name",
    "createTime": "Date Created",
})

DEFAULT_SELECTION = MappingProxyType({
    "starRating": True,
    "comment": True,
    "reviewer": False,
    "createTime": False,
})

ALL_RATINGS = "all"
ALL_RATINGS_LABEL = "All Ratings"


def header_label(name: str) -> str:
    """Column header for a field; unknown names get their first letter capitalized."""
    label = FIELD_LABELS.get(name)
    if label is not None:
        return label
    return name[:1].upper() + name[1:]


class FieldSelection(Mapping):
    """Immutable mapping of field name -> selected flag."""

    __slots__ = ("_flags",)

    def __init__(self, flags: Optional[Mapping] = None, **kwargs: bool):
        merged: Dict[str, bool] = {name: False for name in FIELD_ORDER}
        if flags:
            merged.update({str(k): bool(v) for k, v in flags.items()})
        merged.update({k: bool(v) for k, v in kwargs.items()})
        self._flags = merged

    @classmethod
    def default(cls) -> "FieldSelection":
        return cls(DEFAULT_SELECTION)

    @classmethod
    def all(cls) -> "FieldSelection":
        return cls({name: True for name in FIELD_ORDER})

    @classmethod
    def of(cls, names: Iterable[str]) -> "FieldSelection":
        return cls({name: True for name in names})

    @classmethod
    def from_labels(cls, labels: Optional[Iterable[str]]) -> "FieldSelection":
        """Build a selection from UI checkbox labels ('Star Rating', ...) or field names."""
        by_label = {label: name for name, label in FIELD_LABELS.items()}
        names = [by_label.get(label, label) for label in (labels or [])]
        return cls.of(names)

    def __getitem__(self, name: str) -> bool:
        return self._flags[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._flags)

    def __len__(self) -> int:
        return len(self._flags)

    def __repr__(self) -> str:
        return f"FieldSelection({self.columns!r})"

    @property
    def columns(self) -> List[str]:
        """Selected fields: known ones in declaration order, then unknown ones as given."""
        known = [name for name in FIELD_ORDER if self._flags.get(name)]
        extra = [name for name, on in self._flags.items() if on and name not in FIELD_ORDER]
        return known + extra

    @property
    def headers(self) -> List[str]:
        return [header_label(name) for name in self.columns]

    def any_selected(self) -> bool:
        return any(self._flags.values())

    def restrict(self, names: Iterable[str]) -> "FieldSelection":
        """Selection containing only the given fields that are already selected."""
        wanted = set(names)
        return FieldSelection({name: on and name in wanted for name, on in self._flags.items()})


@dataclass(frozen=True)
class RatingFilter:
    """Either 'all' or one of the five rating tokens."""

    token: str = ALL_RATINGS

    def __post_init__(self):
        if self.token != ALL_RATINGS and self.token not in RATING_TOKENS:
            raise ValueError(f"Invalid rating filter: {self.token!r}. Must be 'all' or one of {RATING_TOKENS}")

    @classmethod
    def from_label(cls, label: Optional[str]) -> "RatingFilter":
        """Accept a token ('FIVE'), a UI label ('5 Stars', 'All Ratings') or None."""
        if label in (None, '', ALL_RATINGS, ALL_RATINGS_LABEL):
            return cls()
        if label in RATING_TOKENS:
            return cls(label)
        for token, digit in STAR_RATING_MAP.items():
            if label == choice_label(token) or label == digit:
                return cls(token)
        raise ValueError(f"Unknown rating filter: {label!r}")

    @property
    def is_all(self) -> bool:
        return self.token == ALL_RATINGS

    @property
    def label(self) -> str:
        return ALL_RATINGS_LABEL if self.is_all else choice_label(self.token)

    def matches(self, review) -> bool:
        return self.is_all or review.star_rating == self.token


def choice_label(token: str) -> str:
    return f"{STAR_RATING_MAP.get(token, token)} Stars"


def rating_filter_choices() -> List[str]:
    """Dropdown choices, highest rating first."""
    return [ALL_RATINGS_LABEL] + [choice_label(token) for token in reversed(RATING_TOKENS)]


@dataclass(frozen=True)
class ExportOptions:
    """Filter and field selection handed from the UI to the serializer on each call."""

    rating_filter: RatingFilter = field(default_factory=RatingFilter)
    fields: FieldSelection = field(default_factory=FieldSelection.default)
