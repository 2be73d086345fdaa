"""
Export serializer.

Turns a filtered, field-selected view of a ReviewCollection into CSV text
that spreadsheet tools open as UTF-8.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from . import settings
from .errors import EmptyExportError
from .flattening import filter_reviews, flatten_reviews_for_export, flatten_reviews_for_preview
from .options import ExportOptions, FieldSelection, RatingFilter
from .records import ReviewCollection

logger = logging.getLogger(__name__)

UTF8_BOM = "\ufeff"
DELIMITER = ","
LINE_TERMINATOR = "\n"


def check_exportable(collection: Optional[ReviewCollection], fields: FieldSelection) -> None:
    """Raise EmptyExportError when there is nothing to export."""
    if collection is None or len(collection) == 0:
        raise EmptyExportError("No reviews loaded.")
    if fields is None or not fields.any_selected():
        raise EmptyExportError("No fields selected.")


def serialize(
    collection: Optional[ReviewCollection],
    rating_filter: RatingFilter,
    fields: FieldSelection,
) -> str:
    """Serialize the filtered view to BOM-prefixed CSV text.

    Columns follow the fixed field order regardless of how `fields` was
    built. Every row, header included, ends with a newline.
    """
    check_exportable(collection, fields)

    reviews = filter_reviews(collection, rating_filter)
    lines = [DELIMITER.join(fields.headers)]
    lines.extend(DELIMITER.join(row) for row in flatten_reviews_for_export(reviews, fields))

    logger.info(f"Serialized {len(reviews)} of {len(collection)} reviews ({rating_filter.label}, columns: {fields.columns})")
    return UTF8_BOM + "".join(line + LINE_TERMINATOR for line in lines)


def serialize_with_options(collection: Optional[ReviewCollection], options: ExportOptions) -> str:
    return serialize(collection, options.rating_filter, options.fields)


def preview_rows(
    collection: Optional[ReviewCollection],
    rating_filter: RatingFilter,
    fields: FieldSelection,
    limit: Optional[int] = None,
):
    """The first `limit` filtered reviews as display rows."""
    if limit is None:
        limit = settings.PREVIEW_LIMIT
    return flatten_reviews_for_preview(filter_reviews(collection, rating_filter), fields, limit)


def preview_caption(
    collection: Optional[ReviewCollection],
    rating_filter: RatingFilter,
    limit: Optional[int] = None,
) -> str:
    if limit is None:
        limit = settings.PREVIEW_LIMIT
    total = len(filter_reviews(collection, rating_filter))
    limit = max(1, int(limit))
    if total > limit:
        return f"Showing {limit} of {total} reviews. Export to see all."
    return ""


def write_export_file(
    csv_text: str,
    file_name: Optional[str] = None,
    directory: Optional[str] = None,
) -> str:
    """Write serialized CSV text to disk and return the path."""
    if not file_name or not file_name.strip():
        file_name = settings.EXPORT_FILENAME
    file_name = os.path.basename(file_name.strip())
    if not file_name.lower().endswith('.csv'):
        file_name += '.csv'

    directory = directory or settings.EXPORT_DIR
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, file_name)

    # newline='' keeps the '\n' row terminators as written
    with open(path, 'w', newline='', encoding='utf-8') as f:
        f.write(csv_text)

    logger.info(f"Wrote export to {path}")
    return path
