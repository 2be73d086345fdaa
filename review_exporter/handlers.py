from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from .errors import EmptyExportError
from .merging import IngestOutcome, MergeResult, load_sample_data, merge_documents_async
from .options import FieldSelection, RatingFilter
from .records import ReviewCollection, rating_counts
from .serializer import preview_caption, preview_rows, serialize, write_export_file

logger = logging.getLogger(__name__)

FILE_STATUS_HEADERS = ["File", "Status", "Reviews"]


def summarize_collection(collection: Optional[ReviewCollection], file_count: int = 0) -> str:
    if collection is None:
        return ""
    text = f"{len(collection)} reviews found"
    if file_count:
        text += f" from {file_count} file(s)"
    return text


def format_outcomes(outcomes: Iterable[IngestOutcome]) -> List[List[Any]]:
    return [[o.name, o.status, o.review_count] for o in outcomes]


def format_rating_counts(collection: Optional[ReviewCollection]) -> str:
    if not collection:
        return ""
    counts = rating_counts(collection)
    return " | ".join(f"{name}: {count}" for name, count in counts.items() if count)


def merge_result_payload(result: MergeResult, file_count: int):
    """State and status outputs shared by the upload and sample handlers."""
    outcomes = format_outcomes(result.outcomes)
    summary = summarize_collection(result.collection, file_count)

    if result.successful:
        message = "Successfully loaded. " + summary + "."
        if result.failed:
            names = ", ".join(o.name for o in result.failed)
            message += f" Failed to parse: {names}."
    else:
        message = "No usable data found in the uploaded file(s)."

    return result.collection, file_count, outcomes, message, summary, format_rating_counts(result.collection)


async def handle_files_upload(files):
    if not files:
        return None, 0, [], "No file uploaded.", "", ""
    if not isinstance(files, list):
        files = [files]

    result = await merge_documents_async(files)
    return merge_result_payload(result, len(files))


def load_sample_data_handler():
    return merge_result_payload(load_sample_data(), 0)


def clear_files_handler():
    return None, 0, [], "", "", ""


def _parse_options(filter_label: Optional[str], field_labels: Optional[List[str]]):
    return RatingFilter.from_label(filter_label), FieldSelection.from_labels(field_labels)


def preview_handler(collection: Optional[ReviewCollection], filter_label, field_labels):
    if collection is None:
        return None, ""

    try:
        rating_filter, fields = _parse_options(filter_label, field_labels)
    except ValueError as e:
        return None, str(e)

    if not fields.any_selected():
        return None, "No fields selected."

    rows = preview_rows(collection, rating_filter, fields)
    table = {"data": rows, "headers": fields.headers}
    return table, preview_caption(collection, rating_filter)


def export_data_handler(collection: Optional[ReviewCollection], filter_label, field_labels, file_name=None):
    try:
        rating_filter, fields = _parse_options(filter_label, field_labels)
        csv_text = serialize(collection, rating_filter, fields)
    except EmptyExportError as e:
        logger.info(f"Nothing to export: {e}")
        return None, f"Nothing to export. {e}"
    except ValueError as e:
        return None, str(e)

    try:
        path = write_export_file(csv_text, file_name)
    except OSError as e:
        logger.error(f"Error writing export: {e}")
        return None, f"Error during export: {str(e)}"

    return path, f"Export successful! Saved to {path}"
