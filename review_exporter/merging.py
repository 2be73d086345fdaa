"""
Ingest merger.

Combines several uploaded JSON review documents into one ReviewCollection.
A document that cannot be read or parsed contributes no reviews and never
aborts the rest of the batch.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from .errors import DocumentParseError
from .io_utils import parse_json_text, read_text_content, source_name
from .records import ReviewCollection, resolve_review_items, sample_collection

logger = logging.getLogger(__name__)


@dataclass
class IngestOutcome:
    """Per-document status, used only for progress display."""

    name: str
    processed: bool = False
    ok: bool = False
    review_count: int = 0
    error: Optional[str] = None

    @property
    def status(self) -> str:
        if not self.processed:
            return "Processing..."
        return "Processed" if self.ok else "Failed"


@dataclass(frozen=True)
class MergeResult:
    collection: ReviewCollection
    outcomes: Tuple[IngestOutcome, ...] = ()
    successful: bool = False

    @property
    def failed(self) -> List[IngestOutcome]:
        return [o for o in self.outcomes if o.processed and not o.ok]


def parse_document(name: str, content: Any) -> List[Any]:
    """Parse one document and return its review items.

    Raises DocumentParseError for malformed JSON. A well-formed document
    without a `reviews` array yields [].
    """
    try:
        data = parse_json_text(content)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError, TypeError, AttributeError) as e:
        raise DocumentParseError(name, str(e)) from e
    return resolve_review_items(data)


def _named_documents(documents: Iterable[Any]) -> List[Tuple[str, Any]]:
    named = []
    for index, doc in enumerate(documents):
        if isinstance(doc, tuple) and len(doc) == 2:
            named.append((str(doc[0]), doc[1]))
        else:
            named.append((f"document-{index + 1}", doc))
    return named


def _ingest(outcome: IngestOutcome, content: Any, items: List[Any]) -> None:
    """Parse `content` and append its reviews to the shared accumulator."""
    try:
        reviews = parse_document(outcome.name, content)
    except DocumentParseError as e:
        logger.warning(str(e))
        outcome.error = e.reason
    else:
        items.extend(reviews)
        outcome.ok = True
        outcome.review_count = len(reviews)
    outcome.processed = True


def _finish(items: List[Any], outcomes: Sequence[IngestOutcome]) -> MergeResult:
    collection = ReviewCollection.from_records(items)
    successful = any(o.ok for o in outcomes)
    failed = sum(1 for o in outcomes if not o.ok)
    if successful:
        logger.info(f"Merged {len(collection)} reviews from {len(outcomes)} document(s) ({failed} failed)")
    else:
        logger.warning(f"No usable data in {len(outcomes)} document(s)")
    return MergeResult(collection=collection, outcomes=tuple(outcomes), successful=successful)


def merge_documents(documents: Iterable[Any]) -> MergeResult:
    """Merge raw JSON texts (or (name, text) pairs) in submission order."""
    items: List[Any] = []
    outcomes: List[IngestOutcome] = []
    for name, content in _named_documents(documents):
        outcome = IngestOutcome(name=name)
        _ingest(outcome, content, items)
        outcomes.append(outcome)
    return _finish(items, outcomes)


async def merge_documents_async(
    sources: Iterable[Any],
    reader: Callable[[Any], Any] = read_text_content,
    preserve_order: bool = True,
) -> MergeResult:
    """Read every source concurrently and merge the reviews they contain.

    Reads run in worker threads; parsing and appending happen on the event
    loop, one completion at a time. With `preserve_order` the reviews are
    appended in submission order, otherwise in the order reads complete.
    """
    sources = list(sources)
    outcomes = [
        IngestOutcome(name=source_name(src) or f"document-{i + 1}")
        for i, src in enumerate(sources)
    ]
    items: List[Any] = []

    async def load(index: int, source: Any):
        try:
            content = await asyncio.to_thread(reader, source)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            return index, None, DocumentParseError(outcomes[index].name, str(e))
        return index, content, None

    def accept(index: int, content: Any, error: Optional[DocumentParseError]) -> None:
        outcome = outcomes[index]
        if error is not None:
            logger.warning(str(error))
            outcome.error = error.reason
            outcome.processed = True
            return
        _ingest(outcome, content, items)

    tasks = [asyncio.ensure_future(load(i, src)) for i, src in enumerate(sources)]
    if preserve_order:
        for index, content, error in await asyncio.gather(*tasks):
            accept(index, content, error)
    else:
        for next_done in asyncio.as_completed(tasks):
            accept(*(await next_done))

    return _finish(items, outcomes)


def load_sample_data() -> MergeResult:
    """The built-in sample; it is already a valid collection and skips parsing."""
    collection = sample_collection()
    logger.info(f"Loaded {len(collection)} sample reviews")
    return MergeResult(collection=collection, outcomes=(), successful=True)
