"""
Unit tests for the ingest merger.
"""

import json
import time

import pytest

from review_exporter.errors import DocumentParseError
from review_exporter.io_utils import read_text_content
from review_exporter.merging import (
    load_sample_data,
    merge_documents,
    merge_documents_async,
    parse_document,
)
from tests.conftest import make_document


def comments(result):
    return [review.comment for review in result.collection]


def test_merge_sums_review_counts():
    docs = [make_document("a", "b"), make_document("c"), make_document("d", "e", "f")]

    result = merge_documents(docs)

    assert len(result.collection) == 6
    assert result.successful
    assert [o.review_count for o in result.outcomes] == [2, 1, 3]


def test_merge_preserves_submission_order():
    result = merge_documents([make_document("a", "b"), make_document("c")])
    assert comments(result) == ["a", "b", "c"]


def test_malformed_document_does_not_affect_valid_ones():
    docs = [make_document("a"), '{"reviews": [', make_document("b", "c")]

    result = merge_documents(docs)

    assert comments(result) == ["a", "b", "c"]
    assert result.successful
    bad = result.outcomes[1]
    assert bad.processed
    assert not bad.ok
    assert bad.review_count == 0
    assert bad.error
    assert bad.status == "Failed"
    assert result.failed == [bad]


def test_deeply_nested_document_does_not_abort_batch():
    nested = "[" * 200000 + "]" * 200000

    result = merge_documents([make_document("a"), nested, make_document("b")])

    assert comments(result) == ["a", "b"]
    assert result.successful
    assert [o.ok for o in result.outcomes] == [True, False, True]
    assert result.outcomes[1].error


def test_parse_document_wraps_recursion_error():
    with pytest.raises(DocumentParseError):
        parse_document("deep.json", "{\"a\": " * 200000 + "1" + "}" * 200000)


def test_document_without_reviews_array_is_not_an_error():
    docs = [json.dumps({"items": []}), json.dumps({"reviews": {"not": "a list"}}), json.dumps([1, 2])]

    result = merge_documents(docs)

    assert len(result.collection) == 0
    assert all(o.ok and o.processed for o in result.outcomes)
    assert result.successful


def test_all_documents_failing_is_not_successful():
    result = merge_documents(["not json", "{broken"])

    assert not result.successful
    assert len(result.collection) == 0
    assert all(o.processed for o in result.outcomes)
    assert len(result.failed) == 2


def test_no_documents():
    result = merge_documents([])
    assert not result.successful
    assert len(result.collection) == 0
    assert result.outcomes == ()


def test_named_documents_and_bytes_with_bom():
    payload = "\ufeff" + make_document("Überraschend gut")
    result = merge_documents([("a.json", payload.encode("utf-8"))])

    assert result.outcomes[0].name == "a.json"
    assert comments(result) == ["Überraschend gut"]


def test_parse_document_raises_for_malformed_json():
    with pytest.raises(DocumentParseError) as exc_info:
        parse_document("bad.json", "{")
    assert exc_info.value.name == "bad.json"
    assert "bad.json" in str(exc_info.value)


def test_load_sample_data():
    result = load_sample_data()
    assert result.successful
    assert len(result.collection) == 3
    assert result.collection[2].comment is None


@pytest.fixture
def json_files(tmp_path):
    first = tmp_path / "first.json"
    first.write_text(make_document("a", "b"), encoding="utf-8")
    broken = tmp_path / "broken.json"
    broken.write_text("{oops", encoding="utf-8")
    second = tmp_path / "second.json"
    second.write_text(make_document("c"), encoding="utf-8")
    return [str(first), str(broken), str(second)]


@pytest.mark.asyncio
async def test_async_merge_matches_sync_merge(json_files):
    result = await merge_documents_async(json_files)

    expected = merge_documents([read_text_content(path) for path in json_files])
    assert result.collection == expected.collection
    assert [o.name for o in result.outcomes] == ["first.json", "broken.json", "second.json"]
    assert [o.ok for o in result.outcomes] == [True, False, True]


@pytest.mark.asyncio
async def test_async_merge_completion_order(json_files):
    def slow_first(path):
        if path.endswith("first.json"):
            time.sleep(0.3)
        return read_text_content(path)

    result = await merge_documents_async(json_files, reader=slow_first, preserve_order=False)

    assert len(result.collection) == 3
    assert comments(result) == ["c", "a", "b"]
    # outcomes stay in submission order
    assert [o.name for o in result.outcomes] == ["first.json", "broken.json", "second.json"]


@pytest.mark.asyncio
async def test_async_merge_records_unreadable_source(tmp_path, json_files):
    missing = str(tmp_path / "missing.json")

    result = await merge_documents_async(json_files + [missing])

    assert len(result.collection) == 3
    last = result.outcomes[-1]
    assert last.processed and not last.ok
    assert last.error
