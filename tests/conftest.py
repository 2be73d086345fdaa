import json

import pytest

from review_exporter import settings
from review_exporter.records import ReviewCollection, sample_collection


@pytest.fixture
def iso_dates(monkeypatch):
    """Render createTime as YYYY-MM-DD so assertions do not depend on the locale."""
    monkeypatch.setattr(settings, "DATE_FORMAT", "%Y-%m-%d")


@pytest.fixture
def sample():
    return sample_collection()


@pytest.fixture
def mixed_collection():
    return ReviewCollection.from_records([
        {"reviewer": {"displayName": "Ana"}, "starRating": "FIVE", "comment": "Loved it"},
        {"reviewer": {"displayName": "Ben"}, "starRating": "ONE", "comment": "Broke after a day"},
        {"starRating": "FIVE", "comment": 'He said "great"'},
        {"reviewer": {"displayName": "Dee"}, "starRating": "THREE"},
        {"reviewer": {"displayName": "Eli"}, "starRating": "FIVE", "createTime": "2024-06-01T10:00:00Z"},
    ])


def make_document(*comments, rating="FIVE"):
    return json.dumps({"reviews": [{"comment": c, "starRating": rating} for c in comments]})
