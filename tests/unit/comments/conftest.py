"""Shared fixtures for comment unit tests"""

from datetime import datetime, timezone

import pytest

from mdview.comments.models import MarkdownComment


@pytest.fixture(name="fixed_now")
def fixed_now_fixture():
    return datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc)


@pytest.fixture(name="later")
def later_fixture():
    return datetime(2026, 2, 1, 8, 0, 5, tzinfo=timezone.utc)


@pytest.fixture(name="comment")
def comment_fixture(fixed_now):
    return MarkdownComment(id="COM-1", created=fixed_now, updated=fixed_now, body="hi")
