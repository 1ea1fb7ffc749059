"""Shared fixtures for core unit tests"""

from datetime import datetime, timezone

import pytest


SAMPLE_MD = """\
---
title: Test Doc
author: Someone
---

# Heading 1

A paragraph with **bold** text.

## Heading 2

- item one
- item two
"""


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="md_file")
def md_file_fixture(tmp_path):
    """SAMPLE_MD written to a file, byte for byte."""
    path = tmp_path / "doc.md"
    path.write_bytes(SAMPLE_MD.encode('utf-8'))
    return path


@pytest.fixture(name="fixed_now")
def fixed_now_fixture():
    return datetime(2026, 1, 15, 10, 30, tzinfo=timezone.utc)
