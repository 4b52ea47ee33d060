# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""Test configuration — paths isolation and reflection factories."""

from datetime import datetime, timedelta

import pytest

from core.paths import configure, reset
from engine.events import bus


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path):
    """Route all journey data to a temp directory for test isolation."""
    paths = configure(tmp_path)
    paths.ensure_dirs()
    yield paths
    reset()


@pytest.fixture(autouse=True)
def clean_bus():
    bus.reset()
    yield
    bus.reset()


def make_rows(contents, start=datetime(2026, 3, 1, 9, 0), **extra):
    """Raw reflection rows, newest first, one day apart."""
    rows = []
    for i, content in enumerate(contents):
        row = {
            "id": i + 1,
            "content": content,
            "created_at": (start + timedelta(days=i)).isoformat(),
        }
        row.update(extra)
        rows.append(row)
    return rows[::-1]


@pytest.fixture
def rows_factory():
    return make_rows
