from __future__ import annotations

from typing import List

import pytest

from sui_readers.runtime.events import RuntimeEvent, emitting


@pytest.fixture(autouse=True)
def _no_emitter():
    with emitting(None):
        yield


@pytest.fixture
def events():
    captured: List[RuntimeEvent] = []
    with emitting(captured.append):
        yield captured
