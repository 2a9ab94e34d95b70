from __future__ import annotations

from collections.abc import Iterator

import pytest

from fogline.util.live_vars import metric_registry


@pytest.fixture(autouse=True)
def clear_metric_registry() -> Iterator[None]:
    """Clear the global metric registry before and after each test."""
    metric_registry.clear()
    metric_registry.strict = False
    yield
    metric_registry.clear()
    metric_registry.strict = False
