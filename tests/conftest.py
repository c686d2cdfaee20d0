from __future__ import annotations

from collections.abc import Generator

import pytest

from mapstep.hashes.ordered_hash import OrderedHash


@pytest.fixture
def sample_hash() -> OrderedHash[str, int]:
    return OrderedHash({"foo": 0, "bar": 1, "baz": 2})


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    for name in ("MAPSTEP_LOG_LEVEL", "MAPSTEP_JSON_LOGS", "MAPSTEP_LOG_MAX_ITEMS", "K_SERVICE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("KUBERNETES_SERVICE_HOST", raising=False)
    yield
