from types import SimpleNamespace

import pytest


def make_rusage(**overrides):
    """Return an object shaped like ``resource.struct_rusage``."""
    fields = {
        "ru_utime": 0.0,
        "ru_stime": 0.0,
        "ru_maxrss": 0,
        "ru_ixrss": 0,
        "ru_idrss": 0,
        "ru_isrss": 0,
        "ru_inblock": 0,
        "ru_oublock": 0,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


@pytest.fixture
def fake_rusage():
    return make_rusage


@pytest.fixture(autouse=True)
def _clear_usage_log_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("USAGE_LOG_LEVEL", "USAGE_LOG_JSON", "USAGE_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
