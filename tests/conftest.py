import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure `src/` is on sys.path so `import yart` works without an editable install.
    root = Path(__file__).resolve().parent.parent
    src = root / "src"
    if src.exists():
        p = str(src)
        if p not in sys.path:
            sys.path.insert(0, p)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Process-wide config backed by a throwaway file."""
    from yart.config.manager import ConfigManager, set_config

    for var in ("YART_DEBUG", "YART_LOG_LEVEL", "YART_SCHEMA_DIALECT"):
        monkeypatch.delenv(var, raising=False)

    config = ConfigManager(str(tmp_path / "yart.yaml"))
    config.load()
    set_config(config)
    try:
        yield config
    finally:
        set_config(None)
