import pytest

from mcpdeck.config import get_settings
from mcpdeck.mcp.catalog import reset_tool_catalog


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path, monkeypatch):
    """Point config at a temp dir and drop cached singletons between tests."""
    monkeypatch.setenv("MCPDECK_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("MCPDECK_DEFAULT_TRANSPORT", raising=False)
    get_settings.cache_clear()
    reset_tool_catalog()
    yield
    get_settings.cache_clear()
    reset_tool_catalog()
