"""Pytest fixtures for contract-views tests."""

import pytest

from contract_views import config
from contract_views.types import Contract


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """Point the config directory at a temp dir."""
    config_dir = tmp_path / "contract-views"
    config_dir.mkdir()
    monkeypatch.setattr(config, "get_config_dir", lambda: config_dir)
    return config_dir


@pytest.fixture
def make_contract():
    """Factory for contracts with sensible defaults."""
    def _make(label="counter", address="wasm1abc", code_id=1, chain_config="localnet", **kwargs):
        return Contract(
            label=label,
            address=address,
            code_id=code_id,
            chain_config=chain_config,
            **kwargs,
        )

    return _make
