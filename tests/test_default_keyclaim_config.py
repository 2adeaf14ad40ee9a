"""
Unit tests for DefaultKeyclaimConfig.

This module tests reading the claim secret and the default reward from the
environment, and the values given explicitly.
"""

import logging

import pytest

from keyclaim.config.default_keyclaim_config import DefaultKeyclaimConfig
from keyclaim.config.keyclaim_config import KeyclaimConfig
from keyclaim.constants import DEFAULT_CLAIM_SECRET


class TestDefaultKeyclaimConfig:
    """Test cases for DefaultKeyclaimConfig"""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        monkeypatch.delenv("CLAIM_SECRET", raising=False)
        monkeypatch.delenv("KEYCLAIM_DEFAULT_REWARD", raising=False)

    def test_explicit_values(self):
        config = DefaultKeyclaimConfig(claim_secret="s3cret", default_reward={"gems": 2})

        assert isinstance(config, KeyclaimConfig)
        assert config.get_claim_secret() == "s3cret"
        assert config.get_default_reward() == {"gems": 2}

    def test_defaults(self):
        config = DefaultKeyclaimConfig()

        assert config.get_claim_secret() == DEFAULT_CLAIM_SECRET
        assert config.get_default_reward() == {"coins": 100}

    def test_default_secret_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            DefaultKeyclaimConfig()

        assert "default claim secret" in caplog.text

    def test_configured_secret_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            DefaultKeyclaimConfig(claim_secret="s3cret")

        assert "default claim secret" not in caplog.text

    def test_values_from_environment(self, monkeypatch):
        monkeypatch.setenv("CLAIM_SECRET", "env-secret")
        monkeypatch.setenv("KEYCLAIM_DEFAULT_REWARD", '{"coins": 250, "badge": "gold"}')

        config = DefaultKeyclaimConfig()

        assert config.get_claim_secret() == "env-secret"
        assert config.get_default_reward() == {"coins": 250, "badge": "gold"}

    def test_reward_must_be_object(self, monkeypatch):
        monkeypatch.setenv("KEYCLAIM_DEFAULT_REWARD", "[1, 2]")

        with pytest.raises(ValueError):
            DefaultKeyclaimConfig()

    def test_reward_must_be_json(self, monkeypatch):
        monkeypatch.setenv("KEYCLAIM_DEFAULT_REWARD", "coins=100")

        with pytest.raises(ValueError):
            DefaultKeyclaimConfig()

    def test_default_reward_instances_are_separate(self):
        config1 = DefaultKeyclaimConfig(claim_secret="a")
        config2 = DefaultKeyclaimConfig(claim_secret="b")

        assert config1.default_reward is not config2.default_reward

    def test_dataclass_behavior(self):
        config1 = DefaultKeyclaimConfig(claim_secret="a", default_reward={"coins": 1})
        config2 = DefaultKeyclaimConfig(claim_secret="a", default_reward={"coins": 1})

        assert config1 == config2
        assert "DefaultKeyclaimConfig" in repr(config1)
