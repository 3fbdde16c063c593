"""Tests for ExchangeConfig."""

import pytest

from cpamm.config import DEFAULT_CONFIG, ExchangeConfig


class TestExchangeConfig:
    """Tests for configuration defaults, validation and env loading."""

    def test_defaults(self):
        assert DEFAULT_CONFIG.fee_percent == 1
        assert DEFAULT_CONFIG.fee_multiplier == 99
        assert DEFAULT_CONFIG.share_symbol_suffix == "_LP"
        assert DEFAULT_CONFIG.base_symbol == "Eth"
        assert DEFAULT_CONFIG.log_level == "INFO"

    @pytest.mark.parametrize("fee", [-1, 100, 150])
    def test_rejects_fee(self, fee):
        with pytest.raises(ValueError, match="fee_percent"):
            ExchangeConfig(fee_percent=fee)

    def test_zero_fee(self):
        assert ExchangeConfig(fee_percent=0).fee_multiplier == 100

    def test_from_env_defaults(self, monkeypatch):
        for name in (
            "CPAMM_FEE_PERCENT",
            "CPAMM_SHARE_SYMBOL_SUFFIX",
            "CPAMM_BASE_SYMBOL",
            "CPAMM_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        assert ExchangeConfig.from_env() == DEFAULT_CONFIG

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("CPAMM_FEE_PERCENT", "3")
        monkeypatch.setenv("CPAMM_SHARE_SYMBOL_SUFFIX", "-UNI")
        monkeypatch.setenv("CPAMM_BASE_SYMBOL", "ETH")
        monkeypatch.setenv("CPAMM_LOG_LEVEL", "debug")

        config = ExchangeConfig.from_env()

        assert config.fee_multiplier == 97
        assert config.share_symbol_suffix == "-UNI"
        assert config.base_symbol == "ETH"
        assert config.log_level == "DEBUG"

    def test_from_env_invalid_fee(self, monkeypatch):
        monkeypatch.setenv("CPAMM_FEE_PERCENT", "lots")
        with pytest.raises(ValueError):
            ExchangeConfig.from_env()
