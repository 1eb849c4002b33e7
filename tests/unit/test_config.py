"""Unit tests for configuration management."""

import pytest
from pathlib import Path
from unittest.mock import patch

import yaml

from alp_app.config.defaults import get_default_config
from alp_app.config.loader import ConfigLoader, build_config
from alp_app.config.validation import ConfigValidator
from alp_app.errors import InputInvalid
from alp_app.logging import configure_from_params

CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()
        assert config.ledger.currency_symbol == "ETH"
        assert config.ledger.currency_decimals == 18
        assert config.timeouts.confirmation_timeout_seconds == 120.0
        assert config.catalog.max_concurrent_reads == 8
        assert config.logging.level == "INFO"


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self, tmp_path: Path) -> None:
        loader = ConfigLoader.create(tmp_path)
        assert loader.config_dir == tmp_path

    def test_merge_config_defaults_only(self, tmp_path: Path) -> None:
        """Without a file or overrides the defaults come through."""
        config = ConfigLoader.create(tmp_path).merge_config()

        assert config["ledger"]["currency_decimals"] == 18
        assert config["timeouts"]["read_timeout_seconds"] == 30.0

    def test_file_overrides_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "dashboard.yaml").write_text(yaml.safe_dump({
            "ledger": {"contract_address": CONTRACT},
            "catalog": {"max_concurrent_reads": 2},
        }))

        config = ConfigLoader.create(tmp_path).merge_config()

        assert config["ledger"]["contract_address"] == CONTRACT
        assert config["catalog"]["max_concurrent_reads"] == 2
        # Other defaults should remain
        assert config["ledger"]["currency_symbol"] == "ETH"

    def test_explicit_overrides_win(self, tmp_path: Path) -> None:
        (tmp_path / "dashboard.yaml").write_text(yaml.safe_dump({
            "timeouts": {"confirmation_timeout_seconds": 60},
        }))

        config = ConfigLoader.create(tmp_path).merge_config({
            "timeouts": {"confirmation_timeout_seconds": 5},
        })

        assert config["timeouts"]["confirmation_timeout_seconds"] == 5

    def test_empty_file_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "dashboard.yaml").write_text("")
        config = ConfigLoader.create(tmp_path).merge_config()
        assert config["ledger"]["currency_decimals"] == 18

    def test_load_builds_typed_config(self, tmp_path: Path) -> None:
        config = ConfigLoader.create(tmp_path).load({
            "ledger": {"contract_address": CONTRACT, "currency_symbol": "POL"},
            "timeouts": {"confirmation_timeout_seconds": None},
        })

        assert config.ledger.contract_address == CONTRACT
        assert config.ledger.currency_symbol == "POL"
        assert config.timeouts.confirmation_timeout_seconds is None

    def test_load_rejects_invalid_values(self, tmp_path: Path) -> None:
        with pytest.raises(InputInvalid) as exc_info:
            ConfigLoader.create(tmp_path).load({"ledger": {"contract_address": "0x123"}})
        assert exc_info.value.field == "contract_address"

    def test_build_config_partial_sections(self) -> None:
        config = build_config({"catalog": {"max_concurrent_reads": 1}})
        assert config.catalog.max_concurrent_reads == 1
        assert config.ledger.currency_decimals == 18


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_config(self) -> None:
        config = ConfigLoader.create(Path("/nonexistent")).merge_config()
        assert ConfigValidator.validate_config(config) == []

    def test_invalid_contract_address(self) -> None:
        errors = ConfigValidator.validate_ledger_params({"contract_address": "not-an-address"})
        assert len(errors) == 1
        assert errors[0].field == "contract_address"

    @pytest.mark.parametrize("decimals", [-1, 78, 1.5, True])
    def test_invalid_decimals(self, decimals) -> None:
        errors = ConfigValidator.validate_ledger_params({"currency_decimals": decimals})
        assert [e.field for e in errors] == ["currency_decimals"]

    def test_invalid_timeouts(self) -> None:
        errors = ConfigValidator.validate_timeout_params({
            "confirmation_timeout_seconds": 0,
            "read_timeout_seconds": -1,
        })
        assert {e.field for e in errors} == {"confirmation_timeout_seconds", "read_timeout_seconds"}

    def test_null_confirmation_timeout_allowed(self) -> None:
        assert ConfigValidator.validate_timeout_params({"confirmation_timeout_seconds": None}) == []

    def test_invalid_concurrency(self) -> None:
        errors = ConfigValidator.validate_catalog_params({"max_concurrent_reads": 0})
        assert errors[0].field == "max_concurrent_reads"

    def test_invalid_log_level(self) -> None:
        errors = ConfigValidator.validate_logging_params({"level": "VERBOSE"})
        assert errors[0].field == "level"

    def test_unknown_section_and_key(self) -> None:
        errors = ConfigValidator.validate_config({
            "metrics": {},
            "ledger": {"rpc_url": "http://localhost:8545"},
        })
        assert {e.field for e in errors} == {"metrics", "ledger.rpc_url"}


class TestLoggingSection:
    """The logging section drives logging setup."""

    def test_file_level_applied(self, tmp_path: Path) -> None:
        (tmp_path / "dashboard.yaml").write_text(yaml.safe_dump({
            "logging": {"level": "DEBUG", "format_json": True},
        }))
        config = ConfigLoader.create(tmp_path).load()

        with patch("alp_app.logging.config.configure_logging") as configure:
            configure_from_params(config.logging)

        configure.assert_called_once_with(level="DEBUG", format_json=True)
