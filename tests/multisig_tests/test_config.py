"""
Configuration Testing

Tests configuration loading to verify:
- Defaults are valid
- YAML and JSON files are applied
- MSIG_* environment overrides take precedence
- Invalid configurations fail with ConfigurationError
"""

import json

import pytest

from multisig_vault.core.config import (
    ConfigurationError,
    EngineConfig,
    LoggingConfig,
    WalletConfig,
    _apply_env_variables,
    _parse_env_value,
    load_config,
)


class TestDefaults:
    def test_default_config_is_valid(self):
        config = load_config(environ={})
        assert config.wallet.max_owners == 0
        assert config.logging.level == "INFO"
        assert config.logging.json_format is True
        assert config.logging.log_file is None

    def test_to_dict(self):
        assert EngineConfig().to_dict() == {
            "wallet": {"max_owners": 0},
            "logging": {
                "level": "INFO",
                "log_file": None,
                "environment": "development",
                "json_format": True,
            },
        }


class TestValidation:
    @pytest.mark.parametrize("max_owners", [-1, 1, "ten", True])
    def test_invalid_max_owners(self, max_owners):
        with pytest.raises(ConfigurationError):
            WalletConfig(max_owners=max_owners).validate()

    @pytest.mark.parametrize("max_owners", [0, 2, 100])
    def test_valid_max_owners(self, max_owners):
        WalletConfig(max_owners=max_owners).validate()

    def test_invalid_log_level(self):
        with pytest.raises(ConfigurationError):
            LoggingConfig(level="LOUD").validate()

    def test_log_level_is_normalized(self):
        config = LoggingConfig(level="debug")
        config.validate()
        assert config.level == "DEBUG"

    @pytest.mark.parametrize(
        "options",
        [{"log_file": 2024}, {"environment": 7}, {"json_format": "nah"}, {"json_format": 1}],
    )
    def test_invalid_logging_types(self, options):
        with pytest.raises(ConfigurationError):
            LoggingConfig(**options).validate()


class TestConfigFiles:
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "wallet.yaml"
        path.write_text("wallet:\n  max_owners: 12\nlogging:\n  level: warning\n")

        config = load_config(path, environ={})

        assert config.wallet.max_owners == 12
        assert config.logging.level == "WARNING"

    def test_json_file(self, tmp_path):
        path = tmp_path / "wallet.json"
        path.write_text(json.dumps({"logging": {"json_format": False, "environment": "staging"}}))

        config = load_config(path, environ={})

        assert config.logging.json_format is False
        assert config.logging.environment == "staging"

    def test_empty_yaml_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path, environ={}).wallet.max_owners == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "nope.yaml", environ={})

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("wallet: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Malformed"):
            load_config(path, environ={})

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path, environ={})

    def test_non_mapping_section(self, tmp_path):
        path = tmp_path / "scalar.yaml"
        path.write_text("wallet: 5\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(path, environ={})

    def test_unknown_section(self, tmp_path):
        path = tmp_path / "extra.yaml"
        path.write_text("network:\n  port: 1\n")
        with pytest.raises(ConfigurationError, match="Unknown config section"):
            load_config(path, environ={})

    def test_unknown_option(self, tmp_path):
        path = tmp_path / "typo.yaml"
        path.write_text("wallet:\n  max_ownerz: 3\n")
        with pytest.raises(ConfigurationError, match="max_ownerz"):
            load_config(path, environ={})

    def test_invalid_value_in_file(self, tmp_path):
        path = tmp_path / "invalid.yaml"
        path.write_text("wallet:\n  max_owners: -3\n")
        with pytest.raises(ConfigurationError):
            load_config(path, environ={})


class TestEnvironmentOverrides:
    @pytest.mark.parametrize(
        "raw,expected",
        [("true", True), ("off", False), ("42", 42), ("1.5", 1.5), ("INFO", "INFO")],
    )
    def test_parse_env_value(self, raw, expected):
        assert _parse_env_value(raw) == expected

    def test_env_overrides_file(self, tmp_path):
        path = tmp_path / "wallet.yaml"
        path.write_text("wallet:\n  max_owners: 12\n")

        config = load_config(path, environ={"MSIG_WALLET_MAX_OWNERS": "30"})

        assert config.wallet.max_owners == 30

    def test_multi_word_keys(self):
        config = load_config(
            environ={"MSIG_LOGGING_LOG_FILE": "/tmp/wallet.json", "MSIG_LOGGING_JSON_FORMAT": "no"}
        )
        assert config.logging.log_file == "/tmp/wallet.json"
        assert config.logging.json_format is False

    def test_unrelated_variables_ignored(self):
        result = _apply_env_variables({}, {"PATH": "/bin", "MSIG_X": "1", "MSIG_NETWORK_PORT": "80"})
        assert result == {}

    @pytest.mark.parametrize(
        "environ",
        [
            {"MSIG_WALLET_MAX_OWNERS": "-2"},
            {"MSIG_LOGGING_LOG_FILE": "2024"},
            {"MSIG_LOGGING_JSON_FORMAT": "nah"},
            {"MSIG_LOGGING_ENVIRONMENT": "7"},
        ],
    )
    def test_invalid_env_value(self, environ):
        with pytest.raises(ConfigurationError):
            load_config(environ=environ)

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("MSIG_LOGGING_LEVEL", "error")
        assert load_config().logging.level == "ERROR"
