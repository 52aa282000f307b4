"""Tests for config module."""

import argparse

import pytest

from chatlog_translator.config import (
    Config,
    _parse_bool,
    build_config,
    load_config,
    load_yaml_config,
)
from chatlog_translator.errors import ConfigurationError
from chatlog_translator.main import build_cli_parser
from chatlog_translator.papago import PAPAGO_ENDPOINT

BASE_ENV = {"LOG_DIRECTORY": "/logs", "TARGET_CHATCODES": "003D"}


class TestParseBool:
    def test_true_values(self):
        for val in ("true", "True", "TRUE", "1", "yes", " yes ", True):
            assert _parse_bool(val) is True

    def test_false_values(self):
        for val in ("false", "0", "no", "", "random", False):
            assert _parse_bool(val) is False


class TestConfigDefaults:
    def test_defaults(self):
        cfg = Config()
        assert cfg.secret_file == "secret.json"
        assert cfg.source_language == "ja"
        assert cfg.target_language == "ko"
        assert cfg.translate_actor_name is False
        assert cfg.endpoint == PAPAGO_ENDPOINT
        assert cfg.request_timeout == 10.0
        assert cfg.exhausted_policy == "halt"
        assert cfg.target_codes == ()

    def test_frozen(self):
        cfg = Config()
        with pytest.raises(AttributeError):
            cfg.source_language = "en"


class TestLoadConfigEnv:
    def test_minimal_env(self):
        cfg = load_config(environ=BASE_ENV)
        assert cfg.log_directory == "/logs"
        assert cfg.target_codes == ("003D",)
        assert cfg.source_language == "ja"

    def test_env_overrides(self):
        env = dict(BASE_ENV, **{
            "TARGET_CHATCODES": "003D, SAY,party",
            "SECRET_FILE_NAME": "keys.json",
            "SOURCE_LANGUAGE": "en",
            "TARGET_LANGUAGE": "ja",
            "TRANSLATE_ACTOR_NAME": "true",
            "REQUEST_TIMEOUT": "5",
            "POLL_INTERVAL": "0.25",
            "EXHAUSTED_POLICY": "Passthrough",
            "LOG_LEVEL": "debug",
        })
        cfg = load_config(environ=env)
        assert cfg.target_codes == ("003D", "000A", "000E")
        assert cfg.secret_file == "keys.json"
        assert cfg.source_language == "en"
        assert cfg.target_language == "ja"
        assert cfg.translate_actor_name is True
        assert cfg.request_timeout == 5.0
        assert cfg.poll_interval == 0.25
        assert cfg.exhausted_policy == "passthrough"
        assert cfg.log_level == "DEBUG"

    def test_log_file_alone_is_enough(self):
        cfg = load_config(environ={"LOG_FILE": "/logs/a.log", "TARGET_CHATCODES": "003D"})
        assert cfg.log_file == "/logs/a.log"


class TestLoadConfigPriority:
    def test_yaml_then_env_then_cli(self):
        yaml_data = {
            "log_directory": "/yaml",
            "target_codes": ["000A"],
            "source_language": "en",
            "target_language": "fr",
        }
        env = {"SOURCE_LANGUAGE": "ja", "TARGET_LANGUAGE": "de"}
        args = build_cli_parser().parse_args(["--target-language", "ko"])
        cfg = load_config(args, yaml_data, environ=env)
        assert cfg.log_directory == "/yaml"
        assert cfg.target_codes == ("000A",)
        assert cfg.source_language == "ja"
        assert cfg.target_language == "ko"

    def test_cli_flags(self):
        args = build_cli_parser().parse_args([
            "--log-file", "/tmp/x.log",
            "--target-codes", "SAY,003D",
            "--translate-actor-name",
            "--exhausted-policy", "passthrough",
        ])
        cfg = load_config(args, {}, environ={})
        assert cfg.log_file == "/tmp/x.log"
        assert cfg.target_codes == ("000A", "003D")
        assert cfg.translate_actor_name is True
        assert cfg.exhausted_policy == "passthrough"

    def test_unset_cli_flags_do_not_override(self):
        args = argparse.Namespace(translate_actor_name=None, source_language=None)
        cfg = load_config(args, {}, environ=dict(BASE_ENV, TRANSLATE_ACTOR_NAME="1"))
        assert cfg.translate_actor_name is True

    def test_unknown_yaml_key_ignored(self):
        cfg = load_config(None, {"colour": "blue", "log_directory": "/l", "target_codes": "003D"},
                          environ={})
        assert cfg.log_directory == "/l"


class TestValidation:
    def test_no_targets(self):
        with pytest.raises(ConfigurationError, match="target"):
            load_config(environ={"LOG_DIRECTORY": "/logs"})

    def test_no_log_location(self):
        with pytest.raises(ConfigurationError, match="log directory"):
            load_config(environ={"TARGET_CHATCODES": "003D"})

    def test_unknown_channel(self):
        with pytest.raises(ConfigurationError):
            load_config(environ=dict(BASE_ENV, TARGET_CHATCODES="GUILD"))

    def test_bad_number(self):
        with pytest.raises(ConfigurationError, match="request_timeout"):
            load_config(environ=dict(BASE_ENV, REQUEST_TIMEOUT="soon"))

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigurationError):
            build_config({"log_directory": "/l", "target_codes": "003D", "request_timeout": 0})

    def test_bad_policy(self):
        with pytest.raises(ConfigurationError, match="exhausted_policy"):
            load_config(environ=dict(BASE_ENV, EXHAUSTED_POLICY="retry"))

    def test_bad_log_level(self):
        with pytest.raises(ConfigurationError):
            load_config(environ=dict(BASE_ENV, LOG_LEVEL="LOUD"))

    def test_empty_language(self):
        with pytest.raises(ConfigurationError):
            load_config(environ=dict(BASE_ENV, SOURCE_LANGUAGE=" "))


class TestLoadYamlConfig:
    def test_no_path(self):
        assert load_yaml_config(None) == {}

    def test_missing_file(self, tmp_path):
        assert load_yaml_config(str(tmp_path / "missing.yaml")) == {}

    def test_loads_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text('target_codes: ["003D", "SAY"]\ntranslate_actor_name: true\n')
        data = load_yaml_config(str(path))
        assert data == {"target_codes": ["003D", "SAY"], "translate_actor_name": True}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("target_codes: [003D\n")
        with pytest.raises(ConfigurationError):
            load_yaml_config(str(path))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            load_yaml_config(str(path))
