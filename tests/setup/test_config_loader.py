# -*- coding: utf-8 -*-
"""
Tests for the config_loader module.
"""

import argparse
import os

import pytest
from pydantic import ValidationError

from gcloud_setup.config_loader import (
    _deep_update,
    load_feature_settings,
    resolve_env_option,
)


def _cli(**overrides):
    values = {
        "verbose": False,
        "config_file": None,
        "additional_components": None,
        "target_user": None,
        "skip_sdk": False,
        "log_format": None,
        "command": "install",
    }
    values.update(overrides)
    return argparse.Namespace(**values)


@pytest.fixture(autouse=True)
def clean_feature_env(monkeypatch):
    """Keeps GCLOUD_FEATURE_* variables of the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("GCLOUD_FEATURE_"):
            monkeypatch.delenv(name)


@pytest.mark.parametrize(
    "environ, expected",
    [
        ({"ADDITIONALCOMPONENTS": "a", "ADDITIONAL_COMPONENTS": "b"}, "a"),
        ({"ADDITIONAL_COMPONENTS": "b", "additionalComponents": "c"}, "b"),
        ({"additionalComponents": "c"}, "c"),
        ({"ADDITIONALCOMPONENTS": "", "ADDITIONAL_COMPONENTS": "b"}, "b"),
        ({"ADDITIONALCOMPONENTS": ""}, None),
        ({}, None),
    ],
)
def test_resolve_env_option_priority(environ, expected):
    names = ("ADDITIONALCOMPONENTS", "ADDITIONAL_COMPONENTS", "additionalComponents")
    assert resolve_env_option(environ, names) == expected


def test_deep_update_merges_nested_and_ignores_none():
    source = {"a": 1, "nested": {"x": 1, "y": 2}}
    result = _deep_update(source, {"a": None, "nested": {"y": 3}, "b": None})
    assert result == {"a": 1, "nested": {"x": 1, "y": 3}, "b": None}


def test_defaults_without_any_source():
    settings = load_feature_settings(environ={})

    assert settings.additional_components == ""
    assert settings.target_user is None
    assert settings.default_target_user == "vscode"
    assert settings.skip_sdk is False
    assert settings.log_level == "INFO"


def test_feature_env_prefix(monkeypatch):
    monkeypatch.setenv("GCLOUD_FEATURE_INSTALL_DIR_NAME", "gcloud")
    monkeypatch.setenv("GCLOUD_FEATURE_DOWNLOAD_TIMEOUT", "90")

    settings = load_feature_settings(environ={})

    assert settings.install_dir_name == "gcloud"
    assert settings.download_timeout == 90.0


def test_option_spellings(mock_logger):
    settings = load_feature_settings(
        environ={
            "ADDITIONAL_COMPONENTS": "beta,alpha",
            "additionalComponents": "ignored",
            "_REMOTE_USER": "dev",
        },
        current_logger=mock_logger,
    )

    assert settings.additional_components == "beta,alpha"
    assert settings.target_user == "dev"


def test_username_wins_over_remote_user():
    settings = load_feature_settings(
        environ={"USERNAME": "alice", "_REMOTE_USER": "bob"}
    )
    assert settings.target_user == "alice"


def test_blank_username_is_ignored():
    settings = load_feature_settings(environ={"USERNAME": "  ", "_REMOTE_USER": "bob"})
    assert settings.target_user is None


def test_yaml_file_then_env_then_cli(tmp_path, mock_logger):
    config_file = tmp_path / "feature.yaml"
    config_file.write_text(
        "additional_components: from-yaml\n"
        "install_dir_name: sdk-from-yaml\n"
        "log_format: json\n"
    )

    from_yaml = load_feature_settings(
        config_file_path=config_file, environ={}, current_logger=mock_logger
    )
    assert from_yaml.additional_components == "from-yaml"
    assert from_yaml.install_dir_name == "sdk-from-yaml"
    assert from_yaml.log_format == "json"

    from_env = load_feature_settings(
        config_file_path=config_file,
        environ={"ADDITIONALCOMPONENTS": "from-env"},
        current_logger=mock_logger,
    )
    assert from_env.additional_components == "from-env"

    from_cli = load_feature_settings(
        cli_args=_cli(additional_components="from-cli", skip_sdk=True, verbose=True),
        config_file_path=config_file,
        environ={"ADDITIONALCOMPONENTS": "from-env"},
        current_logger=mock_logger,
    )
    assert from_cli.additional_components == "from-cli"
    assert from_cli.skip_sdk is True
    assert from_cli.log_level == "DEBUG"
    assert from_cli.install_dir_name == "sdk-from-yaml"


def test_missing_yaml_file_uses_defaults(tmp_path, mock_logger):
    settings = load_feature_settings(
        config_file_path=tmp_path / "missing.yaml", environ={}, current_logger=mock_logger
    )
    assert settings.install_dir_name == "google-cloud-sdk"
    mock_logger.info.assert_any_call(
        f"Configuration file '{tmp_path / 'missing.yaml'}' not found. "
        "Using defaults, environment variables, and CLI args."
    )


@pytest.mark.parametrize("content", ["key: [unclosed\n", "- just\n- a list\n"])
def test_unusable_yaml_is_ignored(tmp_path, mock_logger, content):
    config_file = tmp_path / "feature.yaml"
    config_file.write_text(content)

    settings = load_feature_settings(
        config_file_path=config_file, environ={}, current_logger=mock_logger
    )

    assert settings.additional_components == ""
    mock_logger.warning.assert_called_once()


def test_unset_cli_flags_do_not_override(tmp_path):
    config_file = tmp_path / "feature.yaml"
    config_file.write_text("skip_sdk: true\n")

    settings = load_feature_settings(
        cli_args=_cli(), config_file_path=config_file, environ={}
    )

    assert settings.skip_sdk is True


def test_invalid_log_format_is_rejected(tmp_path):
    config_file = tmp_path / "feature.yaml"
    config_file.write_text("log_format: xml\n")

    with pytest.raises(ValidationError):
        load_feature_settings(config_file_path=config_file, environ={})
