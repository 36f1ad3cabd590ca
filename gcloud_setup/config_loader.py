# gcloud_setup/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the provisioning tool.

Handles loading settings from Pydantic model defaults, an optional YAML
file, environment variables, and command-line arguments, applying a
specific order of precedence:
1. Pydantic Model Defaults
2. GCLOUD_FEATURE_* Environment Variables (via Pydantic's BaseSettings)
3. YAML Configuration File
4. Dev-container option variables (ADDITIONALCOMPONENTS, USERNAME, ...)
5. Command-Line Arguments
"""

import argparse
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import yaml

from .config_models import FeatureSettings

module_logger = logging.getLogger(__name__)

# Accepted spellings of each option, highest priority first. The dev-container
# feature system may pass an option under any of these names.
OPTION_ENV_NAMES: Dict[str, Sequence[str]] = {
    "additional_components": (
        "ADDITIONALCOMPONENTS",
        "ADDITIONAL_COMPONENTS",
        "additionalComponents",
    ),
    "target_user": ("USERNAME", "_REMOTE_USER"),
}

# argparse destination -> settings field
CLI_FIELD_MAP: Dict[str, str] = {
    "additional_components": "additional_components",
    "target_user": "target_user",
    "skip_sdk": "skip_sdk",
    "log_format": "log_format",
}


def resolve_env_option(
    environ: Mapping[str, str], names: Sequence[str]
) -> Optional[str]:
    """
    Returns the value of the first name in `names` that is set to a
    non-empty value in `environ`, or None if there is none.

    An empty variable counts as unset, so it falls through to the next
    spelling.
    """
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates `source` with values from `overrides`. Nested
    dictionaries are merged, None values in `overrides` never replace an
    existing value.

    Returns:
        The updated `source` dictionary.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def _load_yaml_file(
    config_file_path: Union[str, Path], logger_to_use: logging.Logger
) -> Dict[str, Any]:
    yaml_config_path = Path(config_file_path)
    if not yaml_config_path.is_file():
        logger_to_use.info(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}
    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except IOError as e:
        logger_to_use.warning(
            f"Could not read config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}
    logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def load_feature_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
    current_logger: Optional[logging.Logger] = None,
) -> FeatureSettings:
    """
    Loads the feature settings by layering every configuration source in
    priority order (see module docstring).

    Args:
        cli_args: Parsed command-line arguments (from argparse). Attributes
            that are None are treated as "not given".
        config_file_path: Optional path to a YAML configuration file.
        environ: Environment mapping used for the dev-container option
            spellings. Defaults to os.environ.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of FeatureSettings with the fully resolved configuration.
    """
    logger_to_use = current_logger if current_logger else module_logger
    env = os.environ if environ is None else environ

    # Model defaults < GCLOUD_FEATURE_* variables
    current_values_dict = FeatureSettings().model_dump()

    if config_file_path:
        current_values_dict = _deep_update(
            current_values_dict, _load_yaml_file(config_file_path, logger_to_use)
        )

    env_option_values: Dict[str, Any] = {}
    for field_name, names in OPTION_ENV_NAMES.items():
        value = resolve_env_option(env, names)
        if value is not None:
            env_option_values[field_name] = value
    # A blank user hint carries no information.
    if not (env_option_values.get("target_user") or "").strip():
        env_option_values.pop("target_user", None)
    current_values_dict = _deep_update(current_values_dict, env_option_values)

    if cli_args:
        mapped_cli_values: Dict[str, Any] = {}
        for cli_key, cli_value in vars(cli_args).items():
            if cli_value is None or cli_key not in CLI_FIELD_MAP:
                continue
            # store_true flags only override when actually set.
            if cli_value is False:
                continue
            mapped_cli_values[CLI_FIELD_MAP[cli_key]] = cli_value
        if getattr(cli_args, "verbose", False):
            mapped_cli_values["log_level"] = "DEBUG"
        current_values_dict = _deep_update(
            current_values_dict, mapped_cli_values
        )

    settings = FeatureSettings(**current_values_dict)
    logger_to_use.debug(
        f"Resolved settings: {settings.model_dump(exclude={'symbols'})}"
    )
    return settings
