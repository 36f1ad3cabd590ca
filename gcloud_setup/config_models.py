# gcloud_setup/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for the provisioning configuration.

This module defines the structured settings for the Google Cloud SDK
dev-container feature, including defaults, type annotations, and
descriptions. It utilizes Pydantic for data validation and settings
management.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
SDK_DOWNLOAD_URL_DEFAULT: str = (
    "https://dl.google.com/dl/cloudsdk/channels/rapid/downloads/"
    "google-cloud-cli-linux-x86_64.tar.gz"
)
SDK_ARCHIVE_NAME_DEFAULT: str = "google-cloud-cli-linux-x86_64.tar.gz"
INSTALL_DIR_NAME_DEFAULT: str = "google-cloud-sdk"
DEFAULT_TARGET_USER: str = "vscode"
PROFILE_SNIPPET_PATH_DEFAULT: str = "/etc/profile.d/google-cloud-sdk.sh"

# Packages installed through apt when running as root. util-linux provides
# runuser, which is used to run the SDK installer as the target user.
PREREQUISITE_PACKAGES_DEFAULT: List[str] = ["ca-certificates", "util-linux"]
REQUIRED_COMMANDS_DEFAULT: List[str] = ["sh"]
INSTALLER_ARGS_DEFAULT: List[str] = [
    "--quiet",
    "--usage-reporting",
    "false",
    "--path-update",
    "false",
]

LOG_FORMATS = ("text", "json")

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅", "error": "❌", "warning": "⚠️", "info": "ℹ️",
    "step": "➡️", "gear": "⚙️", "package": "📦", "rocket": "🚀",
    "sparkles": "✨", "critical": "🔥", "debug": "🐛",
}


class FeatureSettings(BaseSettings):
    """Settings for provisioning the Google Cloud SDK in a dev container."""
    model_config = SettingsConfigDict(
        env_prefix="GCLOUD_FEATURE_",
        extra="ignore",
    )

    additional_components: str = Field(
        default="",
        description="Comma-separated list of gcloud component ids to install (e.g. 'beta, cloud-run-proxy').",
    )
    target_user: Optional[str] = Field(
        default=None,
        description="Account that should own the SDK when provisioning as root.",
    )
    default_target_user: str = Field(
        default=DEFAULT_TARGET_USER,
        description="Account used when no target user hint is available.",
    )

    sdk_download_url: Union[HttpUrl, str] = Field(
        default=SDK_DOWNLOAD_URL_DEFAULT,
        description="URL of the Google Cloud CLI archive (64-bit Linux).",
    )
    download_timeout: Optional[float] = Field(
        default=None,
        description="Timeout in seconds for the SDK download. None waits indefinitely.",
    )
    install_dir_name: str = Field(
        default=INSTALL_DIR_NAME_DEFAULT,
        description="Directory name of the SDK tree inside the target user's home.",
    )
    profile_snippet_path: Path = Field(
        default=Path(PROFILE_SNIPPET_PATH_DEFAULT),
        description="Profile script written when provisioning as root, adding the SDK to PATH.",
    )
    prerequisite_packages: List[str] = Field(
        default_factory=lambda: list(PREREQUISITE_PACKAGES_DEFAULT),
        description="apt packages installed before the SDK download when running as root.",
    )
    required_commands: List[str] = Field(
        default_factory=lambda: list(REQUIRED_COMMANDS_DEFAULT),
        description="Commands that must already exist when running without root.",
    )
    installer_args: List[str] = Field(
        default_factory=lambda: list(INSTALLER_ARGS_DEFAULT),
        description="Arguments passed to the SDK's install.sh.",
    )
    skip_sdk: bool = Field(
        default=False,
        description="Do not check for or install the SDK; only manage components.",
    )

    log_level: str = Field(default="INFO", description="Logging level name.")
    log_format: str = Field(default="text", description="Console log format: 'text' or 'json'.")

    # Static symbols, could also be loaded from a separate static config if preferred
    symbols: Dict[str, str] = Field(default_factory=lambda: dict(SYMBOLS_DEFAULT))

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_FORMATS:
            raise ValueError(
                f"log_format must be one of {', '.join(LOG_FORMATS)}"
            )
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()
