# gcloud_common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the provisioning tool.

This module determines whether the process runs with elevated privileges,
which account the SDK is provisioned for, and where it is installed. The
result is captured once per run in an immutable InstallContext.
"""

import logging
import os
import pwd
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from gcloud_common.command_utils import get_symbols, log_feature
from gcloud_setup.config_models import FeatureSettings

module_logger = logging.getLogger(__name__)


class InstallMode(str, Enum):
    """Deployment mode of a provisioning run."""

    PRIVILEGED_INSTALL = "privileged"
    USER_INSTALL = "user"


class InstallContext(BaseModel):
    """Where and for whom the SDK is provisioned."""

    model_config = ConfigDict(frozen=True)

    mode: InstallMode
    target_user: str
    target_home: Path
    install_dir: Path

    @property
    def is_privileged(self) -> bool:
        return self.mode is InstallMode.PRIVILEGED_INSTALL

    @property
    def gcloud_path(self) -> Path:
        return self.install_dir / "bin" / "gcloud"


def get_install_mode() -> InstallMode:
    """Returns PRIVILEGED_INSTALL when running with effective uid 0."""
    if os.geteuid() == 0:
        return InstallMode.PRIVILEGED_INSTALL
    return InstallMode.USER_INSTALL


def get_current_user_name() -> str:
    """Returns the account name of the effective user."""
    return pwd.getpwuid(os.geteuid()).pw_name


def resolve_target_user(
    settings: FeatureSettings,
    current_logger: Optional[logging.Logger] = None,
) -> Tuple[str, Path]:
    """
    Resolves the account that should own the SDK installation and its home.

    The hint is the configured target user, falling back to the default
    account name. If no such account exists the effective user is used. The
    home directory comes from the account database, falling back to $HOME.

    Returns:
        A (user name, home directory) tuple.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(settings)
    hint = (settings.target_user or "").strip() or settings.default_target_user

    try:
        entry = pwd.getpwnam(hint)
        target_user = hint
    except KeyError:
        target_user = get_current_user_name()
        log_feature(
            f"{symbols.get('info', 'ℹ️')} User '{hint}' does not exist; provisioning for '{target_user}' instead.",
            "info",
            logger_to_use,
            settings,
        )
        try:
            entry = pwd.getpwnam(target_user)
        except KeyError:
            entry = None

    home = entry.pw_dir if entry is not None and entry.pw_dir else ""
    if not home:
        home = os.environ.get("HOME", "") or str(Path.home())
    return target_user, Path(home)


def resolve_install_context(
    settings: FeatureSettings,
    current_logger: Optional[logging.Logger] = None,
) -> InstallContext:
    """
    Resolves the install mode, target user and install directory once for
    the whole run.

    As root the SDK goes into the target user's home so it is usable without
    sudo. Otherwise it goes into the current user's home.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(settings)

    mode = get_install_mode()
    target_user, target_home = resolve_target_user(settings, logger_to_use)

    if mode is InstallMode.PRIVILEGED_INSTALL:
        install_root = target_home
    else:
        install_root = Path(os.environ.get("HOME", "") or str(Path.home()))

    install_context = InstallContext(
        mode=mode,
        target_user=target_user,
        target_home=target_home,
        install_dir=install_root / settings.install_dir_name,
    )
    log_feature(
        f"{symbols.get('info', 'ℹ️')} Install mode: {mode.value}, target user: {target_user}, "
        f"install directory: {install_context.install_dir}",
        "info",
        logger_to_use,
        settings,
    )
    return install_context
