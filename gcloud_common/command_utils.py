# gcloud_common/command_utils.py
# -*- coding: utf-8 -*-
"""
Running external programs (apt-get, chown, install.sh, gcloud) and logging
what they did.

Every helper accepts an optional logger and the run's FeatureSettings, which
supply the symbols prefixed to log lines.
"""

import logging
import os
import shlex
import shutil
import subprocess
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Union

from gcloud_setup.config_models import SYMBOLS_DEFAULT, FeatureSettings

if TYPE_CHECKING:
    from gcloud_common.system_utils import InstallContext

module_logger = logging.getLogger(__name__)

_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


def get_symbols(settings: Optional[FeatureSettings]) -> Dict[str, str]:
    """Returns the settings' log symbols, or the defaults when unavailable."""
    if settings is not None and settings.symbols:
        return settings.symbols
    return SYMBOLS_DEFAULT


def log_feature(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    settings: Optional[FeatureSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a provisioning message. Levels other than debug, info, warning,
    error and critical (e.g. "success") are logged at info.
    """
    logger_to_use = current_logger if current_logger else module_logger
    log_method = getattr(logger_to_use, level if level in _LOG_LEVELS else "info")
    log_method(message, exc_info=exc_info)


def _format_command(command: Sequence[str]) -> str:
    return shlex.join(str(part) for part in command)


def _log_streams(
    stdout: Optional[str],
    stderr: Optional[str],
    level: str,
    logger: logging.Logger,
    settings: Optional[FeatureSettings],
) -> None:
    for label, stream in (("stdout", stdout), ("stderr", stderr)):
        if isinstance(stream, str) and stream.strip():
            log_feature(f"   {label}: {stream.strip()}", level, logger, settings)


def _get_target_user_prefix(install_context: "InstallContext") -> List[str]:
    """
    `runuser -u <user> --` when running as root for a non-root target user,
    so files the SDK writes belong to that user. Empty otherwise.
    """
    if install_context.is_privileged and install_context.target_user != "root":
        return ["runuser", "-u", install_context.target_user, "--"]
    return []


def run_command(
    command: Sequence[str],
    settings: Optional[FeatureSettings],
    check: bool = True,
    capture_output: bool = False,
    capture_stderr: bool = False,
    current_logger: Optional[logging.Logger] = None,
    env: Optional[Dict[str, str]] = None,
    failure_level: str = "error",
) -> subprocess.CompletedProcess:
    """
    Runs a command, logging the command line and any captured output.

    Args:
        command: The command as a list of arguments.
        settings: Settings of the current run, for log symbols.
        check: Raise CalledProcessError on a non-zero exit code.
        capture_output: Capture stdout and stderr.
        capture_stderr: Capture only stderr; stdout still goes to the
            console.
        current_logger: Optional logger instance.
        env: Environment for the command. Defaults to the inherited one.
        failure_level: Log level of the failure messages.

    Returns:
        The completed process.

    Raises:
        subprocess.CalledProcessError: On a non-zero exit code when `check`
            is set. Captured output is logged first.
        FileNotFoundError: If the executable does not exist.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(settings)
    if failure_level == "error":
        failure_symbol = symbols.get("error", "❌")
    else:
        failure_symbol = symbols.get("warning", "⚠️")

    log_feature(
        f"{symbols.get('gear', '⚙️')} Executing: {_format_command(command)}",
        "info",
        logger_to_use,
        settings,
    )
    try:
        result = subprocess.run(
            list(command),
            check=check,
            stdout=subprocess.PIPE if capture_output else None,
            stderr=subprocess.PIPE if capture_output or capture_stderr else None,
            text=True,
            env=env,
        )
    except subprocess.CalledProcessError as e:
        log_feature(
            f"{failure_symbol} Command `{_format_command(e.cmd)}` failed (rc {e.returncode}).",
            failure_level,
            logger_to_use,
            settings,
        )
        _log_streams(e.stdout, e.stderr, failure_level, logger_to_use, settings)
        raise
    except FileNotFoundError as e:
        log_feature(
            f"{failure_symbol} Command not found: {e.filename}. Ensure it's installed and in PATH.",
            failure_level,
            logger_to_use,
            settings,
        )
        raise

    _log_streams(result.stdout, result.stderr, "debug", logger_to_use, settings)
    return result


def run_as_target_user(
    command: Sequence[str],
    install_context: "InstallContext",
    settings: Optional[FeatureSettings],
    check: bool = True,
    capture_output: bool = False,
    capture_stderr: bool = False,
    current_logger: Optional[logging.Logger] = None,
    env: Optional[Dict[str, str]] = None,
    failure_level: str = "error",
) -> subprocess.CompletedProcess:
    """
    Runs `command` as the target user of the install context. See
    `run_command` for the arguments. runuser keeps the caller's environment,
    so `env` applies to the target user as well.
    """
    prefix = _get_target_user_prefix(install_context)
    return run_command(
        prefix + list(command),
        settings,
        check=check,
        capture_output=capture_output,
        capture_stderr=capture_stderr,
        current_logger=current_logger,
        env=env,
        failure_level=failure_level,
    )


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.

    Parameters:
        command_name (str): The name of the command to check for existence.

    Returns:
        bool: True if the command is found in the system's PATH, False otherwise.
    """
    return shutil.which(command_name) is not None


def is_executable_file(path: Union[str, "os.PathLike[str]"]) -> bool:
    """Returns True if `path` is a regular file the current user may execute."""
    return os.path.isfile(path) and os.access(path, os.X_OK)
