# gcloud_common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: unpacking the SDK archive, moving the SDK
tree into place, handing it to the target user and writing the profile
snippet that puts it on PATH.
"""

import logging
import shutil
import tarfile
from pathlib import Path
from typing import Optional, Union

from gcloud_common.command_utils import get_symbols, log_feature, run_command
from gcloud_setup.config_models import INSTALL_DIR_NAME_DEFAULT, FeatureSettings

module_logger = logging.getLogger(__name__)

PROFILE_SNIPPET_TEMPLATE = """\
if [ -d "{bin_dir}" ]; then
  case ":$PATH:" in
    *:"{bin_dir}":*) ;;
    *) PATH="{bin_dir}:$PATH" ;;
  esac
fi
"""


def extract_tarball(
    archive_path: Union[str, Path],
    extract_to_dir: Union[str, Path],
    settings: Optional[FeatureSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Extract a gzip-compressed tar archive into a directory.

    Members that would land outside the target directory, absolute links and
    device files are refused.

    Args:
        archive_path: The path to the .tar.gz archive.
        extract_to_dir: The directory to extract into. Created if missing.
        settings: Settings of the current run, for log symbols.
        current_logger: Optional logger instance.

    Returns:
        True if extraction was successful, False otherwise.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(settings)
    tar_path = Path(archive_path)
    extract_path = Path(extract_to_dir)

    if not tar_path.is_file():
        log_feature(
            f"{symbols.get('error', '❌')} Archive not found or is not a file: {tar_path}",
            "error",
            logger_to_use,
            settings,
        )
        return False

    try:
        extract_path.mkdir(parents=True, exist_ok=True)
        with tarfile.open(tar_path, "r:*") as tar:
            tar.extractall(extract_path, filter="data")
    except tarfile.TarError as tar_err:
        log_feature(
            f"{symbols.get('error', '❌')} '{tar_path}' is not a valid tar archive or is corrupted: {tar_err}",
            "error",
            logger_to_use,
            settings,
        )
        return False
    except IOError as io_err:
        log_feature(
            f"{symbols.get('error', '❌')} File I/O error during extraction: {io_err}",
            "error",
            logger_to_use,
            settings,
        )
        return False

    log_feature(
        f"Extracted '{tar_path.name}' to {extract_path}",
        "debug",
        logger_to_use,
        settings,
    )
    return True


def find_sdk_source_dir(
    extract_dir: Union[str, Path],
    name_prefix: str = INSTALL_DIR_NAME_DEFAULT,
) -> Path:
    """
    Returns the first top-level directory of `extract_dir` whose name starts
    with `name_prefix`, or `extract_dir / name_prefix` if there is none.
    """
    base = Path(extract_dir)
    if base.is_dir():
        for candidate in sorted(base.iterdir()):
            if candidate.is_dir() and candidate.name.startswith(name_prefix):
                return candidate
    return base / name_prefix


def move_directory(
    source_dir: Union[str, Path],
    destination_dir: Union[str, Path],
    settings: Optional[FeatureSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Moves `source_dir` to `destination_dir`, replacing whatever is there.

    Raises:
        OSError: If the directory cannot be removed or moved.
    """
    logger_to_use = current_logger if current_logger else module_logger
    destination = Path(destination_dir)

    if destination.is_dir() and not destination.is_symlink():
        log_feature(
            f"Removing existing directory {destination}",
            "debug",
            logger_to_use,
            settings,
        )
        shutil.rmtree(destination)
    elif destination.exists() or destination.is_symlink():
        destination.unlink()
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(source_dir), str(destination))


def chown_recursive(
    path: Union[str, Path],
    user: str,
    settings: Optional[FeatureSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Recursively hands `path` to `user` (and the group of the same name).

    Raises:
        subprocess.CalledProcessError: If chown fails.
    """
    run_command(
        ["chown", "-R", f"{user}:{user}", str(path)],
        settings,
        current_logger=current_logger,
    )


def render_profile_snippet(bin_dir: Union[str, Path]) -> str:
    """Returns a POSIX shell snippet prepending `bin_dir` to PATH once."""
    return PROFILE_SNIPPET_TEMPLATE.format(bin_dir=bin_dir)


def write_profile_snippet(
    snippet_path: Union[str, Path],
    bin_dir: Union[str, Path],
    settings: Optional[FeatureSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Writes the PATH profile snippet for `bin_dir` to `snippet_path` with mode
    0644.

    Returns:
        True if the snippet was written, False otherwise.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(settings)
    target = Path(snippet_path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_profile_snippet(bin_dir), encoding="utf-8")
        target.chmod(0o644)
    except OSError as e:
        log_feature(
            f"{symbols.get('error', '❌')} Failed to write profile snippet {target}: {e}",
            "error",
            logger_to_use,
            settings,
        )
        return False
    log_feature(
        f"{symbols.get('success', '✅')} Wrote profile snippet {target}",
        "info",
        logger_to_use,
        settings,
    )
    return True
