# gcloud_installer/sdk_installer.py
# -*- coding: utf-8 -*-
"""
Ensures the Google Cloud SDK is present.

When no gcloud binary can be found, the SDK archive is downloaded, unpacked
into the target user's home and its bundled install.sh is run as that user.
As root, system prerequisites are installed through apt first and a
profile snippet is written so login shells find gcloud on PATH.
"""

import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from gcloud_common.command_utils import (
    command_exists,
    is_executable_file,
    run_as_target_user,
    run_command,
)
from gcloud_common.file_utils import (
    chown_recursive,
    extract_tarball,
    find_sdk_source_dir,
    move_directory,
    write_profile_snippet,
)
from gcloud_common.network_utils import download_file
from gcloud_common.system_utils import InstallContext
from gcloud_installer.base_installer import BaseInstaller
from gcloud_installer.errors import PrerequisiteError, SdkInstallError
from gcloud_setup.config_models import SDK_ARCHIVE_NAME_DEFAULT


def resolve_gcloud_binary(install_context: InstallContext) -> Optional[Path]:
    """
    Returns the gcloud binary of this install: `<install_dir>/bin/gcloud` when
    it is executable, otherwise `gcloud` from PATH, otherwise None.
    """
    if is_executable_file(install_context.gcloud_path):
        return install_context.gcloud_path
    found = shutil.which("gcloud")
    return Path(found) if found else None


class GoogleCloudSdkInstaller(BaseInstaller):
    """Installs the Google Cloud SDK when gcloud is not available."""

    def is_installed(self) -> bool:
        """True when a gcloud binary resolves for this install context."""
        return resolve_gcloud_binary(self.install_context) is not None

    def install(self) -> bool:
        """
        Installs the SDK unless gcloud is already available.

        Returns:
            True if the SDK was installed, False if it was already present.

        Raises:
            PrerequisiteError: If prerequisites are missing.
            SdkInstallError: If download, extraction or the installer fails.
        """
        if self.is_installed():
            self._log(
                f"{self.symbols.get('success', '✅')} gcloud CLI already available; skipping SDK installation."
            )
            return False

        self._log(
            f"{self.symbols.get('info', 'ℹ️')} gcloud CLI not found, installing..."
        )
        self.ensure_prerequisites()

        with tempfile.TemporaryDirectory(prefix="gcloud-install-") as tmp:
            work_dir = Path(tmp)
            archive_path = work_dir / self._archive_name()
            if not download_file(
                str(self.settings.sdk_download_url),
                archive_path,
                self.settings,
                timeout=self.settings.download_timeout,
                current_logger=self.logger,
            ):
                raise SdkInstallError(
                    f"Failed to download the Google Cloud SDK from {self.settings.sdk_download_url}"
                )

            extract_dir = work_dir / "extracted"
            if not extract_tarball(
                archive_path, extract_dir, self.settings, self.logger
            ):
                raise SdkInstallError(
                    f"Failed to extract the Google Cloud SDK archive {archive_path.name}"
                )
            archive_path.unlink()

            source_dir = find_sdk_source_dir(
                extract_dir, self.settings.install_dir_name
            )
            if not source_dir.is_dir():
                raise SdkInstallError(
                    f"No Google Cloud SDK directory found in the archive (expected {source_dir.name})"
                )

            self._place_sdk(source_dir)
            self._run_sdk_installer()

        self._update_session_path()
        if self.install_context.is_privileged:
            if not write_profile_snippet(
                self.settings.profile_snippet_path,
                self.install_context.install_dir / "bin",
                self.settings,
                self.logger,
            ):
                raise SdkInstallError(
                    f"Failed to write {self.settings.profile_snippet_path}"
                )

        self._log(
            f"{self.symbols.get('success', '✅')} Google Cloud SDK installed to {self.install_context.install_dir}."
        )
        return True

    def ensure_prerequisites(self) -> None:
        """
        As root, installs the prerequisite apt packages. Otherwise checks that
        every required command is on PATH.

        Raises:
            PrerequisiteError: If a package cannot be installed or a command
                is missing.
        """
        if self.install_context.is_privileged:
            packages = list(self.settings.prerequisite_packages)
            if not packages:
                return
            apt_env = dict(os.environ, DEBIAN_FRONTEND="noninteractive")
            try:
                run_command(
                    ["apt-get", "update", "-y"],
                    self.settings,
                    current_logger=self.logger,
                    env=apt_env,
                )
                run_command(
                    ["apt-get", "install", "-y", *packages],
                    self.settings,
                    current_logger=self.logger,
                    env=apt_env,
                )
            except (subprocess.CalledProcessError, FileNotFoundError) as e:
                raise PrerequisiteError(
                    "Failed to install prerequisites", original_error=e
                ) from e
            return

        for cmd in self.settings.required_commands:
            if not command_exists(cmd):
                raise PrerequisiteError(
                    f"Required command '{cmd}' not found; aborting."
                )

    def _archive_name(self) -> str:
        name = Path(urlparse(str(self.settings.sdk_download_url)).path).name
        return name or SDK_ARCHIVE_NAME_DEFAULT

    def _place_sdk(self, source_dir: Path) -> None:
        install_dir = self.install_context.install_dir
        self._log(
            f"{self.symbols.get('step', '➡️')} Moving Google Cloud SDK to '{install_dir}'"
        )
        try:
            move_directory(source_dir, install_dir, self.settings, self.logger)
        except OSError as e:
            raise SdkInstallError(
                f"Failed to move SDK to {install_dir}", original_error=e
            ) from e

        if self.install_context.is_privileged:
            try:
                chown_recursive(
                    install_dir,
                    self.install_context.target_user,
                    self.settings,
                    self.logger,
                )
            except (subprocess.CalledProcessError, FileNotFoundError) as e:
                raise SdkInstallError(
                    f"Failed to hand {install_dir} to {self.install_context.target_user}",
                    original_error=e,
                ) from e

    def _run_sdk_installer(self) -> None:
        install_dir = self.install_context.install_dir
        self._log(
            f"{self.symbols.get('gear', '⚙️')} Running Google Cloud SDK installer in '{install_dir}'"
        )
        try:
            run_as_target_user(
                [str(install_dir / "install.sh"), *self.settings.installer_args],
                self.install_context,
                self.settings,
                current_logger=self.logger,
            )
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            raise SdkInstallError(
                "gcloud installer failed", original_error=e
            ) from e

    def _update_session_path(self) -> None:
        """Puts the SDK's bin directory on PATH for the rest of this process."""
        if not is_executable_file(self.install_context.gcloud_path):
            return
        bin_dir = str(self.install_context.install_dir / "bin")
        path_entries = os.environ.get("PATH", "").split(os.pathsep)
        if bin_dir not in path_entries:
            os.environ["PATH"] = os.pathsep.join([bin_dir] + [p for p in path_entries if p])
            self._log(f"Added {bin_dir} to PATH for this session.")
