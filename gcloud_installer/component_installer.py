# gcloud_installer/component_installer.py
# -*- coding: utf-8 -*-
"""
Installs additional Google Cloud SDK components.

The requested component ids come from a comma-separated option. Components
that gcloud already reports as installed locally are skipped and everything
else is installed with a single `gcloud components install` call. If the
installed components cannot be listed, every requested component is
installed.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Optional, Tuple

from gcloud_common.command_utils import run_as_target_user
from gcloud_common.system_utils import InstallContext
from gcloud_installer.base_installer import BaseInstaller
from gcloud_installer.errors import ComponentInstallError, GcloudNotFoundError
from gcloud_installer.sdk_installer import resolve_gcloud_binary
from gcloud_setup.config_models import FeatureSettings

LIST_LOCAL_COMPONENTS_ARGS: Tuple[str, ...] = (
    "components",
    "list",
    "--only-local-state",
    "--format=value(id)",
)
INSTALL_COMPONENTS_ARGS: Tuple[str, ...] = ("components", "install", "--quiet")


def parse_component_request(raw: Optional[str]) -> Tuple[str, ...]:
    """
    Parses a comma-separated list of component ids.

    Entries are stripped of surrounding whitespace, empty entries are dropped
    and repeated ids are kept only at their first position.

    >>> parse_component_request(" beta, cloud-run-proxy,,beta ")
    ('beta', 'cloud-run-proxy')
    """
    if not raw:
        return ()
    requested: List[str] = []
    for entry in raw.split(","):
        component_id = entry.strip()
        if component_id and component_id not in requested:
            requested.append(component_id)
    return tuple(requested)


def compute_components_to_install(
    requested: Iterable[str],
    installed: Optional[AbstractSet[str]],
) -> Tuple[str, ...]:
    """
    Returns the requested ids that are not installed, in request order.

    `installed` is None when the installed components are unknown, in which
    case everything requested is returned.
    """
    if installed is None:
        return tuple(requested)
    return tuple(c for c in requested if c not in installed)


class GcloudComponentInstaller(BaseInstaller):
    """Installs the requested gcloud components that are not yet installed."""

    def __init__(
        self,
        settings: FeatureSettings,
        install_context: InstallContext,
        logger: Optional[logging.Logger] = None,
        raw_request: Optional[str] = None,
    ):
        """
        Args:
            settings: The feature settings.
            install_context: The install context resolved for this run.
            logger: Optional logger instance.
            raw_request: Comma-separated component ids. Defaults to
                `settings.additional_components`.
        """
        super().__init__(settings, install_context, logger)
        if raw_request is None:
            raw_request = self.settings.additional_components
        self.requested = parse_component_request(raw_request)

    def resolve_gcloud(self) -> Path:
        """
        Raises:
            GcloudNotFoundError: If no gcloud binary can be found.
        """
        gcloud = resolve_gcloud_binary(self.install_context)
        if gcloud is None:
            raise GcloudNotFoundError(
                "gcloud binary not found after installation; aborting."
            )
        return gcloud

    def query_installed_components(
        self, gcloud: Path
    ) -> Optional[FrozenSet[str]]:
        """
        Lists the ids of the locally installed components.

        A failed listing is only reported as a warning: the caller goes on to
        install every requested component.

        Returns:
            The installed ids, or None if gcloud could not list them.
        """
        try:
            result = run_as_target_user(
                [str(gcloud), *LIST_LOCAL_COMPONENTS_ARGS],
                self.install_context,
                self.settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
                failure_level="warning",
            )
        except OSError as e:
            reason = str(e)
        else:
            if result.returncode == 0:
                return frozenset(
                    line.strip()
                    for line in (result.stdout or "").splitlines()
                    if line.strip()
                )
            reason = f"exit code {result.returncode}"

        self._log(
            f"{self.symbols.get('warning', '⚠️')} Unable to read currently installed components ({reason}); "
            "proceeding to install requested components.",
            "warning",
        )
        return None

    def status(self) -> Dict[str, Optional[bool]]:
        """
        Reports each requested component as installed (True), not installed
        (False) or unknown (None) when the installed components cannot be
        listed.

        Raises:
            GcloudNotFoundError: If components were requested and no gcloud
                binary can be found.
        """
        if not self.requested:
            return {}
        installed = self.query_installed_components(self.resolve_gcloud())
        if installed is None:
            return {component: None for component in self.requested}
        return {component: component in installed for component in self.requested}

    def install(self) -> bool:
        """
        Installs the requested components that are missing.

        Returns:
            True if an install call was made, False if nothing was requested
            or everything was already installed.

        Raises:
            GcloudNotFoundError: If no gcloud binary can be found.
            ComponentInstallError: If `gcloud components install` fails.
        """
        if not self.requested:
            self._log(
                f"{self.symbols.get('info', 'ℹ️')} No Google Cloud components requested; skipping installation."
            )
            return False

        gcloud = self.resolve_gcloud()
        installed = self.query_installed_components(gcloud)

        to_install = compute_components_to_install(self.requested, installed)
        for component in self.requested:
            if component not in to_install:
                self._log(f"Component '{component}' already installed; skipping.")

        if not to_install:
            self._log(
                f"{self.symbols.get('success', '✅')} All requested Google Cloud components already installed."
            )
            return False

        self._log(
            f"{self.symbols.get('package', '📦')} Installing Google Cloud components: {' '.join(to_install)}"
        )
        install_env = dict(os.environ, CLOUDSDK_CORE_DISABLE_PROMPTS="1")
        try:
            run_as_target_user(
                [str(gcloud), *INSTALL_COMPONENTS_ARGS, *to_install],
                self.install_context,
                self.settings,
                check=True,
                capture_stderr=True,
                current_logger=self.logger,
                env=install_env,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            message = f"gcloud components install failed with exit code {e.returncode}"
            if stderr:
                message = f"{message}: {stderr}"
            raise ComponentInstallError(
                message,
                returncode=e.returncode,
                stderr=e.stderr,
                original_error=e,
            ) from e
        except OSError as e:
            raise ComponentInstallError(
                f"Could not run {gcloud}: {e}", original_error=e
            ) from e

        self._log(
            f"{self.symbols.get('success', '✅')} Google Cloud components installation complete."
        )
        return True
