# gcloud_installer/orchestrator.py
# -*- coding: utf-8 -*-
"""
This module defines the provisioning run: resolve where and for whom the SDK
is installed, make sure the SDK is present, then install the requested
components. Each step is a task of the shared Orchestrator, so any failure
ends the run with exit status 1.
"""

import logging
from typing import Any, Dict, Optional

from gcloud_common.orchestrator import Orchestrator
from gcloud_common.system_utils import InstallContext, resolve_install_context
from gcloud_installer.component_installer import GcloudComponentInstaller
from gcloud_installer.sdk_installer import GoogleCloudSdkInstaller
from gcloud_setup.config_models import FeatureSettings

module_logger = logging.getLogger(__name__)

INSTALL_CONTEXT_KEY = "install_context"


def resolve_context_task(
    context: Dict[str, Any],
    settings: FeatureSettings,
    logger: Optional[logging.Logger] = None,
    **kwargs,
) -> InstallContext:
    """Resolves the install context once and stores it for later tasks."""
    install_context = resolve_install_context(settings, logger)
    context[INSTALL_CONTEXT_KEY] = install_context
    return install_context


def ensure_sdk_task(
    context: Dict[str, Any],
    settings: FeatureSettings,
    logger: Optional[logging.Logger] = None,
    **kwargs,
) -> bool:
    """Installs the Google Cloud SDK unless gcloud is already available."""
    installer = GoogleCloudSdkInstaller(
        settings, context[INSTALL_CONTEXT_KEY], logger
    )
    return installer.install()


def install_components_task(
    context: Dict[str, Any],
    settings: FeatureSettings,
    logger: Optional[logging.Logger] = None,
    **kwargs,
) -> bool:
    """Installs the requested components that are not installed yet."""
    installer = GcloudComponentInstaller(
        settings, context[INSTALL_CONTEXT_KEY], logger
    )
    return installer.install()


def run_provisioning(
    settings: FeatureSettings, logger: Optional[logging.Logger] = None
) -> Dict[str, Any]:
    """
    Runs the whole provisioning sequence.

    Args:
        settings: The resolved feature settings.
        logger: An optional logger instance.

    Returns:
        The orchestration context, holding the install context and the
        result of every task.

    Raises:
        SystemExit: With status 1 when any step fails.
    """
    effective_logger = logger or module_logger
    orchestrator = Orchestrator(settings, effective_logger)

    task_kwargs = {"logger": effective_logger}
    orchestrator.add_task(
        "Resolve install context", resolve_context_task, kwargs=dict(task_kwargs)
    )
    if settings.skip_sdk:
        effective_logger.info(
            "Skipping Google Cloud SDK installation check (skip_sdk is set)."
        )
    else:
        orchestrator.add_task(
            "Google Cloud SDK", ensure_sdk_task, kwargs=dict(task_kwargs)
        )
    orchestrator.add_task(
        "Additional components", install_components_task, kwargs=dict(task_kwargs)
    )

    orchestrator.run()
    return orchestrator.context


def report_component_status(
    settings: FeatureSettings, logger: Optional[logging.Logger] = None
) -> bool:
    """
    Logs whether each requested component is installed.

    Returns:
        True if every requested component is installed (or none were
        requested), False otherwise.

    Raises:
        GcloudNotFoundError: If components were requested and gcloud is missing.
    """
    effective_logger = logger or module_logger
    install_context = resolve_install_context(settings, effective_logger)
    installer = GcloudComponentInstaller(settings, install_context, effective_logger)

    status = installer.status()
    if not status:
        effective_logger.info("No Google Cloud components requested.")
        return True

    effective_logger.info("Component status:")
    for component, installed in status.items():
        if installed is None:
            status_str = "unknown"
        else:
            status_str = "installed" if installed else "not installed"
        effective_logger.info(f"  {component}: {status_str}")
    return all(installed is True for installed in status.values())
