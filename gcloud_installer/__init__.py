"""
Installers for the Google Cloud SDK dev-container feature.

This package provides the SDK installer, the component installer and the
provisioning sequence that runs them.
"""

from gcloud_installer.base_installer import BaseInstaller
from gcloud_installer.component_installer import (
    GcloudComponentInstaller,
    compute_components_to_install,
    parse_component_request,
)
from gcloud_installer.orchestrator import report_component_status, run_provisioning
from gcloud_installer.sdk_installer import GoogleCloudSdkInstaller

__all__ = [
    "BaseInstaller",
    "GcloudComponentInstaller",
    "GoogleCloudSdkInstaller",
    "compute_components_to_install",
    "parse_component_request",
    "report_component_status",
    "run_provisioning",
]
