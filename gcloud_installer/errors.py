# gcloud_installer/errors.py
# -*- coding: utf-8 -*-
"""
Exceptions raised by the installers. Every one of them is fatal to a
provisioning run; the orchestrator turns them into a non-zero exit.
"""

from typing import Optional


class FeatureInstallError(Exception):
    """Base class for provisioning failures."""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
    ):
        self.original_error = original_error
        super().__init__(message)


class PrerequisiteError(FeatureInstallError):
    """A required system package or command is missing and cannot be installed."""


class SdkInstallError(FeatureInstallError):
    """Downloading, unpacking or running the SDK installer failed."""


class GcloudNotFoundError(FeatureInstallError):
    """The gcloud binary cannot be found after the install step."""


class ComponentInstallError(FeatureInstallError):
    """The batched `gcloud components install` call failed."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message, original_error=original_error)
