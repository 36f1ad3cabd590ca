"""
Base installer class for all installer modules.

This module provides the base class that the SDK and component installers
inherit from. It defines the common interface every installer implements.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from gcloud_common.command_utils import get_symbols, log_feature
from gcloud_common.system_utils import InstallContext
from gcloud_setup.config_models import FeatureSettings


class BaseInstaller(ABC):
    """
    Base class for all installer modules.

    Installers are idempotent: `install` does nothing when a previous run
    already did the work. Failures are raised as FeatureInstallError
    subclasses.
    """

    def __init__(
        self,
        settings: FeatureSettings,
        install_context: InstallContext,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the installer.

        Args:
            settings: The feature settings.
            install_context: The install context resolved for this run.
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.settings = settings
        self.install_context = install_context
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.symbols = get_symbols(settings)

    @abstractmethod
    def install(self) -> bool:
        """
        Install whatever this installer is responsible for.

        Returns:
            True if something was installed, False if nothing needed doing.

        Raises:
            FeatureInstallError: On any fatal failure.
        """

    def _log(self, message: str, level: str = "info", exc_info: bool = False) -> None:
        log_feature(message, level, self.logger, self.settings, exc_info=exc_info)
