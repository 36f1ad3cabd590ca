# tests/conftest.py
import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from gcloud_common.system_utils import InstallContext, InstallMode
from gcloud_setup.config_models import FeatureSettings


@pytest.fixture
def settings(tmp_path):
    """Settings that never touch the real system profile directory."""
    return FeatureSettings(
        additional_components="",
        profile_snippet_path=tmp_path / "profile.d" / "google-cloud-sdk.sh",
        symbols={
            "success": "✅",
            "error": "❌",
            "warning": "!",
            "info": "ℹ️",
            "gear": "⚙️",
            "package": "📦",
            "step": "➡️",
        },
    )


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def user_context(tmp_path) -> InstallContext:
    home = tmp_path / "home" / "dev"
    return InstallContext(
        mode=InstallMode.USER_INSTALL,
        target_user="dev",
        target_home=home,
        install_dir=home / "google-cloud-sdk",
    )


@pytest.fixture
def privileged_context(tmp_path) -> InstallContext:
    home = tmp_path / "home" / "vscode"
    return InstallContext(
        mode=InstallMode.PRIVILEGED_INSTALL,
        target_user="vscode",
        target_home=home,
        install_dir=home / "google-cloud-sdk",
    )


@pytest.fixture
def make_fake_gcloud():
    """Factory creating an executable shell script at <install_dir>/bin/gcloud."""

    def _make(install_dir: Path, script: str = "exit 0\n") -> Path:
        gcloud = install_dir / "bin" / "gcloud"
        gcloud.parent.mkdir(parents=True, exist_ok=True)
        gcloud.write_text("#!/bin/sh\n" + script)
        gcloud.chmod(0o755)
        return gcloud

    return _make
