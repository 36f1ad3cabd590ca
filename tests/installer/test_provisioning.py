# tests/installer/test_provisioning.py
# -*- coding: utf-8 -*-
"""
Tests for the provisioning sequence and the component status report.
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from gcloud_installer.errors import GcloudNotFoundError
from gcloud_installer.orchestrator import (
    INSTALL_CONTEXT_KEY,
    report_component_status,
    run_provisioning,
)


@pytest.fixture
def patched_context(mocker, user_context):
    return mocker.patch(
        "gcloud_installer.orchestrator.resolve_install_context",
        return_value=user_context,
    )


def test_run_provisioning_runs_tasks_in_order(settings, mock_logger, patched_context, mocker):
    calls = []
    mocker.patch(
        "gcloud_installer.orchestrator.GoogleCloudSdkInstaller.install",
        side_effect=lambda: calls.append("sdk") or False,
    )
    mocker.patch(
        "gcloud_installer.orchestrator.GcloudComponentInstaller.install",
        side_effect=lambda: calls.append("components") or False,
    )

    context = run_provisioning(settings, mock_logger)

    assert calls == ["sdk", "components"]
    assert context[INSTALL_CONTEXT_KEY] is patched_context.return_value


def test_run_provisioning_skip_sdk(settings, mock_logger, patched_context, mocker):
    settings.skip_sdk = True
    sdk_install = mocker.patch(
        "gcloud_installer.orchestrator.GoogleCloudSdkInstaller.install"
    )
    mocker.patch(
        "gcloud_installer.orchestrator.GcloudComponentInstaller.install",
        return_value=False,
    )

    run_provisioning(settings, mock_logger)

    sdk_install.assert_not_called()


def test_run_provisioning_exits_when_gcloud_missing(
    settings, mock_logger, patched_context, mocker
):
    settings.additional_components = "beta"
    mocker.patch(
        "gcloud_installer.orchestrator.GoogleCloudSdkInstaller.install",
        return_value=True,
    )
    mocker.patch(
        "gcloud_installer.component_installer.resolve_gcloud_binary",
        return_value=None,
    )
    mock_run = mocker.patch("gcloud_installer.component_installer.run_as_target_user")

    with pytest.raises(SystemExit) as excinfo:
        run_provisioning(settings, mock_logger)

    assert excinfo.value.code == 1
    mock_run.assert_not_called()


def test_run_provisioning_exits_when_sdk_install_fails(
    settings, mock_logger, patched_context, mocker
):
    mocker.patch(
        "gcloud_installer.orchestrator.GoogleCloudSdkInstaller.install",
        side_effect=subprocess.CalledProcessError(1, ["install.sh"]),
    )
    components = mocker.patch(
        "gcloud_installer.orchestrator.GcloudComponentInstaller.install"
    )

    with pytest.raises(SystemExit):
        run_provisioning(settings, mock_logger)
    components.assert_not_called()


def test_second_run_is_noop(settings, mock_logger, patched_context, mocker, user_context, make_fake_gcloud):
    """With the installed state persisted, a repeated run makes no install call."""
    settings.additional_components = "beta, alpha"
    make_fake_gcloud(user_context.install_dir)
    download = mocker.patch("gcloud_installer.sdk_installer.download_file")
    installed = set()

    def _run(command, *args, **kwargs):
        if "list" in command:
            return MagicMock(returncode=0, stdout="\n".join(sorted(installed)))
        if "install" in command:
            installed.update(command[command.index("--quiet") + 1:])
        return MagicMock(returncode=0, stdout="")

    mock_run = mocker.patch(
        "gcloud_installer.component_installer.run_as_target_user", side_effect=_run
    )

    run_provisioning(settings, mock_logger)
    first_run_calls = mock_run.call_count
    run_provisioning(settings, mock_logger)

    download.assert_not_called()
    assert installed == {"alpha", "beta"}
    assert first_run_calls == 2
    assert mock_run.call_count == 3
    assert "install" not in mock_run.call_args.args[0]


def test_report_component_status(settings, mock_logger, patched_context, mocker):
    settings.additional_components = "beta, alpha"
    mocker.patch(
        "gcloud_installer.component_installer.resolve_gcloud_binary",
        return_value=Path("/usr/bin/gcloud"),
    )
    mocker.patch(
        "gcloud_installer.component_installer.run_as_target_user",
        return_value=MagicMock(returncode=0, stdout="beta\nalpha\n"),
    )

    assert report_component_status(settings, mock_logger) is True
    mock_logger.info.assert_any_call("  beta: installed")


def test_report_component_status_missing(settings, mock_logger, patched_context, mocker):
    settings.additional_components = "beta"
    mocker.patch(
        "gcloud_installer.component_installer.resolve_gcloud_binary",
        return_value=Path("/usr/bin/gcloud"),
    )
    mocker.patch(
        "gcloud_installer.component_installer.run_as_target_user",
        return_value=MagicMock(returncode=0, stdout="core\n"),
    )

    assert report_component_status(settings, mock_logger) is False
    mock_logger.info.assert_any_call("  beta: not installed")


def test_report_component_status_without_gcloud(settings, mock_logger, patched_context, mocker):
    settings.additional_components = "beta"
    mocker.patch(
        "gcloud_installer.component_installer.resolve_gcloud_binary",
        return_value=None,
    )

    with pytest.raises(GcloudNotFoundError):
        report_component_status(settings, mock_logger)


def test_report_component_status_nothing_requested(settings, mock_logger, patched_context):
    assert report_component_status(settings, mock_logger) is True
