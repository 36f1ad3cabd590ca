# gcloud_common/network_utils.py
# -*- coding: utf-8 -*-
"""
Network-related utility functions.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import requests

from gcloud_common.command_utils import get_symbols, log_feature
from gcloud_setup.config_models import FeatureSettings

module_logger = logging.getLogger(__name__)


def download_file(
    url: str,
    download_to_path: Union[str, Path],
    settings: Optional[FeatureSettings] = None,
    timeout: Optional[float] = None,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Download a file from a URL to a local path, streaming it in chunks.

    Args:
        url: The URL to download.
        download_to_path: The file path where the download is saved. Parent
            directories are created as needed.
        settings: Settings of the current run, for log symbols.
        timeout: Seconds to wait for the server. None waits indefinitely.
        current_logger: Optional logger instance.

    Returns:
        True if the download was successful, False otherwise.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(settings)
    download_path = Path(download_to_path)
    log_feature(
        f"{symbols.get('package', '📦')} Downloading {url}",
        "info",
        logger_to_use,
        settings,
    )
    response: Optional[requests.Response] = None

    try:
        download_path.parent.mkdir(parents=True, exist_ok=True)
        if download_path.exists():
            download_path.unlink()
        response = requests.get(url, stream=True, timeout=timeout)
        response.raise_for_status()

        with open(download_path, "wb") as f:
            for chunk in response.iter_content(chunk_size=8192):
                if chunk:
                    f.write(chunk)
        log_feature(
            f"{symbols.get('success', '✅')} Downloaded to {download_path}",
            "info",
            logger_to_use,
            settings,
        )
        return True
    except requests.exceptions.HTTPError as http_err:
        status_code = response.status_code if response is not None else "Unknown"
        log_feature(
            f"{symbols.get('error', '❌')} HTTP error occurred: {http_err} - Status code: {status_code}",
            "error",
            logger_to_use,
            settings,
        )
    except requests.exceptions.ConnectionError as conn_err:
        log_feature(
            f"{symbols.get('error', '❌')} Connection error occurred: {conn_err}",
            "error",
            logger_to_use,
            settings,
        )
    except requests.exceptions.Timeout as timeout_err:
        log_feature(
            f"{symbols.get('error', '❌')} Timeout error occurred: {timeout_err}",
            "error",
            logger_to_use,
            settings,
        )
    except requests.exceptions.RequestException as req_err:
        log_feature(
            f"{symbols.get('error', '❌')} An unexpected error occurred during download: {req_err}",
            "error",
            logger_to_use,
            settings,
        )
    except IOError as io_err:
        log_feature(
            f"{symbols.get('error', '❌')} File I/O error when saving download: {io_err}",
            "error",
            logger_to_use,
            settings,
        )
    finally:
        if response is not None:
            response.close()
    return False
