# gcloud_common/__init__.py
# -*- coding: utf-8 -*-
"""
Shared helpers for commands, logging, files, downloads and task orchestration.
"""
