"""
Configuration for the Google Cloud SDK dev-container feature.

This package holds the settings model and the layered loader that merges
defaults, environment variables, an optional YAML file and CLI arguments.
"""

from gcloud_setup.config_loader import load_feature_settings
from gcloud_setup.config_models import FeatureSettings

__all__ = ["FeatureSettings", "load_feature_settings"]
