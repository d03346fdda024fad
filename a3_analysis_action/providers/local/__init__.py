"""Local provider module."""

from a3_analysis_action.providers.local.config import LocalConfig
from a3_analysis_action.providers.local.manifest import local_manifest
from a3_analysis_action.providers.local.provider import LocalProvider

__all__ = ["LocalConfig", "LocalProvider", "local_manifest"]
