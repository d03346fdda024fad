"""Bitbucket Pipelines provider module."""

from a3_analysis_action.providers.bitbucket.config import BitbucketConfig
from a3_analysis_action.providers.bitbucket.manifest import bitbucket_manifest
from a3_analysis_action.providers.bitbucket.provider import BitbucketProvider

__all__ = ["BitbucketConfig", "BitbucketProvider", "bitbucket_manifest"]
