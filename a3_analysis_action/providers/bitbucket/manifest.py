"""Bitbucket Pipelines provider manifest."""

from a3_analysis_action.providers.bitbucket.config import BitbucketConfig
from a3_analysis_action.providers.bitbucket.provider import BitbucketProvider
from a3_analysis_action.providers.manifest import ProviderManifest

bitbucket_manifest = ProviderManifest(
    config_cls=BitbucketConfig,
    provider_factory=BitbucketProvider.from_config,
)
