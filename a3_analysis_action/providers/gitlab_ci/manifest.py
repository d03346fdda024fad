"""GitLab CI provider manifest."""

from a3_analysis_action.providers.gitlab_ci.config import GitLabCIConfig
from a3_analysis_action.providers.gitlab_ci.provider import GitLabCIProvider
from a3_analysis_action.providers.manifest import ProviderManifest

gitlab_ci_manifest = ProviderManifest(
    config_cls=GitLabCIConfig,
    provider_factory=GitLabCIProvider.from_config,
)
