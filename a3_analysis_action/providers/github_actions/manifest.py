"""GitHub Actions provider manifest."""

from a3_analysis_action.providers.github_actions.config import GitHubActionsConfig
from a3_analysis_action.providers.github_actions.provider import GitHubActionsProvider
from a3_analysis_action.providers.manifest import ProviderManifest

github_actions_manifest = ProviderManifest(
    config_cls=GitHubActionsConfig,
    provider_factory=GitHubActionsProvider.from_config,
)
