"""GitHub Actions provider module."""

from a3_analysis_action.providers.github_actions.config import GitHubActionsConfig
from a3_analysis_action.providers.github_actions.manifest import github_actions_manifest
from a3_analysis_action.providers.github_actions.provider import GitHubActionsProvider

__all__ = ["GitHubActionsConfig", "GitHubActionsProvider", "github_actions_manifest"]
