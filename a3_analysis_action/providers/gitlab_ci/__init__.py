"""GitLab CI provider module."""

from a3_analysis_action.providers.gitlab_ci.config import GitLabCIConfig
from a3_analysis_action.providers.gitlab_ci.manifest import gitlab_ci_manifest
from a3_analysis_action.providers.gitlab_ci.provider import GitLabCIProvider

__all__ = ["GitLabCIConfig", "GitLabCIProvider", "gitlab_ci_manifest"]
