"""Azure DevOps provider module."""

from a3_analysis_action.providers.azure_devops.config import AzureDevOpsConfig
from a3_analysis_action.providers.azure_devops.manifest import azure_devops_manifest
from a3_analysis_action.providers.azure_devops.provider import AzureDevOpsProvider

__all__ = ["AzureDevOpsConfig", "AzureDevOpsProvider", "azure_devops_manifest"]
