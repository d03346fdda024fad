"""Local provider manifest."""

from a3_analysis_action.providers.local.config import LocalConfig
from a3_analysis_action.providers.local.provider import LocalProvider
from a3_analysis_action.providers.manifest import ProviderManifest

local_manifest = ProviderManifest(
    config_cls=LocalConfig,
    provider_factory=LocalProvider.from_config,
)
