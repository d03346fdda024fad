"""Provider manifest definition for the plugin system."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from pydantic import BaseModel

from a3_analysis_action.providers.base import CIProvider


@dataclass(frozen=True, kw_only=True)
class ProviderManifest[ConfigT: BaseModel]:
    """Manifest describing a provider plugin.

    The manifest contains references to the configuration class and the
    provider factory function for lazy loading of providers based on their key.
    Configurations are validated from the job's environment variables.
    """

    config_cls: type[ConfigT]
    provider_factory: Callable[[ConfigT], CIProvider]

    def from_environment(self, environ: Mapping[str, str]) -> CIProvider:
        """Build the provider from the CI job's environment."""
        return self.provider_factory(self.config_cls.model_validate(dict(environ)))
