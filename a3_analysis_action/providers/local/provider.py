"""Provider for analysis runs started from a terminal."""

from dataclasses import dataclass
from pathlib import Path

from a3_analysis_action.providers.base import CIProvider
from a3_analysis_action.providers.local.config import LocalConfig


@dataclass(frozen=True, kw_only=True)
class LocalProvider(CIProvider):
    """Terminal host; HTML report ids are rendered as OSC 8 hyperlinks."""

    config: LocalConfig

    @classmethod
    def from_config(cls, config: LocalConfig) -> "LocalProvider":
        """Create provider from its configuration."""
        return cls(config=config)

    @property
    def workspace(self) -> Path:
        """Working directory, or ``A3_WORKSPACE``."""
        return self.config.workspace

    @property
    def run_id(self) -> str:
        """Random run id, or ``A3_RUN_ID``."""
        return self.config.run_id
