"""Discovery of CI providers registered as entry points."""

import logging
from collections.abc import Sequence
from importlib.metadata import entry_points
from typing import Any

from a3_analysis_action.providers.manifest import ProviderManifest

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "a3_analysis_action.providers"


class ProviderNotFoundError(Exception):
    """Raised when a provider key does not name an installed provider."""


def available_providers() -> Sequence[str]:
    """Return the keys of all installed providers, sorted."""
    return sorted(entry.name for entry in entry_points(group=ENTRY_POINT_GROUP))


def load_provider_manifest(key: str) -> ProviderManifest[Any]:
    """Load the manifest registered under *key*.

    Args:
        key: Entry point name, e.g. "github-actions" or "local"

    Returns:
        The provider manifest

    Raises:
        ProviderNotFoundError: If no provider is registered under *key*, or
            the entry point does not resolve to a manifest

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise ProviderNotFoundError(
            f"Provider '{key}' not found. Available providers: "
            f"{', '.join(available_providers())}"
        )

    entry = next(iter(matches))
    manifest = entry.load()
    if not isinstance(manifest, ProviderManifest):
        raise ProviderNotFoundError(
            f"Entry point '{key}' ({entry.value}) is not a provider manifest"
        )
    log.debug("Loaded provider '%s' from %s", key, entry.value)
    return manifest
