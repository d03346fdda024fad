"""Expansion of ``${NAME}`` references in paths and command strings."""

import re
from collections.abc import Mapping

from a3_analysis_action.paths import TargetOS, normalize_separators

VARIABLE_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def expand_env(value: str, env: Mapping[str, str], target_os: TargetOS) -> str:
    """Substitute ``${NAME}`` tokens in *value* using *env*.

    Lookups are case-insensitive (names are upper-cased on both sides) and
    unknown variables expand to an empty string. Backslashes in substituted
    values are doubled before insertion; the whole result then goes through one
    separator normalization pass for *target_os*.

    Args:
        value: String that may contain ``${NAME}`` references
        env: Environment mapping of the run
        target_os: OS whose path separators the result should use

    Returns:
        The expanded, separator-normalized string.

    """
    lookup = {key.upper(): val for key, val in env.items()}

    def _substitute(match: re.Match[str]) -> str:
        return lookup.get(match.group(1).upper(), "").replace("\\", "\\\\")

    return normalize_separators(VARIABLE_PATTERN.sub(_substitute, value), target_os)
