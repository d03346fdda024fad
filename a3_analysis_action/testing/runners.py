"""Process runner doubles for tests."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from a3_analysis_action.command_builder import CommandLine
from a3_analysis_action.process import ProcessRunner

type CommandHandler = Callable[[CommandLine, Path], int]


def succeed(command: CommandLine, cwd: Path) -> int:
    """Handle any command by exiting successfully."""
    return 0


@dataclass(frozen=True, kw_only=True)
class FakeRunner(ProcessRunner):
    """Runner that records commands and delegates to a handler."""

    handler: CommandHandler = succeed
    commands: list[CommandLine] = field(default_factory=list)
    environments: list[Mapping[str, str]] = field(default_factory=list)

    async def run(
        self,
        command: CommandLine,
        *,
        env: Mapping[str, str],
        cwd: Path,
    ) -> int:
        """Record *command* and *env* and return the handler's exit code."""
        self.commands.append(command)
        self.environments.append(env)
        return self.handler(command, cwd)


def option_value(command: CommandLine, option: str) -> str:
    """Return the token following *option* in *command*."""
    return command.tokens[command.tokens.index(option) + 1]
