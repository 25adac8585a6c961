"""Process exit codes for vcheck commands.

The numeric values are part of the CLI contract (CI jobs branch on them)
and must remain stable:
- 0: Success (every relevant workspace has a decision, or nothing changed)
- 1: User error (missing decisions, unknown workspace, aborted editor)
- 2: Environment error (no git repository, no base ref, bad manifest/config)
- 5: I/O error (version file could not be written)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
