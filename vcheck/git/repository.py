"""Git repository abstraction.

Provides what the version check needs from git: the repository root, the
commit the current branch started from, and the files changed since then.
All operations that can fail return Result types.

Usage:
    root = find_root(Path.cwd())
    repo = Repository(root)

    match repo.merge_base(("master", "origin/master")):
        case Ok(base):
            print(f"Branched from {base.short_hash} {base.title}")
        case Err(e):
            print(f"No base: {e.message}")
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from vcheck.core.result import Err, Ok, Result

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "BaseCommit",
    "GitError",
    "Repository",
    "find_root",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class BaseCommit:
    """The commit the current branch forked from.

    Attributes:
        hash: Full commit hash
        title: First line of the commit message
        ref: The base ref the merge base was computed against
    """

    hash: str
    title: str
    ref: str

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


def find_root(start: Path) -> Path | None:
    """Return the nearest directory at or above ``start`` containing ``.git``.

    ``.git`` may be a directory or a file (worktrees, submodules).
    """
    current = start.resolve()
    for candidate in (current, *current.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check if this is a valid git repository."""
        return (self.path / ".git").exists()

    def merge_base(self, refs: Sequence[str]) -> Result[BaseCommit, GitError]:
        """Find the merge base of HEAD with the first resolvable ref.

        Args:
            refs: Candidate base refs, tried in order

        Returns:
            Ok(BaseCommit) for the first ref git accepts
            Err(GitError) if none of them resolves
        """
        for ref in refs:
            result = self._run(["merge-base", "HEAD", ref])
            if isinstance(result, Err):
                continue

            commit = result.value.strip()
            if not commit:
                continue

            title = self._run(["show", "--quiet", "--pretty=format:%s", commit])
            if isinstance(title, Err):
                return title
            return Ok(BaseCommit(hash=commit, title=title.value.strip(), ref=ref))

        return Err(
            GitError(
                command="merge-base",
                message=f"no merge base found against any of: {', '.join(refs)}",
            )
        )

    def changed_files(self, base: BaseCommit) -> Result[tuple[str, ...], GitError]:
        """List files changed since ``base``, including untracked ones.

        Paths are relative to the repository root, POSIX style, sorted and
        without duplicates. Both listings are NUL separated so that git never
        quotes names holding non-ASCII or control characters.
        """
        diff = self._run(["diff", "--name-only", "-z", base.hash])
        if isinstance(diff, Err):
            return diff

        untracked = self._run(["ls-files", "-z", "--others", "--exclude-standard"])
        if isinstance(untracked, Err):
            return untracked

        files = {
            name
            for output in (diff.value, untracked.value)
            for name in output.split("\0")
            if name
        }
        return Ok(tuple(sorted(files)))

    def _run(self, args: list[str]) -> Result[str, GitError]:
        """Run a git subcommand in this repository and return its stdout.

        Non-UTF-8 bytes in paths survive decoding as surrogate escapes.
        """
        cmd = ["git", "-C", str(self.path), *args]
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(self.path),
                capture_output=True,
                encoding="utf-8",
                errors="surrogateescape",
                timeout=_GIT_TIMEOUT_SECONDS,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return Err(
                GitError(
                    command=args[0],
                    message=f"git {args[0]} timed out after {_GIT_TIMEOUT_SECONDS:g}s",
                    returncode=-1,
                )
            )
        except OSError as e:
            return Err(GitError(command=args[0], message=f"cannot run git: {e}", returncode=-1))

        if proc.returncode != 0:
            return Err(
                GitError(
                    command=args[0],
                    message=proc.stderr.strip() or f"git {args[0]} failed",
                    returncode=proc.returncode,
                )
            )
        return Ok(proc.stdout)
