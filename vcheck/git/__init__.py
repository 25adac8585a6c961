"""Git operations module.

Usage:
    from vcheck.git import Repository, find_root

    root = find_root(Path.cwd())
    if root is not None:
        base = Repository(root).merge_base(("main",))
"""

from vcheck.git.repository import (
    BaseCommit,
    GitError,
    Repository,
    find_root,
)

__all__ = [
    "BaseCommit",
    "GitError",
    "Repository",
    "find_root",
]
