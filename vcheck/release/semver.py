"""Version string helpers for previews in the decision editor.

The propagation core never looks at versions; this module only answers
"is this a prerelease" and "what would the next version be".
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["SemVer", "bump", "is_prerelease", "parse"]

_SEMVER_RE = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            return f"{core}-{'.'.join(self.prerelease)}"
        return core

    def bump(self, kind: str) -> SemVer:
        """Return the next version for a bump strategy.

        A prerelease graduates to its own release line when that line has
        not shipped yet (1.0.0-rc.1 + major -> 1.0.0).
        """
        match kind:
            case "major":
                if self.prerelease and self.minor == 0 and self.patch == 0:
                    return SemVer(self.major, 0, 0)
                return SemVer(self.major + 1, 0, 0)
            case "minor":
                if self.prerelease and self.patch == 0:
                    return SemVer(self.major, self.minor, 0)
                return SemVer(self.major, self.minor + 1, 0)
            case "patch":
                if self.prerelease:
                    return SemVer(self.major, self.minor, self.patch)
                return SemVer(self.major, self.minor, self.patch + 1)
            case "prerelease":
                if not self.prerelease:
                    return SemVer(self.major, self.minor, self.patch + 1, ("0",))
                return SemVer(self.major, self.minor, self.patch, _next_prerelease(self.prerelease))
            case _:
                raise ValueError(f"unexpected bump kind: {kind}")


def _next_prerelease(ids: tuple[str, ...]) -> tuple[str, ...]:
    for i in range(len(ids) - 1, -1, -1):
        if ids[i].isdigit():
            return (*ids[:i], str(int(ids[i]) + 1), *ids[i + 1 :])
    return (*ids, "0")


def parse(version: str) -> SemVer | None:
    m = _SEMVER_RE.match(version.strip())
    if m is None:
        return None
    pre = tuple(m.group(4).split(".")) if m.group(4) else ()
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)), pre)


def is_prerelease(version: str) -> bool:
    """True if ``version`` carries a prerelease tag.

    Unparseable versions are treated as stable so the full strategy list is
    offered; ``bump`` rejects them later if one is actually applied.
    """
    parsed = parse(version)
    return parsed is not None and bool(parsed.prerelease)


def bump(version: str, kind: str) -> str:
    """Compute the next version string.

    Raises:
        ValueError: ``version`` is not valid semver or ``kind`` is unknown.
    """
    parsed = parse(version)
    if parsed is None:
        raise ValueError(f"invalid version: {version!r}")
    return str(parsed.bump(kind))
