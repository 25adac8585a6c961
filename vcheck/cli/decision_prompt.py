"""Terminal editor for release decisions.

Up/Down move between workspaces, Left/Right cycle the release strategy of
the selected one, Enter saves, q / Esc / Ctrl+C abort. Every change goes
through the DecisionEditor, so dependents appear and disappear as soon as
the decisions that implicate them change.
"""

from __future__ import annotations

import os
import select
import sys
from collections.abc import Callable, Sequence
from typing import Literal

from vcheck.release.decision import Decision, strategies_for
from vcheck.release.editor import DecisionEditor
from vcheck.release.graph import Workspace
from vcheck.release.release_set import ReleaseSet
from vcheck.release.semver import bump

Key = Literal["up", "down", "left", "right", "enter", "cancel", "other"]

__all__ = [
    "Key",
    "cycle_decision",
    "is_interactive_terminal",
    "prompt_decisions",
    "read_key",
    "render",
]

_ROOTS_STATS_THRESHOLD = 3
_DEPENDENTS_STATS_THRESHOLD = 5
_ESCAPE_TIMEOUT_SECONDS = 0.05


def is_interactive_terminal() -> bool:
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _color_enabled() -> bool:
    if not is_interactive_terminal():
        return False
    if os.getenv("NO_COLOR") is not None:
        return False
    return os.getenv("TERM", "").lower() != "dumb"


def _paint(text: str, *codes: str) -> str:
    if not _color_enabled() or not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def _clear() -> str:
    return "\x1b[2J\x1b[H" if is_interactive_terminal() else ""


def _read_char(fd: int) -> str:
    return os.read(fd, 1).decode("latin-1")


def _has_pending_input(fd: int, timeout: float = _ESCAPE_TIMEOUT_SECONDS) -> bool:
    ready, _, _ = select.select([fd], [], [], timeout)
    return bool(ready)


def _decode_escape(read: Callable[[], str]) -> Key:
    if read() != "[":
        return "cancel"
    match read():
        case "A":
            return "up"
        case "B":
            return "down"
        case "C":
            return "right"
        case "D":
            return "left"
        case _:
            return "other"


def read_key() -> Key:
    if os.name == "nt":
        import msvcrt

        ch = msvcrt.getwch()
        if ch in ("\r", "\n"):
            return "enter"
        if ch in ("q", "Q", "\x03", "\x1b"):
            return "cancel"
        if ch in ("\x00", "\xe0"):
            match msvcrt.getwch():
                case "H":
                    return "up"
                case "P":
                    return "down"
                case "M":
                    return "right"
                case "K":
                    return "left"
                case _:
                    return "other"
        return "other"

    import termios
    import tty

    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = _read_char(fd)
        if ch in ("\r", "\n"):
            return "enter"
        if ch in ("q", "Q", "\x03"):
            return "cancel"
        if ch == "\x1b":
            # A bare Esc is not followed by the rest of an arrow sequence
            if not _has_pending_input(fd):
                return "cancel"
            return _decode_escape(lambda: _read_char(fd))
        return "other"
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def cycle_decision(strategies: Sequence[Decision], current: Decision, step: int) -> Decision:
    """Move ``step`` positions through ``strategies``, wrapping around.

    A current decision not offered for this workspace (a recorded MINOR on
    a prerelease, say) restarts from the first strategy.
    """
    if current not in strategies:
        return strategies[0]
    return strategies[(strategies.index(current) + step) % len(strategies)]


def _next_version(workspace: Workspace, decision: Decision) -> str:
    current = workspace.version or "?"
    if decision is Decision.UNDECIDED:
        return _paint(current, "33")
    if decision is Decision.DECLINE:
        return _paint(current, "32")
    try:
        target = bump(current, decision.value)
    except ValueError:
        target = "?"
    return f"{_paint(current, '35')} -> {_paint(target, '32')}"


def _render_workspace(
    editor: DecisionEditor, workspace: Workspace, *, selected: bool
) -> list[str]:
    decision = editor.decision_for(workspace)
    marker = _paint(">", "1", "96") if selected else " "
    label = f"{workspace.name}{' (private)' if workspace.private else ''}"
    lines = [f"{marker} {_paint(label, '1') if selected else label} - {_next_version(workspace, decision)}"]

    gems: list[str] = []
    for strategy in strategies_for(workspace):
        gem = "(o)" if strategy is decision else "( )"
        text = f"{gem} {strategy.value}"
        gems.append(_paint(text, "1", "96") if strategy is decision else text)
    lines.append("    " + "  ".join(gems))
    return lines


def render(
    *,
    editor: DecisionEditor,
    changed_files: Sequence[str],
    rows: Sequence[Workspace],
    index: int,
) -> list[str]:
    """Build the screen for the current editor state, one string per line."""
    roots = [w for w in rows if w in editor.release_roots]
    dependents = [w for w in rows if w not in editor.release_roots]

    lines = [
        f"Press {_paint('<up>/<down>', '1', '96')} to select workspaces.",
        f"Press {_paint('<left>/<right>', '1', '96')} to select release strategies.",
        f"Press {_paint('<enter>', '1', '96')} to save, {_paint('<q>', '1', '96')} to abort.",
        "",
        "The following files have been modified in your local checkout.",
    ]
    lines += [f"  {_paint(f, '2')}" for f in changed_files]

    if roots:
        lines += [
            "",
            "Because of those files having been modified, the following workspaces may need "
            "to be released again (private workspaces are listed too: releasing them flags "
            "their dependents for a potential release):",
        ]
        if len(roots) > _ROOTS_STATS_THRESHOLD:
            lines.append(_paint(str(editor.stats(roots)), "33"))
        lines.append("")
        for workspace in roots:
            lines += _render_workspace(editor, workspace, selected=rows[index] == workspace)

    if dependents:
        lines += [
            "",
            "The following workspaces depend on other workspaces that have been marked for "
            "release, and thus may need to be released as well:",
        ]
        if len(dependents) > _DEPENDENTS_STATS_THRESHOLD:
            lines.append(_paint(str(editor.stats(dependents)), "33"))
        lines.append("")
        for workspace in dependents:
            lines += _render_workspace(editor, workspace, selected=rows[index] == workspace)

    return lines


def _write_screen(lines: list[str]) -> None:
    sys.stdout.write(_clear() + "\r\n".join(lines) + "\r\n")
    sys.stdout.flush()


def prompt_decisions(
    *,
    editor: DecisionEditor,
    changed_files: Sequence[str],
    read: Callable[[], Key] = read_key,
    write: Callable[[list[str]], None] = _write_screen,
) -> ReleaseSet | None:
    """Run the editor until the user saves or aborts.

    Returns:
        The final release set on save, None on abort.

    Raises:
        MissingVersionError: A displayed workspace has no version.
    """
    index = 0

    while True:
        rows = editor.root_workspaces() + editor.dependent_workspaces()
        if not rows:
            return editor.releases
        index = max(0, min(index, len(rows) - 1))

        write(render(editor=editor, changed_files=changed_files, rows=rows, index=index))

        match read():
            case "up":
                index = (index - 1) % len(rows)
            case "down":
                index = (index + 1) % len(rows)
            case "left" | "right" as direction:
                workspace = rows[index]
                step = -1 if direction == "left" else 1
                decision = cycle_decision(
                    strategies_for(workspace), editor.decision_for(workspace), step
                )
                editor.apply_decision(workspace, decision)
            case "enter":
                return editor.releases
            case "cancel":
                return None
            case _:
                pass
