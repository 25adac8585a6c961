"""Batch validation of a version file, reported through a console."""

from __future__ import annotations

from dataclasses import dataclass

from vcheck.core.errors import ErrorCode
from vcheck.output.console import ConsoleProtocol, Style
from vcheck.release.graph import Workspace
from vcheck.release.validator import ValidationReport, validate
from vcheck.services.version_file import VersionFile

__all__ = ["CheckOutcome", "CheckService", "describe_workspace"]


def describe_workspace(workspace: Workspace) -> str:
    if workspace.version is None:
        return workspace.name
    return f"{workspace.name}@{workspace.version}"


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    report: ValidationReport

    @property
    def exit_code(self) -> ErrorCode:
        return ErrorCode.OK if self.report.ok else ErrorCode.USER_ERROR


class CheckService:
    """Validate the decisions of a version file and print the findings."""

    def __init__(self, *, version_file: VersionFile, console: ConsoleProtocol) -> None:
        self._vf = version_file
        self._console = console

    def run(self) -> CheckOutcome:
        vf = self._vf
        console = self._console

        console.info(
            f"Your branch was started right after {vf.base.short_hash} {vf.base.title}"
        )
        if vf.changed_files:
            console.info("You have changed the following files since then:")
            console.separator()
            for file in vf.changed_files:
                console.print(f"  {file}", Style.DIM)

        report = validate(vf.release_roots, vf.releases, vf.project)

        if report.undecided_roots:
            console.separator()
            for workspace in report.undecided_roots:
                console.error(
                    f"{describe_workspace(workspace)} has been modified "
                    "but doesn't have a release strategy attached"
                )

        if report.undecided_dependents:
            console.separator()
            for workspace, dependency in report.undecided_dependents:
                console.error(
                    f"{describe_workspace(workspace)} doesn't have a release strategy attached, "
                    f"but depends on {dependency.name} which is planned for release."
                )

        if not report.ok:
            console.separator()
            console.info(
                "At least some workspaces have received modifications without explicit "
                "instructions as to how they had to be released (if needed)."
            )
            console.info(
                "To correct these errors, run `vcheck check --interactive` "
                "then follow the instructions."
            )
        else:
            console.success("every modified workspace has a release strategy")

        return CheckOutcome(report=report)
