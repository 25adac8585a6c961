"""Application services.

Services coordinate the release core (release/) with the infrastructure
that feeds it (git/, project/) and the files it persists to.
"""

from vcheck.services.check import CheckOutcome, CheckService
from vcheck.services.version_file import VersionFile, VersionFileError, open_version_file

__all__ = [
    "CheckOutcome",
    "CheckService",
    "VersionFile",
    "VersionFileError",
    "open_version_file",
]
