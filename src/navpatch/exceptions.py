"""Exception and warning types raised by navpatch."""

from __future__ import annotations


class NavPatchError(RuntimeError):
    pass


class HostIncompatible(NavPatchError):
    """The host source or host API does not have the shape navpatch expects.

    Raised when an anchor marker is missing, when the host version cannot be
    read, or when the patched module needs a binding the host does not have.
    These reflect a host/version mismatch and are never retried.
    """

    def __init__(self, message: str, *, marker: str | None = None) -> None:
        super().__init__(message)
        self.marker = marker


class ModuleSynthesisError(NavPatchError):
    """The synthesized module text could not be compiled."""


class NoProgramError(NavPatchError):
    pass


class NoSourceFileError(NavPatchError):
    def __init__(self, file_name: str) -> None:
        super().__init__(f"no source file for {file_name}")
        self.file_name = file_name


class PatchSkippedWarning(UserWarning):
    """A catalog patch could not be applied; the outline lacks that enhancement."""
