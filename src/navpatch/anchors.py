from __future__ import annotations

import re

from navpatch.exceptions import HostIncompatible
from navpatch.model import AnchorWindow

_LINE_BREAK_RE = re.compile(r"\r?\n")


def locate_module(source: str, window: AnchorWindow) -> list[str]:
    """Cut the outline module out of raw host source as a list of lines.

    The region runs from the start marker (omitted when the window says so)
    through the first end marker found after it, inclusive. Either marker
    missing means the host is not one this catalog was written for.
    """

    start = source.find(window.start_marker)
    if start == -1:
        raise HostIncompatible(
            f"outline module start marker not found in host source: {window.start_marker!r}",
            marker=window.start_marker,
        )
    if window.skip_start_marker:
        start += len(window.start_marker)
    tail = source[start:]
    end = tail.find(window.end_marker)
    if end == -1:
        raise HostIncompatible(
            f"outline module end marker not found in host source: {window.end_marker!r}",
            marker=window.end_marker,
        )
    region = tail[: end + len(window.end_marker)]
    return _LINE_BREAK_RE.split(region)
