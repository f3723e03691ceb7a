from __future__ import annotations

from enum import IntEnum


class DiagnosticCode(IntEnum):
    SYNTAX_ERROR = 1005
    CANNOT_FIND_NAME = 2304
    CANNOT_FIND_NAME_DID_YOU_MEAN = 2552
    CANNOT_FIND_NAME_FROM_LIB = 2583


_CANNOT_FIND_PREFIX = "CANNOT_FIND_"


def cannot_find_codes(*, include_from_lib: bool = True) -> frozenset[int]:
    """All "name not found" codes, optionally without the library variant."""

    codes = {
        int(code)
        for code in DiagnosticCode
        if code.name.startswith(_CANNOT_FIND_PREFIX)
    }
    if not include_from_lib:
        codes.discard(int(DiagnosticCode.CANNOT_FIND_NAME_FROM_LIB))
    return frozenset(codes)
