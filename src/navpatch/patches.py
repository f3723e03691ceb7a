from __future__ import annotations

import warnings
from typing import Iterable, MutableSequence

from navpatch.exceptions import PatchSkippedWarning
from navpatch.model import PatchOp, PatchOutcome, skipped_patch_message
from navpatch.synthesis import indent_code


def find_token(lines: MutableSequence[str], token: str) -> int:
    for index, line in enumerate(lines):
        if token in line:
            return index
    return -1


def _indentation(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def splice_indentation(lines: MutableSequence[str], index: int) -> str:
    """Indentation of the code that inserted text will sit in front of."""

    for line in lines[index:]:
        if line.strip():
            return _indentation(line)
    for line in reversed(lines[:index]):
        if line.strip():
            return _indentation(line)
    return ""


def apply_patch(lines: MutableSequence[str], op: PatchOp) -> PatchOutcome:
    found = find_token(lines, op.search_token)
    target = found + op.line_offset
    if found == -1 or not 0 <= target <= target + op.removed_line_count <= len(lines):
        warnings.warn(
            skipped_patch_message(op.search_token),
            PatchSkippedWarning,
            stacklevel=2,
        )
        return PatchOutcome(op=op, applied=False)
    prefix = splice_indentation(lines, target)
    inserted = [indent_code(block, prefix) for block in op.inserted_lines]
    lines[target : target + op.removed_line_count] = inserted
    return PatchOutcome(op=op, applied=True, index=target)


def apply_patches(
    lines: MutableSequence[str], ops: Iterable[PatchOp]
) -> tuple[PatchOutcome, ...]:
    """Apply ``ops`` in order, each one searching the buffer as left by the last."""

    return tuple(apply_patch(lines, op) for op in ops)
