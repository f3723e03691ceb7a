from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Mapping, Tuple


@dataclass(frozen=True)
class AnchorWindow:
    start_marker: str
    end_marker: str
    skip_start_marker: bool = False


@dataclass(frozen=True)
class PatchOp:
    search_token: str
    line_offset: int
    inserted_lines: Tuple[str, ...] = ()
    removed_line_count: int = 0
    feature: str | None = None


@dataclass(frozen=True)
class FeatureFlags:
    arrays_tuples_numbered_items: bool = False

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "FeatureFlags":
        known = {item.name for item in fields(cls)}
        return cls(**{key: bool(value) for key, value in values.items() if key in known})

    def enabled(self, name: str) -> bool:
        return bool(getattr(self, name, False))

    def as_dict(self) -> dict[str, bool]:
        return {item.name: bool(getattr(self, item.name)) for item in fields(self)}


class ProfileKind(str, Enum):
    LEGACY = "legacy"
    REFACTORED = "refactored"


@dataclass(frozen=True)
class HostVersionProfile:
    kind: ProfileKind
    anchor: AnchorWindow
    patches: Tuple[PatchOp, ...]
    export_expression: str
    needs_free_variable_resolution: bool = False

    def catalog_for(self, features: FeatureFlags) -> list[PatchOp]:
        """Return the ordered ops, dropping gated ops whose feature is off."""

        return [
            op
            for op in self.patches
            if op.feature is None or features.enabled(op.feature)
        ]


@dataclass(frozen=True)
class PatchOutcome:
    op: PatchOp
    applied: bool
    index: int | None = None


@dataclass(frozen=True)
class SynthesisPlan:
    profile: HostVersionProfile
    features: FeatureFlags
    module_text: str
    outcomes: Tuple[PatchOutcome, ...] = ()
    resolved_names: frozenset[str] = field(default_factory=frozenset)

    @property
    def applied(self) -> list[PatchOp]:
        return [outcome.op for outcome in self.outcomes if outcome.applied]

    @property
    def skipped(self) -> list[PatchOp]:
        return [outcome.op for outcome in self.outcomes if not outcome.applied]

    @property
    def warnings(self) -> list[str]:
        return [skipped_patch_message(op.search_token) for op in self.skipped]


def skipped_patch_message(search_token: str) -> str:
    return f"Failed to patch navigation module (outline): {search_token}"
