from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel

from navpatch.model import SynthesisPlan


class PatchOutcomeDTO(BaseModel):
    search_token: str
    line_offset: int
    applied: bool
    index: Optional[int] = None
    feature: Optional[str] = None


class SynthesisReportDTO(BaseModel):
    profile: str
    host_version: str
    features: Dict[str, bool]
    line_count: int
    patches: List[PatchOutcomeDTO]
    resolved_names: List[str] = []
    warnings: List[str] = []

    @classmethod
    def from_plan(cls, plan: SynthesisPlan, *, host_version: str) -> "SynthesisReportDTO":
        return cls(
            profile=plan.profile.kind.value,
            host_version=host_version,
            features=plan.features.as_dict(),
            line_count=len(plan.module_text.splitlines()),
            patches=[
                PatchOutcomeDTO(
                    search_token=outcome.op.search_token,
                    line_offset=outcome.op.line_offset,
                    applied=outcome.applied,
                    index=outcome.index,
                    feature=outcome.op.feature,
                )
                for outcome in plan.outcomes
            ],
            resolved_names=sorted(plan.resolved_names),
            warnings=plan.warnings,
        )
