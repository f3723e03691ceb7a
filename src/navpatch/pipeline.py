from __future__ import annotations

from navpatch.anchors import locate_module
from navpatch.model import FeatureFlags, HostVersionProfile, SynthesisPlan
from navpatch.patches import apply_patches
from navpatch.resolver import DiagnosticsProbe, SymtableProbe, resolve_free_variables
from navpatch.synthesis import synthesize_module


def synthesize_navigation_module(
    source: str,
    profile: HostVersionProfile,
    features: FeatureFlags | None = None,
    *,
    probe: DiagnosticsProbe | None = None,
) -> SynthesisPlan:
    """Locate, patch and wrap the host outline module without executing it."""

    features = features or FeatureFlags()
    lines = locate_module(source, profile.anchor)
    outcomes = apply_patches(lines, profile.catalog_for(features))
    resolved_names: frozenset[str] = frozenset()
    if profile.needs_free_variable_resolution:
        resolution = resolve_free_variables(
            lines,
            profile.export_expression,
            probe if probe is not None else SymtableProbe(),
        )
        module_text = resolution.module_text
        resolved_names = resolution.names
    else:
        module_text = synthesize_module(lines, profile.export_expression)
    return SynthesisPlan(
        profile=profile,
        features=features,
        module_text=module_text,
        outcomes=outcomes,
        resolved_names=resolved_names,
    )
