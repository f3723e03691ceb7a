"""navpatch package root."""

from navpatch.exceptions import (
    HostIncompatible,
    ModuleSynthesisError,
    NavPatchError,
    NoProgramError,
    NoSourceFileError,
    PatchSkippedWarning,
)
from navpatch.labels import format_markup_label
from navpatch.model import FeatureFlags
from navpatch.navigation import NavigationQuery, create_navigation_query

__all__ = [
    "__version__",
    "FeatureFlags",
    "HostIncompatible",
    "ModuleSynthesisError",
    "NavPatchError",
    "NavigationQuery",
    "NoProgramError",
    "NoSourceFileError",
    "PatchSkippedWarning",
    "create_navigation_query",
    "format_markup_label",
]

__version__ = "0.1.0"
