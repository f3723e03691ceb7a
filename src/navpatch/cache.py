from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from navpatch.catalog import select_profile
from navpatch.exceptions import HostIncompatible, NavPatchError
from navpatch.host import probe_host_version, read_host_source, resolve_host_source_path
from navpatch.labels import format_markup_label
from navpatch.model import FeatureFlags, HostVersionProfile, SynthesisPlan
from navpatch.pipeline import synthesize_navigation_module
from navpatch.resolver import DiagnosticsProbe, default_probe
from navpatch.synthesis import compile_module

EXPORTED_FUNCTION = "get_navigation_tree"

NavigationTreeBuilder = Callable[[object, object], object]


@dataclass(frozen=True)
class NavigationModule:
    profile: HostVersionProfile
    features: FeatureFlags
    plan: SynthesisPlan
    get_navigation_tree: NavigationTreeBuilder


def _exported_function(exports: object) -> NavigationTreeBuilder:
    if isinstance(exports, Mapping):
        function = exports.get(EXPORTED_FUNCTION)
    else:
        function = getattr(exports, EXPORTED_FUNCTION, None)
    if not callable(function):
        raise HostIncompatible(
            f"patched navigation module does not export {EXPORTED_FUNCTION}"
        )
    return function


class NavigationModuleBuilder:
    """Builds the patched outline module for one host API object."""

    def __init__(
        self,
        host_api: object,
        *,
        profile: HostVersionProfile | None = None,
        host_source: str | None = None,
        source_path: Path | str | None = None,
        probe: DiagnosticsProbe | None = None,
        label_formatter: Callable[..., str] = format_markup_label,
        on_build: Callable[[SynthesisPlan], None] | None = None,
    ) -> None:
        self.host_api = host_api
        self._profile = profile
        self._host_source = host_source
        self._source_path = source_path
        self._probe = probe
        self._label_formatter = label_formatter
        self._on_build = on_build

    @property
    def profile(self) -> HostVersionProfile:
        if self._profile is None:
            self._profile = select_profile(probe_host_version(self.host_api))
        return self._profile

    def host_source(self) -> str:
        if self._host_source is None:
            path = resolve_host_source_path(self._source_path)
            self._host_source = read_host_source(path)
        return self._host_source

    def plan(self, features: FeatureFlags) -> SynthesisPlan:
        probe = self._probe if self._probe is not None else default_probe(self.host_api)
        return synthesize_navigation_module(
            self.host_source(), self.profile, features, probe=probe
        )

    def build(self, features: FeatureFlags) -> NavigationModule:
        plan = self.plan(features)
        if self._on_build is not None:
            self._on_build(plan)
        factory = compile_module(
            plan.module_text,
            {"host_api": self.host_api, "label_formatter": self._label_formatter},
        )
        try:
            exports = factory()
        except AttributeError as exc:
            raise HostIncompatible(
                f"host API is missing a binding the navigation module needs: {exc}"
            ) from exc
        return NavigationModule(
            profile=plan.profile,
            features=features,
            plan=plan,
            get_navigation_tree=_exported_function(exports),
        )


class NavigationModuleCache:
    """Process-lifetime store of built modules, one per feature flag set.

    A build failure is remembered for its flag set and raised again on later
    lookups instead of rebuilding.
    """

    def __init__(self, build: Callable[[FeatureFlags], NavigationModule]) -> None:
        self._build = build
        self._modules: dict[FeatureFlags, NavigationModule] = {}
        self._failures: dict[FeatureFlags, NavPatchError] = {}
        self._lock = threading.Lock()
        self.build_count = 0

    @classmethod
    def for_builder(cls, builder: NavigationModuleBuilder) -> "NavigationModuleCache":
        return cls(builder.build)

    def get(self, features: FeatureFlags | None = None) -> NavigationModule:
        key = features or FeatureFlags()
        with self._lock:
            module = self._modules.get(key)
            if module is not None:
                return module
            failure = self._failures.get(key)
            if failure is not None:
                raise failure
            self.build_count += 1
            try:
                module = self._build(key)
            except NavPatchError as exc:
                self._failures[key] = exc
                raise
            self._modules[key] = module
            return module

    def __contains__(self, features: object) -> bool:
        return features in self._modules
