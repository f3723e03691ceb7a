from __future__ import annotations

import pytest

from navpatch.cache import NavigationModule, NavigationModuleBuilder, NavigationModuleCache
from navpatch.catalog import REFACTORED_PROFILE
from navpatch.exceptions import HostIncompatible
from navpatch.model import FeatureFlags, SynthesisPlan
from tests.host_fixtures import make_host_api


def _fake_module(features: FeatureFlags) -> NavigationModule:
    plan = SynthesisPlan(profile=REFACTORED_PROFILE, features=features, module_text="")
    return NavigationModule(
        profile=REFACTORED_PROFILE,
        features=features,
        plan=plan,
        get_navigation_tree=lambda source_file, token: (source_file, token),
    )


def test_cache_builds_once_per_feature_set() -> None:
    built: list[FeatureFlags] = []

    def _build(features: FeatureFlags) -> NavigationModule:
        built.append(features)
        return _fake_module(features)

    cache = NavigationModuleCache(_build)
    first = cache.get(FeatureFlags())
    assert cache.get(FeatureFlags()) is first
    assert cache.get() is first
    numbered = cache.get(FeatureFlags(arrays_tuples_numbered_items=True))
    assert numbered is not first
    assert numbered.features.arrays_tuples_numbered_items
    assert cache.get(FeatureFlags(arrays_tuples_numbered_items=True)) is numbered
    assert built == [FeatureFlags(), FeatureFlags(arrays_tuples_numbered_items=True)]
    assert cache.build_count == 2
    assert FeatureFlags() in cache


def test_cache_remembers_failed_builds() -> None:
    calls = 0

    def _build(features: FeatureFlags) -> NavigationModule:
        nonlocal calls
        calls += 1
        raise HostIncompatible("missing marker", marker="BEGIN")

    cache = NavigationModuleCache(_build)
    with pytest.raises(HostIncompatible):
        cache.get(FeatureFlags())
    with pytest.raises(HostIncompatible):
        cache.get(FeatureFlags())
    assert calls == 1
    assert FeatureFlags() not in cache


def test_builder_reads_host_source_once(write_host_source, refactored_source: str) -> None:
    path = write_host_source(refactored_source)
    plans: list[SynthesisPlan] = []
    builder = NavigationModuleBuilder(make_host_api(), source_path=path, on_build=plans.append)
    cache = NavigationModuleCache.for_builder(builder)
    cache.get(FeatureFlags())
    path.unlink()
    cache.get(FeatureFlags(arrays_tuples_numbered_items=True))
    assert [plan.features for plan in plans] == [
        FeatureFlags(),
        FeatureFlags(arrays_tuples_numbered_items=True),
    ]


def test_builder_selects_profile_from_host_version(refactored_source: str) -> None:
    builder = NavigationModuleBuilder(make_host_api(version="5.1.0"), host_source=refactored_source)
    assert builder.profile is REFACTORED_PROFILE


def test_builder_rejects_host_without_version(refactored_source: str) -> None:
    host_api = make_host_api()
    del host_api.version
    builder = NavigationModuleBuilder(host_api, host_source=refactored_source)
    with pytest.raises(HostIncompatible):
        builder.build(FeatureFlags())
