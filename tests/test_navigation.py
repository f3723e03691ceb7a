from __future__ import annotations

import pytest

from navpatch.cache import NavigationModule, NavigationModuleBuilder, NavigationModuleCache
from navpatch.catalog import LEGACY_PROFILE, REFACTORED_PROFILE
from navpatch.config import NavPatchSettings
from navpatch.exceptions import NoProgramError, NoSourceFileError
from navpatch.model import FeatureFlags, SynthesisPlan
from navpatch.navigation import (
    NavigationQuery,
    NoopCancellationToken,
    create_navigation_query,
    host_cancellation_token,
)
from tests.host_fixtures import (
    FakeProgram,
    RecordingToken,
    make_host_api,
    make_plugin_info,
    sample_source_file,
)


class RecordingCache(NavigationModuleCache):
    def __init__(self) -> None:
        self.calls: list[tuple[object, object]] = []
        super().__init__(self._build_module)

    def _build_module(self, features: FeatureFlags) -> NavigationModule:
        def _get_navigation_tree(source_file, token):
            self.calls.append((source_file, token))
            return {"text": "<global>", "features": features}

        return NavigationModule(
            profile=REFACTORED_PROFILE,
            features=features,
            plan=SynthesisPlan(profile=REFACTORED_PROFILE, features=features, module_text=""),
            get_navigation_tree=_get_navigation_tree,
        )


def test_missing_program_fails_before_building() -> None:
    cache = RecordingCache()
    query = NavigationQuery(make_plugin_info(None), cache)
    with pytest.raises(NoProgramError):
        query.get_nav_tree_items("main.tsx")
    assert cache.build_count == 0


def test_missing_source_file_names_the_file() -> None:
    query = NavigationQuery(make_plugin_info(FakeProgram({})), RecordingCache())
    with pytest.raises(NoSourceFileError) as exc:
        query.get_nav_tree_items("main.tsx")
    assert exc.value.file_name == "main.tsx"


def test_cancelled_token_is_passed_through_untouched() -> None:
    source_file = object()
    token = RecordingToken(cancelled=True)
    cache = RecordingCache()
    query = NavigationQuery(make_plugin_info(FakeProgram({"main.tsx": source_file}), token=token), cache)
    result = query.get_nav_tree_items("main.tsx")
    assert result["text"] == "<global>"
    assert cache.calls == [(source_file, token)]
    assert cache.calls[0][1] is token


def test_noop_token_when_host_has_none() -> None:
    assert isinstance(host_cancellation_token(object()), NoopCancellationToken)
    info = make_plugin_info(FakeProgram({}), token=None)
    assert isinstance(host_cancellation_token(info.language_service_host), NoopCancellationToken)
    token = NoopCancellationToken()
    assert token.is_cancellation_requested() is False
    assert token.throw_if_cancellation_requested() is None


def test_query_uses_default_and_explicit_features() -> None:
    cache = RecordingCache()
    numbered = FeatureFlags(arrays_tuples_numbered_items=True)
    query = NavigationQuery(make_plugin_info(FakeProgram({"a.tsx": object()})), cache, features=numbered)
    assert query.get_nav_tree_items("a.tsx")["features"] == numbered
    assert query.get_nav_tree_items("a.tsx", FeatureFlags())["features"] == FeatureFlags()
    assert cache.build_count == 2


def test_repeated_queries_synthesize_once(refactored_source: str) -> None:
    synthesized = []
    builder = NavigationModuleBuilder(
        make_host_api(), host_source=refactored_source, on_build=synthesized.append
    )
    cache = NavigationModuleCache.for_builder(builder)
    source_file = sample_source_file()
    query = NavigationQuery(make_plugin_info(FakeProgram({"app.tsx": source_file})), cache)
    first = query.get_nav_tree_items("app.tsx")
    second = query.get_nav_tree_items("app.tsx")
    assert first == second
    assert cache.get(FeatureFlags()) is cache.get(FeatureFlags())
    assert len(synthesized) == 1
    assert cache.build_count == 1


def test_create_navigation_query_applies_settings(write_host_source, legacy_source: str) -> None:
    path = write_host_source(legacy_source)
    settings = NavPatchSettings(
        features=FeatureFlags(arrays_tuples_numbered_items=True),
        host_source_path=path,
        host_version="4.8",
    )
    source_file = sample_source_file()
    query = create_navigation_query(
        make_plugin_info(FakeProgram({"app.tsx": source_file})),
        make_host_api(version="5.0"),
        settings,
    )
    outline = query.get_nav_tree_items("app.tsx")
    assert [item["text"] for item in outline["child_items"]][-2:] == ["0", "1"]
    assert query.cache.get(settings.features).profile is LEGACY_PROFILE
