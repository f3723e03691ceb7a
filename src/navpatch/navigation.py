"""Query facade handing live source files to the patched outline module."""

from __future__ import annotations

from typing import Protocol

from navpatch.cache import NavigationModuleBuilder, NavigationModuleCache
from navpatch.catalog import select_profile
from navpatch.config import NavPatchSettings
from navpatch.exceptions import NoProgramError, NoSourceFileError
from navpatch.model import FeatureFlags


class CancellationToken(Protocol):
    def is_cancellation_requested(self) -> bool: ...

    def throw_if_cancellation_requested(self) -> None: ...


class NoopCancellationToken:
    def is_cancellation_requested(self) -> bool:
        return False

    def throw_if_cancellation_requested(self) -> None:
        return None


class Program(Protocol):
    def get_source_file(self, file_name: str) -> object | None: ...


class LanguageService(Protocol):
    def get_program(self) -> Program | None: ...


class PluginInfo(Protocol):
    language_service: LanguageService
    language_service_host: object


def host_cancellation_token(language_service_host: object) -> CancellationToken:
    """The host's own token when its compiler host exposes one, else a no-op."""

    get_compiler_host = getattr(language_service_host, "get_compiler_host", None)
    compiler_host = get_compiler_host() if callable(get_compiler_host) else None
    get_token = getattr(compiler_host, "get_cancellation_token", None)
    token = get_token() if callable(get_token) else None
    return token if token is not None else NoopCancellationToken()


class NavigationQuery:
    def __init__(
        self,
        info: PluginInfo,
        cache: NavigationModuleCache,
        features: FeatureFlags | None = None,
    ) -> None:
        self.info = info
        self.cache = cache
        self.features = features or FeatureFlags()

    def get_nav_tree_items(
        self, file_name: str, features: FeatureFlags | None = None
    ) -> object:
        program = self.info.language_service.get_program()
        if program is None:
            raise NoProgramError("no program")
        source_file = program.get_source_file(file_name)
        if source_file is None:
            raise NoSourceFileError(file_name)
        cancellation_token = host_cancellation_token(self.info.language_service_host)
        module = self.cache.get(features or self.features)
        return module.get_navigation_tree(source_file, cancellation_token)


def create_navigation_query(
    info: PluginInfo,
    host_api: object,
    settings: NavPatchSettings | None = None,
) -> NavigationQuery:
    settings = settings or NavPatchSettings()
    profile = (
        select_profile(settings.host_version)
        if settings.host_version is not None
        else None
    )
    builder = NavigationModuleBuilder(
        host_api,
        profile=profile,
        source_path=settings.host_source_path,
    )
    return NavigationQuery(
        info,
        NavigationModuleCache.for_builder(builder),
        features=settings.features,
    )
