from __future__ import annotations

import os
import sys
from pathlib import Path

from navpatch.exceptions import HostIncompatible

HOST_SOURCE_ENV = "NAVPATCH_HOST_SOURCE"


def probe_host_version(host_api: object) -> str:
    for attribute in ("version", "__version__"):
        version = getattr(host_api, attribute, None)
        if isinstance(version, str) and version.strip():
            return version.strip()
    raise HostIncompatible("host API does not report a version")


def resolve_host_source_path(override: Path | str | None = None) -> Path:
    """Path of the host entry script whose text holds the outline module.

    Normally the running host's own ``__main__`` module; an explicit override
    or ``NAVPATCH_HOST_SOURCE`` takes precedence.
    """

    if override:
        return Path(override)
    env_path = os.getenv(HOST_SOURCE_ENV, "").strip()
    if env_path:
        return Path(env_path)
    main_path = getattr(sys.modules.get("__main__"), "__file__", None)
    if not main_path:
        raise HostIncompatible("cannot determine the host entry script path")
    return Path(main_path)


def read_host_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise HostIncompatible(f"cannot read host source {path}: {exc}") from exc
