"""
Configuration model for repo-status-check.

The CLI (or any other host) constructs a RunConfig instance and passes
it into the checker, so behavior can be adjusted without relying on a
global settings lookup.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from .errors import ConfigError

SETTINGS_TABLE = "repo_status"

# Key names used by the older plugin settings store.
LEGACY_KEYS = {
    "GitStatusExecutable": "executable",
    "GitStatusDebug": "debug",
    "GitStatusFetch": "fetch",
    "GitStatusFetchWithSudo": "fetch_with_sudo",
    "GitStatusFailFast": "fail_fast",
    "GitStatusIgnoreUntracked": "ignore_untracked",
}

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0", ""}


@dataclass
class RunConfig:
    """
    Settings for a single check run.

    Only ``executable`` and ``repo_root`` affect which commands are run
    and where; the boolean flags select which steps run and how the
    results are reported.
    """

    executable: str = "git"
    repo_root: Path = field(default_factory=Path.cwd)
    debug: bool = False
    fail_fast: bool = False
    ignore_untracked: bool = False
    fetch: bool = False
    fetch_with_sudo: bool = False
    log_file: Optional[Path] = None
    verbosity: int = 0

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "RunConfig":
        """
        Build a RunConfig from a flat settings mapping.

        String flags such as ``"true"`` are accepted because the host
        settings store keeps everything as text. Unknown keys are
        ignored.
        """

        return cls().updated(settings)

    def updated(self, settings: Mapping[str, Any]) -> "RunConfig":
        """Return a copy with the recognized keys of ``settings`` applied."""

        known = {f.name: f for f in fields(self)}
        changes: dict[str, Any] = {}
        for key, value in settings.items():
            name = LEGACY_KEYS.get(key, key)
            if name not in known or value is None:
                continue
            changes[name] = _coerce(name, value)
        return replace(self, **changes)


def load_settings_file(path: Path) -> dict[str, Any]:
    """
    Read the ``[repo_status]`` table from a TOML settings file.

    A file without that table is treated as a flat table of settings.
    """

    try:
        with open(path, "rb") as fh:
            data = tomllib.load(fh)
    except OSError as exc:
        raise ConfigError(f"cannot read settings file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid settings file {path}: {exc}") from exc

    table = data.get(SETTINGS_TABLE, data)
    if not isinstance(table, dict):
        raise ConfigError(f"[{SETTINGS_TABLE}] in {path} must be a table")
    return table


def _coerce(name: str, value: Any) -> Any:
    if name == "executable":
        text = str(value).strip()
        return text or "git"
    if name == "repo_root":
        return Path(value).expanduser()
    if name == "log_file":
        return Path(value).expanduser() if str(value).strip() else None
    if name == "verbosity":
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"verbosity must be an integer, got {value!r}") from exc
    return _as_bool(name, value)


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ConfigError(f"setting {name!r} must be a boolean, got {value!r}")
