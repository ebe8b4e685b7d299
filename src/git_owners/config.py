from __future__ import annotations

import dataclasses
import json
import os
from pathlib import Path

from .git import DEFAULT_BLAME_TIMEOUT_S
from .github import DEFAULT_API_URL, DEFAULT_LOOKUP_TIMEOUT_S

CONFIG_ENV = "GIT_OWNERS_CONFIG"
GITHUB_BACKENDS = ("auto", "gh", "api")


class ConfigError(ValueError):
    pass


def default_jobs() -> int:
    return max(1, min(8, (os.cpu_count() or 4)))


def default_config_path() -> Path:
    env = (os.environ.get(CONFIG_ENV) or "").strip()
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config" / "git-owners" / "config.json"


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"invalid config {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"invalid config {config_path}: expected a JSON object")
    return data


@dataclasses.dataclass(frozen=True)
class Settings:
    jobs: int = dataclasses.field(default_factory=default_jobs)
    lookup_jobs: int = 4
    blame_timeout_s: int = DEFAULT_BLAME_TIMEOUT_S
    lookup_timeout_s: int = DEFAULT_LOOKUP_TIMEOUT_S
    github_backend: str = "auto"
    github_host: str = "github.com"
    github_api_url: str = DEFAULT_API_URL
    ca_bundle_path: str = ""
    color: bool = True


def _positive_int(value: object, name: str) -> int:
    try:
        n = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid config value for {name}: {value!r}") from e
    return max(1, n)


def _bool(value: object, name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"invalid config value for {name}: {value!r} (expected true or false)")
    return value


def settings_from_config(config: dict, overrides: dict | None = None) -> Settings:
    """
    Build Settings from a loaded config dict. `overrides` holds command-line
    values; entries that are None are ignored.
    """
    merged = dict(config)
    for k, v in (overrides or {}).items():
        if v is not None:
            merged[k] = v

    base = Settings()
    backend = str(merged.get("github_backend", base.github_backend) or base.github_backend).strip().lower()
    if backend not in GITHUB_BACKENDS:
        raise ConfigError(f"invalid config value for github_backend: {backend!r} (expected one of {', '.join(GITHUB_BACKENDS)})")

    return Settings(
        jobs=_positive_int(merged.get("jobs", base.jobs), "jobs"),
        lookup_jobs=_positive_int(merged.get("lookup_jobs", base.lookup_jobs), "lookup_jobs"),
        blame_timeout_s=_positive_int(merged.get("blame_timeout_s", base.blame_timeout_s), "blame_timeout_s"),
        lookup_timeout_s=_positive_int(merged.get("lookup_timeout_s", base.lookup_timeout_s), "lookup_timeout_s"),
        github_backend=backend,
        github_host=str(merged.get("github_host", base.github_host) or base.github_host).strip(),
        github_api_url=str(merged.get("github_api_url", base.github_api_url) or base.github_api_url).strip(),
        ca_bundle_path=str(merged.get("ca_bundle_path", "") or "").strip(),
        color=_bool(merged.get("color", base.color), "color"),
    )
