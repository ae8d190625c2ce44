"""Project-scoped update settings stored in ``.nexu.yaml``.

Example::

    update:
      exclude:
        - .env.local
        - apps
      scripts: preserve   # or: overwrite
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from create_nexu.core.constants import EXCLUDE_FROM_DELETION, PROJECT_CONFIG_FILE
from create_nexu.errors import ConfigError
from create_nexu.sync.manifest import ScriptPolicy


@dataclass(slots=True)
class UpdateConfig:
    """Settings for ``create-nexu update``."""

    extra_exclusions: tuple[str, ...] = ()
    script_policy: ScriptPolicy = ScriptPolicy.PRESERVE
    source: Path | None = field(default=None, compare=False)

    @property
    def exclusions(self) -> frozenset[str]:
        return EXCLUDE_FROM_DELETION | frozenset(self.extra_exclusions)

    @classmethod
    def from_dict(cls, data: object, source: Path | None = None) -> "UpdateConfig":
        if data is None:
            return cls(source=source)
        if not isinstance(data, dict):
            raise ConfigError(f"{source}: 'update' must be a mapping")

        exclude = data.get("exclude") or []
        if not isinstance(exclude, list) or not all(isinstance(item, str) for item in exclude):
            raise ConfigError(f"{source}: 'update.exclude' must be a list of strings")

        raw_policy = data.get("scripts", ScriptPolicy.PRESERVE.value)
        try:
            policy = ScriptPolicy(str(raw_policy).strip().lower())
        except ValueError:
            allowed = ", ".join(p.value for p in ScriptPolicy)
            raise ConfigError(
                f"{source}: 'update.scripts' must be one of {allowed}, got {raw_policy!r}"
            ) from None

        return cls(
            extra_exclusions=tuple(item.strip() for item in exclude if item.strip()),
            script_policy=policy,
            source=source,
        )


def load_project_config(project_dir: Path) -> UpdateConfig:
    """Load ``.nexu.yaml`` from *project_dir*; defaults when absent."""
    config_path = project_dir / PROJECT_CONFIG_FILE
    if not config_path.exists():
        return UpdateConfig()

    yaml = YAML(typ="safe")
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            payload = yaml.load(handle) or {}
    except (OSError, YAMLError) as exc:
        raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"{config_path}: top-level value must be a mapping")
    return UpdateConfig.from_dict(payload.get("update"), source=config_path)


__all__ = ["UpdateConfig", "load_project_config"]
