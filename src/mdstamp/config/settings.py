"""StampSettings: one frozen object built from flags, environment and ``mdstamp.toml``.

Sources, strongest first: keyword arguments from the CLI, ``MDSTAMP_*``
environment variables (``__`` separates nested keys), the TOML file, then
the model defaults.
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from mdstamp.config.discovery import find_config
from mdstamp.config.models import FieldConfig, PluginsConfig
from mdstamp.domain.fields import FieldSpec

# Config file chosen by ``from_cli`` for the construction in progress.
_active_toml: ContextVar[Path | None] = ContextVar("mdstamp_active_toml", default=None)


def _read_toml(path: Path | None) -> dict[str, Any]:
    if path is None or not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source over a parsed ``mdstamp.toml`` table."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._table = _read_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._table.get(field_name), field_name, field_name in self._table

    def __call__(self) -> dict[str, Any]:
        return dict(self._table)


class StampSettings(BaseSettings):
    """Everything a run needs to know.

    ``project_root`` is the directory holding the config file in use (or
    the working directory without one); the local plugin directory
    resolves against it. ``metadata`` keeps the TOML table's key order,
    which is the order fields are applied in.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MDSTAMP_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # output and logging
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # config file keys
    git: bool = True
    metadata: dict[str, FieldConfig] = Field(default_factory=dict)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlSettingsSource(settings_cls, _active_toml.get())
        return init_settings, env_settings, toml

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **flags: Any,
    ) -> StampSettings:
        """Build settings for one invocation.

        An explicit *config_path* wins over the walk-up search from
        *project_root* (or the working directory). Flags whose value is
        None were not given on the command line and do not override
        anything.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(project_root)

        if project_root is None:
            project_root = toml_path.parent if toml_path is not None else Path.cwd()

        given = {name: value for name, value in flags.items() if value is not None}
        token = _active_toml.set(toml_path)
        try:
            return cls(project_root=project_root, config_path=toml_path, **given)
        except ValidationError as exc:
            where = toml_path if toml_path is not None else "settings"
            raise click.ClickException(f"Invalid config {where}: {exc}") from exc
        finally:
            _active_toml.reset(token)

    def field_specs(self) -> dict[str, FieldSpec]:
        """Field specs from the ``[metadata]`` table, in file order."""
        return {name: cfg.to_spec() for name, cfg in self.metadata.items()}

    @property
    def plugins_dir(self) -> Path:
        return self.project_root / self.plugins.local_dir
