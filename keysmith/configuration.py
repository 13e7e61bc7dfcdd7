"""Prepper-backed configuration loader for keysmith."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Sequence

from dotenv import dotenv_values
from prepper import (
    Field,
    IoError,
    SchemaError,
    SchemaModel,
    ValidationError,
    model_validator,
)
from prepper.config import ConfigInstance
from prepper.loaders import _parse_file, _path_to_source, discover_file_paths
from prepper.merge import merge_layer
from prepper.provenance import ProvenanceRecorder

from .errors import KeysmithConfigurationError

APP_NAME = "Keysmith"


class KeysmithConfig(SchemaModel):
    """Schema describing all supported configuration options."""

    KEYSMITH_OUTPUT: str = Field(
        default="en.json",
        description="Path of the generated locale JSON file.",
    )
    KEYSMITH_MAX_SLUG: int = Field(
        default=30,
        description="Maximum slug length in characters.",
    )
    KEYSMITH_SKIP_SYMBOLS: bool = Field(
        default=False,
        description="Ignore text made only of symbols and punctuation.",
    )
    KEYSMITH_VERBOSE: bool = Field(default=False)

    @model_validator(mode="before")
    def _normalise_output(data: Any) -> Any:
        if isinstance(data, dict):
            raw_value = data.get("KEYSMITH_OUTPUT")
            if isinstance(raw_value, str):
                data["KEYSMITH_OUTPUT"] = raw_value.strip() or "en.json"
        return data


@lru_cache(maxsize=4)
def _load_config_instance(
    app_dir: Path | None = None,
    config_path: Path | None = None,
) -> ConfigInstance:
    """Load configuration layers once and cache the immutable instance."""

    base_dir = app_dir or Path.cwd()
    try:
        provenance = ProvenanceRecorder()
        combined = _load_discovered_yaml(app_dir=base_dir, provenance=provenance)
        if config_path is not None:
            _merge_explicit_yaml(combined, config_path, provenance=provenance)
        _merge_env_sources(
            combined,
            provenance=provenance,
            app_dir=base_dir,
            schema=KeysmithConfig,
        )

        model = KeysmithConfig.validate(combined, provenance=provenance)
        _validate_settings(model)

        return ConfigInstance(
            model=model,
            provenance=provenance,
            env_prefix=None,
            schema_cls=KeysmithConfig,
        )
    except IoError as exc:
        raise KeysmithConfigurationError(
            f"Configuration files could not be read: {exc}"
        ) from exc
    except SchemaError as exc:
        raise KeysmithConfigurationError(
            f"Configuration schema error: {exc}"
        ) from exc
    except ValidationError as exc:
        issues = _format_validation_errors(exc.to_dict())
        raise KeysmithConfigurationError(issues) from exc


def _load_discovered_yaml(
    *,
    app_dir: Path,
    provenance: ProvenanceRecorder,
) -> dict[str, Any]:
    """Load YAML configuration files using Prepper's discovery rules."""

    result: dict[str, Any] = {}
    discovered = discover_file_paths(
        APP_NAME,
        "yaml",
        app_dir=app_dir,
        extra_paths=None,
    )
    for path, label in discovered:
        _merge_yaml_file(result, path, label, provenance=provenance)
    return result


def _merge_explicit_yaml(
    target: dict[str, Any],
    config_path: Path,
    *,
    provenance: ProvenanceRecorder,
) -> None:
    if not config_path.is_file():
        raise KeysmithConfigurationError(
            f"Configuration file {config_path} does not exist."
        )
    _merge_yaml_file(target, config_path, "explicit", provenance=provenance)


def _merge_yaml_file(
    target: dict[str, Any],
    path: Path,
    label: Any,
    *,
    provenance: ProvenanceRecorder,
) -> None:
    parsed = _parse_file(path, "yaml")
    if parsed is None:
        return
    if not isinstance(parsed, Mapping):
        raise IoError(
            f"Invalid configuration file {path}: expected a mapping at the root."
        )
    source = _path_to_source(label, "yaml", path)
    merge_layer(target, parsed, provenance=provenance, source=source, layer="file")


def _merge_env_sources(
    target: dict[str, Any],
    *,
    provenance: ProvenanceRecorder,
    app_dir: Path,
    schema: type[SchemaModel],
) -> None:
    """Layer ``.env`` values, then the process environment, over ``target``.

    Only ``KEYSMITH_*`` names declared on the schema are taken; the process
    environment is applied last so it wins over the ``.env`` file.
    """

    fields = schema.__field_infos__
    layers: list[tuple[str, Mapping[str, str | None]]] = []
    dotenv_path = app_dir / ".env"
    if dotenv_path.is_file():
        layers.append((".env", dotenv_values(dotenv_path)))
    layers.append(("process", os.environ))

    for origin, values in layers:
        for name in sorted(fields):
            value = values.get(name)
            if value is None:
                continue
            merge_layer(
                target,
                {name: value},
                provenance=provenance,
                source=f"env:{origin}:{name}",
                layer="env",
            )


def _validate_settings(settings: KeysmithConfig) -> None:
    if settings.KEYSMITH_MAX_SLUG < 1:
        raise KeysmithConfigurationError(
            "Configuration validation errors detected:\n"
            f"- KEYSMITH_MAX_SLUG must be at least 1 (got {settings.KEYSMITH_MAX_SLUG})."
        )


def _format_validation_errors(entries: Sequence[dict[str, Any]]) -> str:
    lines = ["Configuration validation errors detected:"]
    for entry in entries:
        location = entry.get("path") or ""
        if isinstance(location, (list, tuple)):
            location = ".".join(str(part) for part in location if part)
        message = entry.get("message") or entry.get("msg") or "Invalid value"
        line = f"- {location}: {message}" if location else f"- {message}"
        if entry.get("source"):
            line += f" (source: {entry['source']})"
        lines.append(line)
    return "\n".join(lines)


def get_config(
    app_dir: Path | None = None,
    config_path: Path | None = None,
) -> ConfigInstance:
    """Return the immutable configuration instance."""

    return _load_config_instance(app_dir=app_dir, config_path=config_path)


def get_settings(
    app_dir: Path | None = None,
    config_path: Path | None = None,
) -> KeysmithConfig:
    """Return the validated schema model for typed access."""

    return get_config(app_dir=app_dir, config_path=config_path).model()
