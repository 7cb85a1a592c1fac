"""Prepper-backed configuration loader for BlockSwift."""

from __future__ import annotations

import os
import re
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

from .errors import ConfigurationError
from .structures import ProjectOptions

APP_NAME = "BlockSwift"
BUNDLE_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9\-]+(\.[A-Za-z0-9\-]+)*$")


class BlockSwiftConfig(SchemaModel):
    """Schema describing all supported configuration options."""

    BLOCKSWIFT_PROJECT_NAME: str = Field(
        default="MyXcodeProject",
        description="Project name used when none is given on the command line.",
    )
    BLOCKSWIFT_BUNDLE_PREFIX: str = Field(
        default="com.example",
        description="Reverse-DNS prefix for generated bundle identifiers.",
    )
    BLOCKSWIFT_USER_NAME: str = Field(
        default="user",
        description="Owner of the xcuserdata folders inside the project.",
    )
    BLOCKSWIFT_MINIMUM_SYSTEM_VERSION: str = Field(
        default="10.15",
        description="Minimum macOS version written to Info.plist.",
    )
    BLOCKSWIFT_DEBUG_RULES: bool = Field(default=False)

    @model_validator(mode="before")
    def _normalise_prefix(data: Any) -> Any:
        if isinstance(data, dict):
            raw_value = data.get("BLOCKSWIFT_BUNDLE_PREFIX")
            if isinstance(raw_value, str):
                data["BLOCKSWIFT_BUNDLE_PREFIX"] = raw_value.strip().strip(".")
        return data


@lru_cache(maxsize=1)
def _load_config_instance(app_dir: Path | None = None) -> ConfigInstance:
    """Load configuration layers once and cache the immutable instance."""

    base_dir = app_dir or Path.cwd()
    try:
        provenance = ProvenanceRecorder()
        combined = _read_yaml_layers(base_dir, provenance)
        _merge_environment(combined, base_dir, provenance)

        # With no sources at all every setting falls back to its default.
        model = BlockSwiftConfig.validate(combined, provenance=provenance)
        _validate_settings(model)

        return ConfigInstance(
            model=model,
            provenance=provenance,
            env_prefix=None,
            schema_cls=BlockSwiftConfig,
        )
    except IoError as exc:
        raise ConfigurationError(
            f"Configuration files could not be read: {exc}"
        ) from exc
    except SchemaError as exc:
        raise ConfigurationError(
            f"Configuration schema error: {exc}"
        ) from exc
    except ValidationError as exc:
        raise ConfigurationError(_format_validation_errors(exc.to_dict())) from exc


def _read_yaml_layers(app_dir: Path, provenance: ProvenanceRecorder) -> dict[str, Any]:
    """Merge every ``BlockSwift`` YAML file found by Prepper's discovery rules."""

    result: dict[str, Any] = {}
    for path, label in discover_file_paths(APP_NAME, "yaml", app_dir=app_dir, extra_paths=None):
        parsed = _parse_file(path, "yaml")
        if not isinstance(parsed, Mapping):
            raise IoError(f"{path} must hold a mapping of BLOCKSWIFT_* settings.")
        source = _path_to_source(label, "yaml", path)
        merge_layer(result, parsed, provenance=provenance, source=source, layer="file")
    return result


def _merge_environment(
    target: dict[str, Any],
    app_dir: Path,
    provenance: ProvenanceRecorder,
) -> None:
    """Layer ``.env`` and then the process environment over ``target``.

    Only keys declared on :class:`BlockSwiftConfig` are taken.
    """

    known = BlockSwiftConfig.__field_infos__.keys()
    layers: list[tuple[str, Mapping[str, str | None]]] = []
    dotenv_path = app_dir / ".env"
    if dotenv_path.exists():
        layers.append((".env", dotenv_values(dotenv_path)))
    layers.append(("process", os.environ))

    for label, values in layers:
        for key in sorted(known):
            value = values.get(key)
            if value is None:
                continue
            merge_layer(
                target,
                {key: value},
                provenance=provenance,
                source=f"env:{label}:{key}",
                layer="env",
            )


def _validate_settings(settings: BlockSwiftConfig) -> None:
    errors: list[str] = []

    if not BUNDLE_PREFIX_PATTERN.match(settings.BLOCKSWIFT_BUNDLE_PREFIX):
        errors.append(
            "BLOCKSWIFT_BUNDLE_PREFIX must be a dotted reverse-DNS prefix "
            f"such as 'com.example' (got '{settings.BLOCKSWIFT_BUNDLE_PREFIX}')."
        )
    if not settings.BLOCKSWIFT_PROJECT_NAME.strip():
        errors.append("BLOCKSWIFT_PROJECT_NAME must not be empty.")
    if not settings.BLOCKSWIFT_USER_NAME.strip() or "/" in settings.BLOCKSWIFT_USER_NAME:
        errors.append("BLOCKSWIFT_USER_NAME must be a non-empty name without '/'.")

    if errors:
        raise ConfigurationError(_bullet_report(errors))


def _format_validation_errors(entries: Sequence[dict[str, Any]]) -> str:
    details: list[str] = []
    for entry in entries:
        path = entry.get("path") or []
        if isinstance(path, (list, tuple)):
            key = ".".join(str(part) for part in path if part)
        else:
            key = str(path)
        message = str(entry.get("message") or "Invalid value")
        details.append(f"{key}: {message}" if key else message)
    return _bullet_report(details)


def _bullet_report(issues: Sequence[str]) -> str:
    return "Configuration validation errors detected:\n" + "\n".join(
        f"- {issue}" for issue in issues
    )


def get_settings(app_dir: Path | None = None) -> BlockSwiftConfig:
    """Return the validated settings, loading them on first use."""

    return _load_config_instance(app_dir=app_dir).model()


def project_options(settings: BlockSwiftConfig) -> ProjectOptions:
    """Translate configuration values into materializer options."""

    return ProjectOptions(
        bundle_prefix=settings.BLOCKSWIFT_BUNDLE_PREFIX,
        user_name=settings.BLOCKSWIFT_USER_NAME,
        minimum_system_version=settings.BLOCKSWIFT_MINIMUM_SYSTEM_VERSION,
    )
