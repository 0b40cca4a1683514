"""Utilities for inspecting and validating configuration files."""

from __future__ import annotations

from pathlib import Path
from types import UnionType
from typing import Any, Iterable, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo

from .app import AppConfig
from .base import load_config
from .storage import StorageConfig


class ConfigInspectionError(RuntimeError):
    """Raised when configuration inspection fails unexpectedly."""


def check_config(
    path: Path, *, config_cls: type[AppConfig] = AppConfig
) -> tuple[dict[str, Any], int, AppConfig | None]:
    """Validate the configuration file and collect warnings.

    Returns ``(result_dict, exit_code, config_or_None)``. Exit codes: 0 ok,
    1 unreadable format, 2 missing file or permission problem, 3 schema
    validation failure.
    """

    try:
        config = load_config(config_cls, path)
    except FileNotFoundError as exc:
        return _error(path, "missing_file", str(exc)), 2, None
    except PermissionError as exc:
        return _error(path, "permission_error", str(exc)), 2, None
    except ValidationError as exc:
        details = [
            {
                "loc": _format_error_location(err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        return _error(path, "validation_error", "Configuration validation failed", details), 3, None
    except ValueError as exc:
        return _error(path, "invalid_format", str(exc)), 1, None
    except Exception as exc:  # pragma: no cover - unexpected failures
        raise ConfigInspectionError("Unexpected configuration inspection error") from exc

    result = {
        "status": "ok",
        "config_path": str(path),
        "warnings": _collect_warnings(config),
    }
    return result, 0, config


def explain_config(*, config_cls: type[AppConfig] = AppConfig) -> list[dict[str, Any]]:
    """Describe configuration fields (dotted names) for documentation purposes."""

    documentation: list[dict[str, Any]] = []
    visited: set[type[BaseModel]] = set()

    def _walk(model_cls: type[BaseModel], prefix: str = "") -> None:
        if model_cls in visited:
            return
        visited.add(model_cls)

        for field_name, field in model_cls.model_fields.items():
            name = f"{prefix}{field_name}"
            documentation.append(
                {
                    "name": name,
                    "type": _format_annotation(field.annotation),
                    "required": field.is_required(),
                    "default": _format_default(field),
                    "description": field.description or "",
                }
            )
            for nested in _nested_models(field.annotation):
                _walk(nested, f"{name}.")

    _walk(config_cls)
    return documentation


def _error(
    path: Path, kind: str, message: str, details: list[dict[str, Any]] | None = None
) -> dict[str, Any]:
    error: dict[str, Any] = {"type": kind, "message": message}
    if details is not None:
        error["details"] = details
    return {"status": "error", "config_path": str(path), "error": error}


def _format_error_location(location: Iterable[Union[int, str]]) -> str:
    return ".".join(str(part) for part in location)


def _collect_warnings(config: AppConfig) -> list[str]:
    warnings: list[str] = []

    if config.backend is None:
        warnings.append("No [backend] block configured; the site cannot load articles")
    elif not config.backend.anon_key.startswith("env:"):
        warnings.append("'backend.anon_key' is stored inline; prefer an 'env:VAR_NAME' reference")
    default_limit = StorageConfig.model_fields["bookmark_limit"].default
    if config.storage.bookmark_limit != default_limit:
        warnings.append(
            f"'storage.bookmark_limit' is {config.storage.bookmark_limit}; readers expect {default_limit}"
        )

    return warnings


def _format_annotation(annotation: Any) -> str:
    origin = get_origin(annotation)
    if origin is None:
        if isinstance(annotation, type):
            return annotation.__name__
        return repr(annotation).replace("typing.", "")

    args = get_args(annotation)
    if origin in {Union, UnionType}:
        non_none = [arg for arg in args if arg is not type(None)]  # noqa: E721
        if len(non_none) == 1 and len(args) == 2:
            return f"Optional[{_format_annotation(non_none[0])}]"
        return f"Union[{', '.join(_format_annotation(arg) for arg in args)}]"

    origin_name = getattr(origin, "__name__", repr(origin).replace("typing.", ""))
    if args:
        return f"{origin_name}[{', '.join(_format_annotation(arg) for arg in args)}]"
    return origin_name


def _format_default(field: FieldInfo) -> Any:
    if field.default_factory is not None:
        try:
            value = field.default_factory()  # type: ignore[call-arg]
        except Exception:  # pragma: no cover - factory failure is unexpected
            return "<factory>"
        return _stringify_default(value)
    if field.is_required():
        return None
    return _stringify_default(field.default)


def _stringify_default(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, BaseModel):
        return _stringify_default(value.model_dump())
    if isinstance(value, (list, tuple)):
        return [_stringify_default(item) for item in value]
    if isinstance(value, dict):
        return {key: _stringify_default(val) for key, val in value.items()}
    return value


def _nested_models(annotation: Any) -> list[type[BaseModel]]:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return [annotation]
    if get_origin(annotation) in {Union, UnionType}:
        return [
            arg for arg in get_args(annotation) if isinstance(arg, type) and issubclass(arg, BaseModel)
        ]
    return []


__all__ = ["check_config", "explain_config", "ConfigInspectionError"]
