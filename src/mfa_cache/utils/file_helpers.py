"""File helpers for loading validated configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

__all__ = [
    "load_validated_json",
    "require_file_exists",
]

ModelT = TypeVar("ModelT", bound=BaseModel)


def require_file_exists(path: Path, file_type: str = "file") -> None:
    """Raise FileNotFoundError with a readable message if path is missing.

    Args:
        path: File that must exist.
        file_type: Human-readable kind of file, for the message.

    Raises:
        FileNotFoundError: If path does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"{file_type.capitalize()} file not found at {path}")


def load_validated_json(
    path: Path,
    model: type[ModelT],
    file_type: str,
    recovery_hint: str,
    encoding: str = "utf-8",
) -> ModelT:
    """Load a JSON file and validate it against a pydantic model.

    Args:
        path: JSON file to read.
        model: Model class to validate with.
        file_type: Human-readable kind of file, for error messages.
        recovery_hint: Appended to error messages.
        encoding: File encoding.

    Returns:
        Validated model instance.

    Raises:
        ValueError: If the file is not valid JSON or fails validation.
    """
    try:
        with open(path, encoding=encoding) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {path}: {e}\n{recovery_hint}") from e

    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or '<root>'}: {err['msg']}" for err in e.errors()
        )
        raise ValueError(f"Invalid {file_type} file {path}: {errors}\n{recovery_hint}") from e
