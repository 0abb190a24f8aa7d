"""Shared helpers for capability providers.

Provides :class:`BaseSchema`, the common base for provider request/response
models, and :func:`merge_options`, which normalizes how scripts pass
arguments to a capability (one options mapping, keyword arguments, or both).
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict


def _to_camel(s: str) -> str:
    """Convert snake_case to camelCase for JSON aliasing."""
    parts = s.split("_")
    return parts[0] + "".join(p.capitalize() or "_" for p in parts[1:])


class BaseSchema(BaseModel):
    """Shared base for provider option and result models.

    - Rejects unknown fields so typos in script arguments surface as errors
    - Enables ``populate_by_name`` for using either snake_case or camelCase
    - Uses a snake->camel alias generator for JSON interop
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        alias_generator=_to_camel,  # snake_case -> camelCase aliases
    )


def merge_options(options: Optional[Mapping[str, Any]], kwargs: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge a positional options mapping with keyword arguments.

    Keyword arguments win on conflict.

    Raises:
        TypeError: If ``options`` is given but is not a mapping.
    """
    if options is None:
        return dict(kwargs)
    if not isinstance(options, Mapping):
        raise TypeError(f"options must be a mapping, got {type(options).__name__}")
    return {**options, **kwargs}
