#!/usr/bin/env python3
"""
Core Utilities

Features:
- Value converter for dataclass reconstruction (`from_dict`)
- File I/O helpers (line-ending normalized reads)
- String and path utilities shared by the commands
"""

from __future__ import annotations

import os
import types
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import (
    IO,
    Any,
    Iterable,
    List,
    Literal,
    Mapping,
    Optional,
    TypeGuard,
    TypeVar,
    Union,
    cast,
    get_args,
    get_origin,
    get_type_hints,
    overload,
)

from qifutil.utilities.converters_scalar import SCALAR_CONVERTERS

# region Common functions


def is_null_or_whitespace(s: Optional[str]) -> bool:
    """Check if a string is None, empty, or consists only of whitespace."""
    return s is None or s.strip() == ""


@overload
def open_for_read(path: Path, binary: Literal[True], **kwargs: Any) -> IO[bytes]: ...
@overload
def open_for_read(path: Path, binary: Literal[False], **kwargs: Any) -> IO[str]: ...


def open_for_read(path: Path, binary: bool = False, **kwargs: Any) -> IO[Any]:
    mode = "rb" if binary else "r"
    return open(path, mode, **kwargs)


def normalize_line_endings(text: str) -> str:
    """Collapse Windows line endings to ``\\n``; the QIF patterns are line-anchored."""
    return text.replace("\r\n", "\n")


def read_qif_text(path: Path, encoding: str = "utf-8") -> str:
    """Read a QIF file and return its text with normalized line endings."""
    with open_for_read(path=Path(path), binary=False, encoding=encoding, errors="replace") as f:
        return normalize_line_endings(f.read())


def clean_path(path: str) -> Path:
    """
    Sanitize a user-typed path.

    Strips surrounding whitespace and quotes and a leading PowerShell ``& ``
    invoke operator (common when a file is dragged into a terminal), converts
    separators to the current OS, and makes the path absolute.
    """
    s = path.strip()
    if s.startswith("& "):
        s = s[2:]
    s = s.strip("'\"")
    if os.sep == "\\":
        s = s.replace("/", "\\")
    else:
        s = s.replace("\\", "/")
    return Path(s).expanduser().absolute()


def sort_and_dedup(values: Iterable[str]) -> List[str]:
    """Sort ascending, remove duplicates and drop blank entries."""
    return sorted({v for v in values if not is_null_or_whitespace(v)})


def quote(value: str) -> str:
    """Wrap ``value`` in double quotes for the one-value-per-line list files."""
    return f'"{value}"'


# endregion Common functions

# region Value conversion

_UNION_TYPES = (Union, types.UnionType)

DC = TypeVar("DC")


def _is_mapping_of_str_any(m: object) -> TypeGuard[Mapping[str, Any]]:
    if not isinstance(m, Mapping):
        return False
    nm: Mapping[object, Any] = cast(Mapping[object, Any], m)
    return all(isinstance(k, str) for k in nm.keys())


def __unwrap_union(target_type: object, value: Any) -> Any:
    args = get_args(target_type)
    if value is None and type(None) in args:
        return None
    for arg in args:
        if arg is type(None):
            continue
        try:
            return convert_value(arg, value)
        except (TypeError, ValueError):
            pass
    raise ValueError(f"Cannot convert {value!r} to {target_type!r}")


def convert_value(target_type: object, value: object) -> Any:
    """
    Convert ``value`` to ``target_type``.

    Supports Optional/Union, ``tuple[X, ...]``, ``list[X]``, Enum subclasses
    (by value, then by member name), nested dataclasses (from a mapping) and the
    scalar types registered in ``SCALAR_CONVERTERS``.
    """
    origin = get_origin(target_type)

    if origin in _UNION_TYPES:
        return __unwrap_union(target_type, value)

    if origin in (tuple, list):
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            raise TypeError(f"Expected a sequence for {target_type!r}, got {type(value).__name__}")
        args = [a for a in get_args(target_type) if a is not Ellipsis]
        item_t = args[0] if args else object
        items = [convert_value(item_t, v) if item_t is not object else v for v in value]
        return tuple(items) if origin is tuple else items

    if isinstance(target_type, type):
        if is_dataclass(target_type):
            if isinstance(value, target_type):
                return value
            return from_dict(target_type, value)
        if issubclass(target_type, Enum):
            if isinstance(value, target_type):
                return value
            try:
                return target_type(value)
            except ValueError:
                if isinstance(value, str) and value in target_type.__members__:
                    return target_type[value]
                raise ValueError(f"{value!r} is not a valid {target_type.__name__}")
        if target_type in SCALAR_CONVERTERS:
            return SCALAR_CONVERTERS[target_type](value)
        if isinstance(value, target_type):
            return value

    raise ValueError(
        f"Don’t know how to convert {type(value).__name__} -> {target_type!r}"
    )


@overload
def from_dict(target_type: type[DC], src: Mapping[str, Any], /) -> DC: ...
@overload
def from_dict(target_type: object, src: Any, /) -> Any: ...


def from_dict(target_type: object, src: Any, /) -> Any:
    """
    Reconstruct dataclass ``target_type`` from a plain dict.

    Keys missing from ``src`` fall back to the dataclass defaults; unknown keys
    are ignored. Non-dataclass targets are delegated to `convert_value`.
    """
    if not (isinstance(target_type, type) and is_dataclass(target_type)):
        return convert_value(target_type, src)

    if not _is_mapping_of_str_any(src):
        raise TypeError(
            f"from_dict expects string-keyed mapping for {target_type.__name__}, "
            f"got {type(src).__name__}"
        )

    type_hints = get_type_hints(target_type)
    kwargs: dict[str, Any] = {}
    for f in fields(target_type):
        if f.name not in src:
            # let dataclass defaults apply
            continue
        ftype = type_hints.get(f.name, f.type)
        kwargs[f.name] = convert_value(ftype, src[f.name])
    return target_type(**kwargs)


# endregion Value conversion
