from __future__ import annotations

import dataclasses
import logging
import typing as t
from dataclasses import fields, is_dataclass
from enum import Enum
from types import UnionType
from typing import Any, get_args, get_origin

from ..errors import StrTemplateError

_LOG = logging.getLogger(__name__)

# -------------------- Public error --------------------

class ConfigLoadError(StrTemplateError, ValueError):
    """Ошибка типизированной загрузки конфигурации с указанием пути поля."""
    pass

# -------------------- Helpers --------------------

def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", str(tp))

def _err(path: str, msg: str) -> ConfigLoadError:
    _LOG.debug("RAISE at %s: %s", path, msg)
    return ConfigLoadError(f"{path}: {msg}")

def _coerce_enum(val: Any, tp: Any, path: str) -> Any:
    if isinstance(val, tp):
        return val
    if isinstance(val, str):
        # по имени без учёта регистра: "named", "MATCH_KEEP_NULL_STR"
        member = tp.__members__.get(val.strip().upper())
        if member is not None:
            return member
        for m in tp:
            if isinstance(m.value, str) and m.value == val:
                return m
    raise _err(path, f"expected one of {sorted(tp.__members__)}, got {val!r}")

def _coerce_union(val: Any, tp: Any, path: str) -> Any:
    errs: list[str] = []
    for sub in get_args(tp):
        # NoneType матчится только при val is None
        if sub is type(None):
            if val is None:
                return None
            continue
        try:
            return load_typed(sub, val, path=path)
        except ConfigLoadError as e:
            errs.append(str(e))
    raise _err(path, " | ".join(errs) or f"no variant of {_type_name(tp)} matched")

def _coerce_mapping(val: Any, tp: Any, path: str) -> Any:
    if not isinstance(val, dict):
        raise _err(path, f"expected mapping, got {type(val).__name__}")
    kt, vt = get_args(tp) or (Any, Any)
    return {
        load_typed(kt, k, path=f"{path}.<key>"): load_typed(vt, v, path=f"{path}.{k}")
        for k, v in val.items()
    }

def _coerce_sequence(val: Any, tp: Any, path: str) -> Any:
    if isinstance(val, str) or not isinstance(val, (list, tuple)):
        raise _err(path, f"expected list, got {type(val).__name__}")
    (et,) = get_args(tp) or (Any,)
    items = [load_typed(et, v, path=f"{path}[{i}]") for i, v in enumerate(val)]
    return tuple(items) if get_origin(tp) in (tuple, t.Tuple) else items

def _coerce_dataclass(val: Any, tp: Any, path: str) -> Any:
    if not isinstance(val, dict):
        raise _err(path, f"expected mapping for {_type_name(tp)}, got {type(val).__name__}")
    hints = t.get_type_hints(tp)
    fld_map = {f.name: f for f in fields(tp)}
    extras = set(val.keys()) - set(fld_map.keys())
    if extras:
        raise _err(path, f"unknown key(s): {sorted(extras)}")
    kwargs: dict[str, Any] = {}
    for name, f in fld_map.items():
        sub_path = f"{path}.{name}"
        if name in val:
            kwargs[name] = load_typed(hints.get(name, f.type), val[name], path=sub_path)
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise _err(sub_path, "required field missing")
    inst = tp(**kwargs)
    _LOG.debug("Dataclass built at %s: %r", path, inst)
    return inst

# -------------------- Entry point --------------------

def load_typed(tp: Any, val: Any, *, path: str = "$") -> Any:
    """
    Рекурсивная коэрция сырых данных YAML в типизированные объекты по аннотациям tp.

    Поддерживает dataclass, Optional/Union, list/tuple, dict, Enum и примитивы.
    """
    origin = get_origin(tp)

    if tp is Any or tp is object:
        return val

    if isinstance(tp, type) and is_dataclass(tp):
        return _coerce_dataclass(val, tp, path)

    if origin in (t.Union, UnionType):
        return _coerce_union(val, tp, path)

    if origin in (dict, t.Dict):
        return _coerce_mapping(val, tp, path)
    if origin in (list, t.List, tuple, t.Tuple):
        return _coerce_sequence(val, tp, path)

    if isinstance(tp, type) and issubclass(tp, Enum):
        return _coerce_enum(val, tp, path)

    if tp is type(None):
        if val is None:
            return None
        raise _err(path, f"expected null, got {type(val).__name__}")

    # Примитивы; bool не считается int
    if tp in (str, int, float, bool):
        if isinstance(val, bool) and tp is not bool:
            raise _err(path, f"expected {_type_name(tp)}, got bool")
        if tp is float and isinstance(val, int):
            return float(val)
        if not isinstance(val, tp):
            raise _err(path, f"expected {_type_name(tp)}, got {type(val).__name__}")
        return val

    raise _err(path, f"unsupported type {_type_name(tp)}")


__all__ = ["ConfigLoadError", "load_typed"]
