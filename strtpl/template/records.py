"""
Доступ к полям record-подобных объектов.

Чтение полей для форматирования и запись разобранных строк
в dataclass, pydantic-модели и обычные объекты с приведением
к типу из аннотаций поля средствами pydantic.
"""

from __future__ import annotations

import dataclasses
import functools
import logging
import typing as t
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..errors import StrTemplateError

logger = logging.getLogger(__name__)


class RecordCoercionError(StrTemplateError, ValueError):
    """Разобранную строку не удалось привести к типу поля."""
    pass


# -------------------- Чтение --------------------

def has_field(obj: Any, name: str) -> bool:
    """Есть ли у объекта поле/атрибут с таким именем."""
    if isinstance(obj, Mapping):
        return name in obj
    if isinstance(obj, BaseModel):
        return name in type(obj).model_fields
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return any(f.name == name for f in dataclasses.fields(obj))
    return bool(name) and hasattr(obj, name)


def read_field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


# -------------------- Приведение типов --------------------

@functools.lru_cache(maxsize=256)
def _type_hints(cls: type) -> Dict[str, Any]:
    try:
        return t.get_type_hints(cls)
    except (NameError, TypeError):
        # Неразрешимые строковые аннотации: поля считаем нетипизированными
        logger.debug("Cannot resolve type hints for %s", cls.__name__)
        return {}


@functools.lru_cache(maxsize=256)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def field_type(obj_or_cls: Any, name: str) -> Any:
    """Объявленный тип поля или Any, если он неизвестен."""
    cls = obj_or_cls if isinstance(obj_or_cls, type) else type(obj_or_cls)
    if issubclass(cls, BaseModel):
        info = cls.model_fields.get(name)
        return info.annotation if info is not None else Any
    return _type_hints(cls).get(name, Any)


def coerce_text(tp: Any, raw: Optional[str], *, path: str = "$") -> Any:
    """
    Приводит разобранную строку к типу tp через pydantic.TypeAdapter.

    None проходит как есть.
    """
    if raw is None or tp is Any or tp is object or tp is str:
        return raw
    try:
        return _adapter(tp).validate_python(raw)
    except ValidationError as e:
        raise RecordCoercionError(f"{path}: cannot convert {raw!r} to {tp!r}: {e}") from e
    except TypeError as e:
        # PydanticSchemaGenerationError и нехешируемые аннотации
        raise RecordCoercionError(f"{path}: unsupported field type {tp!r}") from e


def _has_required_fields(cls: type) -> bool:
    if issubclass(cls, BaseModel):
        return any(info.is_required() for info in cls.model_fields.values())
    return any(
        f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
        for f in dataclasses.fields(cls)
    )


# -------------------- Запись --------------------

def write_field(obj: Any, name: str, raw: Optional[str]) -> bool:
    """
    Записывает разобранное значение в поле объекта.

    Returns:
        False если у объекта нет такого поля (значение пропущено)
    """
    if isinstance(obj, MutableMapping):
        obj[name] = raw
        return True
    if not has_field(obj, name):
        logger.debug("Skip unknown field %r of %s", name, type(obj).__name__)
        return False
    value = coerce_text(field_type(obj, name), raw, path=f"{type(obj).__name__}.{name}")
    setattr(obj, name, value)
    return True


def _is_record_class(factory: Any) -> bool:
    return isinstance(factory, type) and (
        issubclass(factory, BaseModel) or dataclasses.is_dataclass(factory)
    )


def empty_record(factory: Callable[..., Any]) -> Any:
    """
    Пустой результат разбора для несовпавшей строки.

    Класс dataclass/pydantic-модели с обязательными полями без аргументов
    не создать, для него результат None. Остальные фабрики вызываются без аргументов.
    """
    if _is_record_class(factory) and _has_required_fields(factory):
        logger.debug("No empty %s: it has required fields", factory.__name__)
        return None
    return factory()


def build_record(factory: Callable[..., Any], values: Mapping[str, Optional[str]]) -> Any:
    """
    Создаёт объект из разобранных значений.

    - pydantic-модель (класс): model_validate по известным полям
    - dataclass (класс): TypeAdapter по известным полям
    - иначе: factory() и запись полей по одному

    Raises:
        RecordCoercionError: значение не приводится к типу поля или обязательное поле не разобрано
    """
    if isinstance(factory, type) and issubclass(factory, BaseModel):
        known = {k: v for k, v in values.items() if k in factory.model_fields}
        try:
            return factory.model_validate(known)
        except ValidationError as e:
            raise RecordCoercionError(f"{factory.__name__}: {e}") from e

    if isinstance(factory, type) and dataclasses.is_dataclass(factory):
        names = {f.name for f in dataclasses.fields(factory) if f.init}
        known = {k: v for k, v in values.items() if k in names}
        try:
            return _adapter(factory).validate_python(known)
        except (ValidationError, TypeError) as e:
            raise RecordCoercionError(f"{factory.__name__}: {e}") from e

    obj = factory()
    for name, raw in values.items():
        write_field(obj, name, raw)
    return obj


__all__ = [
    "RecordCoercionError",
    "has_field",
    "read_field",
    "field_type",
    "coerce_text",
    "write_field",
    "empty_record",
    "build_record",
]
