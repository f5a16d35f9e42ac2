"""
Строковые шаблоны: форматирование и обратный разбор.

Точки входа:
    of("this is {} for {}")             → SinglePlaceholderTemplate.Builder
    of_named("select * from #[table]")  → NamedPlaceholderTemplate.Builder

Шаблон разбирается один раз при build() и дальше не меняется,
поэтому его можно свободно разделять между потоками.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Iterable, List, Optional, Tuple, TypeVar, Union

from ..errors import InvalidConfigurationError, MissingDefaultValueError
from .features import DEFAULT_FEATURES, Feature, FeatureSet
from .formatter import TemplateFormatter
from .matcher import Capture, DefaultSupplier, TemplateMatcher
from .nodes import IndexedPlaceholder, PlaceholderSegment, Segment
from .parser import parse_named, parse_single, to_source
from .records import build_record, empty_record
from .tokens import (
    DEFAULT_ESCAPE,
    DEFAULT_PLACEHOLDER,
    DEFAULT_PREFIX,
    DEFAULT_SUFFIX,
    DelimiterConfig,
    SinglePlaceholderConfig,
)
from .values import IndexedSource, RecordSource, SequenceSource, ValueSource, to_text, value_source_for

logger = logging.getLogger(__name__)

DefaultValueHandler = Callable[[str], Any]

# -------------------- Глобальные настройки --------------------

# Начальные значения для билдеров; уже созданные шаблоны их не видят
_global_features: FeatureSet = DEFAULT_FEATURES
_global_default_value_handler: Optional[DefaultValueHandler] = None


def set_global_features(*features: Feature) -> None:
    """Задаёт стратегии, с которых начинают все новые билдеры."""
    global _global_features
    _global_features = FeatureSet.of(*features)


def set_global_default_value(handler: DefaultValueHandler) -> None:
    """Задаёт обработчик значений по умолчанию для шаблонов, собранных после вызова."""
    global _global_default_value_handler
    if handler is None:
        raise InvalidConfigurationError("Global default value handler must not be None")
    _global_default_value_handler = handler


def reset_global_defaults() -> None:
    """Возвращает глобальные настройки к исходным."""
    global _global_features, _global_default_value_handler
    _global_features = DEFAULT_FEATURES
    _global_default_value_handler = None


# -------------------- Базовый шаблон --------------------

class StrTemplate:
    """
    Общая часть шаблонов: сегменты, стратегии, значения по умолчанию,
    форматирование и разбор на уровне плейсхолдеров.
    """

    def __init__(
        self,
        template: str,
        segments: List[Segment],
        features: FeatureSet,
        default_value: Optional[str],
        default_value_handler: Optional[DefaultValueHandler],
        global_default_value_handler: Optional[DefaultValueHandler],
    ):
        self._template = template
        self._segments: Tuple[Segment, ...] = tuple(segments)
        self._placeholders: Tuple[PlaceholderSegment, ...] = tuple(
            s for s in self._segments if isinstance(s, PlaceholderSegment)
        )
        self._features = features
        self._default_value = default_value
        self._default_value_handler = default_value_handler
        self._global_default_value_handler = global_default_value_handler
        self._formatter = TemplateFormatter(self._segments, features, self.default_value_for)
        self._matcher = TemplateMatcher(self._segments, features)

    # ----- Свойства -----

    @property
    def template(self) -> str:
        return self._template

    @property
    def features(self) -> FeatureSet:
        return self._features

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self._segments

    @property
    def placeholder_segments(self) -> Tuple[PlaceholderSegment, ...]:
        return self._placeholders

    @property
    def placeholder_variable_names(self) -> List[str]:
        """Имена переменных всех плейсхолдеров: "{name}" → "name"."""
        return [s.key for s in self._placeholders]

    @property
    def placeholder_texts(self) -> List[str]:
        """Плейсхолдеры целиком: "{name}" → "{name}"."""
        return [s.text for s in self._placeholders]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._template!r})"

    # ----- Значения по умолчанию -----

    def has_default_value(self) -> bool:
        return (
            self._default_value is not None
            or self._default_value_handler is not None
            or self._global_default_value_handler is not None
        )

    def default_value_for(self, segment: PlaceholderSegment) -> str:
        """
        Значение по умолчанию для плейсхолдера.

        Порядок: постоянное значение, обработчик шаблона, глобальный обработчик.

        Raises:
            MissingDefaultValueError: Ни один источник не задан
        """
        if self._default_value is not None:
            return self._default_value
        handler = self._default_value_handler or self._global_default_value_handler
        if handler is None:
            raise MissingDefaultValueError(segment.key)
        return to_text(handler(segment.key))

    def _default_supplier(self) -> Optional[DefaultSupplier]:
        return self.default_value_for if self.has_default_value() else None

    # ----- Форматирование -----

    def format_raw_by_key(self, value_supplier: Callable[[str], Any]) -> str:
        """Форматирование без стратегий: значение по имени переменной, None → "null"."""
        return self._formatter.format_raw(lambda segment, position: value_supplier(segment.key))

    def format_raw_by_segment(self, value_supplier: Callable[[PlaceholderSegment], Any]) -> str:
        """Форматирование без стратегий: значение по сегменту плейсхолдера, None → "null"."""
        return self._formatter.format_raw(lambda segment, position: value_supplier(segment))

    def format_source(self, source: Optional[ValueSource]) -> str:
        """Форматирование из произвольного источника значений; None возвращает исходный шаблон."""
        if source is None:
            return self._template
        return self._formatter.format(source)

    def _format_sequence(self, values: Optional[Iterable[Any]]) -> str:
        if values is None:
            return self._template
        return self._formatter.format(SequenceSource(values))

    # ----- Разбор -----

    def is_matches(self, text: Optional[str]) -> bool:
        """Подходит ли строка под шаблон."""
        return self._matcher.is_match(text)

    def matches_raw_by_segment(self, text: Optional[str], consumer: Callable[[PlaceholderSegment, str], None]) -> None:
        """Разбор без стратегий: consumer получает каждый плейсхолдер и его сырое значение."""
        if text is None or consumer is None or not self._placeholders:
            return
        captures = self._matcher.match_raw(text)
        for segment, value in captures or ():
            consumer(segment, value)

    def matches_raw_by_key(self, text: Optional[str], consumer: Callable[[str, str], None]) -> None:
        """Разбор без стратегий: consumer получает имя переменной и сырое значение."""
        self.matches_raw_by_segment(text, lambda segment, value: consumer(segment.key, value))

    def matches_by_key(self, text: Optional[str], consumer: Callable[[str, Optional[str]], None]) -> None:
        """Разбор со стратегиями: consumer получает имя переменной и итоговое значение."""
        for segment, value in self._match(text, self._default_supplier()) or ():
            consumer(segment.key, value)

    def _match(self, text: Optional[str], default_supplier: Optional[DefaultSupplier]) -> Optional[List[Capture]]:
        if text is None or not self._placeholders:
            return None
        return self._matcher.match(text, default_supplier)

    def _matches_sequence(self, text: Optional[str]) -> List[Optional[str]]:
        captures = self._match(text, self._default_supplier())
        return [value for _, value in captures or ()]


# -------------------- Шаблон с одиночным плейсхолдером --------------------

class SinglePlaceholderTemplate(StrTemplate):
    """
    Шаблон с одним видом безымянного плейсхолдера ("{}", "?", "$$$").

    Значения подставляются по порядку.
    """

    def __init__(self, template: str, config: SinglePlaceholderConfig, **kwargs: Any):
        self._config = config
        super().__init__(template, parse_single(template, config), **kwargs)

    @property
    def placeholder(self) -> str:
        return self._config.placeholder

    @property
    def escape(self) -> str:
        return self._config.escape

    def to_source(self) -> str:
        return to_source(list(self.segments), self._config)

    def format(self, *args: Any) -> str:
        """Подставляет аргументы по порядку: format("a", 666)."""
        return self._format_sequence(args)

    def format_list(self, values: Optional[Iterable[Any]]) -> str:
        """Подставляет элементы коллекции по порядку; None возвращает исходный шаблон."""
        return self._format_sequence(values)

    def matches(self, text: Optional[str]) -> List[Optional[str]]:
        """Значения плейсхолдеров по порядку; пустой список, если строка не подходит."""
        return self._matches_sequence(text)

    @staticmethod
    def builder(template: str) -> "SinglePlaceholderTemplateBuilder":
        return SinglePlaceholderTemplateBuilder(template)


# -------------------- Шаблон с именованными плейсхолдерами --------------------

class NamedPlaceholderTemplate(StrTemplate):
    """
    Шаблон с плейсхолдерами вида prefix + имя + suffix ("{name}", "#[id]", "{1}").

    Плейсхолдеры с числовым ключом — индексированные (индекс с 0),
    с пустым ключом — безымянные.
    """

    def __init__(self, template: str, config: DelimiterConfig, **kwargs: Any):
        self._config = config
        super().__init__(template, parse_named(template, config), **kwargs)
        self._max_index = max(
            (s.index for s in self.placeholder_segments if isinstance(s, IndexedPlaceholder)),
            default=0,
        )

    @property
    def prefix(self) -> str:
        return self._config.prefix

    @property
    def suffix(self) -> str:
        return self._config.suffix

    @property
    def escape(self) -> str:
        return self._config.escape

    def to_source(self) -> str:
        return to_source(list(self.segments), self._config)

    # ----- Форматирование по порядку -----

    def format_sequence(self, *args: Any) -> str:
        """N-й плейсхолдер получает N-й аргумент, независимо от имени."""
        return self._format_sequence(args)

    def format_array_sequence(self, values: Optional[Iterable[Any]]) -> str:
        return self._format_sequence(values)

    # ----- Форматирование по индексу -----

    def format_indexed(self, *args: Any) -> str:
        """Плейсхолдер "{i}" получает args[i]."""
        return self.format_array_indexed(args)

    def format_array_indexed(
        self,
        values: Optional[Iterable[Any]],
        missing_index_handler: Optional[Callable[[int], Any]] = None,
    ) -> str:
        """
        Плейсхолдер "{i}" получает values[i].

        Args:
            values: Значения; None возвращает исходный шаблон
            missing_index_handler: Значение для индекса вне диапазона вместо стратегии отсутствующего ключа
        """
        if values is None:
            return self.template
        return self._formatter.format(IndexedSource(list(values), missing_index_handler))

    # ----- Форматирование по имени -----

    def format(self, values: Any) -> str:
        """
        Подставляет значения по имени переменной.

        values — словарь, функция имя → значение или объект с атрибутами
        (dataclass, pydantic-модель и т.п.); None возвращает исходный шаблон.
        """
        if values is None:
            return self.template
        return self._formatter.format(value_source_for(values))

    def format_by_accessor(
        self,
        accessor: Callable[[str], Any],
        contains: Optional[Callable[[str], bool]] = None,
    ) -> str:
        """Значения через функцию доступа; contains отличает отсутствующий ключ от None."""
        if accessor is None:
            return self.template
        return self._formatter.format(RecordSource(accessor, contains))

    # ----- Разбор -----

    def matches_sequence(self, text: Optional[str]) -> List[Optional[str]]:
        """Значения плейсхолдеров по порядку; пустой список, если строка не подходит."""
        return self._matches_sequence(text)

    def matches_indexed(
        self,
        text: Optional[str],
        missing_index_handler: Optional[Callable[[int], Any]] = None,
    ) -> List[Optional[str]]:
        """
        Значения индексированных плейсхолдеров, разложенные по индексам.

        Список имеет длину max_index + 1 и заполнен None там, где плейсхолдера нет.
        missing_index_handler служит источником значения по умолчанию для
        стратегий разбора. Пустой список, если строка не подходит.
        """
        if missing_index_handler is None:
            supplier = self._default_supplier()
        else:
            supplier = self._index_default_supplier(missing_index_handler)

        captures = self._match(text, supplier)
        if captures is None:
            return []

        params: List[Optional[str]] = [None] * (self._max_index + 1)
        for segment, value in captures:
            if isinstance(segment, IndexedPlaceholder):
                params[segment.index] = value
        return params

    def _index_default_supplier(self, handler: Callable[[int], Any]) -> DefaultSupplier:
        def supplier(segment: PlaceholderSegment) -> Optional[str]:
            if isinstance(segment, IndexedPlaceholder):
                value = handler(segment.index)
                return None if value is None else to_text(value)
            return self.default_value_for(segment)
        return supplier

    def matches(self, text: Optional[str], factory: Callable[[], Any] = dict) -> Any:
        """
        Разбирает строку в словарь или объект.

        Args:
            text: Разбираемая строка
            factory: dict (по умолчанию), класс dataclass/pydantic-модели
                     или функция, создающая пустой объект

        Returns:
            Заполненный объект. При несовпадении пустой объект от factory,
            а для класса с обязательными полями None

        Raises:
            RecordCoercionError: строка совпала, но значение не приводится к типу поля
        """
        if factory is None:
            raise InvalidConfigurationError("Factory must not be None")

        captures = self._match(text, self._default_supplier())
        if captures is None:
            return empty_record(factory)
        return build_record(factory, {segment.key: value for segment, value in captures})

    @staticmethod
    def builder(template: str) -> "NamedPlaceholderTemplateBuilder":
        return NamedPlaceholderTemplateBuilder(template)


# -------------------- Билдеры --------------------

TemplateT = TypeVar("TemplateT", bound=StrTemplate)
BuilderT = TypeVar("BuilderT", bound="_TemplateBuilder[Any]")


class _TemplateBuilder(Generic[TemplateT]):
    """Общие настройки билдеров: escape, стратегии, значения по умолчанию."""

    def __init__(self, template: str):
        if template is None:
            raise InvalidConfigurationError("String template must not be None")
        self._template = template
        self._escape = DEFAULT_ESCAPE
        # Стратегии начинаются с глобальных
        self._features = _global_features
        self._default_value: Optional[str] = None
        self._default_value_handler: Optional[DefaultValueHandler] = None

    def escape(self: BuilderT, escape: str) -> BuilderT:
        self._escape = escape
        return self

    def features(self: BuilderT, *features: Feature) -> BuilderT:
        """Полностью заменяет набор стратегий."""
        self._features = FeatureSet.of(*features)
        return self

    def add_features(self: BuilderT, *features: Feature) -> BuilderT:
        """Добавляет стратегии; стратегия вытесняет прежнюю из своей группы."""
        self._features = self._features.add(*features)
        return self

    def remove_features(self: BuilderT, *features: Feature) -> BuilderT:
        """Убирает стратегии; отсутствующие игнорируются."""
        self._features = self._features.remove(*features)
        return self

    def default_value(self: BuilderT, value: Union[str, DefaultValueHandler]) -> BuilderT:
        """
        Значение по умолчанию: строка или функция имя переменной → значение.

        Строка может быть "null", но не None.
        """
        if value is None:
            raise InvalidConfigurationError("Default value must not be None")
        if callable(value):
            self._default_value_handler = value
        else:
            self._default_value = to_text(value)
        return self

    def _common_kwargs(self) -> dict:
        return {
            "features": self._features,
            "default_value": self._default_value,
            "default_value_handler": self._default_value_handler,
            "global_default_value_handler": _global_default_value_handler,
        }

    def build(self) -> TemplateT:
        template = self._build_instance()
        logger.debug(
            "Built %s with %d segments, features: %s",
            type(template).__name__, len(template.segments), template.features,
        )
        return template

    def _build_instance(self) -> TemplateT:
        raise NotImplementedError


class SinglePlaceholderTemplateBuilder(_TemplateBuilder[SinglePlaceholderTemplate]):
    """Билдер шаблона с одиночным плейсхолдером; по умолчанию плейсхолдер "{}"."""

    def __init__(self, template: str):
        super().__init__(template)
        self._placeholder: Optional[str] = None

    def placeholder(self, placeholder: str) -> "SinglePlaceholderTemplateBuilder":
        self._placeholder = placeholder
        return self

    def _build_instance(self) -> SinglePlaceholderTemplate:
        config = SinglePlaceholderConfig(
            placeholder=DEFAULT_PLACEHOLDER if self._placeholder is None else self._placeholder,
            escape=self._escape,
        )
        return SinglePlaceholderTemplate(self._template, config, **self._common_kwargs())


class NamedPlaceholderTemplateBuilder(_TemplateBuilder[NamedPlaceholderTemplate]):
    """Билдер шаблона с именованными плейсхолдерами; по умолчанию "{" и "}"."""

    def __init__(self, template: str):
        super().__init__(template)
        self._prefix: Optional[str] = None
        self._suffix: Optional[str] = None

    def prefix(self, prefix: str) -> "NamedPlaceholderTemplateBuilder":
        self._prefix = prefix
        return self

    def suffix(self, suffix: str) -> "NamedPlaceholderTemplateBuilder":
        self._suffix = suffix
        return self

    def _build_instance(self) -> NamedPlaceholderTemplate:
        config = DelimiterConfig(
            prefix=DEFAULT_PREFIX if self._prefix is None else self._prefix,
            suffix=DEFAULT_SUFFIX if self._suffix is None else self._suffix,
            escape=self._escape,
        )
        return NamedPlaceholderTemplate(self._template, config, **self._common_kwargs())


SinglePlaceholderTemplate.Builder = SinglePlaceholderTemplateBuilder  # type: ignore[attr-defined]
NamedPlaceholderTemplate.Builder = NamedPlaceholderTemplateBuilder  # type: ignore[attr-defined]


def of(template: str) -> SinglePlaceholderTemplateBuilder:
    """Билдер шаблона с одиночным плейсхолдером: "{}", "?", "$$$"."""
    return SinglePlaceholderTemplateBuilder(template)


def of_named(template: str) -> NamedPlaceholderTemplateBuilder:
    """Билдер шаблона с именованными плейсхолдерами: "{0}", "{name}", "#[name]"."""
    return NamedPlaceholderTemplateBuilder(template)


__all__ = [
    "StrTemplate",
    "SinglePlaceholderTemplate",
    "NamedPlaceholderTemplate",
    "SinglePlaceholderTemplateBuilder",
    "NamedPlaceholderTemplateBuilder",
    "DefaultValueHandler",
    "of",
    "of_named",
    "set_global_features",
    "set_global_default_value",
    "reset_global_defaults",
]
