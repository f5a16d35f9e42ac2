"""
Запись разобранных значений в dataclass, pydantic-модели и обычные объекты.
"""

import enum
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import pytest
from pydantic import BaseModel

from strtpl import of_named
from strtpl.template.records import RecordCoercionError, build_record, coerce_text, empty_record, write_field


class Level(enum.Enum):
    LOW = "low"
    HIGH = "high"


@dataclass
class Order:
    item: str = ""
    qty: int = 0
    price: Optional[Decimal] = None
    urgent: bool = False
    level: Optional[Level] = None


@dataclass
class RequiredOrder:
    qty: int
    item: str


class OrderModel(BaseModel):
    item: str
    qty: int
    urgent: bool = False


class PlainOrder:
    item = None
    qty: int = 0


class TestCoerceText:
    """Приведение строки к типу поля."""

    @pytest.mark.parametrize("tp,raw,expected", [
        (int, "42", 42),
        (float, "1.5", 1.5),
        (Decimal, "9.99", Decimal("9.99")),
        (bool, "yes", True),
        (bool, "Off", False),
        (Optional[int], "7", 7),
        (Optional[int], None, None),
        (Level, "high", Level.HIGH),
        (Level, "low", Level.LOW),
        (str, "text", "text"),
    ])
    def test_types(self, tp, raw, expected):
        assert coerce_text(tp, raw) == expected

    @pytest.mark.parametrize("tp,raw", [(int, "x"), (bool, "maybe"), (Level, "mid")])
    def test_invalid(self, tp, raw):
        with pytest.raises(RecordCoercionError):
            coerce_text(tp, raw, path="Order.field")


class TestBuildRecord:
    """Создание объекта-результата из словаря значений."""

    def test_dataclass_missing_required(self):
        with pytest.raises(RecordCoercionError, match="RequiredOrder"):
            build_record(RequiredOrder, {"qty": "1"})

    def test_dataclass(self):
        values = {"item": "pen", "qty": "3", "price": "1.25", "urgent": "true", "level": "high", "extra": "x"}
        assert build_record(Order, values) == Order("pen", 3, Decimal("1.25"), True, Level.HIGH)

    def test_pydantic(self):
        model = build_record(OrderModel, {"item": "pen", "qty": "3", "other": "x"})
        assert model == OrderModel(item="pen", qty=3)

    def test_pydantic_validation_error(self):
        with pytest.raises(RecordCoercionError, match="OrderModel"):
            build_record(OrderModel, {"item": "pen", "qty": "many"})

    def test_plain_factory(self):
        obj = build_record(PlainOrder, {"item": "pen", "qty": "5", "unknown": "x"})

        assert obj.item == "pen"
        assert obj.qty == 5
        assert not hasattr(obj, "unknown")

    def test_dict_factory(self):
        assert build_record(dict, {"a": None}) == {"a": None}

    def test_write_field_skips_unknown(self):
        obj = PlainOrder()
        assert write_field(obj, "missing", "1") is False


class TestMatchesIntoRecords:
    """Разбор строки сразу в запись."""

    TEMPLATE = "{qty} x {item} urgent={urgent}"

    def test_dataclass(self):
        order = of_named(self.TEMPLATE).build().matches("2 x pen urgent=yes", Order)
        assert order == Order(item="pen", qty=2, urgent=True)

    def test_pydantic(self):
        model = of_named(self.TEMPLATE).build().matches("2 x pen urgent=no", OrderModel)
        assert model == OrderModel(item="pen", qty=2, urgent=False)

    def test_factory_callable(self):
        obj = of_named(self.TEMPLATE).build().matches("2 x pen urgent=no", lambda: PlainOrder())
        assert (obj.item, obj.qty) == ("pen", 2)

    def test_not_matching_gives_empty_object(self):
        assert of_named(self.TEMPLATE).build().matches("nothing", Order) == Order()

    def test_not_matching_required_fields_gives_none(self):
        """Класс с обязательными полями без аргументов не создать: несовпадение даёт None."""
        template = of_named("{qty} x {item}").build()

        assert template.matches("nothing", RequiredOrder) is None
        assert template.matches("nothing", OrderModel) is None
        assert template.matches("", RequiredOrder) is None

    def test_required_fields_filled(self):
        template = of_named("{qty} x {item}").build()

        assert template.matches("2 x pen", RequiredOrder) == RequiredOrder(qty=2, item="pen")
        assert template.matches("2 x pen", OrderModel) == OrderModel(item="pen", qty=2)

    @pytest.mark.parametrize("factory", [RequiredOrder, OrderModel])
    def test_matched_without_required_value(self, factory):
        """Пустой захват становится None, и обязательное поле str его не принимает."""
        with pytest.raises(RecordCoercionError, match="item"):
            of_named("{qty} x {item}").build().matches("2 x ", factory)


class TestEmptyRecord:
    """Результат разбора для несовпавшей строки."""

    def test_factories(self):
        assert empty_record(dict) == {}
        assert empty_record(Order) == Order()
        assert isinstance(empty_record(lambda: PlainOrder()), PlainOrder)

    def test_required_fields(self):
        assert empty_record(RequiredOrder) is None
        assert empty_record(OrderModel) is None
