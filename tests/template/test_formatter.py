"""
Стратегии форматирования и разбора на уровне шаблона,
значения по умолчанию и глобальные настройки.
"""

import pytest

from strtpl import (
    Feature,
    InvalidConfigurationError,
    MissingDefaultValueError,
    MissingKeyError,
    StrTemplateError,
    of,
    of_named,
    set_global_default_value,
    set_global_features,
)

COMMON = "this is {tableName} for {id}"


def _check_empty_policies(template):
    assert template.format({"tableName": "aaa", "id": "666"}) == "this is aaa for 666"
    assert template.format({"tableName": "aaa"}) == "this is aaa for "
    assert template.format({"id": "666"}) == "this is  for 666"
    assert template.format({}) == "this is  for "

    assert template.matches("this is aaa for 666") == {"tableName": "aaa", "id": "666"}
    assert template.matches("this is aaa for ") == {"tableName": "aaa"}
    assert template.matches("this is  for 666") == {"id": "666"}
    assert template.matches("this is  for ") == {}


class TestFeatureMatrix:
    """Комбинации стратегий из типичных сценариев."""

    def test_replace_features(self):
        template = of_named(COMMON).features(
            Feature.FORMAT_MISSING_KEY_PRINT_EMPTY, Feature.MATCH_IGNORE_EMPTY_VALUE
        ).build()
        _check_empty_policies(template)

    def test_add_features(self):
        template = of_named(COMMON).add_features(
            Feature.FORMAT_MISSING_KEY_PRINT_EMPTY,
            Feature.MATCH_IGNORE_DEFAULT_VALUE,
            Feature.MATCH_IGNORE_EMPTY_VALUE,
        ).build()
        _check_empty_policies(template)

    def test_removed_missing_key_policy_raises(self):
        template = of_named(COMMON).remove_features(Feature.FORMAT_MISSING_KEY_PRINT_WHOLE_PLACEHOLDER).build()

        assert template.format({"tableName": "aaa", "id": "666"}) == "this is aaa for 666"
        with pytest.raises(MissingKeyError, match="id"):
            template.format({"tableName": "aaa"})

    def test_empty_to_null(self):
        template = of_named(COMMON).add_features(
            Feature.FORMAT_MISSING_KEY_PRINT_EMPTY, Feature.MATCH_EMPTY_VALUE_TO_NULL
        ).build()

        assert template.format({"tableName": "aaa"}) == "this is aaa for "
        assert template.matches("this is aaa for null") == {"tableName": "aaa", "id": None}

    def test_empty_to_default(self):
        template = of_named(COMMON).add_features(
            Feature.FORMAT_MISSING_KEY_PRINT_EMPTY, Feature.MATCH_EMPTY_VALUE_TO_DEFAULT_VALUE
        ).default_value("?").build()

        assert template.format({"tableName": "aaa"}) == "this is aaa for "
        assert template.matches("this is aaa for ") == {"tableName": "aaa", "id": "?"}

    def test_empty_default_value(self):
        template = of_named(COMMON).add_features(
            Feature.FORMAT_MISSING_KEY_PRINT_EMPTY, Feature.MATCH_EMPTY_VALUE_TO_DEFAULT_VALUE
        ).default_value("").build()

        assert template.matches("this is aaa for ") == {"tableName": "aaa", "id": ""}

    def test_null_str_to_null(self):
        template = of_named(COMMON).add_features(
            Feature.FORMAT_MISSING_KEY_PRINT_NULL, Feature.MATCH_NULL_STR_TO_NULL
        ).build()

        assert template.format({"tableName": "aaa"}) == "this is aaa for null"
        assert template.matches("this is aaa for null") == {"tableName": "aaa", "id": None}

    def test_default_null_str_to_null(self):
        template = of_named(COMMON).add_features(
            Feature.FORMAT_MISSING_KEY_PRINT_DEFAULT_VALUE, Feature.MATCH_NULL_STR_TO_NULL
        ).default_value("null").build()

        assert template.format({"tableName": "aaa"}) == "this is aaa for null"
        assert template.matches("this is aaa for null") == {"tableName": "aaa", "id": None}

    @pytest.mark.parametrize("missing_key", [
        Feature.FORMAT_MISSING_KEY_PRINT_NULL,
        Feature.FORMAT_MISSING_KEY_PRINT_DEFAULT_VALUE,
    ])
    def test_ignore_null_str(self, missing_key):
        template = of_named(COMMON).add_features(
            missing_key, Feature.MATCH_IGNORE_NULL_STR
        ).default_value("null").build()

        assert template.format({"tableName": "aaa"}) == "this is aaa for null"
        assert template.matches("this is aaa for null") == {"tableName": "aaa"}

    def test_keep_null_str(self):
        template = of_named(COMMON).add_features(
            Feature.FORMAT_MISSING_KEY_PRINT_NULL, Feature.MATCH_KEEP_NULL_STR
        ).build()

        assert template.format({"tableName": "aaa"}) == "this is aaa for null"
        assert template.matches("this is aaa for null") == {"tableName": "aaa", "id": "null"}

    def test_print_variable_name(self):
        template = of_named("{a} and {}").add_features(Feature.FORMAT_MISSING_KEY_PRINT_VARIABLE_NAME).build()
        assert template.format({}) == "a and {}"


class TestNullValuePolicy:
    """Значение есть в источнике, но равно None."""

    @pytest.mark.parametrize("feature,expected", [
        (Feature.FORMAT_NULL_VALUE_TO_STR, "id=null"),
        (Feature.FORMAT_NULL_VALUE_TO_EMPTY, "id="),
        (Feature.FORMAT_NULL_VALUE_TO_WHOLE_PLACEHOLDER, "id={id}"),
        (Feature.FORMAT_NULL_VALUE_TO_DEFAULT_VALUE, "id=-"),
    ])
    def test_policies(self, feature, expected):
        template = of_named("id={id}").add_features(feature).default_value("-").build()
        assert template.format({"id": None}) == expected

    def test_no_policy_raises(self):
        template = of_named("id={id}").remove_features(Feature.FORMAT_NULL_VALUE_TO_STR).build()
        with pytest.raises(StrTemplateError, match="None"):
            template.format({"id": None})

    def test_raw_format_prints_null(self):
        template = of_named("{a}-{b}").build()
        assert template.format_raw_by_key(lambda key: None if key == "a" else key) == "null-b"


class TestDefaultValues:
    """Источники значения по умолчанию и их порядок."""

    def test_constant_wins_over_handler(self):
        template = (
            of_named("{x}")
            .add_features(Feature.FORMAT_MISSING_KEY_PRINT_DEFAULT_VALUE)
            .default_value(lambda key: "handler")
            .default_value("constant")
            .build()
        )
        assert template.format({}) == "constant"

    def test_missing_default_raises(self):
        template = of_named("{x}").add_features(Feature.FORMAT_MISSING_KEY_PRINT_DEFAULT_VALUE).build()

        assert not template.has_default_value()
        with pytest.raises(MissingDefaultValueError, match="x"):
            template.format({})

    def test_none_default_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            of_named("{x}").default_value(None)

    def test_handler_result_stringified(self):
        template = (
            of_named("{x}")
            .add_features(Feature.FORMAT_MISSING_KEY_PRINT_DEFAULT_VALUE)
            .default_value(lambda key: 42)
            .build()
        )
        assert template.format({}) == "42"


class TestGlobalDefaults:
    """Глобальные настройки применяются к шаблонам, собранным после изменения."""

    def test_global_features(self):
        before = of_named("{x}").build()
        set_global_features(Feature.FORMAT_MISSING_KEY_PRINT_EMPTY)
        after = of_named("{x}").build()

        assert before.format({}) == "{x}"
        assert after.format({}) == ""
        assert list(after.features) == [Feature.FORMAT_MISSING_KEY_PRINT_EMPTY]

    def test_global_default_value(self):
        builder = of("{}").add_features(Feature.FORMAT_MISSING_KEY_PRINT_DEFAULT_VALUE)
        before = builder.build()
        set_global_default_value(lambda key: "g")
        after = builder.build()

        with pytest.raises(MissingDefaultValueError):
            before.format()
        assert after.format() == "g"
        assert after.has_default_value()

    def test_local_handler_wins(self):
        set_global_default_value(lambda key: "g")
        template = (
            of_named("{x}")
            .add_features(Feature.FORMAT_MISSING_KEY_PRINT_DEFAULT_VALUE)
            .default_value(lambda key: "local")
            .build()
        )
        assert template.format({}) == "local"

    def test_global_default_none_rejected(self):
        with pytest.raises(InvalidConfigurationError):
            set_global_default_value(None)


class TestBuilderValidation:
    def test_none_template(self):
        with pytest.raises(InvalidConfigurationError):
            of_named(None)

    @pytest.mark.parametrize("configure", [
        lambda b: b.prefix(""),
        lambda b: b.suffix(""),
        lambda b: b.escape("ab"),
    ])
    def test_invalid_delimiters(self, configure):
        with pytest.raises(InvalidConfigurationError):
            configure(of_named("{x}")).build()

    def test_invalid_placeholder(self):
        with pytest.raises(InvalidConfigurationError):
            of("{}").placeholder("").build()
