"""
Тесты обратного разбора на уровне TemplateMatcher: якоря, границы,
несовпадения и нормализация значений стратегиями.
"""

import pytest

from strtpl.errors import AmbiguousTemplateError
from strtpl.template.features import DEFAULT_FEATURES, Feature
from strtpl.template.matcher import DROP, TemplateMatcher, try_match
from strtpl.template.parser import parse_named, parse_single


def _matcher(source, features=DEFAULT_FEATURES):
    return TemplateMatcher(parse_named(source), features)


def _raw(source, text):
    captures = _matcher(source).match_raw(text)
    return None if captures is None else [(s.key, v) for s, v in captures]


class TestAnchors:
    """Текст шаблона служит якорями."""

    def test_middle_and_trailing(self):
        assert _raw("this is {a} for {b}", "this is x for y") == [("a", "x"), ("b", "y")]

    def test_leading_placeholder(self):
        assert _raw("{a}, this is for {b}", ":)Cleveland, this is for you:(") == [
            ("a", ":)Cleveland"),
            ("b", "you:("),
        ]

    def test_first_occurrence_wins(self):
        """Промежуточный якорь ищется первым вхождением."""
        assert _raw("{a}-{b}", "1-2-3") == [("a", "1"), ("b", "2-3")]

    def test_trailing_literal_must_end_input(self):
        assert _raw("<{a}>", "<x>") == [("a", "x")]
        assert _raw("<{a}>", "<x> ") is None

    def test_trailing_literal_uses_suffix(self):
        """Последний якорь сверяется с концом строки, а не с первым вхождением."""
        assert _raw("{a}.", "a.b.") == [("a", "a.b")]

    def test_trailing_literal_overlap(self):
        """Последний якорь не может перекрывать уже разобранную часть."""
        assert _raw("ab{x}ba", "aba") is None

    def test_empty_capture_at_boundary(self):
        assert _raw("this is {a} for {b}", "this is  for ") == [("a", ""), ("b", "")]

    def test_missing_tail_capture(self):
        """Плейсхолдер в конце забирает весь остаток строки."""
        assert _raw("id={id}", "id=1001 and more") == [("id", "1001 and more")]


class TestNonMatch:
    """Несовпадения дают None, а не ошибку."""

    @pytest.mark.parametrize("text", [
        None,
        "",
        " ",
        "  \r\n \n ",
        " this is a for b",
        "this is a forb",
        "this  is a for b",
        "this are a for b",
        "that is a for b",
    ])
    def test_not_matching(self, text):
        matcher = _matcher("this is {a} for {b}")
        assert matcher.match_raw(text) is None
        assert not matcher.is_match(text)

    def test_template_without_placeholders(self):
        matcher = _matcher("plain")
        assert matcher.match_raw("plain") == []
        assert matcher.match_raw("plain!") is None
        assert matcher.match_raw("") is None

    def test_empty_template_matches_empty_input(self):
        matcher = _matcher("")
        assert matcher.match_raw("") == []
        assert matcher.is_match("")
        assert not matcher.is_match("x")
        assert not matcher.is_match(None)


class TestAdjacentPlaceholders:
    """Плейсхолдеры вплотную нельзя разделить при разборе."""

    def test_match_raises(self):
        matcher = _matcher("i {a}{m} a {jvav} programmer")
        with pytest.raises(AmbiguousTemplateError, match="adjacent"):
            matcher.match_raw("i am a java programmer")

    def test_single_adjacent_raises(self):
        matcher = TemplateMatcher(parse_single("{}{}"), DEFAULT_FEATURES)
        with pytest.raises(AmbiguousTemplateError):
            matcher.match("ab")

    def test_is_match_is_false(self):
        """Проверка совпадения не бросает, а отвечает False."""
        assert TemplateMatcher(parse_single("{}{}"), DEFAULT_FEATURES).is_match("ab") is False
        assert _matcher("{a}{b}").is_match("xy") is False


class TestNormalize:
    """Нормализация значений стратегиями разбора."""

    def _normalize(self, features, value, default=None):
        matcher = _matcher("{a}", features)
        (segment,) = matcher.segments
        supplier = (lambda s: default) if default is not None else None
        return matcher.normalize(segment, value, supplier)

    def test_default_empty_to_null(self):
        assert self._normalize(DEFAULT_FEATURES, "") is None

    def test_null_str_to_null(self):
        assert self._normalize(DEFAULT_FEATURES, "null") is None

    def test_keep_null_str(self):
        features = DEFAULT_FEATURES.add(Feature.MATCH_KEEP_NULL_STR)
        assert self._normalize(features, "null") == "null"

    def test_ignore_empty(self):
        features = DEFAULT_FEATURES.add(Feature.MATCH_IGNORE_EMPTY_VALUE)
        assert self._normalize(features, "") is DROP

    def test_keep_empty(self):
        features = DEFAULT_FEATURES.add(Feature.MATCH_KEEP_VALUE_EMPTY)
        assert self._normalize(features, "") == ""

    def test_empty_to_default(self):
        features = DEFAULT_FEATURES.add(Feature.MATCH_EMPTY_VALUE_TO_DEFAULT_VALUE)
        assert self._normalize(features, "", default="?") == "?"

    def test_default_value_checked_first(self):
        features = DEFAULT_FEATURES.add(Feature.MATCH_IGNORE_DEFAULT_VALUE, Feature.MATCH_KEEP_VALUE_EMPTY)
        assert self._normalize(features, "?", default="?") is DROP
        assert self._normalize(features, "x", default="?") == "x"

    def test_default_value_to_null(self):
        features = DEFAULT_FEATURES.add(Feature.MATCH_DEFAULT_VALUE_TO_NULL)
        assert self._normalize(features, "n/a", default="n/a") is None

    def test_empty_groups_drop(self):
        """Без стратегии в группе пустая строка и "null" выпадают из результата."""
        features = DEFAULT_FEATURES.remove(Feature.MATCH_EMPTY_VALUE_TO_NULL, Feature.MATCH_NULL_STR_TO_NULL)
        assert self._normalize(features, "") is DROP
        assert self._normalize(features, "null") is DROP
        assert self._normalize(features, "value") == "value"


def test_try_match_returns_raw_strings():
    segments = parse_named("{a}, this is for {b}")

    assert try_match(segments, "x, this is for ") == ["x", ""]
    assert try_match(segments, "x; this is for y") is None
