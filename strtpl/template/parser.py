"""
Парсер шаблонов.

Преобразует последовательность токенов в список сегментов:
сливает соседние текстовые фрагменты, отбрасывает пустые
и классифицирует плейсхолдеры по виду ключа.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .lexer import LexerConfig, TemplateLexer
from .nodes import (
    IndexedPlaceholder,
    LiteralSegment,
    NamedPlaceholder,
    PlaceholderSegment,
    PositionalPlaceholder,
    Segment,
    SegmentList,
)
from .tokens import DelimiterConfig, SinglePlaceholderConfig, Token, TokenType

logger = logging.getLogger(__name__)


class TemplateParser:
    """
    Однопроходный парсер токенов в сегменты.

    Ключ плейсхолдера определяет его вид:
    - пустой ключ          → PositionalPlaceholder
    - только цифры ASCII   → IndexedPlaceholder (индекс с 0)
    - всё остальное        → NamedPlaceholder
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.position = 0
        self._positional_count = 0

    def parse(self) -> SegmentList:
        """
        Парсит всю последовательность токенов.

        Returns:
            Список сегментов без пустых и без соседних текстовых фрагментов
        """
        segments: SegmentList = []

        while not self._is_at_end():
            token = self.tokens[self.position]
            self.position += 1

            if token.type == TokenType.TEXT:
                self._append_literal(segments, token.value)
            elif token.type == TokenType.PLACEHOLDER:
                segments.append(self._make_placeholder(token))

        return segments

    def _is_at_end(self) -> bool:
        return self.position >= len(self.tokens) or self.tokens[self.position].type == TokenType.EOF

    @staticmethod
    def _append_literal(segments: SegmentList, text: str) -> None:
        if not text:
            return
        if segments and isinstance(segments[-1], LiteralSegment):
            segments[-1] = LiteralSegment(segments[-1].text + text)
        else:
            segments.append(LiteralSegment(text))

    def _make_placeholder(self, token: Token) -> PlaceholderSegment:
        key = token.value
        if not key:
            ordinal = self._positional_count
            self._positional_count += 1
            return PositionalPlaceholder(key=key, text=token.raw, ordinal=ordinal)
        if key.isascii() and key.isdigit():
            return IndexedPlaceholder(key=key, text=token.raw, index=int(key))
        return NamedPlaceholder(key=key, text=token.raw)


def parse_template(source: str, config: LexerConfig) -> SegmentList:
    """
    Разбирает шаблон в список сегментов.

    Никогда не бросает исключений: некорректный синтаксис
    плейсхолдеров деградирует в обычный текст.
    """
    tokens = TemplateLexer(source, config).tokenize()
    segments = TemplateParser(tokens).parse()
    logger.debug("Parsed %r into %d segments", source, len(segments))
    return segments


def parse_named(source: str, config: Optional[DelimiterConfig] = None) -> SegmentList:
    """Разбор шаблона с именованными плейсхолдерами ("{name}", "#[id]")."""
    return parse_template(source, config or DelimiterConfig())


def parse_single(source: str, config: Optional[SinglePlaceholderConfig] = None) -> SegmentList:
    """Разбор шаблона с одиночным плейсхолдером ("{}", "?")."""
    return parse_template(source, config or SinglePlaceholderConfig())


def to_source(segments: List[Segment], config: LexerConfig) -> str:
    """
    Собирает текст шаблона обратно из сегментов.

    Текст и имена переменных экранируются так, чтобы повторный
    разбор дал ту же последовательность сегментов.
    """
    escape = config.escape
    if isinstance(config, DelimiterConfig):
        open_seq, close_seq = config.prefix, config.suffix
    else:
        open_seq, close_seq = config.placeholder, None

    parts: List[str] = []
    for segment in segments:
        if isinstance(segment, LiteralSegment):
            text = segment.text.replace(escape, escape * 2)
            parts.append(text.replace(open_seq, escape + open_seq))
        elif close_seq is None:
            parts.append(open_seq)
        else:
            key = segment.key.replace(escape, escape * 2).replace(close_seq, escape + close_seq)
            parts.append(open_seq + key + close_seq)
    return "".join(parts)


__all__ = ["TemplateParser", "parse_template", "parse_named", "parse_single", "to_source"]
