"""
Лексический анализатор шаблонов.

Разбивает исходный текст шаблона на токены TEXT и PLACEHOLDER,
разрешая экранирование разделителей. Работает с обоими вариантами
разделителей: prefix/suffix для именованных плейсхолдеров и одиночной
строкой-плейсхолдером для безымянных.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from .tokens import DelimiterConfig, SinglePlaceholderConfig, Token, TokenType

logger = logging.getLogger(__name__)

LexerConfig = Union[DelimiterConfig, SinglePlaceholderConfig]


class TemplateLexer:
    """
    Лексический анализатор шаблонов.

    Правила экранирования:
    - escape + открывающий разделитель  → разделитель как обычный текст
    - escape + escape                   → один символ escape
    - escape перед любым другим символом остаётся в тексте как есть
    - внутри плейсхолдера escape + suffix → suffix становится частью имени

    Открывающий разделитель без закрывающего до конца текста
    считается обычным текстом.
    """

    def __init__(self, text: str, config: LexerConfig):
        self.text = text
        self.config = config
        self.position = 0
        self.line = 1
        self.column = 1
        self.length = len(text)

        self.escape = config.escape
        if isinstance(config, DelimiterConfig):
            self.open_seq = config.prefix
            self.close_seq: Optional[str] = config.suffix
        else:
            self.open_seq = config.placeholder
            self.close_seq = None

        # Накопитель текущего текстового фрагмента
        self._buffer: List[str] = []
        self._buffer_start = (0, 1, 1)

    def tokenize(self) -> List[Token]:
        """
        Токенизирует весь исходный текст и возвращает список токенов.

        Последним всегда идёт EOF.
        """
        tokens: List[Token] = []

        while self.position < self.length:
            if self._at(self.escape) and self._consume_escape():
                continue

            if self._at(self.open_seq):
                token = self._read_placeholder()
                if token is not None:
                    self._flush_text(tokens)
                    tokens.append(token)
                    continue
                # Незакрытый плейсхолдер — открывающий разделитель идёт в текст
                logger.debug(
                    "Unterminated placeholder at %d:%d treated as text", self.line, self.column
                )
                self._append_text(self.open_seq)
                continue

            self._append_text(self.text[self.position])

        self._flush_text(tokens)
        tokens.append(Token(TokenType.EOF, "", self.position, self.line, self.column))

        logger.debug("Tokenized template into %d tokens", len(tokens))
        return tokens

    def _at(self, seq: str, offset: int = 0) -> bool:
        return self.text.startswith(seq, self.position + offset)

    def _consume_escape(self) -> bool:
        """
        Обрабатывает escape в текстовом контексте.

        Returns:
            True если escape что-то экранировал и позиция сдвинута
        """
        step = len(self.escape)
        if self._at(self.open_seq, step):
            self._append_text(self.open_seq, step + len(self.open_seq))
            return True
        if self._at(self.escape, step):
            self._append_text(self.escape, step * 2)
            return True
        return False

    def _read_placeholder(self) -> Optional[Token]:
        """Читает плейсхолдер с текущей позиции или возвращает None, если он не закрыт."""
        start = (self.position, self.line, self.column)

        if self.close_seq is None:
            self._advance(len(self.open_seq))
            return Token(TokenType.PLACEHOLDER, "", *start, raw=self.open_seq)

        scanned = self._scan_key(self.position + len(self.open_seq))
        if scanned is None:
            return None

        key, end = scanned
        self._advance(end - self.position)
        return Token(TokenType.PLACEHOLDER, key, *start, raw=self.open_seq + key + self.close_seq)

    def _scan_key(self, start: int) -> Optional[Tuple[str, int]]:
        """
        Ищет ближайший неэкранированный suffix начиная с start.

        Returns:
            (имя переменной, позиция сразу после suffix) или None
        """
        assert self.close_seq is not None
        text, escape, close = self.text, self.escape, self.close_seq
        parts: List[str] = []
        i = start
        while i < self.length:
            if text.startswith(escape, i):
                after = i + len(escape)
                if text.startswith(close, after):
                    parts.append(close)
                    i = after + len(close)
                    continue
                if text.startswith(escape, after):
                    parts.append(escape)
                    i = after + len(escape)
                    continue
            if text.startswith(close, i):
                return "".join(parts), i + len(close)
            parts.append(text[i])
            i += 1
        return None

    def _append_text(self, value: str, consumed: Optional[int] = None) -> None:
        if not self._buffer:
            self._buffer_start = (self.position, self.line, self.column)
        self._buffer.append(value)
        self._advance(len(value) if consumed is None else consumed)

    def _flush_text(self, tokens: List[Token]) -> None:
        if not self._buffer:
            return
        value = "".join(self._buffer)
        self._buffer = []
        tokens.append(Token(TokenType.TEXT, value, *self._buffer_start))

    def _advance(self, count: int) -> None:
        """
        Перемещает позицию на указанное количество символов,
        обновляя номера строк и колонок.
        """
        for _ in range(count):
            if self.position < self.length:
                if self.text[self.position] == '\n':
                    self.line += 1
                    self.column = 1
                else:
                    self.column += 1
                self.position += 1


def tokenize_template(text: str, config: LexerConfig) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        text: Исходный текст шаблона
        config: Конфигурация разделителей

    Returns:
        Список токенов
    """
    return TemplateLexer(text, config).tokenize()


__all__ = ["TemplateLexer", "LexerConfig", "tokenize_template"]
