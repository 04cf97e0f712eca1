"""Source masking and tokenisation primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

TOKEN_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*|\d[\w.]*|\S")


@dataclass(frozen=True, slots=True)
class Token:
    """A single code token with its 1-based line number."""

    text: str
    line: int

    @property
    def is_identifier(self) -> bool:
        first = self.text[0]
        return first.isalpha() or first in "_$"


@dataclass(frozen=True, slots=True)
class MaskedSource:
    """Source text with comment and literal contents blanked out.

    ``comments`` is the complementary view: only comment text survives.
    """

    code: str
    comments: str = ""
    unterminated_comment_line: int | None = None


def mask_source(text: str) -> MaskedSource:
    """Replace comments and quoted literals with spaces.

    Offsets and newlines are preserved, so line numbers computed on the
    masked code (and on the comment view) are valid for the input text.
    """
    out: list[str] = []
    notes: list[str] = []
    unterminated_line: int | None = None
    index = 0
    length = len(text)

    while index < length:
        char = text[index]
        nxt = text[index + 1] if index + 1 < length else ""

        if char == "/" and nxt == "/":
            end = text.find("\n", index)
            if end == -1:
                end = length
            out.append(" " * (end - index))
            notes.append(text[index:end])
            index = end
            continue

        if char == "/" and nxt == "*":
            end = text.find("*/", index + 2)
            if end == -1:
                unterminated_line = text.count("\n", 0, index) + 1
                end = length
            else:
                end += 2
            out.append(_blank(text[index:end]))
            notes.append(text[index:end])
            index = end
            continue

        if char in "\"'":
            end = _literal_end(text, index)
            out.append(" " * (end - index))
            notes.append(" " * (end - index))
            index = end
            continue

        out.append(char)
        notes.append("\n" if char == "\n" else " ")
        index += 1

    return MaskedSource(
        code="".join(out),
        comments="".join(notes),
        unterminated_comment_line=unterminated_line,
    )


def tokenize(code: str) -> list[Token]:
    """Split masked code into identifier, number and punctuation tokens."""
    tokens: list[Token] = []
    for lineno, line in enumerate(code.split("\n"), start=1):
        for match in TOKEN_RE.finditer(line):
            tokens.append(Token(text=match.group(), line=lineno))
    return tokens


def _blank(chunk: str) -> str:
    return "".join("\n" if char == "\n" else " " for char in chunk)


def _literal_end(text: str, start: int) -> int:
    quote = text[start]
    escape = False
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\n":
            # Solidity literals cannot span lines; stop masking here.
            return index
        if escape:
            escape = False
        elif char == "\\":
            escape = True
        elif char == quote:
            return index + 1
        index += 1
    return index
