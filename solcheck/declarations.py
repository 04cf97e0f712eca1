"""Declaration scanner for Solidity sources.

Recovers just enough structure to drive the naming rules: contract-like
boundaries, functions, state variables, and their visibility and mutability
keywords. Comments and literals are masked before tokenising, so every
bracket and keyword the scanner sees is real code.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum

from solcheck.source import Token, mask_source, tokenize


class DeclarationKind(StrEnum):
    FUNCTION = "function"
    CONSTRUCTOR = "constructor"
    VARIABLE = "variable"
    CONTRACT = "contract"
    LIBRARY = "library"
    INTERFACE = "interface"


class Visibility(StrEnum):
    PUBLIC = "public"
    EXTERNAL = "external"
    INTERNAL = "internal"
    PRIVATE = "private"
    UNSPECIFIED = "unspecified"


class Mutability(StrEnum):
    NONE = "none"
    CONSTANT = "constant"
    IMMUTABLE = "immutable"


class ScopeKind(StrEnum):
    CONTRACT = "contract"
    LIBRARY = "library"
    INTERFACE = "interface"
    FREE = "free"


CONTAINER_KINDS = {
    "contract": DeclarationKind.CONTRACT,
    "library": DeclarationKind.LIBRARY,
    "interface": DeclarationKind.INTERFACE,
}
CONTAINER_SCOPES = {
    DeclarationKind.CONTRACT: ScopeKind.CONTRACT,
    DeclarationKind.LIBRARY: ScopeKind.LIBRARY,
    DeclarationKind.INTERFACE: ScopeKind.INTERFACE,
}
VISIBILITY_KEYWORDS = {"public", "external", "internal", "private"}

_SKIPPED_STATEMENTS = {"pragma", "import", "using", "event", "error", "type"}
_SKIPPED_BLOCKS = {"struct", "enum", "modifier"}
_BOUNDARY_KEYWORDS = {
    "abstract",
    "constructor",
    "contract",
    "enum",
    "event",
    "import",
    "interface",
    "library",
    "modifier",
    "pragma",
    "struct",
    "using",
}
_VARIABLE_KEYWORDS = VISIBILITY_KEYWORDS | {"constant", "immutable", "override", "transient"}
_FUNCTION_TYPE_KEYWORDS = VISIBILITY_KEYWORDS | {"payable", "pure", "view", "virtual"}
_OPENERS = {"(", "[", "{"}
_CLOSERS = {")": "(", "]": "[", "}": "{"}


@dataclass(frozen=True, slots=True)
class Declaration:
    """A named construct with its signature span."""

    kind: DeclarationKind
    name: str
    visibility: Visibility
    mutability: Mutability
    scope: ScopeKind
    line_start: int
    line_end: int

    @property
    def is_function(self) -> bool:
        return self.kind in {DeclarationKind.FUNCTION, DeclarationKind.CONSTRUCTOR}

    @property
    def is_container(self) -> bool:
        return self.kind in CONTAINER_SCOPES

    @property
    def effective_visibility(self) -> Visibility:
        """Visibility with the language defaults applied."""
        if self.visibility is not Visibility.UNSPECIFIED:
            return self.visibility
        if self.is_container or self.kind is DeclarationKind.CONSTRUCTOR:
            return Visibility.PUBLIC
        if self.kind is DeclarationKind.FUNCTION:
            if self.scope is ScopeKind.INTERFACE or self.name in {"fallback", "receive"}:
                return Visibility.EXTERNAL
        return Visibility.INTERNAL


@dataclass(frozen=True, slots=True)
class ScanError:
    """A construct the scanner could not close."""

    line: int
    message: str


@dataclass(slots=True)
class ScanOutcome:
    declarations: list[Declaration] = field(default_factory=list)
    errors: list[ScanError] = field(default_factory=list)


def scan_declarations(text: str) -> ScanOutcome:
    """Extract declarations in order of appearance; never raises."""
    masked = mask_source(text)
    outcome = ScanOutcome()
    if masked.unterminated_comment_line is not None:
        outcome.errors.append(
            ScanError(line=masked.unterminated_comment_line, message="unterminated block comment")
        )
    _Scanner(tokenize(masked.code), last_line=text.count("\n") + 1, outcome=outcome).run()
    return outcome


class _Scanner:
    def __init__(self, tokens: list[Token], *, last_line: int, outcome: ScanOutcome) -> None:
        self._tokens = tokens
        self._last_line = last_line
        self._outcome = outcome
        self._closers = _match_brackets(tokens)

    def run(self) -> None:
        self._scan_scope(0, len(self._tokens), ScopeKind.FREE)

    def _scan_scope(self, index: int, end: int, scope: ScopeKind) -> None:
        while index < end:
            token = self._tokens[index]
            text = token.text
            if (
                text == "abstract"
                and self._text_at(index + 1) == "contract"
                and self._is_identifier_at(index + 2)
            ):
                index = self._scan_container(index + 1, end, scope, token.line)
            elif text in CONTAINER_KINDS and self._is_identifier_at(index + 1):
                index = self._scan_container(index, end, scope, token.line)
            elif self._starts_function(index):
                index = self._scan_function(index, end, scope)
            elif text in _SKIPPED_STATEMENTS:
                index = self._skip(index, end, stops={";"})
            elif text in _SKIPPED_BLOCKS:
                index = self._skip(index, end, stops={"{", ";"})
            elif text in {";", ")", "]", "}"}:
                index += 1
            else:
                index = self._scan_variable(index, end, scope)

    def _scan_container(self, index: int, end: int, scope: ScopeKind, line_start: int) -> int:
        kind = CONTAINER_KINDS[self._tokens[index].text]
        name = self._tokens[index + 1].text
        brace, resume = self._find_terminator(index + 2, end, stops={"{"})
        if brace is None:
            self._error(index, f"unterminated header of {kind} `{name}`")
            return resume

        closer = self._closers.get(brace)
        if closer is None:
            self._error(index, f"unterminated body of {kind} `{name}`")
            line_end, body_end = self._last_line, end
        else:
            line_end, body_end = self._tokens[closer].line, closer

        self._outcome.declarations.append(
            Declaration(
                kind=kind,
                name=name,
                visibility=Visibility.UNSPECIFIED,
                mutability=Mutability.NONE,
                scope=scope,
                line_start=line_start,
                line_end=line_end,
            )
        )
        self._scan_scope(brace + 1, body_end, CONTAINER_SCOPES[kind])
        return body_end + 1 if closer is not None else end

    def _scan_function(self, index: int, end: int, scope: ScopeKind) -> int:
        name, kind, header_start = self._function_head(index)
        terminator, resume = self._find_terminator(header_start, end, stops={"{", ";"})
        if terminator is None:
            self._error(index, f"unterminated signature of function `{name}`")
            return resume
        if header_start == index + 1 and self._names_function_typed_variable(terminator):
            return self._scan_variable(index, end, scope)

        visibility = Visibility.UNSPECIFIED
        for position in self._walk(header_start, terminator):
            if self._tokens[position].text in VISIBILITY_KEYWORDS:
                visibility = Visibility(self._tokens[position].text)
                break

        self._outcome.declarations.append(
            Declaration(
                kind=kind,
                name=name,
                visibility=visibility,
                mutability=Mutability.NONE,
                scope=scope,
                line_start=self._tokens[index].line,
                line_end=self._tokens[terminator].line,
            )
        )
        if self._tokens[terminator].text == ";":
            return terminator + 1
        return self._skip_body(index, terminator, end, f"function `{name}`")

    def _scan_variable(self, index: int, end: int, scope: ScopeKind) -> int:
        terminator, resume = self._find_terminator(index, end, stops={";", "{"})
        if terminator is None:
            self._error(index, "unterminated declaration")
            return max(resume, index + 1)
        if self._tokens[terminator].text == "{":
            return self._skip_body(index, terminator, end, "block")

        head: list[Token] = []
        for position in self._walk(index, terminator):
            if self._tokens[position].text == "=":
                break
            head.append(self._tokens[position])

        keywords = {token.text for token in head}
        identifiers = [
            token for token in head if token.is_identifier and token.text not in _VARIABLE_KEYWORDS
        ]
        if len(identifiers) < 2:
            # A type and a name are the minimum for a variable declaration.
            return terminator + 1

        # The last keyword wins so function-type variables get their own.
        visibility = Visibility.UNSPECIFIED
        for token in head:
            if token.text in VISIBILITY_KEYWORDS:
                visibility = Visibility(token.text)
        if "constant" in keywords:
            mutability = Mutability.CONSTANT
        elif "immutable" in keywords:
            mutability = Mutability.IMMUTABLE
        else:
            mutability = Mutability.NONE

        self._outcome.declarations.append(
            Declaration(
                kind=DeclarationKind.VARIABLE,
                name=identifiers[-1].text,
                visibility=visibility,
                mutability=mutability,
                scope=scope,
                line_start=self._tokens[index].line,
                line_end=self._tokens[terminator].line,
            )
        )
        return terminator + 1

    def _skip(self, index: int, end: int, *, stops: set[str]) -> int:
        keyword = self._tokens[index].text
        terminator, resume = self._find_terminator(index + 1, end, stops=stops)
        if terminator is None:
            self._error(index, f"unterminated {keyword} declaration")
            return resume
        if self._tokens[terminator].text == "{":
            return self._skip_body(index, terminator, end, keyword)
        return terminator + 1

    def _skip_body(self, index: int, brace: int, end: int, what: str) -> int:
        closer = self._closers.get(brace)
        if closer is None:
            self._error(index, f"unterminated body of {what}")
            return self._next_boundary(brace + 1, end)
        return closer + 1

    def _function_head(self, index: int) -> tuple[str, DeclarationKind, int]:
        text = self._tokens[index].text
        if text == "constructor":
            return "constructor", DeclarationKind.CONSTRUCTOR, index + 1
        if text == "function":
            if self._is_identifier_at(index + 1):
                return self._tokens[index + 1].text, DeclarationKind.FUNCTION, index + 2
            # Legacy unnamed fallback: `function() external`.
            return "fallback", DeclarationKind.FUNCTION, index + 1
        return text, DeclarationKind.FUNCTION, index + 1

    def _names_function_typed_variable(self, terminator: int) -> bool:
        """``function (uint) external f;`` declares a variable named ``f``."""
        if self._tokens[terminator].text != ";":
            return False
        last = self._tokens[terminator - 1]
        return last.is_identifier and last.text not in _FUNCTION_TYPE_KEYWORDS

    def _starts_function(self, index: int) -> bool:
        text = self._tokens[index].text
        if text == "function":
            return True
        return text in {"constructor", "fallback", "receive"} and self._text_at(index + 1) == "("

    def _find_terminator(
        self, start: int, end: int, *, stops: set[str]
    ) -> tuple[int | None, int]:
        """Return ``(terminator, resume)`` for the first depth-0 stop token.

        When a declaration keyword shows up first, or the scope ends, the
        terminator is ``None`` and ``resume`` is where scanning continues.
        """
        for position in self._walk(start, end):
            if self._tokens[position].text in stops:
                return position, position
            if self._is_boundary(position):
                return None, position
        return None, end

    def _walk(self, start: int, end: int) -> Iterator[int]:
        position = start
        while position < end:
            yield position
            closer = self._closers.get(position)
            if closer is not None and closer < end:
                position = closer + 1
            else:
                position += 1

    def _next_boundary(self, start: int, end: int) -> int:
        for position in range(start, end):
            if self._is_boundary(position):
                return position
        return end

    def _is_boundary(self, position: int) -> bool:
        text = self._tokens[position].text
        if text in _BOUNDARY_KEYWORDS:
            return True
        return text == "function" and self._is_identifier_at(position + 1)

    def _text_at(self, position: int) -> str:
        if position < len(self._tokens):
            return self._tokens[position].text
        return ""

    def _is_identifier_at(self, position: int) -> bool:
        return position < len(self._tokens) and self._tokens[position].is_identifier

    def _error(self, position: int, message: str) -> None:
        self._outcome.errors.append(ScanError(line=self._tokens[position].line, message=message))


def _match_brackets(tokens: list[Token]) -> dict[int, int]:
    closers: dict[int, int] = {}
    stack: list[int] = []
    for index, token in enumerate(tokens):
        if token.text in _OPENERS:
            stack.append(index)
            continue
        opener = _CLOSERS.get(token.text)
        if opener is None:
            continue
        for depth in range(len(stack) - 1, -1, -1):
            if tokens[stack[depth]].text == opener:
                closers[stack[depth]] = index
                # Openers above the match are left unclosed.
                del stack[depth:]
                break
    return closers
