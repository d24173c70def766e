# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Splits a raw argument vector into abstract tokens.

Each element of the vector becomes exactly one token:

- `--`                        → EndOfOptionsToken; later elements are positional
- `--name`, `--name=v`, `--name:v` → long OptionToken
- `-x`, `-x=v`, `-x:v`         → short OptionToken
- anything else               → PositionalToken (`-`, `-abc`, `-42`, `file.txt`)

The scan is single-pass and never backtracks. `Tokenizer` is a restartable
lazy sequence: every call to `iter()` starts a fresh scan of the same vector.
`TokenStream` adds the one token of lookahead the resolver needs to decide
whether a following element is an option value.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence, Union

END_OF_OPTIONS = "--"
VALUE_SEPARATORS = ("=", ":")


class OptionKind(Enum):
    """Whether an option reference uses its long or its short name."""

    LONG = "long"
    SHORT = "short"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class OptionToken:
    """A reference to an option, with an optional inline value."""

    kind: OptionKind
    name: str
    value: str | None
    raw: str
    index: int = 0

    @property
    def has_value(self) -> bool:
        return self.value is not None

    @property
    def reference(self) -> str:
        """Return the option reference without any inline value (`--name`, `-n`)."""
        prefix = "--" if self.kind == OptionKind.LONG else "-"
        return f"{prefix}{self.name}"


@dataclass(frozen=True)
class PositionalToken:
    """A non-option argument, in encounter order."""

    value: str
    index: int = 0

    @property
    def raw(self) -> str:
        return self.value


@dataclass(frozen=True)
class EndOfOptionsToken:
    """The literal `--` marker that ends option scanning."""

    index: int = 0

    @property
    def raw(self) -> str:
        return END_OF_OPTIONS


Token = Union[OptionToken, PositionalToken, EndOfOptionsToken]


def _split_inline_value(text: str) -> tuple[str, str | None]:
    """Split `name=value` or `name:value` at the first separator."""
    positions = [text.find(sep) for sep in VALUE_SEPARATORS if sep in text]
    if not positions:
        return text, None
    split_at = min(positions)
    return text[:split_at], text[split_at + 1 :]


def scan_token(element: str, index: int = 0) -> Token:
    """
    Classify a single argument element while option scanning is active.

    Args:
        element (str): One element of the argument vector.
        index (int): Position of the element, kept for diagnostics.

    Returns:
        Token: The token for this element.
    """
    if element == END_OF_OPTIONS:
        return EndOfOptionsToken(index)
    if element.startswith("--"):
        name, value = _split_inline_value(element[2:])
        return OptionToken(OptionKind.LONG, name, value, element, index)
    if element.startswith("-") and len(element) >= 2:
        name = element[1]
        rest = element[2:]
        if not rest:
            return OptionToken(OptionKind.SHORT, name, None, element, index)
        if rest[0] in VALUE_SEPARATORS:
            return OptionToken(OptionKind.SHORT, name, rest[1:], element, index)
    return PositionalToken(element, index)


class Tokenizer:
    """
    Restartable lazy token sequence over an argument vector.

    Example:
        tokens = Tokenizer(["-a", "test", "--", "-b"])
        list(tokens)
        # [OptionToken(SHORT, 'a'), PositionalToken('test'),
        #  EndOfOptionsToken(), PositionalToken('-b')]
    """

    def __init__(self, args: Sequence[str]) -> None:
        self.args: tuple[str, ...] = tuple(args)

    def __iter__(self) -> Iterator[Token]:
        scanning = True
        for index, element in enumerate(self.args):
            if not scanning:
                yield PositionalToken(element, index)
                continue
            token = scan_token(element, index)
            if isinstance(token, EndOfOptionsToken):
                scanning = False
            yield token

    def __len__(self) -> int:
        return len(self.args)

    def __repr__(self) -> str:
        return f"Tokenizer({list(self.args)!r})"


class TokenStream:
    """Iterator over tokens with a single token of lookahead."""

    _EMPTY = object()

    def __init__(self, tokens: Iterator[Token] | Tokenizer) -> None:
        self._iterator = iter(tokens)
        self._peeked: object = self._EMPTY

    def peek(self) -> Token | None:
        """Return the next token without consuming it, or None at the end."""
        if self._peeked is self._EMPTY:
            self._peeked = next(self._iterator, None)
        return self._peeked  # type: ignore[return-value]

    def advance(self) -> Token | None:
        """Consume and return the next token, or None at the end."""
        token = self.peek()
        self._peeked = self._EMPTY
        return token

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.advance()
        if token is None:
            raise StopIteration
        return token
