# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Resolves option reference tokens against an option registry.

For every option token the resolver looks up the declared option and decides
where its value comes from:

- REQUIRED: the inline value, else the next token when it is not the end
  marker and not a recognized option reference, else `OptionArgumentError`.
- OPTIONAL: the inline value, else no value. A following token is never
  consumed, so `-a` alone always means "present, no value".
- NONE: no value; an inline value is an `OptionArgumentError`.

Unknown names raise `UnknownOptionError` carrying the raw text. Positional
tokens are passed through untouched; the end marker is dropped.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

from optbind.exceptions import OptionArgumentError, UnknownOptionError
from optbind.option import OptionArgument, OptionDescriptor
from optbind.registry import OptionRegistry
from optbind.tokenizer import (
    EndOfOptionsToken,
    OptionToken,
    PositionalToken,
    Token,
    Tokenizer,
    TokenStream,
)


@dataclass(frozen=True)
class ResolvedOption:
    """An option reference matched to its descriptor, with its raw value if any."""

    descriptor: OptionDescriptor
    value: str | None
    token: OptionToken
    present: bool = True

    @property
    def option_text(self) -> str:
        return self.token.reference


Resolved = Union[ResolvedOption, PositionalToken]


def _can_consume(token: Token | None, registry: OptionRegistry) -> bool:
    """Check whether a token may be taken as the value of a preceding option."""
    if token is None or isinstance(token, EndOfOptionsToken):
        return False
    if isinstance(token, OptionToken):
        return registry.lookup(token) is None
    return True


def resolve_option(
    token: OptionToken, stream: TokenStream, registry: OptionRegistry
) -> ResolvedOption:
    """
    Resolve a single option token, consuming a following value token if needed.

    Raises:
        UnknownOptionError: If the option name is not declared.
        OptionArgumentError: If a value is missing or not allowed.
    """
    descriptor = registry.lookup(token)
    if descriptor is None:
        raise UnknownOptionError(
            f"Unrecognized option '{token.raw}'", option_text=token.raw
        )

    if descriptor.argument == OptionArgument.NONE:
        if token.has_value:
            raise OptionArgumentError(
                f"Option '{token.reference}' does not take a value",
                option_text=token.raw,
                value_text=token.value,
            )
        return ResolvedOption(descriptor, None, token)

    if token.has_value or descriptor.argument == OptionArgument.OPTIONAL:
        return ResolvedOption(descriptor, token.value, token)

    if _can_consume(stream.peek(), registry):
        next_token = stream.advance()
        assert next_token is not None, "peeked token should not be None"
        return ResolvedOption(descriptor, next_token.raw, token)

    raise OptionArgumentError(
        f"Option '{token.reference}' requires a value", option_text=token.raw
    )


def resolve_tokens(
    tokens: Tokenizer | TokenStream, registry: OptionRegistry
) -> Iterator[Resolved]:
    """
    Lazily resolve a token sequence into options and positional values.

    Args:
        tokens (Tokenizer | TokenStream): Tokens of one argument vector.
        registry (OptionRegistry): Options of the target type.

    Yields:
        ResolvedOption | PositionalToken: In encounter order.
    """
    stream = tokens if isinstance(tokens, TokenStream) else TokenStream(tokens)
    for token in stream:
        if isinstance(token, OptionToken):
            yield resolve_option(token, stream, registry)
        elif isinstance(token, PositionalToken):
            yield token
