"""Registration hooks for tag compilers.

A registry is an ordered list of parsers searched by exact tag match.
Callers put custom parsers ahead of the built-ins to override or extend
how a tag is compiled, so the first matching parser wins.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from .codecs import Codec

# (codec, GenerationContext) -> schema fragment
ParserFunction = Callable[..., dict[str, Any]]


@dataclass(frozen=True)
class Parser:
    tag: str
    parse: ParserFunction


def create_parser(tag: str, parse: ParserFunction) -> Parser:
    """Bind ``parse`` to ``tag``.

    Parameters
    ----------
    tag:
        Codec tag the parser handles, compared with ``==`` against
        ``Codec.tag``.
    parse:
        Callable taking the codec and the generation context and returning a
        JSON-compatible schema fragment.
    """
    return Parser(tag=tag, parse=parse)


class ParserRegistry:
    """Ordered, first-match-wins collection of parsers."""

    def __init__(self, parsers: Iterable[Parser] = ()) -> None:
        self._parsers: tuple[Parser, ...] = tuple(parsers)

    def __iter__(self) -> Iterator[Parser]:
        return iter(self._parsers)

    def __len__(self) -> int:
        return len(self._parsers)

    def find(self, codec: Codec) -> Parser | None:
        """Return the first parser whose tag matches ``codec.tag``, if any."""
        return next((parser for parser in self._parsers if parser.tag == codec.tag), None)

    def tags(self) -> list[str]:
        """Return the distinct registered tags in lookup order."""
        seen: list[str] = []
        for parser in self._parsers:
            tag = str(getattr(parser.tag, "value", parser.tag))
            if tag not in seen:
                seen.append(tag)
        return seen
