"""Minimal tag tokenizer for the allow-listed raw HTML subset.

Only the tags the compiler understands (``h1``-``h6``, ``p``, ``img``, ``a``,
``span``, ``br``) are ever inspected, so this scanner reads a single start or
end tag and its attributes without attempting general HTML parsing. Values
are returned raw; callers escape and sanitize them before emitting.

Examples
--------
>>> from docs_manifest.compiler.attributes import parse_tag
>>> tag = parse_tag('<img src="./logo.svg" alt=Logo onerror="x()">')
>>> tag.name, tag.get("src"), tag.get("alt")
('img', './logo.svg', 'Logo')
"""

from __future__ import annotations

import dataclasses as dc

_NAME_TERMINATORS = frozenset(" \t\n\r\f/>=")


@dc.dataclass(frozen=True, slots=True)
class Tag:
    """A tokenized start or end tag.

    Attributes
    ----------
    name : str
        Lowercased tag name.
    closing : bool
        ``True`` for end tags such as ``</span>``.
    attrs : dict[str, str]
        Lowercased attribute names mapped to their raw values; the first
        occurrence of a repeated attribute wins.
    """

    name: str
    closing: bool
    attrs: dict[str, str]

    def get(self, name: str) -> str | None:
        return self.attrs.get(name.lower())


def _skip_space(raw: str, pos: int) -> int:
    while pos < len(raw) and raw[pos].isspace():
        pos += 1
    return pos


def _read_name(raw: str, pos: int) -> tuple[str, int]:
    start = pos
    while pos < len(raw) and raw[pos] not in _NAME_TERMINATORS:
        pos += 1
    return raw[start:pos], pos


def _read_value(raw: str, pos: int) -> tuple[str, int]:
    if pos < len(raw) and raw[pos] in "\"'":
        quote = raw[pos]
        end = raw.find(quote, pos + 1)
        if end == -1:
            return raw[pos + 1 :].rstrip(">"), len(raw)
        return raw[pos + 1 : end], end + 1
    start = pos
    while pos < len(raw) and not raw[pos].isspace() and raw[pos] != ">":
        pos += 1
    return raw[start:pos], pos


def parse_tag(raw: str) -> Tag | None:
    """Tokenize ``raw`` (one ``<...>`` tag) into a :class:`Tag`.

    Parameters
    ----------
    raw : str
        Text starting with ``<`` and ending at the first ``>``.

    Returns
    -------
    Tag or None
        ``None`` when ``raw`` is not shaped like a tag (for example ``<``
        followed by whitespace or a digit).
    """
    if not raw.startswith("<") or not raw.endswith(">"):
        return None
    pos = 1
    closing = raw.startswith("</")
    if closing:
        pos = 2
    name, pos = _read_name(raw, pos)
    if not name or not name[0].isalpha():
        return None

    attrs: dict[str, str] = {}
    while pos < len(raw):
        pos = _skip_space(raw, pos)
        if pos >= len(raw) or raw[pos] == ">":
            break
        if raw[pos] in "/=":
            pos += 1
            continue
        attr_name, pos = _read_name(raw, pos)
        pos = _skip_space(raw, pos)
        value = ""
        if pos < len(raw) and raw[pos] == "=":
            pos = _skip_space(raw, pos + 1)
            value, pos = _read_value(raw, pos)
        attrs.setdefault(attr_name.lower(), value)
    return Tag(name=name.lower(), closing=closing, attrs=attrs)


__all__ = ["Tag", "parse_tag"]
