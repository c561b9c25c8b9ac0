# ============================================================================
# YAML SCALAR CODEC
# ============================================================================
# EPOCH: 2 - CATEGORY-AWARE PROJECTS
# STATUS: Infrastructure - Scalar escaping and atomic file writes
# PURPOSE: Make arbitrary text safe inside generated rule files
# CREATED: 14 OCT 2026
# ============================================================================
"""
YAML Scalar Codec

Generated rule files are assembled from templates, so every user-supplied
value is turned into a YAML scalar token here before it is placed in a
value position. A token always parses back (with PyYAML, the same parser
the generator validates with) to exactly the original text.

Token forms, in priority order:
    ''                     empty string
    "..."                  text YAML cannot carry raw (control chars, CR,
                           Unicode line separators), backslash-escaped
    |- / |+ / |2- ...      multi-line text, literal block, lines indented 2
    '...'                  text that plain style would misread; ' doubled
    text                   everything else, unchanged

Usage:
    from infrastructure.yaml_codec import escape_scalar, atomic_write

    token = escape_scalar("key: value")   # "'key: value'"
    atomic_write(path, "global_vars: []\\n")
"""

import logging
import os
import re
import stat
import tempfile
from pathlib import Path
from typing import Union

from yaml.nodes import ScalarNode
from yaml.resolver import BaseResolver, Resolver

logger = logging.getLogger(__name__)


EMPTY_SCALAR = "''"
BLOCK_INDENT = "  "

# Characters that make a single-line plain scalar ambiguous
_QUOTE_TRIGGERS = frozenset(":|>-*&!%@`#\"'[]{},?\t")
_RESERVED_WORDS = frozenset({"true", "false", "null", "~"})

# Anything outside the printable set, plus NEL / LS / PS which YAML reads as
# line breaks, and BOM
_UNSAFE_CHARS = re.compile(
    r"[^\x09\x0A\x20-\x7E\xA0-\u2027\u202A-\uD7FF\uE000-\uFEFE\uFF00-\uFFFD"
    r"\U00010000-\U0010FFFF]"
)

_DOUBLE_QUOTE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\x00": "\\0",
    "\x07": "\\a",
    "\x08": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\x0b": "\\v",
    "\x0c": "\\f",
    "\r": "\\r",
    "\x1b": "\\e",
    "\x85": "\\N",
    "\u2028": "\\L",
    "\u2029": "\\P",
}

_resolver = Resolver()


# ============================================================================
# SCALAR ESCAPING
# ============================================================================

def escape_scalar(text: str) -> str:
    """
    Render ``text`` as a YAML scalar token for a value position.

    Pure function. Multi-line tokens start with the block indicator and put
    every line on its own row indented by two spaces; use ``indent_scalar``
    to nest such a token deeper than a top-level key.
    """
    if text == "":
        return EMPTY_SCALAR

    if _UNSAFE_CHARS.search(text):
        return quote_double(text)

    if "\n" in text:
        return _literal_block(text)

    if _needs_quotes(text):
        return quote_single(text)

    return text


def quote_single(text: str) -> str:
    """Single-quoted scalar; embedded quotes are doubled."""
    return "'" + text.replace("'", "''") + "'"


def quote_double(text: str) -> str:
    """Double-quoted scalar with backslash escapes; valid for any text."""
    parts = []
    for char in text:
        escaped = _DOUBLE_QUOTE_ESCAPES.get(char)
        if escaped is not None:
            parts.append(escaped)
        elif _UNSAFE_CHARS.match(char):
            code = ord(char)
            if code <= 0xFF:
                parts.append(f"\\x{code:02X}")
            elif code <= 0xFFFF:
                parts.append(f"\\u{code:04X}")
            else:
                parts.append(f"\\U{code:08X}")
        else:
            parts.append(char)
    return '"' + "".join(parts) + '"'


def indent_scalar(token: str, width: int) -> str:
    """
    Shift the continuation lines of a token right by ``width`` spaces.

    ``width`` is the column of the key the token is the value of. Single
    line tokens come back unchanged.
    """
    if "\n" not in token:
        return token
    return token.replace("\n", "\n" + " " * width)


def _needs_quotes(text: str) -> bool:
    """True when a single-line text cannot be emitted plain."""
    if any(char in _QUOTE_TRIGGERS for char in text):
        return True
    if text[0] == " " or text[-1] == " ":
        return True
    if text in _RESERVED_WORDS:
        return True
    if _parses_as_number(text):
        return True
    # yes/no/on/off, 0x1F, .inf, '=' ... anything not implicitly a string
    tag = _resolver.resolve(ScalarNode, text, (True, False))
    return tag != BaseResolver.DEFAULT_SCALAR_TAG


def _parses_as_number(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


def _literal_block(text: str) -> str:
    """
    Literal block scalar for multi-line text.

    The chomping indicator keeps trailing newlines exact: ``-`` strips when
    there are none, ``+`` keeps them all. An explicit indentation indicator
    is added when the first content line begins with a space, since the
    parser would otherwise take that space as indentation.
    """
    if text.endswith("\n"):
        chomping = "+"
        body = text[:-1]
    else:
        chomping = "-"
        body = text

    lines = body.split("\n")
    indentation = "2" if _leading_space_ambiguous(lines) else ""
    rows = [BLOCK_INDENT + line for line in lines]
    return "|" + indentation + chomping + "\n" + "\n".join(rows)


def _leading_space_ambiguous(lines) -> bool:
    for line in lines:
        if line.strip(" ") == "":
            if line:
                return True
            continue
        return line.startswith(" ")
    return False


# ============================================================================
# ATOMIC WRITE
# ============================================================================

def atomic_write(path: Union[str, Path], content: str) -> None:
    """
    Replace ``path`` with ``content`` so readers never see a partial file.

    Writes to a temporary sibling, fsyncs it, then ``os.replace``s it over
    the target. On any failure the temporary file is removed, the target
    keeps its previous content (or stays absent) and the error propagates.
    """
    path = Path(path)
    directory = path.parent
    directory.mkdir(parents=True, exist_ok=True)

    fd, temp_name = tempfile.mkstemp(
        dir=directory,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())

        if path.exists():
            os.chmod(temp_name, stat.S_IMODE(path.stat().st_mode))

        os.replace(temp_name, path)
    except Exception:
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        logger.error(f"Atomic write to {path} failed, target left unchanged")
        raise


__all__ = [
    "EMPTY_SCALAR",
    "BLOCK_INDENT",
    "escape_scalar",
    "quote_single",
    "quote_double",
    "indent_scalar",
    "atomic_write",
]
