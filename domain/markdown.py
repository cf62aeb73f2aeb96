"""Markdown to plain text for fixed-layout documents.

The stages run once each, in the order of `STAGES`. Later stages rely on the
earlier ones: italic stripping would eat the markers of a bold span, and the
bullet stage would mistake a leftover `*` for a list marker.
"""

import re
from typing import Callable


BULLET = "•"

HEADER = re.compile(r"^[ \t]*#{1,6}[ \t]+", re.MULTILINE)
BOLD = re.compile(r"\*\*(.*?)\*\*")
ITALIC = re.compile(r"\*(.*?)\*")
INLINE_CODE = re.compile(r"`(.*?)`")
BULLET_ITEM = re.compile(r"^[ \t]*[-*+][ \t]+", re.MULTILINE)
NUMBERED_ITEM = re.compile(r"^[ \t]*\d+\.[ \t]+", re.MULTILINE)


def strip_headers(text: str) -> str:
    return HEADER.sub("", text)


def strip_bold(text: str) -> str:
    return BOLD.sub(r"\1", text)


def strip_italic(text: str) -> str:
    return ITALIC.sub(r"\1", text)


def strip_inline_code(text: str) -> str:
    return INLINE_CODE.sub(r"\1", text)


def convert_bullets(text: str) -> str:
    return BULLET_ITEM.sub(f"{BULLET} ", text)


def strip_numbered_lists(text: str) -> str:
    # Lossy: the numbering is dropped, not converted.
    return NUMBERED_ITEM.sub("", text)


STAGES: tuple[Callable[[str], str], ...] = (
    strip_headers,
    strip_bold,
    strip_italic,
    strip_inline_code,
    convert_bullets,
    strip_numbered_lists,
)


def to_plain_text(markdown: str) -> str:
    text = markdown
    for stage in STAGES:
        text = stage(text)
    return text.strip()
