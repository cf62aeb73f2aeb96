"""Fixed-layout recipe documents.

Blocks are appended to a `RecipeDocument` and never revised. The document is
laid out once, on the first call that needs bytes, and after that it is
frozen. Emission goes through a sink (`write_to`) or an async iterator
(`stream`); in both cases the end of emission is explicit.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
import io
import logging
from typing import AsyncIterator, Protocol, Sequence
from xml.sax.saxutils import escape

from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Flowable, Paragraph, SimpleDocTemplate, Spacer

from domain.errors import RenderError
from domain.prompts import join_ingredients


logger = logging.getLogger(__name__)


TITLE = "AI-Generated Recipe"
FOOTER = "Generated using Google Gemini AI on: {timestamp}"
TIMESTAMP_FORMAT = "%m/%d/%Y, %I:%M:%S %p"
CONTENT_WIDTH = 500
CHUNK_SIZE = 16 * 1024

SIDE_MARGIN = (LETTER[0] - CONTENT_WIDTH) / 2

STYLES = {
    "title": ParagraphStyle(
        "title",
        fontName="Helvetica",
        fontSize=20,
        leading=24,
        alignment=TA_CENTER,
        spaceAfter=14,
    ),
    "heading": ParagraphStyle(
        "heading", fontName="Helvetica", fontSize=14, leading=18, spaceAfter=6
    ),
    "ingredients": ParagraphStyle(
        "ingredients", fontName="Helvetica", fontSize=12, leading=15, spaceAfter=14
    ),
    "body": ParagraphStyle(
        "body", fontName="Helvetica", fontSize=11, leading=14, alignment=TA_LEFT
    ),
    "footer": ParagraphStyle(
        "footer",
        fontName="Helvetica",
        fontSize=8,
        leading=10,
        alignment=TA_CENTER,
        spaceBefore=14,
    ),
}


class Sink(Protocol):
    def write(self, data: bytes, /) -> object:
        ...

    def close(self) -> None:
        ...


@dataclass(frozen=True)
class Block:
    style: str
    text: str
    underline: bool = False

    def flowables(self) -> list[Flowable]:
        style = STYLES[self.style]
        if self.style != "body":
            markup = escape(self.text)
            if self.underline:
                markup = f"<u>{markup}</u>"
            return [Paragraph(markup, style)]

        # Paragraph collapses newlines so the body is laid out line by line.
        out: list[Flowable] = []
        for line in self.text.splitlines():
            if line.strip():
                out.append(Paragraph(escape(line), style))
            else:
                out.append(Spacer(1, style.leading))
        return out


class RecipeDocument:
    def __init__(self, *, title: str = TITLE) -> None:
        self.title = title
        self.blocks: list[Block] = []
        self._pdf: bytes | None = None

    @property
    def finished(self) -> bool:
        return self._pdf is not None

    def add(self, block: Block) -> "RecipeDocument":
        if self.finished:
            raise RenderError("Document is finished; blocks cannot be added.")
        if block.style not in STYLES:
            raise RenderError(f"Unknown block style: {block.style}")
        self.blocks.append(block)
        return self

    def heading(self, text: str) -> "RecipeDocument":
        return self.add(Block("heading", text, underline=True))

    def to_pdf(self) -> bytes:
        if self._pdf is not None:
            return self._pdf

        buffer = io.BytesIO()
        template = SimpleDocTemplate(
            buffer,
            pagesize=LETTER,
            leftMargin=SIDE_MARGIN,
            rightMargin=SIDE_MARGIN,
            title=self.title,
        )
        try:
            story: list[Flowable] = []
            for block in self.blocks:
                story.extend(block.flowables())
            template.build(story)
        except Exception as e:
            raise RenderError(f"Could not lay out document: {e!r}") from e

        self._pdf = buffer.getvalue()
        logger.info(
            "Rendered document: %d blocks, %d bytes", len(self.blocks), len(self._pdf)
        )
        return self._pdf

    def chunks(self, chunk_size: int = CHUNK_SIZE) -> list[bytes]:
        data = self.to_pdf()
        return [data[i : i + chunk_size] for i in range(0, len(data), chunk_size)]

    def write_to(self, sink: Sink, *, chunk_size: int = CHUNK_SIZE) -> int:
        """Write every chunk to `sink` then close it. Returns bytes written."""
        written = 0
        try:
            for chunk in self.chunks(chunk_size):
                sink.write(chunk)
                written += len(chunk)
            sink.close()
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"Could not write document: {e!r}") from e
        return written

    async def stream(self, *, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
        for chunk in self.chunks(chunk_size):
            yield chunk
            await asyncio.sleep(0)


def render_recipe(
    ingredients: Sequence[str],
    plain_recipe: str,
    generated_at: datetime,
) -> RecipeDocument:
    doc = RecipeDocument()
    doc.add(Block("title", TITLE))
    doc.heading("Ingredients Used:")
    doc.add(Block("ingredients", join_ingredients(ingredients)))
    doc.heading("Recipe:")
    doc.add(Block("body", plain_recipe))
    doc.add(
        Block("footer", FOOTER.format(timestamp=generated_at.strftime(TIMESTAMP_FORMAT)))
    )
    return doc
