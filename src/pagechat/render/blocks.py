"""Structural markdown tree.

Every node is a frozen dataclass holding tuples, so two parses of the
same text compare equal and nothing can be mutated between renders.
"""

from dataclasses import dataclass
from enum import Enum


# Inline nodes

@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Strong:
    children: tuple["Inline", ...]


@dataclass(frozen=True)
class Emphasis:
    children: tuple["Inline", ...]


@dataclass(frozen=True)
class Strikethrough:
    children: tuple["Inline", ...]


@dataclass(frozen=True)
class InlineCode:
    """Code span. Never highlighted and never given actions."""

    text: str


@dataclass(frozen=True)
class Link:
    href: str
    children: tuple["Inline", ...]
    title: str | None = None


@dataclass(frozen=True)
class Image:
    src: str
    alt: str
    title: str | None = None


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


Inline = Text | Strong | Emphasis | Strikethrough | InlineCode | Link | Image | SoftBreak | HardBreak


# Block nodes

@dataclass(frozen=True)
class Heading:
    level: int
    children: tuple[Inline, ...]


@dataclass(frozen=True)
class Paragraph:
    children: tuple[Inline, ...]


@dataclass(frozen=True)
class ListItem:
    children: tuple["Block", ...]


@dataclass(frozen=True)
class ListBlock:
    ordered: bool
    items: tuple[ListItem, ...]
    start: int = 1


@dataclass(frozen=True)
class BlockQuote:
    children: tuple["Block", ...]


@dataclass(frozen=True)
class TableCell:
    children: tuple[Inline, ...]
    align: str | None = None  # "left", "center", "right"


@dataclass(frozen=True)
class Table:
    header: tuple[TableCell, ...]
    rows: tuple[tuple[TableCell, ...], ...]


class CodeKind(str, Enum):
    """Handler tag for a code block, decided once at parse time."""

    SOURCE = "source"            # recognized language, highlighted
    PLAIN = "plain"              # no tag or unknown tag, plain text
    HTML_DOCUMENT = "html"       # a complete page; previewable


@dataclass(frozen=True)
class CodeBlock:
    """Fenced (or indented) code.

    Attributes:
        language: Declared tag, None if absent
        text: Literal content with one trailing newline stripped
        lexer: Highlighter name resolved from the tag ("text" if unknown)
        kind: Handler tag used for highlighting and previewability
    """

    language: str | None
    text: str
    lexer: str
    kind: CodeKind

    @property
    def previewable(self) -> bool:
        return self.kind is CodeKind.HTML_DOCUMENT


@dataclass(frozen=True)
class ThematicBreak:
    pass


@dataclass(frozen=True)
class HtmlBlock:
    """Raw HTML outside a fence; shown literally, never interpreted."""

    text: str


Block = Heading | Paragraph | ListBlock | BlockQuote | Table | CodeBlock | ThematicBreak | HtmlBlock


def iter_code_blocks(blocks: tuple[Block, ...]):
    """Yield every CodeBlock in document order, including nested ones."""
    for block in blocks:
        if isinstance(block, CodeBlock):
            yield block
        elif isinstance(block, BlockQuote):
            yield from iter_code_blocks(block.children)
        elif isinstance(block, ListBlock):
            for item in block.items:
                yield from iter_code_blocks(item.children)
