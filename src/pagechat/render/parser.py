"""Markdown parser producing the structural block tree.

Hidden design decisions:
- markdown-it-py's CommonMark preset with GFM tables and strikethrough
- SyntaxTreeNode walk instead of the flat token stream
- No state carried between calls; every call parses the full text

Incomplete input is normal while a reply is streaming. markdown-it runs
an unclosed fence to the end of the document, so "```py\\ndef f(" becomes
a python code block holding "def f(".
"""

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from .blocks import (
    Block,
    BlockQuote,
    CodeBlock,
    Emphasis,
    HardBreak,
    Heading,
    HtmlBlock,
    Image,
    Inline,
    InlineCode,
    Link,
    ListBlock,
    ListItem,
    Paragraph,
    SoftBreak,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    Text,
    ThematicBreak,
)
from .code import classify_code, language_from_info


def _strip_one_newline(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


def _cell_align(node: SyntaxTreeNode) -> str | None:
    style = str(node.attrs.get("style", ""))
    if style.startswith("text-align:"):
        return style.split(":", 1)[1].strip()
    return None


class MarkdownRenderer:
    """Converts accumulated message text into a tuple of blocks.

    Safe to call repeatedly with growing input; parse() of the same
    string always returns an equal tree.
    """

    def __init__(self) -> None:
        self._md = MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"])

    def parse(self, content: str) -> tuple[Block, ...]:
        """Parse the full current text of a message.

        Args:
            content: Markdown text, possibly truncated mid-construct

        Returns:
            Top-level blocks in document order (empty for empty input)
        """
        root = SyntaxTreeNode(self._md.parse(content))
        return self._blocks(root.children)

    def _blocks(self, nodes: list[SyntaxTreeNode]) -> tuple[Block, ...]:
        blocks = []
        for node in nodes:
            block = self._block(node)
            if block is not None:
                blocks.append(block)
        return tuple(blocks)

    def _block(self, node: SyntaxTreeNode) -> Block | None:
        kind = node.type

        if kind == "heading":
            return Heading(level=int(node.tag[1:]), children=self._inline_children(node))
        if kind == "paragraph":
            return Paragraph(children=self._inline_children(node))
        if kind in ("bullet_list", "ordered_list"):
            items = tuple(
                ListItem(children=self._blocks(item.children))
                for item in node.children
                if item.type == "list_item"
            )
            start = int(node.attrs.get("start", 1)) if kind == "ordered_list" else 1
            return ListBlock(ordered=kind == "ordered_list", items=items, start=start)
        if kind == "blockquote":
            return BlockQuote(children=self._blocks(node.children))
        if kind == "table":
            return self._table(node)
        if kind == "fence":
            return self._code(language_from_info(node.info), node.content)
        if kind == "code_block":
            return self._code(None, node.content)
        if kind == "hr":
            return ThematicBreak()
        if kind == "html_block":
            return HtmlBlock(text=_strip_one_newline(node.content))
        return None

    def _code(self, language: str | None, content: str) -> CodeBlock:
        text = _strip_one_newline(content)
        lexer, code_kind = classify_code(language, text)
        return CodeBlock(language=language, text=text, lexer=lexer, kind=code_kind)

    def _table(self, node: SyntaxTreeNode) -> Table:
        header: tuple[TableCell, ...] = ()
        rows: list[tuple[TableCell, ...]] = []
        for section in node.children:
            for row in section.children:
                cells = tuple(
                    TableCell(children=self._inline_children(cell), align=_cell_align(cell))
                    for cell in row.children
                )
                if section.type == "thead":
                    header = cells
                else:
                    rows.append(cells)
        return Table(header=header, rows=tuple(rows))

    def _inline_children(self, node: SyntaxTreeNode) -> tuple[Inline, ...]:
        """Inline content of a block whose only child is an 'inline' node."""
        inlines: list[Inline] = []
        for child in node.children:
            if child.type == "inline":
                inlines.extend(self._inlines(child.children))
        return tuple(inlines)

    def _inlines(self, nodes: list[SyntaxTreeNode]) -> tuple[Inline, ...]:
        result: list[Inline] = []
        for node in nodes:
            kind = node.type
            if kind in ("text", "html_inline"):
                result.append(Text(node.content))
            elif kind == "code_inline":
                result.append(InlineCode(node.content))
            elif kind == "strong":
                result.append(Strong(self._inlines(node.children)))
            elif kind == "em":
                result.append(Emphasis(self._inlines(node.children)))
            elif kind == "s":
                result.append(Strikethrough(self._inlines(node.children)))
            elif kind == "link":
                result.append(Link(
                    href=str(node.attrs.get("href", "")),
                    children=self._inlines(node.children),
                    title=node.attrs.get("title"),
                ))
            elif kind == "image":
                result.append(Image(
                    src=str(node.attrs.get("src", "")),
                    alt=node.content,
                    title=node.attrs.get("title"),
                ))
            elif kind == "softbreak":
                result.append(SoftBreak())
            elif kind == "hardbreak":
                result.append(HardBreak())
        return tuple(result)
