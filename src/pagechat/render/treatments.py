"""Visual treatment of each block type.

Hides how blocks look. Each block type maps to exactly one stateless
handler producing a Rich renderable; code blocks are further dispatched
on their CodeKind. The Textual front end and the console share these.
"""

from collections.abc import Callable

from rich import box
from rich.console import Console, ConsoleOptions, Group, RenderableType, RenderResult
from rich.padding import Padding
from rich.panel import Panel
from rich.rule import Rule
from rich.segment import Segment
from rich.style import Style
from rich.syntax import Syntax
from rich.table import Table as RichTable
from rich.text import Text as RichText

from .blocks import (
    Block,
    BlockQuote,
    CodeBlock,
    CodeKind,
    Emphasis,
    HardBreak,
    Heading,
    HtmlBlock,
    Image,
    Inline,
    InlineCode,
    Link,
    ListBlock,
    Paragraph,
    SoftBreak,
    Strikethrough,
    Strong,
    Table,
    Text,
    ThematicBreak,
)

# Catppuccin Mocha accents, matching the TUI theme
HEADING_STYLES = {
    1: "bold underline #89b4fa",
    2: "bold #cba6f7",
    3: "bold italic #f9e2af",
}
LINK_STYLE = Style(color="#89b4fa", underline=True)
INLINE_CODE_STYLE = Style(color="#f5c2e7", bgcolor="#313244")
LIST_MARKER_STYLE = "bold #cba6f7"
QUOTE_RULE_STYLE = "#89b4fa"
CODE_THEME = "monokai"


class LeftRule:
    """Draws a vertical bar down the left edge of a renderable."""

    def __init__(
        self,
        renderable: RenderableType,
        rule_style: str = QUOTE_RULE_STYLE,
        style: str = "italic",
    ) -> None:
        self.renderable = renderable
        self.rule_style = rule_style
        self.style = style

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = max(options.max_width - 2, 1)
        lines = console.render_lines(
            self.renderable,
            options.update(width=width),
            style=console.get_style(self.style),
        )
        rule = Segment("▌ ", console.get_style(self.rule_style))
        new_line = Segment.line()
        for line in lines:
            yield rule
            yield from line
            yield new_line


def _append_inlines(text: RichText, inlines: tuple[Inline, ...], style: Style) -> None:
    for node in inlines:
        if isinstance(node, Text):
            text.append(node.text, style)
        elif isinstance(node, Strong):
            _append_inlines(text, node.children, style + Style(bold=True))
        elif isinstance(node, Emphasis):
            _append_inlines(text, node.children, style + Style(italic=True))
        elif isinstance(node, Strikethrough):
            _append_inlines(text, node.children, style + Style(strike=True))
        elif isinstance(node, InlineCode):
            text.append(node.text, style + INLINE_CODE_STYLE)
        elif isinstance(node, Link):
            # the terminal opens hyperlinks in the browser, never in place
            link_style = style + LINK_STYLE + Style(link=node.href)
            if node.children:
                _append_inlines(text, node.children, link_style)
            else:
                text.append(node.href, link_style)
        elif isinstance(node, Image):
            label = node.alt or node.src
            text.append(f"[image: {label}]", style + LINK_STYLE + Style(italic=True, link=node.src))
        elif isinstance(node, (SoftBreak, HardBreak)):
            text.append("\n", style)


def render_inlines(inlines: tuple[Inline, ...], style: str = "") -> RichText:
    """Render inline nodes into one wrapped Text."""
    text = RichText(style=style, overflow="fold")
    _append_inlines(text, inlines, Style())
    return text


def render_code(block: CodeBlock) -> Syntax:
    """Highlighted body of a code block, chosen by its kind."""
    return CODE_TREATMENTS[block.kind](block)


def _highlighted(block: CodeBlock) -> Syntax:
    return Syntax(block.text, block.lexer, theme=CODE_THEME, line_numbers=True, word_wrap=True)


def _plain(block: CodeBlock) -> Syntax:
    return Syntax(block.text, block.lexer, theme=CODE_THEME, line_numbers=False, word_wrap=True)


CODE_TREATMENTS: dict[CodeKind, Callable[[CodeBlock], Syntax]] = {
    CodeKind.SOURCE: _highlighted,
    CodeKind.PLAIN: _plain,
    CodeKind.HTML_DOCUMENT: _highlighted,
}


def _heading(block: Heading) -> RenderableType:
    tier = min(block.level, 3)
    text = render_inlines(block.children, HEADING_STYLES[tier])
    if tier == 1:
        return Group(text, Rule(style="#89b4fa"))
    return text


def _paragraph(block: Paragraph) -> RenderableType:
    return render_inlines(block.children)


def _list(block: ListBlock) -> RenderableType:
    grid = RichTable.grid(padding=(0, 1))
    grid.add_column(no_wrap=True, style=LIST_MARKER_STYLE)
    grid.add_column()
    for index, item in enumerate(block.items):
        marker = f"{block.start + index}." if block.ordered else "•"
        grid.add_row(marker, Group(*(render_block(child) for child in item.children)))
    return Padding(grid, (0, 0, 0, 2))


def _quote(block: BlockQuote) -> RenderableType:
    return LeftRule(Group(*(render_block(child) for child in block.children)))


def _table(block: Table) -> RenderableType:
    table = RichTable(box=box.ROUNDED, header_style="bold #89b4fa", show_lines=False)
    for cell in block.header:
        table.add_column(render_inlines(cell.children), justify=cell.align or "left")
    for row in block.rows:
        table.add_row(*(render_inlines(cell.children) for cell in row))
    return table


def _code(block: CodeBlock) -> RenderableType:
    return Panel(
        render_code(block),
        title=block.language or "text",
        title_align="left",
        box=box.ROUNDED,
        border_style="#45475a",
    )


def _thematic_break(block: ThematicBreak) -> RenderableType:
    return Rule(style="#45475a")


def _html(block: HtmlBlock) -> RenderableType:
    return RichText(block.text, style="dim")


BLOCK_TREATMENTS: dict[type, Callable[[Block], RenderableType]] = {
    Heading: _heading,
    Paragraph: _paragraph,
    ListBlock: _list,
    BlockQuote: _quote,
    Table: _table,
    CodeBlock: _code,
    ThematicBreak: _thematic_break,
    HtmlBlock: _html,
}


def render_block(block: Block) -> RenderableType:
    """Render one block. Unknown node types render as nothing."""
    treatment = BLOCK_TREATMENTS.get(type(block))
    if treatment is None:
        return RichText()
    return treatment(block)


def render_blocks(blocks: tuple[Block, ...]) -> Group:
    """Render a whole message for plain console output."""
    return Group(*(Padding(render_block(block), (0, 0, 1, 0)) for block in blocks))
