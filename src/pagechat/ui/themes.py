"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

The palette matches the styles baked into the markdown treatments so
rendered messages and widget chrome agree.
"""

from textual.theme import Theme

# Catppuccin Mocha
PAGECHAT_MOCHA = Theme(
    name="pagechat-mocha",
    primary="#89b4fa",      # Blue - links, user accent
    secondary="#cba6f7",    # Mauve - assistant accent, list markers
    accent="#f9e2af",       # Yellow - headings tier 3
    foreground="#cdd6f4",
    background="#11111b",   # Crust
    success="#a6e3a1",      # Green - copied state
    warning="#fab387",      # Peach - streaming state
    error="#f38ba8",
    surface="#1e1e2e",      # Base
    panel="#181825",        # Mantle
    dark=True,
    variables={
        "block-cursor-foreground": "#11111b",
        "block-cursor-background": "#f5e0dc",
        "block-cursor-text-style": "bold",
        "block-hover-background": "#313244 20%",

        "input-cursor-background": "#cdd6f4",
        "input-cursor-foreground": "#11111b",
        "input-selection-background": "#89b4fa 30%",

        "border": "#45475a",
        "border-blurred": "#313244",

        "scrollbar": "#313244",
        "scrollbar-hover": "#45475a",
        "scrollbar-active": "#89b4fa",
        "scrollbar-background": "#181825",
        "scrollbar-corner-color": "#181825",

        "footer-foreground": "#bac2de",
        "footer-background": "#11111b",
        "footer-key-foreground": "#f9e2af",
        "footer-key-background": "#313244",

        "text-muted": "#6c7086",
        "text-disabled": "#45475a",

        "link-color": "#89b4fa",
        "link-style": "underline",
        "link-color-hover": "#b4befe",

        "button-foreground": "#cdd6f4",
        "button-color-foreground": "#11111b",
    },
)
