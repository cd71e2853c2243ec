"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout
   ============================================ */
Screen {
    layout: vertical;
    background: $background;
}

/* ============================================
   Chat History Panel
   ============================================ */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

/* ============================================
   Landing: welcome text and example prompts
   ============================================ */
PromptSuggestions {
    height: auto;
    padding: 1 2;

    & #welcome-title {
        color: $primary;
        text-style: bold;
        margin-bottom: 1;
    }

    & #welcome-text {
        color: $text-muted;
        margin-bottom: 1;
    }

    & .suggestion {
        width: 100%;
        height: 3;
        margin-bottom: 1;
        content-align: left middle;
        background: $surface;
        border: tall $border;

        &:hover {
            background: $primary 15%;
            border: tall $primary;
        }
    }
}

/* ============================================
   Debug/Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 12;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    overflow-x: auto;
    scrollbar-gutter: stable;
}

/* ============================================
   Bottom Bar - Status + Input
   ============================================ */
#bottom-bar {
    height: auto;
    padding: 0 1;
    background: $panel;
    border-top: solid $border;
}

#status {
    height: 1;
    padding: 0 2;
    background: $surface;
    color: $foreground;
}

ChatInputBar {
    height: 6;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }

    &.-busy {
        border: round $warning;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;
}

#send-btn {
    width: 10;
    height: 100%;
    margin: 0 0 0 1;
    border: tall $success;
    background: $success;
    color: $background;
    text-style: bold;

    &:hover {
        background: $success-lighten-1;
    }

    &:disabled {
        background: $surface;
        border: tall $border;
        color: $text-disabled;
    }
}

/* ============================================
   Chat Messages
   ============================================ */
.chat-message {
    width: 100%;
    height: auto;
    margin: 0 0 1 0;
    padding: 0 1;
}

.message-header {
    height: auto;
    text-style: bold;
}

.message-body {
    height: auto;
}

.user-message {
    border-left: tall $success;
    background: $success 8%;

    & .message-header {
        color: $success;
    }
}

.assistant-message {
    border-left: tall $secondary;
    background: $secondary 8%;

    & .message-header {
        color: $secondary;
    }

    &.-streaming {
        border-left: tall $warning;
    }
}

/* Markdown blocks: wide tables scroll instead of squeezing */
BlockView {
    height: auto;
    margin: 0 0 1 0;
}

BlockView > .block-renderable {
    height: auto;
    overflow-x: auto;
}

/* ============================================
   Code Blocks
   ============================================ */
CodeBlockView {
    height: auto;
    margin: 0 0 1 0;
}

CodeBlockView > .code-renderable {
    height: auto;
    overflow-x: auto;
}

CodeActionBar {
    height: 1;
    background: $surface;

    & .code-language {
        width: 1fr;
        padding: 0 1;
        color: $text-muted;
    }

    & Button {
        height: 1;
        min-width: 11;
        border: none;
        margin: 0 0 0 1;
        background: $panel;
        color: $foreground;

        &:hover {
            background: $primary 25%;
        }
    }

    & .-copied {
        background: $success;
        color: $background;
        text-style: bold;
    }
}

/* ============================================
   Scrollbar Styling
   ============================================ */
* {
    scrollbar-background: $panel;
    scrollbar-color: $surface-lighten-1;
    scrollbar-color-hover: $primary 50%;
    scrollbar-color-active: $primary;
    scrollbar-size: 1 1;
}

Header {
    background: $panel;
    color: $foreground;
    dock: top;
    height: 1;
}

Footer {
    background: $panel;
    height: auto;
}

Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-information {
        border: tall $primary;
    }

    &.-warning {
        border: tall $warning;
    }

    &.-error {
        border: tall $error;
    }
}
"""
