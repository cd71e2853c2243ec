"""Exception hierarchy for pagechat.

Only failures that cross a component boundary get a type here. Parse
anomalies are not errors: the renderer always produces a tree.
"""


class PageChatError(Exception):
    """Base class for pagechat errors."""


class TurnInProgressError(PageChatError):
    """A new turn was started while another is still streaming."""

    def __init__(self, slot: int):
        super().__init__(f"Assistant turn in slot {slot} is still streaming")
        self.slot = slot


class CapabilityError(PageChatError):
    """A host capability (clipboard, sandbox) refused or failed."""


class ClipboardError(CapabilityError):
    """Text could not be placed on the clipboard."""

    def __init__(self, message: str):
        super().__init__(f"Clipboard unavailable: {message}")
        self.reason = message


class SandboxError(CapabilityError):
    """An HTML preview surface could not be created or shown."""

    def __init__(self, message: str):
        super().__init__(f"Preview sandbox failed: {message}")
        self.reason = message
