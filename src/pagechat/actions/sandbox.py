"""Sandboxed HTML preview surfaces.

Hides how a generated page is shown. The document is embedded in an
<iframe sandbox="allow-scripts" srcdoc=...> inside a throwaway host page:
scripts run, but the frame gets an opaque origin, so it cannot read the
host's storage or cookies, navigate the top window, or send credentials.
"""

import html
import shutil
import tempfile
import uuid
import webbrowser
from pathlib import Path
from typing import Protocol

from ..errors import SandboxError

SANDBOX_FLAGS = "allow-scripts"

_HOST_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
  html, body {{ margin: 0; height: 100%; background: #11111b; }}
  iframe {{ border: 0; width: 100%; height: 100%; background: #ffffff; }}
</style>
</head>
<body>
<iframe title="Code Preview" sandbox="{flags}" srcdoc="{srcdoc}"></iframe>
</body>
</html>
"""


def build_host_page(document: str, title: str = "HTML Preview") -> str:
    """Wrap a document in a sandboxed iframe host page."""
    return _HOST_PAGE.format(
        title=html.escape(title),
        flags=SANDBOX_FLAGS,
        srcdoc=html.escape(document, quote=True),
    )


class PreviewSurface:
    """One rendered preview. Closing discards it."""

    def __init__(self, path: Path, size: int) -> None:
        self.path = path
        self.size = size
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def uri(self) -> str:
        return self.path.as_uri()

    def open_in_browser(self) -> None:
        """Show the surface in the default browser.

        Raises:
            SandboxError: If the surface is closed or no browser is available
        """
        if self._closed:
            raise SandboxError("preview has been closed")
        try:
            opened = webbrowser.open(self.uri, new=2)
        except webbrowser.Error as e:
            raise SandboxError(str(e)) from e
        if not opened:
            raise SandboxError("no web browser available")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.path.unlink(missing_ok=True)


class HtmlSandbox(Protocol):
    """Capability that renders an HTML document into a preview surface."""

    async def render(self, document: str) -> PreviewSurface:
        ...


class IframeSandbox:
    """Writes host pages into a private temporary directory."""

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory
        self._owns_directory = directory is None

    def _ensure_directory(self) -> Path:
        if self._directory is None:
            self._directory = Path(tempfile.mkdtemp(prefix="pagechat-preview-"))
        return self._directory

    async def render(self, document: str) -> PreviewSurface:
        try:
            directory = self._ensure_directory()
            path = directory / f"preview-{uuid.uuid4().hex[:12]}.html"
            path.write_text(build_host_page(document), encoding="utf-8")
        except OSError as e:
            raise SandboxError(str(e)) from e
        return PreviewSurface(path, size=len(document))

    def cleanup(self) -> None:
        """Remove the temporary directory and every surface in it."""
        if self._owns_directory and self._directory is not None:
            shutil.rmtree(self._directory, ignore_errors=True)
            self._directory = None
