"""Prompt management module.

Externalizes the hidden system preamble and the example prompts to text
files. Both can be overridden by placing files in ./prompts/ of the
working directory.
"""

from functools import lru_cache
from pathlib import Path

_PROMPTS_DIR = Path(__file__).parent


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt from file.

    Search order:
    1. Current working directory: ./prompts/{name}.txt
    2. Package prompts directory: pagechat/prompts/{name}.txt

    Args:
        name: Prompt name (without .txt extension)

    Returns:
        Prompt text content

    Raises:
        FileNotFoundError: If prompt file not found in any location
    """
    filename = f"{name}.txt"

    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8")

    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8")

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def get_system_preamble() -> str:
    """Get the preamble prefixed to every outgoing user turn.

    Joined onto the user text without a separator, so the file's
    trailing whitespace is significant and kept.
    """
    return load_prompt("system").rstrip("\n") + " "


def get_example_prompts() -> list[str]:
    """Get the example prompts offered before the first submission."""
    return [
        line.strip()
        for line in load_prompt("examples").splitlines()
        if line.strip()
    ]


def clear_cache() -> None:
    """Clear the prompt cache (useful after modifying prompt files)."""
    load_prompt.cache_clear()


__all__ = [
    "clear_cache",
    "get_example_prompts",
    "get_system_preamble",
    "load_prompt",
]
