"""Display-width helpers for terminal text (wide and combining characters)."""

from typing import List

from wcwidth import wcwidth


def char_width(ch: str) -> int:
    w = wcwidth(ch)
    if w is None or w < 0:
        return 0
    return w


def display_width(text: str) -> int:
    """Return visual width of text accounting for wide/narrow characters."""
    return sum(char_width(ch) for ch in text)


def trim_display(text: str, width: int) -> str:
    """Trim text so visible width doesn't exceed `width`."""
    acc = []
    used = 0
    for ch in text:
        w = char_width(ch)
        if used + w > width:
            break
        acc.append(ch)
        used += w
    return "".join(acc)


def pad_display(text: str, width: int) -> str:
    """Trim and pad with spaces to exact visible width."""
    trimmed = trim_display(text, width)
    trimmed_width = display_width(trimmed)
    if trimmed_width < width:
        trimmed += " " * (width - trimmed_width)
    return trimmed


def ellipsize(text: str, width: int) -> str:
    if width <= 0:
        return ""
    if display_width(text) <= width:
        return text
    if width == 1:
        return "…"
    return trim_display(text, width - 1) + "…"


def wrap_display(text: str, width: int) -> List[str]:
    """Hard-wrap text into chunks of at most `width` columns; always at least one chunk."""
    if width <= 0:
        return [text]
    lines: List[str] = []
    current = ""
    used = 0
    for ch in text:
        w = char_width(ch)
        if used + w > width and current:
            lines.append(current)
            current = ch
            used = w
        else:
            current += ch
            used += w
    lines.append(current)
    return lines


__all__ = [
    "char_width",
    "display_width",
    "trim_display",
    "pad_display",
    "ellipsize",
    "wrap_display",
]
