"""Exceptions surfaced to callers of the mindmap core."""


class MindmapError(Exception):
    """Base class for mindmap generation/export failures."""


class UnsupportedFormatError(MindmapError, ValueError):
    """Raised when an export is requested in a format nobody renders."""

    def __init__(self, format_id: str):
        self.format_id = format_id
        super().__init__(f"Unsupported export format: {format_id}")


class InputTooLargeError(MindmapError, ValueError):
    """Raised when the source text exceeds the configured line limit."""

    def __init__(self, line_count: int, max_lines: int):
        self.line_count = line_count
        self.max_lines = max_lines
        super().__init__(
            f"Input too large ({line_count} lines). Maximum is {max_lines} lines."
        )
