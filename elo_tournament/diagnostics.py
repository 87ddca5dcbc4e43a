"""
Diagnostic sink implementations.

Sinks receive the optimizer's periodic progress lines. They are purely
observational; nothing reads them back programmatically.
"""

from typing import TextIO

from typing_extensions import override

from .interfaces import DiagnosticSink
from .logging_config import get_logger


class StreamSink(DiagnosticSink):
    """Writes each line to a text stream."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    @override
    def write_line(self, line: str) -> None:
        _ = self.stream.write(line + "\n")


class LoggerSink(DiagnosticSink):
    """Forwards each line to loguru at a fixed level."""

    def __init__(self, level: str = "INFO", name: str = "optimizer"):
        self.level = level
        self.logger = get_logger(name)

    @override
    def write_line(self, line: str) -> None:
        self.logger.log(self.level, line)


class ListSink(DiagnosticSink):
    """Collects lines in memory."""

    def __init__(self):
        self.lines: list[str] = []

    @override
    def write_line(self, line: str) -> None:
        self.lines.append(line)
