"""Documentation generator error taxonomy.

Every failure in the scrape -> parse -> merge -> render pipeline is fatal to
the run; the CLI maps any ``DocGenError`` to exit code 1 and reports the
failing stage. Only ``MalformedLineError`` is conditionally tolerated (the
parser skips such lines unless strict mode is requested).

Stage Hints:
 - ScrapeError: exposition handler answered with a non-200 status
 - ExpositionReadError: I/O failure while reading the exposition body
 - MalformedLineError: HELP/TYPE line with too few tokens
 - RuleDefinitionError: recording rule file unreadable or invalid
 - UnknownCollectorError: collector name not present in the collector table
 - DocumentWriteError: output document could not be created or written
"""
from __future__ import annotations


class DocGenError(Exception):
    """Base documentation generator error (do not raise directly)."""

    stage = "docgen"


class ScrapeError(DocGenError):
    """Exposition handler returned a non-success status."""

    stage = "scrape"

    def __init__(self, status: int, path: str = "/metrics") -> None:
        super().__init__(f"got HTTP status code of {status} from {path}")
        self.status = status
        self.path = path


class ExpositionReadError(DocGenError):
    """Underlying stream failed while the exposition was being read."""

    stage = "parse"


class MalformedLineError(DocGenError):
    """HELP or TYPE line with fewer tokens than the format requires."""

    stage = "parse"

    def __init__(self, lineno: int, line: str, reason: str) -> None:
        super().__init__(f"malformed exposition line {lineno}: {reason}: {line!r}")
        self.lineno = lineno
        self.line = line
        self.reason = reason


class RuleDefinitionError(DocGenError):
    stage = "rules"


class UnknownCollectorError(DocGenError):
    stage = "collectors"


class DocumentWriteError(DocGenError):
    stage = "write"


__all__ = [
    "DocGenError",
    "ScrapeError",
    "ExpositionReadError",
    "MalformedLineError",
    "RuleDefinitionError",
    "UnknownCollectorError",
    "DocumentWriteError",
]
