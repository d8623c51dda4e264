"""
Input sources and JSON parsing.

A Source supplies document text; `parse_json_document` and
`parse_jsonl_records` turn that text into value trees. Nothing past this
module touches raw text.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, TextIO, Union

from jsontable.ingest.errors import MalformedInputError, SourceIOError

logger = logging.getLogger(__name__)


@dataclass
class Source:
    """Where document text comes from: an in-memory string, a file, or a stream."""
    text: Optional[str] = None
    path: Optional[Path] = None
    stream: Optional[TextIO] = None
    encoding: str = "utf-8-sig"

    @classmethod
    def from_string(cls, text: str) -> "Source":
        return cls(text=text)

    @classmethod
    def from_file(cls, path: Union[str, Path], encoding: str = "utf-8-sig") -> "Source":
        return cls(path=Path(path), encoding=encoding)

    @classmethod
    def from_stream(cls, stream: TextIO) -> "Source":
        return cls(stream=stream)

    @property
    def name(self) -> Optional[str]:
        """File name of a file source, used as the default table name."""
        return self.path.name if self.path is not None else None

    def read_text(self) -> str:
        """
        Read the full document text.

        Raises:
            SourceIOError: If the file or stream cannot be read
            MalformedInputError: If the bytes are not valid text in the encoding
        """
        if self.text is not None:
            return self.text
        try:
            if self.path is not None:
                return self.path.read_text(encoding=self.encoding)
            if self.stream is not None:
                return self.stream.read()
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"Source is not valid {self.encoding} text: {e}") from e
        except OSError as e:
            raise SourceIOError(f"Failed to read source: {e}") from e
        raise ValueError("Source has no text, path, or stream")


def parse_json_document(text: str) -> Any:
    """
    Parse a single JSON document.

    Raises:
        MalformedInputError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInputError(
            f"Invalid JSON at line {e.lineno} column {e.colno}: {e.msg}") from e


def parse_jsonl_records(text: str) -> List[Any]:
    """
    Parse newline-delimited JSON, one value per non-blank line.

    Raises:
        MalformedInputError: If any line is not valid JSON
    """
    records = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise MalformedInputError(
                f"Invalid JSON on line {line_number} column {e.colno}: {e.msg}") from e
    logger.debug(f"Parsed {len(records)} JSONL records")
    return records
