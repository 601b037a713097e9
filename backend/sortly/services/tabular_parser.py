"""
Tabular Parser
Turns pasted text (TSV from spreadsheet copy, CSV, pipe or semicolon
separated) into columns + rows.
"""

import re
from typing import List, Optional

from shared.models.sortly import ParseResult, Row
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)

SINGLE_COLUMN_NAME = "Value"

# Priority order for delimiter detection; on equal counts the earlier entry wins.
DELIMITER_PRIORITY: List[str] = ["\t", ",", "|", ";"]

LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
SINGLE_LINE_TOKEN_RE = re.compile(r"[\t,|;\s]+")


class TabularParser:
    """
    Delimiter-aware text-to-table parser.

    - Single non-blank line: every token becomes a row of a "Value" column
    - Multiple lines: first line is the header, delimiter auto-detected
    - Double quotes group fields; `""` inside quotes is a literal quote
    """

    @staticmethod
    def split_lines(text: str) -> List[str]:
        """Split on any line-break style and drop blank lines"""
        return [line for line in LINE_BREAK_RE.split(text) if line.strip()]

    @classmethod
    def detect_delimiter(cls, text: str) -> str:
        """Pick the delimiter occurring most often in the first line"""
        first_line = LINE_BREAK_RE.split(text, maxsplit=1)[0]
        # max() keeps the first maximal element, which preserves the priority tie-break
        return max(DELIMITER_PRIORITY, key=first_line.count)

    @staticmethod
    def split_line(line: str, delimiter: str) -> List[str]:
        """Split one line into trimmed fields, honouring double-quote grouping"""
        fields: List[str] = []
        current: List[str] = []
        in_quotes = False
        i = 0
        length = len(line)

        while i < length:
            ch = line[i]
            if ch == '"':
                if in_quotes and i + 1 < length and line[i + 1] == '"':
                    current.append('"')
                    i += 1  # skip escaped quote
                else:
                    in_quotes = not in_quotes
            elif ch == delimiter and not in_quotes:
                fields.append("".join(current).strip())
                current = []
            else:
                current.append(ch)
            i += 1

        fields.append("".join(current).strip())
        return fields

    @classmethod
    def parse(cls, raw_text: str) -> Optional[ParseResult]:
        """
        Parse raw pasted text into a structured dataset.

        Returns:
            ParseResult, or None if the input is too empty to be useful
        """
        trimmed = (raw_text or "").strip()
        if not trimmed:
            return None

        lines = cls.split_lines(trimmed)
        if len(lines) < 2:
            tokens = [t for t in SINGLE_LINE_TOKEN_RE.split(trimmed) if t]
            if not tokens:
                return None
            logger.debug(f"Single-line paste parsed into {len(tokens)} values")
            return ParseResult(
                columns=[SINGLE_COLUMN_NAME],
                rows=[{SINGLE_COLUMN_NAME: token} for token in tokens],
            )

        delimiter = cls.detect_delimiter(trimmed)
        headers = [
            field or f"Column {index + 1}"
            for index, field in enumerate(cls.split_line(lines[0], delimiter))
        ]
        columns = list(dict.fromkeys(headers))

        rows: List[Row] = []
        for line in lines[1:]:
            cells = cls.split_line(line, delimiter)
            row: Row = {}
            for index, header in enumerate(headers):
                row[header] = cells[index].strip() if index < len(cells) else ""
            rows.append(row)

        logger.debug(
            f"Parsed {len(rows)} rows x {len(columns)} columns (delimiter={delimiter!r})"
        )
        return ParseResult(columns=columns, rows=rows)
