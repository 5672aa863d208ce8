"""
Hand-rolled CSV tokenizer.

Splits text into records of fields with a two-state (quoted/unquoted)
scanner: comma separates fields, LF, CRLF or a lone CR ends a record, a
double quote toggles quoting and a doubled quote inside quotes is a literal
quote. There is no backslash escaping.
"""

from pathlib import Path
from typing import Iterator

from es_importer.core.errors import InputNotFoundError, InputReadError

FIELD_SEPARATOR = ","
QUOTE = '"'
LF = "\n"
CR = "\r"


def read_csv_text(file_path: str | Path, encoding: str = "utf-8-sig") -> str:
    """
    Read a whole CSV file into memory.

    The tokenizer works on the complete text, so memory use is proportional
    to file size, not batch size.

    Args:
        file_path: Path to CSV file
        encoding: Text encoding; the default strips a UTF-8 byte order mark

    Returns:
        File contents

    Raises:
        InputNotFoundError: If the file does not exist
        InputReadError: If the file cannot be opened or is not valid text
            in the given encoding
    """
    path = Path(file_path)
    if not path.is_file():
        raise InputNotFoundError(str(file_path))
    # newline="" keeps CR/CRLF for the tokenizer instead of translating them
    try:
        with open(path, encoding=encoding, newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise InputReadError(str(file_path), f"not valid {encoding} ({e.reason})") from e
    except OSError as e:
        raise InputReadError(str(file_path), e.strerror or str(e)) from e


class CSVTokenizer:
    """
    Lazily yields records from in-memory CSV text.

    The tokenizer can be restarted at any record boundary by constructing a
    new one with start=<position of a previous tokenizer>.
    """

    def __init__(self, text: str, start: int = 0):
        """
        Initialize tokenizer.

        Args:
            text: Complete CSV content
            start: Offset to start scanning from (a record boundary)
        """
        if not 0 <= start <= len(text):
            raise ValueError(f"start must be within the text (0..{len(text)}), got {start}")
        self.text = text
        self.position = start

    def __iter__(self) -> Iterator[list[str]]:
        while True:
            record = self.next_record()
            if record is None:
                return
            yield record

    def next_record(self) -> list[str] | None:
        """
        Scan the next record.

        Returns:
            List of field values, or None once the input is exhausted
        """
        text = self.text
        length = len(text)
        i = self.position
        if i >= length:
            return None

        fields: list[str] = []
        field: list[str] = []
        in_quotes = False

        while i < length:
            ch = text[i]
            if in_quotes:
                if ch == QUOTE:
                    if i + 1 < length and text[i + 1] == QUOTE:
                        field.append(QUOTE)
                        i += 2
                    else:
                        in_quotes = False
                        i += 1
                else:
                    field.append(ch)
                    i += 1
            elif ch == QUOTE:
                in_quotes = True
                i += 1
            elif ch == FIELD_SEPARATOR:
                fields.append("".join(field))
                field.clear()
                i += 1
            elif ch == LF or ch == CR:
                i += 2 if ch == CR and i + 1 < length and text[i + 1] == LF else 1
                fields.append("".join(field))
                self.position = i
                return fields
            else:
                field.append(ch)
                i += 1

        # End of input without a terminator: something was consumed since
        # the last record boundary, so it forms a final record
        fields.append("".join(field))
        self.position = i
        return fields


def tokenize(text: str) -> list[list[str]]:
    """Tokenize complete CSV text into a list of records."""
    return list(CSVTokenizer(text))
