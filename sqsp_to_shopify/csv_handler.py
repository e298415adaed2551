"""
CSV Handler Module
Writes Shopify import rows to a CSV file or standard output.
"""

import codecs
import os
import sys
import tempfile
from pathlib import Path
from typing import IO, Iterable, Optional

import pandas as pd
from loguru import logger

from .errors import FileAccessError
from .field_schema import SHOPIFY_FIELDS, Row

STDOUT = '-'


class ShopifyCSVWriter:
    """
    Write the Shopify header and rows, in the order received.

    Use as a context manager so the output is flushed and closed on every
    exit path. With ``atomic`` set, rows go to a temporary file next to the
    destination that only replaces it once the run completes.
    """

    def __init__(
        self,
        output_path: str = STDOUT,
        encoding: str = 'utf-8',  # UTF-8 without BOM to match Shopify template
        atomic: bool = False,
        stream: Optional[IO[str]] = None
    ):
        """
        Initialize CSV writer.

        Args:
            output_path: Output file path, or "-" for standard output
            encoding: Encoding to use for file output
            atomic: Write to a temporary file and move it into place on success
            stream: Already open text stream to write to instead of a path
        """
        self.output_path = output_path
        self.encoding = encoding
        self.atomic = atomic and stream is None and output_path != STDOUT
        self.rows_written = 0
        self._stream = stream
        self._handle: Optional[IO[str]] = None
        self._temp_path: Optional[Path] = None
        self._owns_handle = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> 'ShopifyCSVWriter':
        """Acquire the output handle."""
        if self._closed:
            raise ValueError("CSV writer is closed")
        if self._handle is not None:
            return self

        if self._stream is not None:
            self._handle = self._stream
        elif self.output_path == STDOUT:
            self._handle = sys.stdout
        else:
            path = Path(self.output_path)
            try:
                # Fail on an unknown encoding before the file is created
                codecs.lookup(self.encoding)
                path.parent.mkdir(parents=True, exist_ok=True)
                if self.atomic:
                    handle = tempfile.NamedTemporaryFile(
                        mode='w',
                        encoding=self.encoding,
                        newline='',
                        dir=path.parent,
                        prefix=f".{path.name}.",
                        suffix='.tmp',
                        delete=False
                    )
                    self._temp_path = Path(handle.name)
                    self._handle = handle
                else:
                    self._handle = open(path, 'w', encoding=self.encoding, newline='')
            except (OSError, LookupError) as e:
                logger.error(f"Error opening output file: {e}")
                raise FileAccessError(str(path), e) from e
            self._owns_handle = True

        logger.info(f"Writing CSV to: {self._describe()}")
        return self

    def write_header(self) -> None:
        """Write the Shopify field names as the first line."""
        self._write(pd.DataFrame(columns=list(SHOPIFY_FIELDS)), header=True)

    def write_row(self, row: Row) -> None:
        """Write a single row."""
        self.write_rows([row])

    def write_rows(self, rows: Iterable[Row]) -> None:
        """
        Write rows in the order given.

        Args:
            rows: Rows of exactly ``len(SHOPIFY_FIELDS)`` string fields
        """
        rows = list(rows)
        for row in rows:
            if len(row) != len(SHOPIFY_FIELDS):
                raise ValueError(f"Row has {len(row)} fields, expected {len(SHOPIFY_FIELDS)}")
        if not rows:
            return

        self._write(pd.DataFrame(rows, columns=list(SHOPIFY_FIELDS), dtype=str), header=False)
        self.rows_written += len(rows)

    def close(self) -> None:
        """Flush and release the output; move the temporary file into place when atomic."""
        if self._closed:
            return
        self._closed = True
        if self._handle is None:
            return

        try:
            self._handle.flush()
            if self._owns_handle:
                self._handle.close()
            if self._temp_path is not None:
                os.replace(self._temp_path, self.output_path)
                self._temp_path = None
        except (OSError, UnicodeError) as e:
            logger.error(f"Error closing CSV output: {e}")
            self._discard_temp()
            raise FileAccessError(self._describe(), e) from e

        logger.info(f"Successfully wrote {self.rows_written} rows to {self._describe()}")

    def abort(self) -> None:
        """Release the output after a failure. A temporary file is removed, a direct file is kept."""
        if self._closed:
            return
        self._closed = True
        if self._handle is None:
            return

        try:
            self._handle.flush()
            if self._owns_handle:
                self._handle.close()
        except (OSError, UnicodeError) as e:
            logger.warning(f"Error releasing CSV output after failure: {e}")
        self._discard_temp()

        if self.atomic:
            logger.warning(f"Conversion failed, {self.output_path} was not written")
        else:
            logger.warning(f"Conversion failed, {self._describe()} may be incomplete "
                           f"({self.rows_written} rows written)")

    def __enter__(self) -> 'ShopifyCSVWriter':
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if exc_type is None:
            self.close()
        else:
            self.abort()

    def _write(self, df: pd.DataFrame, header: bool) -> None:
        if self._closed:
            raise ValueError("Cannot write to a closed CSV writer")
        if self._handle is None:
            self.open()

        try:
            df.to_csv(
                self._handle,
                header=header,
                index=False,
                lineterminator='\n'  # Use Unix line endings
            )
        except (OSError, UnicodeError) as e:
            logger.error(f"Error writing CSV output: {e}")
            raise FileAccessError(self._describe(), e) from e

    def _discard_temp(self) -> None:
        if self._temp_path is None:
            return
        try:
            self._temp_path.unlink()
        except FileNotFoundError:
            pass
        self._temp_path = None

    def _describe(self) -> str:
        if self._stream is not None or self.output_path == STDOUT:
            return '<stdout>' if self._stream is None else '<stream>'
        return str(self.output_path)
