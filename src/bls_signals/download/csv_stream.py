'''Stream a QCEW single-file CSV into batches of :class:`RawRow`.

The annual single files run to several hundred megabytes, so they are never
loaded whole. Chunks are decoded incrementally, every complete line is parsed
as soon as it arrives, and only the trailing partial line is held back.

Quoting follows the simple rules the BLS files need: ``"`` toggles a quoted
section, commas inside quotes are literal, and ``""`` inside quotes is an
escaped quote character. Every field is whitespace-trimmed.
'''

from __future__ import annotations

import codecs
import logging
from collections.abc import AsyncIterable, AsyncIterator

from ..config import CSV_BATCH_SIZE, MAX_PENDING_CHARS
from ..errors import MalformedSourceError
from ..models import RawRow

log = logging.getLogger(__name__)


def split_csv_line(line: str) -> list[str]:
    '''Split one CSV line on unquoted commas.

    Args:
        line: A single line without its newline.

    Returns:
        The trimmed field values; always at least one element.
    '''
    values: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            values.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    values.append(''.join(current).strip())
    return values


class StreamingCsvIngester:
    '''Parse a byte (or text) stream into fixed-size batches of rows.

    A single instance may be reused, but each call to :meth:`batches`
    consumes its stream once, forward only. The counters describe the most
    recent run.

    Attributes:
        batch_size: Maximum rows per yielded batch.
        max_pending_chars: Size of the partial-line buffer above which a
            warning is logged.
        line_number: Physical lines seen so far, blank lines included.
        lines_read: Non-empty lines seen, header included.
        rows_parsed: Rows yielded.
        rows_skipped: Lines dropped for having the wrong column count.
    '''

    def __init__(
        self,
        batch_size: int = CSV_BATCH_SIZE,
        *,
        max_pending_chars: int = MAX_PENDING_CHARS,
        encoding: str = 'utf-8',
    ) -> None:
        if batch_size < 1:
            raise ValueError(f'batch_size must be positive, got {batch_size}')
        self.batch_size = batch_size
        self.max_pending_chars = max_pending_chars
        self.encoding = encoding
        self._reset()

    def _reset(self) -> None:
        self.headers: list[str] = []
        self.line_number = 0
        self.lines_read = 0
        self.rows_parsed = 0
        self.rows_skipped = 0

    def _parse_line(self, line: str) -> RawRow | None:
        self.line_number += 1
        if not line.strip():
            return None
        self.lines_read += 1
        values = split_csv_line(line)

        if not self.headers:
            if not any(values):
                raise MalformedSourceError('CSV file is empty or has no headers')
            self.headers = values
            return None

        if len(values) != len(self.headers):
            self.rows_skipped += 1
            log.warning(
                'Skipping malformed line %d: expected %d columns, got %d',
                self.line_number,
                len(self.headers),
                len(values),
            )
            return None

        self.rows_parsed += 1
        return RawRow.from_record(dict(zip(self.headers, values)))

    async def batches(
        self, stream: AsyncIterable[bytes | str]
    ) -> AsyncIterator[list[RawRow]]:
        '''Yield lists of up to :attr:`batch_size` rows parsed from *stream*.

        Args:
            stream: Async iterable of ``bytes`` (decoded with
                :attr:`encoding`) or ``str`` chunks.

        Yields:
            Non-empty row batches; only the last may be short.

        Raises:
            MalformedSourceError: If the header line has no columns.
        '''
        self._reset()
        decoder = codecs.getincrementaldecoder(self.encoding)(errors='replace')
        pending = ''
        warned = False
        batch: list[RawRow] = []

        async for chunk in stream:
            text = decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
            pending += text

            lines = pending.split('\n')
            pending = lines.pop()
            for line in lines:
                row = self._parse_line(line)
                if row is None:
                    continue
                batch.append(row)
                if len(batch) >= self.batch_size:
                    yield batch
                    batch = []

            if len(pending) > self.max_pending_chars and not warned:
                # a single line longer than the cap; nothing complete is left to flush
                log.warning(
                    'Pending line buffer exceeded %d characters after %d lines',
                    self.max_pending_chars,
                    self.lines_read,
                )
                warned = True

        pending += decoder.decode(b'', final=True)
        for line in pending.split('\n'):
            row = self._parse_line(line)
            if row is not None:
                batch.append(row)
                if len(batch) >= self.batch_size:
                    yield batch
                    batch = []

        if batch:
            yield batch


async def iter_csv_batches(
    stream: AsyncIterable[bytes | str],
    batch_size: int = CSV_BATCH_SIZE,
) -> AsyncIterator[list[RawRow]]:
    '''Convenience wrapper around :meth:`StreamingCsvIngester.batches`.'''
    ingester = StreamingCsvIngester(batch_size)
    async for batch in ingester.batches(stream):
        yield batch
