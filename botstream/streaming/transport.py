"""Transport reader over a streaming HTTP response.

Wraps an httpx response opened in stream mode and hands out raw byte
chunks one read at a time. The response status is checked once, before
the first read; connection failures during reading surface as
TransportError.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx

from botstream.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadResult:
    """Outcome of a single read. ``done`` is set on the final (empty) read."""

    chunk: bytes
    done: bool = False


class TransportReader:
    """Pulls byte chunks from a streaming ``httpx.Response`` on demand.

    Usage:
        async with client.stream("POST", url, json=body) as response:
            reader = TransportReader(response)
            while not (result := await reader.read()).done:
                handle(result.chunk)
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._iterator: AsyncIterator[bytes] | None = None
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    @property
    def status_code(self) -> int:
        return self._response.status_code

    def raise_for_status(self) -> None:
        """Fail unless the endpoint answered with a 2xx status.

        Raises:
            TransportError: On a non-2xx status.
        """
        if not self._response.is_success:
            raise TransportError(
                f"Chat endpoint returned HTTP {self._response.status_code}"
            )

    async def read(self) -> ReadResult:
        """Read the next chunk, suspending until bytes arrive.

        Empty chunks from the underlying stream are skipped. Once the
        stream is exhausted every further read returns ``done=True``.
        """
        if self._done:
            return ReadResult(b"", done=True)
        if self._iterator is None:
            self.raise_for_status()
            self._iterator = self._response.aiter_bytes()

        try:
            while True:
                chunk = await anext(self._iterator)
                if chunk:
                    return ReadResult(chunk)
        except StopAsyncIteration:
            self._done = True
            return ReadResult(b"", done=True)
        except (httpx.StreamConsumed, httpx.StreamClosed) as e:
            self._done = True
            raise TransportError(f"Chat endpoint response has no readable body: {e}") from e
        except (httpx.TransportError, httpx.StreamError) as e:
            self._done = True
            raise TransportError(f"Connection lost while reading response: {e}") from e

    async def aclose(self) -> None:
        """Release the underlying response."""
        self._done = True
        await self._response.aclose()
