import asyncio
from typing import AsyncIterator, Callable, List, Optional

from packages.mockdy_core.logging import get_logger

logger = get_logger("mockdy_session.stream")

CompletionCallback = Callable[[str, Optional[BaseException]], None]


class ReplyStream:
    """
    Cancellable async sequence of model text deltas.

    The consumer iterates deltas; the stream accumulates them and calls
    `on_complete(full_text, error)` exactly once when the source is exhausted,
    fails, or the consumer cancels/closes it. Source errors end the iteration
    quietly and are reported through `error`.
    """
    def __init__(self, source: AsyncIterator[str], on_complete: Optional[CompletionCallback] = None):
        self._source = source
        self._on_complete = on_complete
        self._chunks: List[str] = []
        self._finished = False
        self.cancelled = False
        self.error: Optional[BaseException] = None

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    @property
    def finished(self) -> bool:
        return self._finished

    def __aiter__(self) -> "ReplyStream":
        return self

    async def __anext__(self) -> str:
        if self._finished:
            raise StopAsyncIteration
        try:
            delta = await self._source.__anext__()
        except StopAsyncIteration:
            self._finish()
            raise
        except asyncio.CancelledError:
            # Consumer went away (client disconnect / navigation)
            self.cancelled = True
            await self._close_source()
            self._finish()
            raise
        except Exception as e:
            logger.error(f"Reply stream failed: {e}")
            self.error = e
            self._finish()
            raise StopAsyncIteration
        self._chunks.append(delta)
        return delta

    async def cancel(self) -> None:
        """Abort the reply; keeps what was received so far."""
        if self._finished:
            return
        self.cancelled = True
        await self._close_source()
        self._finish()

    async def aclose(self) -> None:
        await self.cancel()

    async def collect(self) -> str:
        async for _ in self:
            pass
        return self.text

    async def _close_source(self) -> None:
        aclose = getattr(self._source, "aclose", None)
        if aclose is None:
            return
        try:
            await aclose()
        except Exception as e:
            logger.warning(f"Error while closing reply source: {e}")

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        if self._on_complete is not None:
            self._on_complete(self.text, self.error)
