from __future__ import annotations

import asyncio
import os
import shutil
import stat
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from typing import TYPE_CHECKING, BinaryIO

if TYPE_CHECKING:
    from pathlib import Path


__all__ = (
    "ReadStream",
    "PathState",
    "Source",
    "PathAvailable",
    "PathUnavailable",
    "PathSource",
    "BytesSource",
    "StreamSource",
    "NoSource",
)

ReadStream = AsyncIterable[bytes] | Iterable[bytes]


def single_pass(stream: ReadStream) -> AsyncIterator[bytes] | Iterator[bytes]:
    """Returns an iterator over the chunks that can be consumed only once.

    Lists and other restartable iterables are pinned to one iterator,
    so a second copy never sees the same chunks again.
    """
    if isinstance(stream, AsyncIterable):
        return aiter(stream)
    return iter(stream)


_EXHAUSTED = object()


async def _iterate(chunks: AsyncIterator[bytes] | Iterator[bytes]) -> AsyncIterator[bytes]:
    if isinstance(chunks, AsyncIterator):
        async for chunk in chunks:
            yield chunk
        return

    # Plain iterables may block (e.g. reading a socket), so they are pulled in a thread.
    while True:
        chunk = await asyncio.to_thread(next, chunks, _EXHAUSTED)
        if chunk is _EXHAUSTED:
            return
        yield chunk


def _is_file(path: str) -> bool:
    try:
        st = os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    return stat.S_ISREG(st.st_mode)


def _close_sink(opening: asyncio.Future[BinaryIO]) -> None:
    if not opening.cancelled() and opening.exception() is None:
        opening.result().close()


async def _open_sink(target: Path) -> BinaryIO:
    opening = asyncio.ensure_future(asyncio.to_thread(target.open, "wb"))
    try:
        return await asyncio.shield(opening)
    except asyncio.CancelledError:
        # The worker thread still hands back an open file once it is done.
        opening.add_done_callback(_close_sink)
        raise


class PathAvailable:
    """The platform has a filesystem, the path can be asked for.

    Attributes:
        value: The stored path. May be None.
    """

    __slots__ = ("value",)

    def __init__(self, value: str | None) -> None:
        self.value: str | None = value

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} value={self.value!r}>"


class PathUnavailable:
    """The platform has no filesystem, asking for the path is an error.

    Attributes:
        reason: Why the path cannot be used.
    """

    __slots__ = ("reason",)

    def __init__(self, reason: str) -> None:
        self.reason: str = reason

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} reason={self.reason!r}>"


class PathSource:
    """File data lives on the filesystem."""

    __slots__ = ("path",)

    def __init__(self, path: str) -> None:
        self.path: str = path

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} path={self.path!r}>"

    async def exists(self) -> bool:
        return await asyncio.to_thread(_is_file, self.path)

    async def write_to(self, target: Path) -> None:
        await asyncio.to_thread(shutil.copyfile, self.path, target)


class BytesSource:
    """File data is held in memory."""

    __slots__ = ("data",)

    def __init__(self, data: bytes) -> None:
        self.data: bytes = data

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} size={len(self.data)}>"

    async def exists(self) -> bool:
        # An empty sequence still counts.
        return True

    async def write_to(self, target: Path) -> None:
        await asyncio.to_thread(target.write_bytes, self.data)


class StreamSource:
    """File data arrives in chunks and can be read only once."""

    __slots__ = ("chunks",)

    def __init__(self, chunks: AsyncIterator[bytes] | Iterator[bytes]) -> None:
        self.chunks: AsyncIterator[bytes] | Iterator[bytes] = chunks

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} chunks={self.chunks!r}>"

    async def exists(self) -> bool:
        # Never touches the stream.
        return True

    async def write_to(self, target: Path) -> None:
        fp = await _open_sink(target)
        with fp:
            async for chunk in _iterate(self.chunks):
                await asyncio.to_thread(fp.write, chunk)
            await asyncio.to_thread(fp.flush)


class NoSource:
    """The file has nothing to read from."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"

    async def exists(self) -> bool:
        return False


PathState = PathAvailable | PathUnavailable
Source = PathSource | BytesSource | StreamSource | NoSource
