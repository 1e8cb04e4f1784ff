from __future__ import annotations

import asyncio
import builtins
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Self

from .errors import InvalidOperation, InvalidState
from .sources import (
    BytesSource,
    NoSource,
    PathAvailable,
    PathSource,
    PathUnavailable,
    StreamSource,
    single_pass,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator, Mapping

    from aiohttp import ClientResponse

    from .sources import PathState, ReadStream, Source
    from .types.file import PlatformFileData

_log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

WEB_PATH_REASON = (
    "On web `path` is always unavailable since there is no filesystem to point at. "
    "You should access the `bytes` property instead."
)


__all__ = ("PlatformFile", "DEFAULT_CHUNK_SIZE")


class PlatformFile:
    """Object that represents a file picked by the user, wherever its data lives.

    The data is read from the first of these sources that is present:
    the file at `path` (never on web), the in-memory `bytes`, the `read_stream`.

    Attributes:
        name: The file name, including its extension.
        size: The file size in bytes, as declared by whoever built the file.
        bytes: The file content, if it is held in memory.
        read_stream: The file content as a single-pass stream of chunks.
            Plain iterables are read in a worker thread.
        identifier: Platform reference of the original file. It is not a path.
        is_web: Whether the file comes from a platform without a filesystem.
    """

    __slots__ = (
        "_name",
        "_size",
        "_path",
        "_bytes",
        "_read_stream",
        "_chunks",
        "_identifier",
        "_is_web",
    )

    def __init__(
        self,
        name: str,
        size: int,
        *,
        path: str | None = None,
        bytes: bytes | None = None,
        read_stream: ReadStream | None = None,
        identifier: str | None = None,
        is_web: bool = False,
    ) -> None:
        if isinstance(bytes, (bytearray, memoryview)):
            bytes = builtins.bytes(bytes)

        self._name: str = name
        self._size: int = size
        self._path: str | None = path
        self._bytes: builtins.bytes | None = bytes
        self._read_stream: ReadStream | None = read_stream
        self._chunks: AsyncIterator[builtins.bytes] | Iterator[builtins.bytes] | None = (
            single_pass(read_stream) if read_stream is not None else None
        )
        self._identifier: str | None = identifier
        self._is_web: bool = is_web

    @property
    def name(self) -> str:
        return self._name

    @property
    def size(self) -> int:
        return self._size

    @property
    def bytes(self) -> builtins.bytes | None:
        return self._bytes

    @property
    def read_stream(self) -> ReadStream | None:
        return self._read_stream

    @property
    def identifier(self) -> str | None:
        return self._identifier

    @property
    def is_web(self) -> bool:
        return self._is_web

    @property
    def extension(self) -> str:
        """The text after the last dot of the name.

        A name without a dot is returned whole.
        """
        return self._name.rsplit(".", 1)[-1]

    @property
    def path_state(self) -> PathState:
        """Whether the path can be asked for on this platform."""
        if self._is_web:
            return PathUnavailable(WEB_PATH_REASON)
        return PathAvailable(self._path)

    @property
    def path(self) -> str | None:
        """The path of the file on the filesystem.

        Raises:
            InvalidOperation: The file comes from web, where there is no path.
        """
        state = self.path_state
        if isinstance(state, PathUnavailable):
            raise InvalidOperation(state.reason)
        return state.value

    def __str__(self) -> str:
        path = "" if self._is_web else f"path {self._path}"
        return (
            f"PlatformFile({path}, name: {self._name}, bytes: {self._bytes!r}, "
            f"read_stream: {self._read_stream!r}, size: {self._size})"
        )

    def __repr__(self) -> str:
        # The path is left out on web, reading it would raise.
        attrs = ("name", "size", "identifier", "is_web")
        if not self._is_web:
            attrs = ("name", "size", "path", "identifier", "is_web")

        fmt = " ".join(f"{a}={getattr(self, a)!r}" for a in attrs)
        return f"<{self.__class__.__name__} {fmt}>"

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True

        if not isinstance(other, PlatformFile):
            return NotImplemented

        return (
            self._is_web == other._is_web
            and (self._is_web or self._path == other._path)
            and self._name == other._name
            and self._bytes == other._bytes
            and self._read_stream is other._read_stream
            and self._identifier == other._identifier
            and self._size == other._size
        )

    def __hash__(self) -> int:
        # Every web file lands on the same hash.
        if self._is_web:
            return 0

        return hash(
            (
                self._path,
                self._name,
                self._bytes,
                id(self._read_stream),
                self._identifier,
                self._size,
            )
        )

    def sources(self) -> list[Source]:
        """Returns the data sources of this file, the preferred one first."""
        sources: list[Source] = []

        if not self._is_web and self._path is not None:
            sources.append(PathSource(self._path))

        if self._bytes is not None:
            sources.append(BytesSource(self._bytes))

        if self._chunks is not None:
            sources.append(StreamSource(self._chunks))

        return sources

    def resolve_source(self) -> Source:
        """Returns the data source that answers for this file."""
        sources = self.sources()
        return sources[0] if sources else NoSource()

    async def exists(self) -> bool:
        """Checks if the file exists.

        A file with a path (not on web) exists if the path points to a file.
        Otherwise it exists if it has bytes or a stream, even an empty one.
        The stream is not consumed.
        """
        return await self.resolve_source().exists()

    async def copy(self, target_path: str | os.PathLike[str]) -> Path:
        """Copies this file to the target path, creating its parent directories.

        The path is copied if the file behind it exists, else the bytes are written,
        else the stream is written chunk by chunk. A stream can only be copied once,
        a second copy writes an empty file.

        Args:
            target_path: Where to write the file.

        Raises:
            InvalidState: The file has no data source.
            OSError: Reading or writing failed.
        """
        target = Path(target_path)
        await asyncio.to_thread(target.parent.mkdir, parents=True, exist_ok=True)

        for source in self.sources():
            if isinstance(source, PathSource) and not await source.exists():
                _log.warning(f"{source.path!r} does not exist, copying {self._name!r} from another source")
                continue

            _log.debug(f"Copying {self._name!r} to {str(target)!r} from {source!r}")
            await source.write_to(target)
            return target

        raise InvalidState(
            "Cannot copy file: no valid data source available. "
            "File must have either a valid path (non-web), bytes, or read_stream."
        )

    def to_dict(self) -> PlatformFileData:
        """Returns the file as dict. The stream is not included."""
        data: PlatformFileData = {
            "name": self._name,
            "size": self._size,
            "bytes": self._bytes,
            "identifier": self._identifier,
            "isWeb": self._is_web,
        }

        if not self._is_web:
            data["path"] = self._path

        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], read_stream: ReadStream | None = None) -> Self:
        """Create an instance of the class from a dict handed over by a file picker.

        Args:
            data: Dict with the `name`, `size`, `path`, `bytes`, `identifier` and `isWeb` keys.
            read_stream: The file content as stream, since the dict cannot carry one.
        """
        is_web = data.get("isWeb")

        return cls(
            name=data["name"],
            size=data["size"],
            path=data.get("path"),
            bytes=data.get("bytes"),
            read_stream=read_stream,
            identifier=data.get("identifier"),
            is_web=False if is_web is None else is_web,
        )

    @classmethod
    def from_response(cls, response: ClientResponse, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Self:
        """Create a stream backed instance of the class from an HTTP response.

        The body is not read here, it is streamed when the file is copied.

        Args:
            response: The response whose body is the file.
            chunk_size: Size of the chunks read from the body.
        """
        name = None
        if response.content_disposition is not None:
            name = response.content_disposition.filename

        if not name:
            name = response.url.name or "unknown"

        return cls(
            name=name,
            size=response.content_length or 0,
            read_stream=response.content.iter_chunked(chunk_size),
            identifier=str(response.url),
        )
