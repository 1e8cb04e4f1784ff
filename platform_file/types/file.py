from __future__ import annotations

from typing_extensions import NotRequired, TypedDict


# Shape handed over by file pickers.
class PlatformFileData(TypedDict):
    name: str
    size: int
    path: NotRequired[str | None]
    bytes: NotRequired[bytes | None]
    identifier: NotRequired[str | None]
    isWeb: NotRequired[bool | None]
