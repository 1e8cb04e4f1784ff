import pytest

from platform_file import InvalidOperation, PathAvailable, PathUnavailable, PlatformFile


def test_create_file() -> None:
    file = PlatformFile(name="test", size=0)
    assert file.name == "test"
    assert file.size == 0
    assert file.path is None
    assert file.bytes is None
    assert file.read_stream is None
    assert file.identifier is None
    assert file.is_web is False


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("report.csv", "csv"),
        ("archive.tar.gz", "gz"),
        ("README", "README"),
    ],
)
def test_extension(name: str, expected: str) -> None:
    assert PlatformFile(name=name, size=0).extension == expected


def test_path_on_web_raises() -> None:
    file = PlatformFile(name="w.txt", size=3, path="/tmp/w.txt", bytes=b"\x01\x02\x03", is_web=True)

    with pytest.raises(InvalidOperation) as exc:
        file.path

    assert "bytes" in str(exc.value)
    assert isinstance(file.path_state, PathUnavailable)


def test_path_state() -> None:
    file = PlatformFile(name="a.txt", size=5, path="/tmp/a.txt")
    state = file.path_state

    assert isinstance(state, PathAvailable)
    assert state.value == "/tmp/a.txt"
    assert file.path == "/tmp/a.txt"


def test_fields_are_read_only() -> None:
    file = PlatformFile(name="a.txt", size=5)

    with pytest.raises(AttributeError):
        file.name = "b.txt"  # type: ignore

    with pytest.raises(AttributeError):
        file.is_web = True  # type: ignore


def test_mutable_bytes_are_frozen() -> None:
    data = bytearray(b"Hello")
    file = PlatformFile(name="a.txt", size=5, bytes=data)
    data[0] = 0

    assert file.bytes == b"Hello"
    assert isinstance(file.bytes, bytes)


def test_from_dict() -> None:
    stream = [b"chunk"]
    file = PlatformFile.from_dict(
        {
            "name": "a.txt",
            "path": "/tmp/a.txt",
            "bytes": b"Hello",
            "size": 5,
            "identifier": "content://a",
        },
        read_stream=stream,
    )

    assert file.name == "a.txt"
    assert file.path == "/tmp/a.txt"
    assert file.bytes == b"Hello"
    assert file.size == 5
    assert file.identifier == "content://a"
    assert file.read_stream is stream
    assert file.is_web is False


@pytest.mark.parametrize(("value", "expected"), [(None, False), (False, False), (True, True)])
def test_from_dict_is_web(value: bool | None, expected: bool) -> None:
    file = PlatformFile.from_dict({"name": "a.txt", "size": 0, "isWeb": value})
    assert file.is_web is expected


def test_from_dict_missing_name() -> None:
    with pytest.raises(KeyError):
        PlatformFile.from_dict({"size": 0})


def test_to_dict() -> None:
    file = PlatformFile(name="a.txt", size=5, path="/tmp/a.txt", bytes=b"Hello")
    assert file.to_dict() == {
        "name": "a.txt",
        "size": 5,
        "path": "/tmp/a.txt",
        "bytes": b"Hello",
        "identifier": None,
        "isWeb": False,
    }
    assert PlatformFile.from_dict(file.to_dict()) == file


def test_to_dict_on_web_has_no_path() -> None:
    file = PlatformFile(name="w.txt", size=3, path="/tmp/w.txt", is_web=True)
    assert "path" not in file.to_dict()


def test_equality() -> None:
    stream = [b"a"]
    a = PlatformFile(name="a.txt", size=1, path="/tmp/a.txt", bytes=b"a", read_stream=stream)
    b = PlatformFile(name="a.txt", size=1, path="/tmp/a.txt", bytes=bytearray(b"a"), read_stream=stream)

    assert a == b
    assert hash(a) == hash(b)
    assert a != PlatformFile(name="a.txt", size=1, path="/tmp/b.txt", bytes=b"a", read_stream=stream)
    assert a != PlatformFile(name="a.txt", size=2, path="/tmp/a.txt", bytes=b"a", read_stream=stream)
    assert a != "a.txt"


def test_equality_compares_streams_by_identity() -> None:
    a = PlatformFile(name="a.txt", size=1, read_stream=[b"a"])
    b = PlatformFile(name="a.txt", size=1, read_stream=[b"a"])
    assert a != b


def test_equality_on_web_ignores_path() -> None:
    a = PlatformFile(name="w.txt", size=3, path="/tmp/one", is_web=True)
    b = PlatformFile(name="w.txt", size=3, path="/tmp/two", is_web=True)

    assert a == b
    assert a != PlatformFile(name="w.txt", size=3, path="/tmp/one")


def test_web_files_share_hash() -> None:
    a = PlatformFile(name="one.txt", size=1, is_web=True)
    b = PlatformFile(name="two.txt", size=2, is_web=True)

    assert hash(a) == hash(b) == 0
    assert a != b
    assert len({a, b}) == 2


def test_str_and_repr_on_web() -> None:
    file = PlatformFile(name="w.txt", size=3, path="/tmp/w.txt", is_web=True)

    assert "/tmp/w.txt" not in str(file)
    assert "/tmp/w.txt" not in repr(file)
    assert "name: w.txt" in str(file)


def test_str() -> None:
    file = PlatformFile(name="a.txt", size=5, path="/tmp/a.txt")
    assert str(file) == "PlatformFile(path /tmp/a.txt, name: a.txt, bytes: None, read_stream: None, size: 5)"
