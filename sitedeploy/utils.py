import codecs
from typing import Final

from .typed_path import AbsFile

BINARY_SNIFF_BYTES: Final[int] = 8192
BINARY_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {
        ".avif",
        ".bmp",
        ".eot",
        ".gif",
        ".gz",
        ".ico",
        ".jpeg",
        ".jpg",
        ".mp3",
        ".mp4",
        ".otf",
        ".pdf",
        ".png",
        ".ttf",
        ".webm",
        ".webp",
        ".woff",
        ".woff2",
        ".zip",
    }
)


def strict_not_none[T](not_none: T | None, /) -> T:
    if not_none is None:
        raise TypeError()
    return not_none


def is_binary(file: AbsFile) -> bool:
    if file.path.suffix.lower() in BINARY_EXTENSIONS:
        return True
    with open(file, "rb") as f:
        chunk = f.read(BINARY_SNIFF_BYTES)
    if b"\0" in chunk:
        return True
    # Incremental decoding tolerates a multibyte character cut off by the chunk boundary.
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(chunk, final=len(chunk) < BINARY_SNIFF_BYTES)
    except UnicodeDecodeError:
        return True
    return False

