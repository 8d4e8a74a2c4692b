"""
Decoding of incoming datagrams into text.

Clients do not announce which encoding their probe is written in, so each datagram is tried as UTF-8 first and
as UTF-16 second. The encoding that produced a match is kept so the reply can be written in the same one.
"""

from typing import NamedTuple

from .responders import ResponderEntry, ResponderRegistry

UTF8 = "utf-8"
UTF16 = "utf-16-le"
ENCODINGS = (UTF8, UTF16)


class DatagramMatch(NamedTuple):
    text: str
    entry: ResponderEntry
    encoding: str


def decode(data: bytes, encoding: str) -> str:
    # malformed sequences become U+FFFD rather than failing the whole datagram
    return data.decode(encoding, errors="replace")


def match_datagram(data: bytes, registry: ResponderRegistry) -> DatagramMatch | None:
    """
    Decode a datagram under each supported encoding in turn and find the responder for it.

    :param data: Raw datagram payload.
    :param registry: Responders to match against.
    :return: The decoded text, responder and encoding of the first encoding that matched, or `None` if the
        datagram matches no responder under any encoding.
    """
    for encoding in ENCODINGS:
        text = decode(data, encoding)
        entry = registry.lookup(text)
        if entry is not None:
            return DatagramMatch(text, entry, encoding)
    return None
