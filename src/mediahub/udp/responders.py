"""
Module defining the ordered registry of message responders.

A responder pairs a pattern with the handler that answers messages matching it. Responders are tried in the
order they were registered and the first match wins.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator

BYTE_ORDER_MARK = "\ufeff"

MessageHandler = Callable[[str, str, str], None]
"""Called with the decoded message text, the remote endpoint and the encoding the message matched in."""


def _strip_message(text: str) -> str:
    # a UTF-16 probe written with a byte order mark decodes with a leading U+FEFF
    return text.strip().lstrip(BYTE_ORDER_MARK).strip()


class MatchKind(Enum):
    SUBSTRING = "substring"
    EXACT = "exact"


@dataclass(frozen=True)
class ResponderEntry:
    pattern: str
    match_kind: MatchKind
    handler: MessageHandler

    def matches(self, text: str) -> bool:
        """
        Whether the given text matches this responder's pattern, ignoring case.

        Substring responders match if the pattern occurs anywhere in the text. Exact responders match if the
        text, stripped of surrounding whitespace and any byte order mark, is the pattern.
        """
        pattern = self.pattern.casefold()
        if self.match_kind is MatchKind.SUBSTRING:
            return pattern in text.casefold()
        return _strip_message(text).casefold() == pattern


class ResponderRegistry:
    """
    Ordered collection of responders. Entries can be added but never removed or reordered. Once frozen, no more
    entries can be added either, so a frozen registry can be read from any number of threads.
    """

    def __init__(self):
        self._entries: list[ResponderEntry] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        self._frozen = True

    def register(self, pattern: str, match_kind: MatchKind, handler: MessageHandler):
        """
        :raises RuntimeError: if the registry has been frozen.
        """
        if self._frozen:
            raise RuntimeError("Cannot register a responder in a frozen registry.")
        self._entries.append(ResponderEntry(pattern, match_kind, handler))

    def lookup(self, text: str) -> ResponderEntry | None:
        """
        Find the first registered responder matching the given text.

        :param text: Decoded message text.
        :return: The responder, or `None` if no responder matches.
        """
        return next((entry for entry in self._entries if entry.matches(text)), None)

    def __iter__(self) -> Iterator[ResponderEntry]:
        return iter(tuple(self._entries))

    def __len__(self):
        return len(self._entries)
