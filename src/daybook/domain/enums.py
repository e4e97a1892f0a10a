from __future__ import annotations

from enum import Enum


class CacheDomain(str, Enum):
    EVENTS = "events"
    TASKS = "tasks"
    BOARD_CARDS = "board_cards"
    ALL = "all"

    @classmethod
    def parse(cls, value: "CacheDomain | str") -> "CacheDomain":
        """Accept enum members, their values and the persisted/legacy aliases."""

        if isinstance(value, cls):
            return value
        normalized = str(value).strip()
        aliases = {"boardCards": cls.BOARD_CARDS, "cards": cls.BOARD_CARDS, "trello": cls.BOARD_CARDS}
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized.lower())

    def expand(self) -> tuple["CacheDomain", ...]:
        if self is CacheDomain.ALL:
            return (CacheDomain.EVENTS, CacheDomain.TASKS, CacheDomain.BOARD_CARDS)
        return (self,)
