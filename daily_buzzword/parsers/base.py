from __future__ import annotations

from abc import ABC, abstractmethod

from daily_buzzword.models import BuzzwordEntry


class EntryExtractor(ABC):
    @abstractmethod
    def extract(self, raw_markup: str) -> BuzzwordEntry:
        """Turn a source page into an entry. Never raises; an empty entry means unavailable."""
        ...

    @abstractmethod
    def name(self) -> str:
        ...
