from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class SourceUnavailableError(RuntimeError):
    """The source page could not be fetched."""


class SourceProvider(ABC):
    @abstractmethod
    async def fetch(self) -> str:
        """Return the raw page markup or raise SourceUnavailableError."""
        ...

    @abstractmethod
    def name(self) -> str:
        ...


class TTSProvider(ABC):
    @abstractmethod
    async def synthesize(self, text: str, output_path: Path) -> Path:
        ...

    @abstractmethod
    def name(self) -> str:
        ...
