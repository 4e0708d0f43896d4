"""
Embedding provider interface for abstracting text embedding implementations.
"""
from abc import ABC, abstractmethod


class TextEmbedder(ABC):
    """
    Abstract base class for text -> vector providers.

    One instance serves one pinned model/dimension pair. Every vector stored in
    the same index must come from the same pair, otherwise nearest-neighbor
    scores are meaningless.
    """

    @property
    @abstractmethod
    def model(self) -> str:
        """Model identifier recorded next to every stored vector."""
        pass

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Length of every vector returned by ``embed``."""
        pass

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """
        Convert text into a vector of ``dimensions`` floats.

        Args:
            text: Arbitrary text. Empty text is passed through to the provider.

        Returns:
            The embedding vector

        Raises:
            ProviderError: provider unreachable, failing, or malformed response
        """
        pass
