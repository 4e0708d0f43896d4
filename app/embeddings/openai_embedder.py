"""
OpenAI embeddings provider implementation.
"""
import logging
import math
from typing import Optional
from openai import OpenAI, OpenAIError

from app.core import config
from app.core.exceptions import ProviderError
from app.embeddings.provider import TextEmbedder

logger = logging.getLogger(__name__)


class OpenAIEmbedder(TextEmbedder):
    """OpenAI embeddings using the official OpenAI SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        dimensions: Optional[int] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize the OpenAI client.

        The credential is bound here once; ``embed`` takes no auth parameters.
        Timeout and retry-with-backoff are handled by the SDK client.
        """
        self._model = model or config.EMBEDDING_MODEL
        self._dimensions = dimensions or config.EMBEDDING_DIMENSIONS
        if client is not None:
            self.client = client
        else:
            api_key = api_key or config.OPENAI_API_KEY
            if not api_key:
                raise ValueError("OPENAI_API_KEY not configured")
            self.client = OpenAI(
                api_key=api_key,
                timeout=timeout if timeout is not None else config.EMBEDDING_TIMEOUT_SECONDS,
                max_retries=max_retries if max_retries is not None else config.EMBEDDING_MAX_RETRIES,
            )
        logger.info(f"OpenAI embedder initialized: model={self._model}, dimensions={self._dimensions}")

    @property
    def model(self) -> str:
        return self._model

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> list[float]:
        """Embed a single text with one outbound request."""
        try:
            response = self.client.embeddings.create(
                input=text,
                model=self._model,
                dimensions=self._dimensions,
                encoding_format="float",
            )
        except OpenAIError as e:
            logger.error(f"OpenAI embeddings error: {type(e).__name__}: {e}")
            raise ProviderError(f"Embedding provider request failed: {type(e).__name__}") from e

        data = getattr(response, "data", None)
        if not data:
            logger.error("OpenAI embeddings response contained no data")
            raise ProviderError("Embedding provider returned no embedding")

        vector = getattr(data[0], "embedding", None)
        if not isinstance(vector, list) or not vector:
            logger.error("OpenAI embeddings response missing embedding vector")
            raise ProviderError("Embedding provider returned no embedding")

        if len(vector) != self._dimensions:
            logger.error(
                f"OpenAI embeddings dimension mismatch: expected {self._dimensions}, got {len(vector)}"
            )
            raise ProviderError(
                f"Embedding provider returned {len(vector)} dimensions, expected {self._dimensions}"
            )

        try:
            vector = [float(value) for value in vector]
        except (TypeError, ValueError) as e:
            raise ProviderError("Embedding provider returned non-numeric values") from e
        if not all(math.isfinite(value) for value in vector):
            raise ProviderError("Embedding provider returned non-finite values")

        logger.debug(f"Embedded text: chars={len(text)}, dimensions={len(vector)}")
        return vector
