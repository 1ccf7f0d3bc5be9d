"""Classification caches keyed by message id.

The classifier only talks to the ``get``/``set`` capability, so the store
can be swapped between a process-local dict and an on-disk cache without
touching classification logic.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from diskcache import Cache

from assistdesk.messaging.models import ClassificationResult

logger = logging.getLogger(__name__)


class ClassificationCache(ABC):
    """Key-value store for classification results."""

    @abstractmethod
    def get(self, message_id: str) -> Optional[ClassificationResult]:
        """Return the cached result, or None."""

    @abstractmethod
    def set(self, message_id: str, result: ClassificationResult) -> None:
        """Store a result."""

    def close(self) -> None:
        """Release any resources held by the store."""


class InMemoryClassificationCache(ClassificationCache):
    """Dict-backed cache living for the lifetime of the process."""

    def __init__(self):
        self._results: Dict[str, ClassificationResult] = {}

    def get(self, message_id: str) -> Optional[ClassificationResult]:
        return self._results.get(message_id)

    def set(self, message_id: str, result: ClassificationResult) -> None:
        self._results[message_id] = result

    def __len__(self) -> int:
        return len(self._results)


class DiskClassificationCache(ClassificationCache):
    """diskcache-backed cache that survives restarts."""

    def __init__(self, cache_dir: Path):
        self.cache = Cache(str(cache_dir))

    @staticmethod
    def _key(message_id: str) -> str:
        return f"classification:{message_id}"

    def get(self, message_id: str) -> Optional[ClassificationResult]:
        data = self.cache.get(self._key(message_id))
        if data is None:
            return None
        try:
            return ClassificationResult.from_dict(data)
        except (KeyError, ValueError) as e:
            logger.warning(f"Discarding unreadable cache entry for {message_id}: {e}")
            return None

    def set(self, message_id: str, result: ClassificationResult) -> None:
        self.cache[self._key(message_id)] = result.to_dict()

    def close(self) -> None:
        self.cache.close()


def create_cache(backend: str = "memory", cache_dir: Optional[Path] = None) -> ClassificationCache:
    """Create a classification cache.

    Args:
        backend: "memory" or "disk".
        cache_dir: Directory for the disk backend.

    Returns:
        A ClassificationCache instance.
    """
    if backend == "memory":
        return InMemoryClassificationCache()
    if backend == "disk":
        if cache_dir is None:
            raise ValueError("cache_dir is required for the disk cache backend")
        return DiskClassificationCache(Path(cache_dir))
    raise ValueError(f"Unknown cache backend: {backend}. Available: ['memory', 'disk']")
