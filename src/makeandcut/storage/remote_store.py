"""Abstract remote store adapter definition."""

from abc import ABC, abstractmethod

from ..exceptions import RemoteServiceError
from ..ingest.ingest_models import MediaAsset
from .store_models import StoredAssetRef


class StoreError(RemoteServiceError):
    """Raised when the remote store rejects or fails an upload."""

    service = "store"


class RemoteStore(ABC):
    """Base interface for remote media stores."""

    @abstractmethod
    async def store(self, asset: MediaAsset, *, folder: str) -> StoredAssetRef:
        """Upload ``asset`` in one call and return the store's reference."""
