# =============================================================================
# Worker Provisioning Service - Firestore Document Store
# =============================================================================
"""
Google Cloud Firestore access for worker and user profiles.

Profiles live in two top-level collections keyed by the worker's uid:

    workers/{uid}
    users/{uid}

Both documents are always written together in a single WriteBatch.
"""

import asyncio
from functools import lru_cache
from typing import Iterable, Optional

import structlog
from google.cloud import firestore

from ..config import get_settings
from ..models import DocumentWrite


# Configure structured logger
logger = structlog.get_logger(__name__)

# Sentinel resolved by Firestore to the commit time
SERVER_TIMESTAMP = firestore.SERVER_TIMESTAMP


class DocumentStore:
    """
    Firestore document store for provisioning profiles.
    
    Attributes:
        project_id: GCP project identifier
        _client: Firestore client instance
    """
    
    def __init__(
        self,
        project_id: str,
        client: Optional[firestore.Client] = None,
    ) -> None:
        """
        Initialize the document store.
        
        Args:
            project_id: GCP project identifier
            client: Pre-built Firestore client (created lazily if None)
        """
        self.project_id = project_id
        self._client: Optional[firestore.Client] = client
        
        logger.info(
            "document_store_initialized",
            project_id=project_id,
        )
    
    def _get_client(self) -> firestore.Client:
        """
        Lazily initialize the Firestore client.
        
        Returns:
            firestore.Client: Initialized Firestore client
        """
        if self._client is None:
            self._client = firestore.Client(project=self.project_id)
        return self._client
    
    async def _run(self, func):
        """Run a blocking Firestore call in the default thread pool."""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, func)
    
    async def get_document(
        self,
        collection: str,
        document_id: str,
    ) -> Optional[dict]:
        """
        Read a single document.
        
        Args:
            collection: Collection name
            document_id: Document ID
            
        Returns:
            Optional[dict]: Document data if it exists, None otherwise
            
        Raises:
            DocumentStoreError: If the read fails
        """
        client = self._get_client()
        doc_ref = client.collection(collection).document(document_id)
        
        try:
            doc = await self._run(doc_ref.get)
        except Exception as e:
            logger.error(
                "document_read_failed",
                path=f"{collection}/{document_id}",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DocumentStoreError(
                f"Failed to read {collection}/{document_id}: {e}"
            ) from e
        
        if doc.exists:
            return doc.to_dict()
        return None
    
    async def batch_write(self, writes: Iterable[DocumentWrite]) -> None:
        """
        Set every document in one atomic batch.
        
        Either all documents are written or none are. Each write replaces
        the whole document at its path.
        
        Args:
            writes: Documents to set
            
        Raises:
            DocumentStoreError: If the batch cannot be committed
        """
        client = self._get_client()
        writes = list(writes)
        paths = [write.path for write in writes]
        
        batch = client.batch()
        for write in writes:
            doc_ref = client.collection(write.collection).document(write.document_id)
            batch.set(doc_ref, write.fields)
        
        try:
            await self._run(batch.commit)
        except Exception as e:
            logger.error(
                "batch_commit_failed",
                paths=paths,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DocumentStoreError(f"Failed to commit batch write: {e}") from e
        
        logger.info("batch_committed", paths=paths)
    
    def close(self) -> None:
        """Close the underlying client, if one was created."""
        if self._client is not None:
            self._client.close()
            self._client = None


class DocumentStoreError(Exception):
    """Custom exception for Firestore operations."""
    pass


@lru_cache
def get_document_store() -> DocumentStore:
    """
    Get cached document store instance.
    
    Returns:
        DocumentStore: Configured document store
    """
    settings = get_settings()
    return DocumentStore(project_id=settings.gcp_project_id)
