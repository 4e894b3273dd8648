"""
ChromaDB-backed component store.

Profile items are stored in one collection in cosine space. The item body
is kept as JSON in the record metadata next to the owner id, so a record
can be turned back into a ``ProfileItem`` without another lookup.
"""

from pathlib import Path
from typing import Any, Iterable, Optional

from cvmatch.data.models import ProfileItem
from cvmatch.utils.config import get_settings
from cvmatch.utils.exceptions import StoreError
from cvmatch.utils.logger import get_logger

from .base import ComponentStore

logger = get_logger(__name__)


class ChromaComponentStore(ComponentStore):
    """
    ChromaDB-based component store.

    Provides persistent storage with indexed vector search filtered by owner.
    """

    def __init__(
        self,
        collection_name: Optional[str] = None,
        persist_directory: Optional[Path] = None,
        client: Any = None,
    ):
        """
        Initialize ChromaDB component store.

        Args:
            collection_name: Name of the collection to use.
            persist_directory: Directory for persistent storage.
            client: Pre-built chromadb client (e.g. ``chromadb.EphemeralClient()``).
        """
        settings = get_settings()
        self.collection_name = collection_name or settings.vector_store.collection_name
        self.persist_directory = persist_directory or settings.vector_store.persist_directory

        self._client = client
        self._collection = None

    def _initialize(self) -> None:
        """Lazy initialization of the ChromaDB client and collection."""
        if self._collection is not None:
            return

        try:
            import chromadb
            from chromadb.config import Settings as ChromaSettings

            if self._client is None:
                self.persist_directory.mkdir(parents=True, exist_ok=True)
                logger.info(f"Initializing ChromaDB at: {self.persist_directory}")
                self._client = chromadb.PersistentClient(
                    path=str(self.persist_directory),
                    settings=ChromaSettings(anonymized_telemetry=False),
                )

            self._collection = self._client.get_or_create_collection(
                name=self.collection_name,
                metadata={"hnsw:space": "cosine"},
            )
            logger.info(
                f"ChromaDB initialized with collection: {self.collection_name} "
                f"({self._collection.count()} items)"
            )

        except ImportError:
            logger.error("chromadb not installed. Install with: pip install chromadb")
            raise
        except Exception as e:
            logger.error(f"Failed to initialize ChromaDB: {e}")
            raise StoreError(
                f"Failed to initialize ChromaDB: {e}", operation="initialize", cause=e
            ) from e

    @property
    def collection(self):
        """Get the ChromaDB collection."""
        self._initialize()
        return self._collection

    def add_items(self, items: Iterable[ProfileItem]) -> int:
        """
        Add or update profile items.

        Args:
            items: Items to store. Each needs an ``owner_id`` and an embedding.

        Returns:
            Number of items written.
        """
        items = list(items)
        if not items:
            return 0

        missing = [item.id for item in items if not item.owner_id or not item.embedding]
        if missing:
            raise StoreError(
                "Profile items need an owner_id and an embedding before indexing",
                operation="add_items",
                details={"item_ids": missing},
            )

        offset = self.collection.count()
        self.collection.upsert(
            ids=[self._record_id(item) for item in items],
            embeddings=[list(item.embedding) for item in items],
            documents=[item.embedding_text() for item in items],
            metadatas=[
                {
                    "owner_id": item.owner_id,
                    "position": offset + i,
                    "item": item.model_dump_json(exclude={"embedding"}),
                }
                for i, item in enumerate(items)
            ],
        )

        logger.debug(f"Upserted {len(items)} profile items to collection")
        return len(items)

    def vector_search(
        self,
        owner_id: str,
        vector: list[float],
        k: int,
    ) -> list[ProfileItem]:
        try:
            results = self.collection.query(
                query_embeddings=[list(vector)],
                n_results=k,
                where={"owner_id": owner_id},
                include=["metadatas", "embeddings", "distances"],
            )
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(
                f"Vector search failed: {e}", operation="vector_search", cause=e
            ) from e

        ids = results.get("ids") or [[]]
        if not ids[0]:
            return []

        metadatas = results["metadatas"][0]
        embeddings = self._column(results, "embeddings", 0)
        return [
            self._to_item(metadatas[i], embeddings[i] if embeddings is not None else None)
            for i in range(len(ids[0]))
        ]

    def list_all(self, owner_id: str) -> list[ProfileItem]:
        try:
            results = self.collection.get(
                where={"owner_id": owner_id},
                include=["metadatas", "embeddings"],
            )
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(
                f"Listing items failed: {e}", operation="list_all", cause=e
            ) from e

        metadatas = results.get("metadatas") or []
        embeddings = self._column(results, "embeddings")
        records = [
            (meta, embeddings[i] if embeddings is not None else None)
            for i, meta in enumerate(metadatas)
        ]
        records.sort(key=lambda record: record[0].get("position", 0))
        return [self._to_item(meta, embedding) for meta, embedding in records]

    def count(self) -> int:
        """Get total number of items in the collection."""
        return self.collection.count()

    def clear(self) -> None:
        """Delete and recreate the collection."""
        self._initialize()
        self._client.delete_collection(self.collection_name)
        self._collection = self._client.create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine"},
        )
        logger.info(f"Cleared collection: {self.collection_name}")

    @staticmethod
    def _record_id(item: ProfileItem) -> str:
        return f"{item.owner_id}:{item.id}"

    @staticmethod
    def _column(results: dict[str, Any], key: str, row: Optional[int] = None) -> Any:
        # Chroma may hand back numpy arrays, which have no truth value
        column = results.get(key)
        if column is None:
            return None
        if row is not None:
            column = column[row]
        return column

    @staticmethod
    def _to_item(metadata: dict[str, Any], embedding: Any) -> ProfileItem:
        item = ProfileItem.model_validate_json(metadata["item"])
        if embedding is None:
            return item
        return item.model_copy(update={"embedding": [float(v) for v in embedding]})
