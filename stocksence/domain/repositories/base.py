"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import TypeVar, List, Optional, Any, Protocol

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations."""

    def get_by_id(self, id: str) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    def list(self, skip: int = 0, limit: int | None = None) -> List[T]:
        """List entities, optionally paginated."""
        ...

    def count(self) -> int:
        """Count all entities."""
        ...

    def create(self, obj_in: Any) -> T:
        """Create a new entity and commit."""
        ...

    def update(self, db_obj: T, obj_in: Any) -> T:
        """Update an existing entity and commit."""
        ...

    def delete(self, id: str) -> Optional[T]:
        """Delete an entity by ID."""
        ...

    def commit(self) -> None:
        """Commit the unit of work shared by this repository's session."""
        ...

    def rollback(self) -> None:
        """Discard uncommitted changes."""
        ...
