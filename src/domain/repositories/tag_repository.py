"""Tag catalog repository protocol."""

from typing import Protocol

from domain.entities.tag import TagDefinition


class ITagDefinitionRepository(Protocol):
    """Repository interface for TagDefinition entities."""

    async def get(self, tag_id: str) -> TagDefinition | None:
        """Get a tag definition by ID (active or not)."""
        ...

    async def get_by_full_tag(self, full_tag: str) -> TagDefinition | None:
        """Get a tag definition by full tag (active or not)."""
        ...

    async def get_active_by_full_tags(self, full_tags: list[str]) -> list[TagDefinition]:
        """Get the active definitions among the given full tags (single query)."""
        ...

    async def list_active(self, prefix: str | None = None) -> list[TagDefinition]:
        """List active definitions sorted by prefix then code."""
        ...

    async def list_all(self) -> list[TagDefinition]:
        """List every definition, including inactive ones."""
        ...

    async def create(self, tag: TagDefinition) -> TagDefinition:
        """Create a new tag definition."""
        ...

    async def update(self, tag: TagDefinition) -> TagDefinition:
        """Update display metadata and active flag."""
        ...

    async def adjust_customer_count(self, full_tag: str, delta: int) -> None:
        """Add ``delta`` to the usage counter of ``full_tag`` (floored at zero)."""
        ...

    async def set_customer_count(self, full_tag: str, count: int) -> None:
        """Overwrite the usage counter."""
        ...
