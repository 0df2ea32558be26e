"""Cacheable record protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Cacheable(Protocol):
    """Any record that can be stored in a collection and addressed by id.

    Records must also be serializable by pydantic (BaseModel, dataclass
    or TypedDict-shaped). No base class is required: a pydantic model
    with a ``cache_item_id`` field or property satisfies the protocol.

    Example:
        ```python
        class Note(BaseModel):
            id: str
            text: str

            @property
            def cache_item_id(self) -> str:
                return self.id
        ```
    """

    @property
    def cache_item_id(self) -> str:
        """Return the id used by remove and replace."""
        ...
