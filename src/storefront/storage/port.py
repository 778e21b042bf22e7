"""Client storage port.

Durable key/value persistence on the shopper's side of the wire. The cart
snapshot is the only document written through it today.
"""

from abc import ABC, abstractmethod


class ClientStorage(ABC):
    """Abstract key/value store holding serialized documents."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored document, or None when the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store (or replace) a document."""
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a document. Missing keys are ignored."""
        ...
