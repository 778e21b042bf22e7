"""In-memory client storage for development and tests."""

from storefront.storage.port import ClientStorage


class MemoryStorage(ClientStorage):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.documents: dict[str, str] = dict(initial or {})
        self.writes: int = 0

    def get(self, key: str) -> str | None:
        return self.documents.get(key)

    def set(self, key: str, value: str) -> None:
        self.documents[key] = value
        self.writes += 1

    def remove(self, key: str) -> None:
        self.documents.pop(key, None)
