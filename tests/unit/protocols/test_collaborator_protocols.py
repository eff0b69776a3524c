"""Unit tests for the collaborator protocols."""

from typing import Optional

from gamepack.demo import StaticIconSource
from gamepack.protocols import IconSourceProtocol, MatchStoreProtocol
from gamepack.storage import InMemoryMatchStore


class TestMatchStoreProtocol:
    def test_in_memory_store_conforms(self) -> None:
        assert isinstance(InMemoryMatchStore(), MatchStoreProtocol)

    def test_structural_conformance(self) -> None:
        class ListStore:
            def __init__(self) -> None:
                self.messages = []

            def persist(self, message) -> bool:
                self.messages.append(message)
                return True

            def lookup_timeline(self, subpack, external_match_id, entry_types=None, limit=None):
                return False, []

        assert isinstance(ListStore(), MatchStoreProtocol)

    def test_missing_method_does_not_conform(self) -> None:
        class WriteOnly:
            def persist(self, message) -> bool:
                return True

        assert not isinstance(WriteOnly(), MatchStoreProtocol)


class TestIconSourceProtocol:
    def test_static_source_conforms(self) -> None:
        assert isinstance(StaticIconSource({}), IconSourceProtocol)

    def test_plain_object_does_not_conform(self) -> None:
        assert not isinstance(object(), IconSourceProtocol)

    def test_custom_source(self) -> None:
        class CdnIcons:
            def resolve_icon(self, event_key: str) -> Optional[str]:
                return f"https://cdn/{event_key}.webp"

        source = CdnIcons()
        assert isinstance(source, IconSourceProtocol)
        assert source.resolve_icon("Baron") == "https://cdn/Baron.webp"
