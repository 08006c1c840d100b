"""
Module: test_destinations.py
Description: Unit tests for the secondary destination registry.
"""

from webhook_relay.storage.destinations import DestinationRegistry


class TestDestinationRegistry:
    """Test cases for set semantics and ordering."""

    def test_add_twice_keeps_one_entry(self):
        registry = DestinationRegistry()

        assert registry.add("https://dev.example.com/hook") is True
        assert registry.add("https://dev.example.com/hook") is False

        assert registry.snapshot() == ["https://dev.example.com/hook"]

    def test_remove_unknown_is_noop(self):
        registry = DestinationRegistry(["https://a.example.com"])

        assert registry.remove("https://missing.example.com") is False
        assert registry.snapshot() == ["https://a.example.com"]

    def test_remove(self):
        registry = DestinationRegistry(["https://a.example.com", "https://b.example.com"])

        assert registry.remove("https://a.example.com") is True
        assert "https://a.example.com" not in registry
        assert len(registry) == 1

    def test_registration_order_is_preserved(self):
        registry = DestinationRegistry()
        for url in ("https://c.example.com", "https://a.example.com", "https://b.example.com"):
            registry.add(url)

        assert registry.snapshot() == [
            "https://c.example.com",
            "https://a.example.com",
            "https://b.example.com",
        ]

    def test_snapshot_is_a_copy(self):
        registry = DestinationRegistry(["https://a.example.com"])

        snapshot = registry.snapshot()
        snapshot.append("https://b.example.com")

        assert registry.snapshot() == ["https://a.example.com"]

    def test_initial_duplicates_collapse(self):
        registry = DestinationRegistry(["https://a.example.com", "https://a.example.com"])

        assert len(registry) == 1
