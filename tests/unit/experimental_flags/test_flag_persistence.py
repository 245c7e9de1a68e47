"""Tests for JSON persistence of flag state."""

import json
import logging
from unittest.mock import Mock

import pytest

from experimental_flags import (
    AliasDeclaration,
    FlagDeclaration,
    FlagDocumentConverter,
    FlagRegistry,
    IPersistenceGateway,
    JsonFilePersistence,
    NullPersistence,
    flag_id_for,
)

SCOPE = "tests.flags"


def _gateway_with(document):
    gateway = Mock(spec=IPersistenceGateway)
    gateway.read_document.return_value = document
    gateway.write_document.return_value = True
    return gateway


class TestJsonFilePersistence:
    """Test the JSON file gateway."""

    def test_missing_file_reads_none(self, tmp_path):
        """An absent file is not an error."""
        gateway = JsonFilePersistence(tmp_path / "missing.json")

        assert gateway.read_document() is None

    def test_malformed_file_reads_none(self, tmp_path, caplog):
        """Invalid JSON is logged and ignored."""
        path = tmp_path / "flags.json"
        path.write_text("{not json", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            assert JsonFilePersistence(path).read_document() is None

        assert "Failed to load flag config file" in caplog.text

    def test_non_object_document_reads_none(self, tmp_path, caplog):
        """The document must be a JSON object."""
        path = tmp_path / "flags.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        with caplog.at_level(logging.WARNING):
            assert JsonFilePersistence(path).read_document() is None

        assert "must contain a JSON object" in caplog.text

    def test_write_creates_directory(self, tmp_path):
        """Missing parent directories are created on save."""
        path = tmp_path / "resources" / "config" / "flags.json"

        assert JsonFilePersistence(path).write_document({"b": 1, "a": {"x": True}}) is True

        text = path.read_text(encoding="utf-8")
        assert json.loads(text) == {"a": {"x": True}, "b": 1}
        assert text.index('"a"') < text.index('"b"')
        assert '\n  "a": {\n    "x": true\n  }' in text

    def test_write_failure_is_logged(self, tmp_path, caplog):
        """Write errors are reported through the return value and the log."""
        with caplog.at_level(logging.ERROR):
            assert JsonFilePersistence(tmp_path).write_document({"a": 1}) is False

        assert "Failed to save flag config file" in caplog.text

    def test_null_persistence(self):
        """The null gateway stores nothing."""
        gateway = NullPersistence()

        assert gateway.write_document({"a": 1}) is True
        assert gateway.read_document() is None


class TestFlagDocumentConverter:
    """Test conversion between documents and flag state."""

    @pytest.fixture
    def registry(self, declarations):
        return FlagRegistry(declarations, autoload=False, autosave=False)

    def test_dump_excludes_aliases(self, registry):
        """Only canonical flags are written, keyed by declared name."""
        registry.enable("FooBar")

        document = FlagDocumentConverter().dump(registry)

        assert document == {
            "FooBar": {
                "id": str(flag_id_for(SCOPE, "FooBar")),
                "name": "FooBar",
                "enabled": True,
            },
            "Baz": {
                "id": str(flag_id_for(SCOPE, "Baz")),
                "name": "Baz",
                "enabled": False,
            },
        }

    def test_read_overrides_matches_by_name(self, registry):
        """Entries match flags case-insensitively by name."""
        overrides = FlagDocumentConverter().read_overrides(
            registry, {"foobar": {"enabled": True}, "BAZ": False}
        )

        assert overrides == {
            flag_id_for(SCOPE, "FooBar"): True,
            flag_id_for(SCOPE, "Baz"): False,
        }

    def test_read_overrides_falls_back_to_id(self, registry):
        """A renamed entry still matches through its identifier."""
        flag_id = flag_id_for(SCOPE, "Baz")

        overrides = FlagDocumentConverter().read_overrides(
            registry, {"OldBazName": {"id": str(flag_id), "enabled": True}}
        )

        assert overrides == {flag_id: True}

    def test_read_overrides_skips_aliases(self, registry):
        """Persisted alias entries never touch the canonical flag."""
        overrides = FlagDocumentConverter().read_overrides(
            registry, {"LegacyFoo": {"enabled": True}}
        )

        assert overrides == {}

    def test_read_overrides_skips_invalid_entries(self, registry, caplog):
        """Unknown names, bad ids and non-boolean states are ignored."""
        with caplog.at_level(logging.WARNING):
            overrides = FlagDocumentConverter().read_overrides(
                registry,
                {
                    "Unknown": {"enabled": True},
                    "BadId": {"id": "not-a-uuid", "enabled": True},
                    "FooBar": {"enabled": "yes"},
                    "Baz": None,
                },
            )

        assert overrides == {}
        assert "Ignoring flag entry 'FooBar'" in caplog.text

    def test_identity_comes_from_registry(self, registry):
        """A persisted id that disagrees with the registry is not adopted."""
        overrides = FlagDocumentConverter().read_overrides(
            registry, {"FooBar": {"id": str(flag_id_for("elsewhere", "FooBar")), "enabled": True}}
        )

        assert overrides == {flag_id_for(SCOPE, "FooBar"): True}


class TestRegistryPersistence:
    """Test load/save through the registry."""

    def test_round_trip(self, tmp_path, declarations):
        """Saving then loading into a fresh registry restores every flag."""
        path = tmp_path / "flags.json"
        registry = FlagRegistry(declarations, persistence=JsonFilePersistence(path))
        registry.enable("LegacyFoo")
        registry.enable("Baz")
        registry.disable("Baz")

        restored = FlagRegistry(declarations, persistence=JsonFilePersistence(path))

        assert restored.get_all_flags() == registry.get_all_flags() == {"FooBar": True, "Baz": False}
        assert restored.is_enabled("LegacyFoo") is True

    def test_saved_file_has_no_alias_entries(self, tmp_path, declarations):
        """Aliases are write-through only."""
        path = tmp_path / "flags.json"
        registry = FlagRegistry(declarations, persistence=JsonFilePersistence(path))

        registry.enable("LegacyFoo")

        assert set(json.loads(path.read_text(encoding="utf-8"))) == {"FooBar", "Baz"}

    def test_load_does_not_save(self, declarations):
        """Restoring state is not a mutation."""
        gateway = _gateway_with({"FooBar": True})

        registry = FlagRegistry(declarations, persistence=gateway)

        assert registry.is_enabled("FooBar") is True
        gateway.write_document.assert_not_called()

    def test_load_without_document(self, declarations, gateway):
        """load() reports whether anything was read."""
        registry = FlagRegistry(declarations, persistence=gateway, autoload=False)

        assert registry.load() is False
        assert registry.get_all_flags() == {"FooBar": False, "Baz": False}

    def test_load_overrides_declared_defaults(self, declarations):
        """Persisted state wins over declared defaults."""
        gateway = _gateway_with({"Baz": {"enabled": False}})

        registry = FlagRegistry(
            [FlagDeclaration("Baz", SCOPE, enabled=True), AliasDeclaration("B", "Baz", SCOPE)],
            persistence=gateway,
        )

        assert registry.is_enabled("Baz") is False

    def test_read_failure_is_soft(self, declarations, caplog):
        """A gateway that raises does not break construction."""
        gateway = Mock(spec=IPersistenceGateway)
        gateway.read_document.side_effect = RuntimeError("boom")

        with caplog.at_level(logging.ERROR):
            registry = FlagRegistry(declarations, persistence=gateway)

        assert registry.get_all_flags() == {"FooBar": False, "Baz": False}
        assert "boom" in caplog.text

    def test_malformed_file_keeps_defaults(self, tmp_path, declarations):
        """A corrupt file leaves the declared defaults in place."""
        path = tmp_path / "flags.json"
        path.write_text("{", encoding="utf-8")

        registry = FlagRegistry(declarations, persistence=JsonFilePersistence(path))

        assert registry.load() is False
        assert registry.get_all_flags() == {"FooBar": False, "Baz": False}
