import pytest
import json
from src.core.storage import StorageManager


class TestStorageManager:

    def test_load_nonexistent_file_returns_default(self, storage_manager):
        """Test loading non-existent file returns default value."""
        result = storage_manager.load("nonexistent.json", {"steps": []})
        assert result == {"steps": []}

    def test_save_and_load_data(self, storage_manager):
        """Test saving and loading keeps non-ASCII status text."""
        data = {"steps": [{"text": "Café ☕", "emoji_name": "🔥"}], "interval": 10}

        assert storage_manager.save("rotation.json", data) is True
        assert storage_manager.load("rotation.json") == data

    def test_load_invalid_json_returns_default(self, storage_manager, tmp_path):
        """Test loading invalid JSON returns default value."""
        (tmp_path / "rotation.json").write_text("{ invalid json")

        result = storage_manager.load("rotation.json", {"default": True})
        assert result == {"default": True}

    def test_load_invalid_encoding_returns_default(self, storage_manager, tmp_path):
        """Test bytes that are not UTF-8 are treated like a missing file."""
        (tmp_path / "rotation.json").write_bytes(b"\xff\xfe\x00garbage")

        assert storage_manager.load("rotation.json", "fallback") == "fallback"

    def test_save_handles_serialization_error(self, storage_manager, tmp_path):
        """Test a failed save returns False and leaves no partial file."""
        class NonSerializable:
            pass

        assert storage_manager.save("rotation.json", NonSerializable()) is False
        assert not (tmp_path / "rotation.json").exists()
        assert not (tmp_path / "rotation.json.tmp").exists()

    def test_creates_nested_data_dir(self, tmp_path):
        """Test the data directory is created when missing."""
        manager = StorageManager(str(tmp_path / "nested" / "data"))

        assert manager.save("x.json", [1, 2]) is True
        assert json.loads((tmp_path / "nested" / "data" / "x.json").read_text()) == [1, 2]
