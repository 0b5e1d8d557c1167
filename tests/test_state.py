"""
Tests for vert.state module.

Tests the package store including:
- Loading and saving state files
- Add, update, delete and mark operations
- Scheduling queries (due packages, pending count)
- State file creation and error handling
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import json

import pytest

from vert.exceptions import StateError
from vert.state import PackageTracker, load_state, save_state
from vert.state.tracker import create_default_state


@pytest.fixture
def tracker(state_file) -> PackageTracker:
    tracker = PackageTracker(state_file)
    tracker.load()
    return tracker


class TestStateFileOperations:
    """Tests for loading and saving state files."""

    def test_create_default_state(self):
        """Test creating default empty state structure."""
        state = create_default_state()

        assert state["metadata"]["schema_version"] == "1"
        assert "vert_version" in state["metadata"]
        assert state["packages"] == {}

    def test_save_and_load_state(self, tmp_path):
        """Test round-trip save and load."""
        state_file = tmp_path / "packages.json"
        state = {
            "metadata": {"vert_version": "0.1.0"},
            "packages": {
                "sudo": {
                    "master_site": "https://www.sudo.ws/dist",
                    "version": "1.9.15",
                    "local_version": "1.9.14",
                    "last_check": "2025-06-01T10:00:00+00:00",
                }
            },
        }

        save_state(state, state_file)
        loaded = load_state(state_file)

        assert loaded == state

    def test_load_missing_file_raises(self, tmp_path):
        """Test that loading nonexistent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_state(tmp_path / "nonexistent.json")

    def test_save_creates_parent_directory(self, tmp_path):
        """Test that save_state creates parent directories."""
        state_file = tmp_path / "deep" / "nested" / "packages.json"
        save_state(create_default_state(), state_file)
        assert state_file.exists()

    def test_save_sorted_with_trailing_newline(self, tmp_path):
        """Test that JSON output is stable for version control."""
        state_file = tmp_path / "packages.json"
        save_state({"b": 1, "a": 2}, state_file)

        content = state_file.read_text(encoding="utf-8")
        assert content.index('"a"') < content.index('"b"')
        assert content.endswith("\n")


class TestPackageTrackerPersistence:
    """Tests for PackageTracker load/save."""

    def test_load_creates_default_if_missing(self, state_file):
        """Test that load() creates the file and its directory."""
        tracker = PackageTracker(state_file)
        state = tracker.load()

        assert state_file.exists()
        assert state["packages"] == {}

    def test_load_corrupted_file_creates_backup(self, state_file):
        """Test that a corrupted file is backed up and replaced."""
        state_file.parent.mkdir(parents=True)
        state_file.write_text("{invalid json", encoding="utf-8")

        tracker = PackageTracker(state_file)
        with pytest.raises(StateError, match="Corrupted state file"):
            tracker.load()

        backup = state_file.with_name("packages.json.backup")
        assert backup.read_text(encoding="utf-8") == "{invalid json"
        assert json.loads(state_file.read_text(encoding="utf-8"))["packages"] == {}

    @pytest.mark.parametrize(
        "content",
        ["[1, 2]", '"text"', '{"packages": []}', '{"packages": null}'],
    )
    def test_load_wrong_shape_creates_backup(self, state_file, content):
        """Test that valid JSON of the wrong shape is treated as corrupted."""
        state_file.parent.mkdir(parents=True)
        state_file.write_text(content, encoding="utf-8")

        tracker = PackageTracker(state_file)
        with pytest.raises(StateError, match="Corrupted state file"):
            tracker.load()

        backup = state_file.with_name("packages.json.backup")
        assert backup.read_text(encoding="utf-8") == content
        assert tracker.state["packages"] == {}
        assert tracker.packages() == []

    def test_save_updates_timestamp(self, tracker):
        tracker.state["metadata"]["last_updated"] = "2000-01-01T00:00:00+00:00"
        tracker.save()
        assert tracker.state["metadata"]["last_updated"] != "2000-01-01T00:00:00+00:00"

    def test_packages_survive_reload(self, tracker, make_package):
        tracker.put(make_package())
        tracker.save()

        reloaded = PackageTracker(tracker.state_file)
        reloaded.load()
        assert reloaded.get("sudo") == make_package()


class TestPackageTrackerOperations:
    """Tests for add/get/update/delete/mark."""

    def test_add_records_version_as_installed(self, tracker):
        package = tracker.add("sudo", "https://www.sudo.ws/dist", "1.9.14")

        assert package.version == "1.9.14"
        assert package.local_version == "1.9.14"
        assert "sudo" in tracker
        assert tracker.get("sudo").master_site == "https://www.sudo.ws/dist"

    def test_add_duplicate_raises(self, tracker):
        tracker.add("sudo", "https://www.sudo.ws/dist", "1.9.14")
        with pytest.raises(StateError, match="already tracked"):
            tracker.add("sudo", "https://example.com", "1.0")

    def test_get_unknown_raises(self, tracker):
        with pytest.raises(StateError, match="not tracked"):
            tracker.get("missing")

    def test_get_malformed_record_raises(self, tracker):
        tracker.state["packages"]["broken"] = {"version": "1.0"}
        with pytest.raises(StateError, match="Invalid record"):
            tracker.get("broken")

    def test_update_fields(self, tracker):
        tracker.add("sudo", "https://www.sudo.ws/dist", "1.9.14")

        package, changed = tracker.update(
            "sudo", master_site="https://www.sudo.ws/dist/beta", local_version="1.9.15"
        )

        assert changed is True
        assert package.master_site == "https://www.sudo.ws/dist/beta"
        assert tracker.get("sudo").local_version == "1.9.15"
        assert tracker.get("sudo").version == "1.9.14"

    def test_update_rename(self, tracker):
        tracker.add("sudo", "https://www.sudo.ws/dist", "1.9.14")

        package, changed = tracker.update("sudo", new_name="sudo-ws")

        assert changed is True
        assert package.distname == "sudo-ws"
        assert "sudo" not in tracker
        assert tracker.get("sudo-ws").version == "1.9.14"

    def test_update_rename_to_existing_raises(self, tracker):
        tracker.add("a", "https://example.com/a", "1.0")
        tracker.add("b", "https://example.com/b", "1.0")
        with pytest.raises(StateError):
            tracker.update("a", new_name="b")
        assert "a" in tracker

    def test_update_nothing(self, tracker):
        tracker.add("sudo", "https://www.sudo.ws/dist", "1.9.14")
        _, changed = tracker.update("sudo")
        assert changed is False

    def test_delete(self, tracker):
        tracker.add("sudo", "https://www.sudo.ws/dist", "1.9.14")
        package = tracker.delete("sudo")
        assert package.distname == "sudo"
        assert "sudo" not in tracker

    def test_delete_unknown_raises(self, tracker):
        with pytest.raises(StateError):
            tracker.delete("missing")

    def test_mark_latest(self, tracker, make_package):
        tracker.put(make_package(version="1.9.15", local_version="1.9.14"))

        package, previous, changed = tracker.mark_latest("sudo")

        assert (previous, changed) == ("1.9.14", True)
        assert package.local_version == "1.9.15"
        assert tracker.get("sudo").local_version == "1.9.15"

    def test_mark_latest_already_current(self, tracker, make_package):
        tracker.put(make_package(version="1.9.15", local_version="1.9.15"))
        _, previous, changed = tracker.mark_latest("sudo")
        assert (previous, changed) == ("1.9.15", False)

    def test_mark_latest_without_local_version(self, tracker, make_package):
        tracker.put(make_package(version="1.9.15", local_version=None))
        package, previous, changed = tracker.mark_latest("sudo")
        assert (previous, changed) == (None, True)
        assert package.local_version == "1.9.15"


class TestPackageTrackerQueries:
    """Tests for listing and scheduling queries."""

    def test_packages_sorted_by_name(self, tracker, make_package):
        for name in ["zsh", "bash", "sudo"]:
            tracker.put(make_package(distname=name))
        assert [p.distname for p in tracker.packages()] == ["bash", "sudo", "zsh"]

    def test_due_for_check(self, tracker, make_package):
        now = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
        tracker.put(make_package("old", last_check=now - timedelta(hours=3)))
        tracker.put(make_package("edge", last_check=now - timedelta(hours=2)))
        tracker.put(make_package("new", last_check=now - timedelta(minutes=30)))

        due = tracker.due_for_check(now, timedelta(hours=2))

        assert [p.distname for p in due] == ["edge", "old"]

    def test_pending_count(self, tracker, make_package):
        tracker.put(make_package("a", version="2.0", local_version="1.0"))
        tracker.put(make_package("b", version="2.0", local_version="2.0"))
        tracker.put(make_package("c", version="2.0", local_version=None))
        assert tracker.pending_count() == 2
