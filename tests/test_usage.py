"""Tests for recents tracking and persistence."""

import json
import stat

from conftest import make_skill
from skill_palette.types import SkillUsage
from skill_palette.usage import MAX_RECENTS, load_usage, record_usage, save_usage


class TestRecordUsage:
    def test_new_skill_inserted_at_front(self):
        recents = [SkillUsage("old", "ns", 1, 4)]
        updated = record_usage(recents, make_skill("new", "tools"), now=100)
        assert updated[0] == SkillUsage("new", "tools", 100, 1)
        assert updated[1].name == "old"

    def test_repeat_use_moves_to_front_and_counts(self):
        skill = make_skill("a", "ns")
        recents = record_usage([], skill, now=1)
        recents = record_usage(recents, make_skill("b", "ns"), now=2)
        recents = record_usage(recents, skill, now=3)
        assert [r.name for r in recents] == ["a", "b"]
        assert recents[0].count == 2
        assert recents[0].timestamp == 3

    def test_does_not_mutate_input(self):
        recents = [SkillUsage("a", "ns", 1, 1)]
        record_usage(recents, make_skill("b"), now=2)
        assert recents == [SkillUsage("a", "ns", 1, 1)]

    def test_truncated_to_limit(self):
        recents = []
        for i in range(MAX_RECENTS + 3):
            recents = record_usage(recents, make_skill(f"s{i}"), now=i)
        assert len(recents) == MAX_RECENTS
        assert recents[0].name == f"s{MAX_RECENTS + 2}"
        assert "s0" not in [r.name for r in recents]

    def test_custom_limit(self):
        recents = record_usage([], make_skill("a"), now=1, limit=1)
        recents = record_usage(recents, make_skill("b"), now=2, limit=1)
        assert [r.name for r in recents] == ["b"]

    def test_default_timestamp_is_epoch_millis(self):
        recents = record_usage([], make_skill("a"))
        assert recents[0].timestamp > 1_000_000_000_000


class TestPersistence:
    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "usage.json"
        recents = [SkillUsage("a", "ns", 5, 2), SkillUsage("b", "other", 4, 1)]
        assert save_usage(path, recents) is True
        assert load_usage(path) == recents

    def test_file_format(self, tmp_path):
        path = tmp_path / "usage.json"
        save_usage(path, [SkillUsage("a", "ns", 5, 2)])
        data = json.loads(path.read_text())
        assert data == {"recents": [{"name": "a", "namespace": "ns", "timestamp": 5, "count": 2}]}

    def test_file_is_private(self, tmp_path):
        path = tmp_path / "usage.json"
        save_usage(path, [])
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_missing_file(self, tmp_path):
        assert load_usage(tmp_path / "nope.json") == []

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "usage.json"
        path.write_text("{not json")
        assert load_usage(path) == []

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "usage.json"
        path.write_text(json.dumps({"recents": "nope"}))
        assert load_usage(path) == []
        path.write_text(json.dumps([1, 2, 3]))
        assert load_usage(path) == []

    def test_malformed_records_dropped(self, tmp_path):
        path = tmp_path / "usage.json"
        path.write_text(
            json.dumps(
                {
                    "recents": [
                        {"name": "good", "namespace": "ns", "timestamp": 1.5, "count": 3},
                        {"namespace": "ns"},
                        "junk",
                        {"name": "bad-count", "count": "many"},
                    ]
                }
            )
        )
        assert load_usage(path) == [SkillUsage("good", "ns", 1, 3)]

    def test_save_failure_is_ignored(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        # Parent "directory" is a regular file
        assert save_usage(blocker / "usage.json", []) is False
