"""
Tests for the keep-first deletion policy.
The first file of every group (path order) must survive; every other member is
removed, and one failed removal must not stop the rest.
"""
from unittest import mock

import pytest

from dupsweep.core.models import FileRecord, DuplicateGroup
from dupsweep.services.duplicate_service import KeepFirstPolicy, DeletionReport
from dupsweep.services.file_service import FileService


def _group(*records):
    return DuplicateGroup(size=records[0].size, digest=b"\x01\x02\x03\x04", files=list(records))


def _real_group(directory, names, content=b"identical content"):
    records = []
    for name in names:
        path = directory / name
        path.write_bytes(content)
        records.append(FileRecord.from_path(path))
    return _group(*records)


class TestKeepFirstPlan:

    def test_keeper_is_first_by_path(self):
        group = _group(
            FileRecord(size=100, path="/z/last.jpg"),
            FileRecord(size=100, path="/a/first.jpg"),
            FileRecord(size=100, path="/m/middle.jpg"),
        )

        keeper, to_remove = KeepFirstPolicy().plan(group)

        assert keeper.path == "/a/first.jpg"
        assert [f.path for f in to_remove] == ["/m/middle.jpg", "/z/last.jpg"]

    def test_single_file_group_is_rejected(self):
        group = _group(FileRecord(size=10, path="/only.txt"))

        with pytest.raises(ValueError):
            KeepFirstPolicy().plan(group)


class TestKeepFirstApply:

    def test_removes_all_but_keeper(self, temp_dir):
        group = _real_group(temp_dir, ["c.txt", "a.txt", "b.txt"])

        report = KeepFirstPolicy().apply(group)

        assert (temp_dir / "a.txt").exists()
        assert not (temp_dir / "b.txt").exists()
        assert not (temp_dir / "c.txt").exists()
        assert report.kept == [str(temp_dir / "a.txt")]
        assert report.removed == [str(temp_dir / "b.txt"), str(temp_dir / "c.txt")]
        assert report.bytes_freed == 2 * len(b"identical content")
        assert report.success

    def test_failed_removal_is_recorded_and_others_continue(self, temp_dir):
        group = _real_group(temp_dir, ["a.txt", "b.txt", "c.txt", "d.txt"])
        locked = str(temp_dir / "b.txt")
        real_remove = FileService.remove_file

        def remove_or_fail(path):
            if path == locked:
                raise PermissionError(13, "Permission denied", path)
            real_remove(path)

        with mock.patch.object(FileService, "remove_file", side_effect=remove_or_fail):
            report = KeepFirstPolicy().apply(group)

        assert [path for path, _ in report.failed] == [locked]
        assert report.removed == [str(temp_dir / "c.txt"), str(temp_dir / "d.txt")]
        assert (temp_dir / "b.txt").exists()
        assert not report.success

    def test_vanished_duplicate_is_a_failure_not_a_crash(self, temp_dir):
        group = _real_group(temp_dir, ["a.txt", "b.txt"])
        (temp_dir / "b.txt").unlink()

        report = KeepFirstPolicy().apply(group)

        assert report.removed == []
        assert len(report.failed) == 1

    def test_dry_run_touches_nothing(self, temp_dir):
        group = _real_group(temp_dir, ["a.txt", "b.txt"])

        with mock.patch.object(FileService, "remove_file") as mock_remove:
            report = KeepFirstPolicy().apply(group, dry_run=True)

        mock_remove.assert_not_called()
        assert (temp_dir / "b.txt").exists()
        assert report.dry_run
        assert report.removed == [str(temp_dir / "b.txt")]

    def test_removal_callback_receives_each_removed_path(self, temp_dir):
        group = _real_group(temp_dir, ["a.txt", "b.txt", "c.txt"])
        removed = []

        KeepFirstPolicy(removal_callback=removed.append).apply(group)

        assert removed == [str(temp_dir / "b.txt"), str(temp_dir / "c.txt")]


class TestKeepFirstApplyAll:

    def test_merges_reports(self, temp_dir):
        dir1 = temp_dir / "one"
        dir2 = temp_dir / "two"
        dir1.mkdir()
        dir2.mkdir()
        groups = [
            _real_group(dir1, ["a", "b"], b"first"),
            _real_group(dir2, ["a", "b", "c"], b"second!"),
        ]

        report = KeepFirstPolicy().apply_all(groups)

        assert len(report.kept) == 2
        assert len(report.removed) == 3
        assert report.bytes_freed == 5 + 2 * 7

    def test_stopped_flag_stops_between_groups(self, temp_dir):
        dir1 = temp_dir / "one"
        dir2 = temp_dir / "two"
        dir1.mkdir()
        dir2.mkdir()
        groups = [_real_group(dir1, ["a", "b"]), _real_group(dir2, ["a", "b"])]
        policy = KeepFirstPolicy()
        calls = {"n": 0}

        def stop_after_first():
            calls["n"] += 1
            return calls["n"] > 1

        report = policy.apply_all(groups, stopped_flag=stop_after_first)

        assert report.removed == [str(dir1 / "b")]
        assert (dir2 / "b").exists()

    def test_report_merge(self):
        total = DeletionReport()
        total.merge(DeletionReport(kept=["/a"], removed=["/b"], bytes_freed=10))
        total.merge(DeletionReport(kept=["/c"], failed=[("/d", "busy")]))

        assert total.kept == ["/a", "/c"]
        assert total.removed == ["/b"]
        assert total.failed == [("/d", "busy")]
        assert total.bytes_freed == 10
