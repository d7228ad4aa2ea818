"""
Unit tests for FileScannerImpl.
Covers depth limits, excluded directories, masks, minimum size, symlinks,
unreadable entries and cancellation.
"""
import os

import pytest

from dupsweep.core.scanner import FileScannerImpl
from dupsweep.core.filters import CandidateFilter
from dupsweep.core.engine import SizeFirstEngine
from dupsweep.core.hasher import HasherImpl, MD5AlgorithmImpl
from dupsweep.core.models import ScanStats


def _names(records):
    return sorted(os.path.basename(r.path) for r in records)


class TestFileScannerDepth:

    def test_depth_zero_scans_only_direct_entries(self, test_files, temp_dir):
        scanner = FileScannerImpl([str(temp_dir)], max_depth=0)

        names = _names(scanner.scan())

        assert "dup1_d.txt" not in names
        assert "dup1_a.txt" in names

    def test_depth_one_enters_direct_subdirectories(self, test_files, temp_dir):
        scanner = FileScannerImpl([str(temp_dir)], max_depth=1)

        assert "dup1_d.txt" in _names(scanner.scan())

    def test_copy_two_levels_down_needs_depth_two(self, temp_dir):
        (temp_dir / "top.bin").write_bytes(b"payload")
        deep = temp_dir / "l1" / "l2"
        deep.mkdir(parents=True)
        (deep / "deep.bin").write_bytes(b"payload")

        shallow = _names(FileScannerImpl([str(temp_dir)], max_depth=1).scan())
        deeper = _names(FileScannerImpl([str(temp_dir)], max_depth=2).scan())

        assert shallow == ["top.bin"]
        assert deeper == ["deep.bin", "top.bin"]

    def test_multiple_roots_are_all_scanned(self, temp_dir):
        first = temp_dir / "first"
        second = temp_dir / "second"
        first.mkdir()
        second.mkdir()
        (first / "one.txt").write_bytes(b"1")
        (second / "two.txt").write_bytes(b"2")

        records = list(FileScannerImpl([str(first), str(second)]).scan())

        assert _names(records) == ["one.txt", "two.txt"]


class TestFileScannerExclusions:

    def test_excluded_directory_is_skipped(self, temp_dir):
        included = temp_dir / "included"
        excluded = temp_dir / "excluded"
        included.mkdir()
        excluded.mkdir()
        (included / "keep.txt").write_bytes(b"content")
        (excluded / "skip.txt").write_bytes(b"content")

        scanner = FileScannerImpl([str(temp_dir)], excluded_dirs=[str(excluded)], max_depth=3)

        assert _names(scanner.scan()) == ["keep.txt"]

    def test_excluding_parent_excludes_nested_directories(self, temp_dir):
        excluded = temp_dir / "excluded"
        nested = excluded / "nested" / "deep"
        nested.mkdir(parents=True)
        (excluded / "level0.txt").write_bytes(b"content")
        (nested / "level2.txt").write_bytes(b"content")
        (temp_dir / "outside.txt").write_bytes(b"content")

        scanner = FileScannerImpl([str(temp_dir)], excluded_dirs=[str(excluded)], max_depth=5)

        assert _names(scanner.scan()) == ["outside.txt"]

    def test_prefix_named_sibling_is_not_excluded(self, temp_dir):
        (temp_dir / "cache").mkdir()
        (temp_dir / "cache_backup").mkdir()
        (temp_dir / "cache" / "a.txt").write_bytes(b"x")
        (temp_dir / "cache_backup" / "b.txt").write_bytes(b"x")

        scanner = FileScannerImpl([str(temp_dir)], excluded_dirs=[str(temp_dir / "cache")], max_depth=1)

        assert _names(scanner.scan()) == ["b.txt"]

    def test_excluded_root_yields_nothing(self, temp_dir):
        (temp_dir / "a.txt").write_bytes(b"x")

        scanner = FileScannerImpl([str(temp_dir)], excluded_dirs=[str(temp_dir)])

        assert list(scanner.scan()) == []


class TestFileScannerFilters:

    def test_glob_mask(self, temp_dir):
        (temp_dir / "notes.txt").write_bytes(b"x")
        (temp_dir / "app.log").write_bytes(b"x")

        scanner = FileScannerImpl([str(temp_dir)], candidate_filter=CandidateFilter(masks=["*.txt"]))

        assert _names(scanner.scan()) == ["notes.txt"]

    def test_regex_mask_is_searched_in_name(self, temp_dir):
        (temp_dir / "notes.txt").write_bytes(b"x")
        (temp_dir / "app.log").write_bytes(b"x")
        (temp_dir / "app.log.1").write_bytes(b"x")

        scanner = FileScannerImpl([str(temp_dir)], candidate_filter=CandidateFilter(masks=[r"\.log"]))

        assert _names(scanner.scan()) == ["app.log", "app.log.1"]

    def test_minimum_size(self, test_files, temp_dir):
        scanner = FileScannerImpl([str(temp_dir)], candidate_filter=CandidateFilter(min_size=1500))

        assert _names(scanner.scan()) == ["dup2_a.txt", "dup2_b.txt", "unique.txt"]

    def test_default_filter_skips_empty_files(self, test_files, temp_dir):
        assert "empty.txt" not in _names(FileScannerImpl([str(temp_dir)]).scan())

    def test_zero_minimum_accepts_empty_files(self, test_files, temp_dir):
        scanner = FileScannerImpl([str(temp_dir)], candidate_filter=CandidateFilter(min_size=0))

        assert "empty.txt" in _names(scanner.scan())

    def test_records_carry_absolute_paths_and_sizes(self, test_files, temp_dir):
        records = {os.path.basename(r.path): r for r in FileScannerImpl([str(temp_dir)]).scan()}

        assert records["unique.txt"].size == 1500
        assert records["unique.txt"].path == str(test_files["unique.txt"])


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
class TestFileScannerSymlinks:

    def test_symlinked_file_is_skipped(self, temp_dir):
        target = temp_dir / "real.txt"
        target.write_bytes(b"content")
        os.symlink(target, temp_dir / "link.txt")

        assert _names(FileScannerImpl([str(temp_dir)]).scan()) == ["real.txt"]

    def test_symlinked_directory_is_not_followed(self, temp_dir):
        outside = temp_dir / "outside"
        outside.mkdir()
        (outside / "a.txt").write_bytes(b"content")
        root = temp_dir / "root"
        root.mkdir()
        os.symlink(outside, root / "linked", target_is_directory=True)

        assert list(FileScannerImpl([str(root)], max_depth=3).scan()) == []


class TestFileScannerErrors:

    def test_missing_root_is_reported(self, temp_dir):
        stats = ScanStats()
        scanner = FileScannerImpl([str(temp_dir / "gone")], stats=stats)

        assert list(scanner.scan()) == []
        assert len(stats.traversal_errors) == 1
        assert stats.traversal_errors[0][0] == str(temp_dir / "gone")

    def test_unstatable_file_is_reported_and_skipped(self, temp_dir, monkeypatch):
        (temp_dir / "good.txt").write_bytes(b"x")
        (temp_dir / "bad.txt").write_bytes(b"x")
        bad_path = str(temp_dir / "bad.txt")
        real_lstat = os.lstat

        def flaky_lstat(path, *args, **kwargs):
            if str(path) == bad_path:
                raise PermissionError(13, "Permission denied", bad_path)
            return real_lstat(path, *args, **kwargs)

        monkeypatch.setattr(os, "lstat", flaky_lstat)
        stats = ScanStats()

        names = _names(FileScannerImpl([str(temp_dir)], stats=stats).scan())

        assert names == ["good.txt"]
        assert [path for path, _ in stats.traversal_errors] == [bad_path]


class TestFileScannerProgressAndCancel:

    def test_stats_are_counted(self, test_files, temp_dir):
        stats = ScanStats()

        list(FileScannerImpl([str(temp_dir)], max_depth=1, stats=stats).scan())

        assert stats.directories_visited == 2
        assert stats.files_seen == 9
        assert stats.candidates == 8  # empty.txt is below the default minimum

    def test_stopped_flag_interrupts_scan(self, test_files, temp_dir):
        seen = []

        for record in FileScannerImpl([str(temp_dir)]).scan(stopped_flag=lambda: len(seen) >= 2):
            seen.append(record)

        assert len(seen) == 2

    def test_progress_callback_counts_files(self, test_files, temp_dir):
        calls = []

        list(FileScannerImpl([str(temp_dir)]).scan(
            progress_callback=lambda stage, current, total: calls.append((stage, current, total))
        ))

        assert calls[-1] == ("Scanning", 8, None)

    def test_feed_adds_candidates_to_engine(self, test_files, temp_dir):
        engine = SizeFirstEngine(HasherImpl(MD5AlgorithmImpl()))

        added = FileScannerImpl([str(temp_dir)], max_depth=1).feed(engine)

        assert added == 8
        assert len(engine) == 8
        assert str(test_files["subdir/dup1_d.txt"]) in engine
