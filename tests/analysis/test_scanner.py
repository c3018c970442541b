"""Tests for plan generation."""

import threading

import pytest

from tidyfolder.analysis.scanner import PlanScanner, generate_plan, list_entries
from tidyfolder.core.cancellation import CancellationToken
from tidyfolder.core.types import Config


def no_capture_date(path):
    return None


class TestListEntries:
    """Test directory enumeration."""

    def test_sorted_immediate_children(self, temp_dir, make_file):
        """Test only immediate children are listed, sorted by name."""
        make_file(temp_dir / "b.txt")
        make_file(temp_dir / "a.txt")
        make_file(temp_dir / "sub" / "nested.txt")

        assert [path.name for path in list_entries(temp_dir)] == ["a.txt", "b.txt", "sub"]

    def test_missing_directory(self, temp_dir):
        """Test enumeration failure propagates."""
        with pytest.raises(OSError):
            list_entries(temp_dir / "missing")


class TestPlanScanner:
    """Test the chunked plan scanner."""

    def test_plan_for_mixed_directory(self, temp_dir, make_file, config):
        """Test files and directories are classified together."""
        make_file(temp_dir / "report.pdf")
        make_file(temp_dir / "song.mp3")
        make_file(temp_dir / "server.log")
        make_file(temp_dir / "my-app" / "package.json")
        make_file(temp_dir / "random" / "stuff.bin")

        plan = PlanScanner(config, capture_date_reader=no_capture_date).generate_plan(temp_dir)
        by_name = {action.from_path.name: action for action in plan}

        assert set(by_name) == {"report.pdf", "song.mp3", "server.log", "my-app"}
        assert by_name["report.pdf"].reason == "Documents"
        assert by_name["song.mp3"].reason == "Audio"
        assert by_name["server.log"].reason == "Other"
        assert by_name["my-app"].to_path == temp_dir / "Projects" / "my-app"

    def test_chunking_covers_every_entry(self, temp_dir, make_file):
        """Test entries spread over several chunks are all classified."""
        for i in range(25):
            make_file(temp_dir / f"file{i:02d}.pdf")
        config = Config(categories={".pdf": "Documents"})

        plan = PlanScanner(config, chunk_size=4, max_workers=3).generate_plan(temp_dir)

        assert len(plan) == 25
        assert {action.reason for action in plan} == {"Documents"}
        assert len({action.from_path for action in plan}) == 25

    def test_empty_directory(self, temp_dir, config):
        """Test an empty target gives an empty plan."""
        assert PlanScanner(config).generate_plan(temp_dir) == []

    def test_missing_target(self, temp_dir, config):
        """Test an unreadable target gives an empty plan."""
        assert PlanScanner(config).generate_plan(temp_dir / "missing") == []

    def test_invalid_chunk_size(self, config):
        """Test chunk size validation."""
        with pytest.raises(ValueError):
            PlanScanner(config, chunk_size=0)

    def test_cancel_before_scan(self, temp_dir, make_file, config):
        """Test a pre-cancelled token yields an empty plan."""
        make_file(temp_dir / "report.pdf")
        token = CancellationToken()
        token.cancel()

        assert PlanScanner(config).generate_plan(temp_dir, token) == []

    def test_cancel_keeps_finished_chunks(self, temp_dir, make_file):
        """Test cancellation stops at a chunk boundary and keeps prior results."""
        for i in range(10):
            make_file(temp_dir / f"img{i}.jpg")
        config = Config(categories={".jpg": "Images"})
        token = CancellationToken()
        seen = []
        lock = threading.Lock()

        def reader(path):
            with lock:
                seen.append(path)
                if len(seen) == 2:
                    token.cancel()
            return None

        scanner = PlanScanner(config, chunk_size=2, max_workers=1, capture_date_reader=reader)
        plan = scanner.generate_plan(temp_dir, token)

        assert len(plan) == 2
        assert sorted(action.from_path.name for action in plan) == ["img0.jpg", "img1.jpg"]

    def test_category_directories_not_moved_again(self, temp_dir, make_file, config):
        """Test scanning an organized directory proposes nothing."""
        make_file(temp_dir / "report.pdf")
        make_file(temp_dir / "my-app" / "package.json")
        scanner = PlanScanner(config, capture_date_reader=no_capture_date)

        for action in scanner.generate_plan(temp_dir):
            action.to_path.parent.mkdir(parents=True, exist_ok=True)
            action.from_path.rename(action.to_path)

        assert scanner.generate_plan(temp_dir) == []

    def test_module_level_generate_plan(self, temp_dir, make_file):
        """Test the convenience wrapper."""
        make_file(temp_dir / "a.pdf")

        plan = generate_plan(temp_dir, Config(categories={".pdf": "Documents"}))

        assert [action.reason for action in plan] == ["Documents"]
