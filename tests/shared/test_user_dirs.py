"""Tests for default target directory discovery."""

import sys
from pathlib import Path

import pytest

from tidyfolder.shared.user_dirs import resolve_default_target_directory

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="XDG lookup is POSIX only")


@pytest.fixture
def home(temp_dir, monkeypatch) -> Path:
    """Isolated home directory."""
    monkeypatch.setenv("HOME", str(temp_dir))
    monkeypatch.delenv("XDG_DOWNLOAD_DIR", raising=False)
    return temp_dir


class TestResolveDefaultTargetDirectory:
    """Test Downloads folder lookup."""

    def test_fallback_to_home_downloads(self, home):
        """Test the default location."""
        assert resolve_default_target_directory() == home / "Downloads"

    def test_environment_variable(self, home, monkeypatch):
        """Test XDG_DOWNLOAD_DIR from the environment wins."""
        monkeypatch.setenv("XDG_DOWNLOAD_DIR", "$HOME/Incoming")

        assert resolve_default_target_directory() == home / "Incoming"

    def test_user_dirs_file(self, home, make_file):
        """Test the user-dirs.dirs entry."""
        make_file(
            home / ".config" / "user-dirs.dirs",
            '# comment\nXDG_DESKTOP_DIR="$HOME/Desktop"\nXDG_DOWNLOAD_DIR="$HOME/Stuff/Downloads"\n',
        )

        assert resolve_default_target_directory() == home / "Stuff" / "Downloads"

    def test_user_dirs_absolute_path(self, home, make_file, temp_dir):
        """Test an absolute path in user-dirs.dirs."""
        make_file(
            home / ".config" / "user-dirs.dirs",
            f'XDG_DOWNLOAD_DIR="{temp_dir / "abs"}"\n',
        )

        assert resolve_default_target_directory() == temp_dir / "abs"

    def test_user_dirs_without_download_entry(self, home, make_file):
        """Test a file lacking the entry falls back to ~/Downloads."""
        make_file(home / ".config" / "user-dirs.dirs", 'XDG_MUSIC_DIR="$HOME/Music"\n')

        assert resolve_default_target_directory() == home / "Downloads"

    def test_no_home(self, monkeypatch):
        """Test None without a home directory."""
        monkeypatch.delenv("HOME", raising=False)

        assert resolve_default_target_directory() is None
