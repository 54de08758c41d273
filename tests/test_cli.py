"""
Critical CLI tests: word parsing, exit codes and what happens on disk.
These tests prevent bugs that could cause data loss.
"""
import os
import sys
from unittest import mock

import pytest

from linkdedup.cli import CLIApplication, main
from linkdedup.core.models import ResolveMode
from linkdedup.errors import DeleteError, UsageError
from linkdedup.services.file_service import FileService


def run_cli(*args):
    """Run the CLI and return its exit status."""
    try:
        CLIApplication().run(list(args))
    except SystemExit as e:
        return e.code
    return 0


def make_copies(directory, names, content=b"hello"):
    paths = []
    for name in names:
        path = directory / name
        path.write_bytes(content)
        paths.append(path)
    return paths


class TestInterpretTokens:
    """Words are sorted into mode, options and folders regardless of order."""

    def test_defaults(self):
        parsed = CLIApplication.interpret_tokens(["/data"])
        assert parsed.mode is None
        assert not parsed.force and not parsed.include_hard_links
        assert parsed.folders == ["/data"]

    def test_order_does_not_matter(self):
        parsed = CLIApplication.interpret_tokens(["force", "/a", "delete", "/b", "deletehl"])
        assert parsed.mode is ResolveMode.DELETE
        assert parsed.force and parsed.include_hard_links
        assert parsed.folders == ["/a", "/b"]

    def test_repeated_words_are_harmless(self):
        parsed = CLIApplication.interpret_tokens(["delete", "delete", "force", "force", "/a"])
        assert parsed.mode is ResolveMode.DELETE
        assert parsed.force

    def test_two_modes_rejected(self):
        with pytest.raises(UsageError, match="Multiple modes have been provided, list and delete"):
            CLIApplication.interpret_tokens(["list", "delete", "/a"])

    def test_words_are_case_sensitive(self):
        parsed = CLIApplication.interpret_tokens(["Delete"])
        assert parsed.mode is None
        assert parsed.folders == ["Delete"]


class TestUsageErrors:
    """Conflicting words exit with 2 and change nothing."""

    @pytest.mark.parametrize("words", [
        ["list", "delete"],
        ["delete", "hardlink"],
        ["force"],
        ["list", "force"],
        ["deletehl"],
        ["hardlink", "deletehl"],
    ])
    def test_exit_code_2(self, words, temp_dir, log_dir, capsys):
        a, b = make_copies(temp_dir, ["a.txt", "b.txt"])
        assert run_cli(*words, str(temp_dir)) == 2
        assert a.exists() and b.exists()
        assert "For usage information" in capsys.readouterr().err

    def test_unknown_option_is_usage_error(self, temp_dir, log_dir):
        assert run_cli("--no-such-option", str(temp_dir)) == 2

    def test_help_word(self, log_dir, capsys):
        assert run_cli("help") == 0
        out = capsys.readouterr().out
        assert "hardlink" in out and "deletehl" in out

    def test_dash_h(self, log_dir):
        assert run_cli("-h") == 0


class TestFolders:
    def test_missing_folder_exits_1(self, temp_dir, log_dir, capsys):
        assert run_cli(str(temp_dir / "missing")) == 1
        assert "Unable to locate a folder named" in capsys.readouterr().err

    def test_file_instead_of_folder_exits_1(self, temp_dir, log_dir):
        (temp_dir / "f.txt").write_bytes(b"x")
        assert run_cli(str(temp_dir / "f.txt")) == 1

    def test_missing_folder_checked_before_any_change(self, temp_dir, log_dir):
        a, b = make_copies(temp_dir, ["a.txt", "b.txt"])
        assert run_cli("delete", str(temp_dir), str(temp_dir / "missing")) == 1
        assert a.exists() and b.exists()

    def test_prompts_when_no_folder_given(self, temp_dir, log_dir, capsys):
        make_copies(temp_dir, ["a.txt", "b.txt"])
        with mock.patch("builtins.input", return_value=f"  {temp_dir}  "):
            assert run_cli() == 0
        assert str(temp_dir / "b.txt") in capsys.readouterr().out

    def test_prompt_eof_is_usage_error(self, log_dir):
        with mock.patch("builtins.input", side_effect=EOFError):
            assert run_cli("delete") == 2

    def test_scan_failure_exits_4(self, temp_dir, log_dir):
        def failing_walk(top, onerror=None, **kwargs):
            onerror(OSError(5, "Input/output error", str(top)))
            return iter(())

        with mock.patch("linkdedup.core.scanner.os.walk", side_effect=failing_walk):
            assert run_cli(str(temp_dir)) == 4


class TestListMode:
    def test_lists_hash_inode_path(self, temp_dir, log_dir, capsys):
        a, b, c = make_copies(temp_dir, ["a.txt", "b.txt", "c.txt"])
        c.write_bytes(b"world")

        assert run_cli(str(temp_dir)) == 0

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 2
        hashes = {line.split(" ", 2)[0] for line in lines}
        assert len(hashes) == 1
        first = lines[0].split(" ", 2)
        assert first[1] == str(os.stat(a).st_ino)
        assert first[2] == str(a)
        assert lines[1].split(" ", 2)[2] == str(b)
        assert a.exists() and b.exists()

    def test_no_duplicates(self, temp_dir, log_dir, capsys):
        (temp_dir / "a.txt").write_bytes(b"one")
        assert run_cli("list", str(temp_dir)) == 0
        assert "No duplicates found." in capsys.readouterr().out

    def test_paths_with_spaces(self, temp_dir, log_dir, capsys):
        folder = temp_dir / "my files"
        folder.mkdir()
        make_copies(folder, ["a copy.txt", "b copy.txt"])
        assert run_cli(str(folder)) == 0
        assert str(folder / "b copy.txt") in capsys.readouterr().out


class TestDeleteMode:
    def test_basic_scenario(self, temp_dir, log_dir, capsys):
        """a.txt=b.txt="hello", c.txt="world": b.txt goes, 5 bytes freed."""
        a, b, c = make_copies(temp_dir, ["a.txt", "b.txt", "c.txt"])
        c.write_bytes(b"world")

        assert run_cli("delete", str(temp_dir)) == 0

        assert a.exists() and c.exists()
        assert not b.exists()
        assert "Deleted 1 file to save approximately 5B of storage space." in capsys.readouterr().out

    def test_hard_links_kept_by_default(self, temp_dir, log_dir, capsys):
        a = temp_dir / "a.txt"
        a.write_bytes(b"x")
        b = temp_dir / "b.txt"
        os.link(a, b)

        assert run_cli("delete", str(temp_dir)) == 0

        assert a.exists() and b.exists()
        assert "No (non-hard-link) duplicates found." in capsys.readouterr().out

    def test_deletehl(self, temp_dir, log_dir, capsys):
        a = temp_dir / "a.txt"
        a.write_bytes(b"x")
        b = temp_dir / "b.txt"
        os.link(a, b)

        assert run_cli("delete", "deletehl", str(temp_dir)) == 0

        assert a.exists()
        assert not b.exists()
        assert "Deleted 1 file." in capsys.readouterr().out

    def test_second_run_finds_nothing(self, temp_dir, log_dir, capsys):
        make_copies(temp_dir, ["a.txt", "b.txt", "c.txt"])
        assert run_cli("delete", str(temp_dir)) == 0
        capsys.readouterr()
        assert run_cli(str(temp_dir)) == 0
        assert "No duplicates found." in capsys.readouterr().out

    def test_failure_without_force_exits_3(self, temp_dir, log_dir):
        a, b, c = make_copies(temp_dir, ["a.txt", "b.txt", "c.txt"])
        error = DeleteError(str(b), f"Failed to delete {b}: Permission denied")

        with mock.patch.object(FileService, "delete_file", side_effect=error) as mock_delete:
            assert run_cli("delete", str(temp_dir)) == 3
        assert mock_delete.call_count == 1

    def test_force_continues_and_logs_failure(self, temp_dir, log_dir):
        """One of three duplicates cannot be removed: the other two go, exit 0."""
        files = make_copies(temp_dir, ["a.txt", "b.txt", "c.txt", "d.txt"])
        blocked = files[2]

        def delete(path):
            if path == str(blocked):
                raise DeleteError(path, f"Failed to delete {path}: Permission denied")
            os.unlink(path)

        with mock.patch.object(FileService, "delete_file", side_effect=delete):
            assert run_cli("delete", "force", str(temp_dir)) == 0

        assert files[0].exists() and blocked.exists()
        assert not files[1].exists() and not files[3].exists()

        (log_file,) = list(log_dir.iterdir())
        assert f"Failed to delete {blocked}: Permission denied" in log_file.read_text(encoding="utf-8")

    def test_forced_failure_stays_off_the_console(self, temp_dir, log_dir, capsys):
        """Without --verbose a forced failure is noted in the audit log only."""
        files = make_copies(temp_dir, ["a.txt", "b.txt", "c.txt"])
        error = DeleteError(str(files[1]), f"Failed to delete {files[1]}: Permission denied")

        with mock.patch.object(FileService, "delete_file", side_effect=error):
            assert run_cli("delete", "force", str(temp_dir)) == 0

        captured = capsys.readouterr()
        assert "Permission denied" not in captured.err
        assert "could not be changed" not in captured.err
        assert "Permission denied" not in captured.out

    def test_forced_failure_reported_in_verbose_mode(self, temp_dir, log_dir, capsys):
        files = make_copies(temp_dir, ["a.txt", "b.txt"])
        error = DeleteError(str(files[1]), f"Failed to delete {files[1]}: Permission denied")

        with mock.patch.object(FileService, "delete_file", side_effect=error):
            assert run_cli("-v", "delete", "force", str(temp_dir)) == 0

        assert "1 file(s) could not be changed" in capsys.readouterr().err


class TestHardlinkMode:
    def test_replaces_duplicates_with_links(self, temp_dir, log_dir, capsys):
        a, b = make_copies(temp_dir, ["a.txt", "b.txt"])

        assert run_cli("hardlink", str(temp_dir)) == 0

        assert os.stat(a).st_ino == os.stat(b).st_ino
        assert "Deleted 1 file to save approximately 5B" in capsys.readouterr().out

    def test_second_run_reports_nothing_to_free(self, temp_dir, log_dir, capsys):
        make_copies(temp_dir, ["a.txt", "b.txt"])
        assert run_cli("hardlink", str(temp_dir)) == 0
        capsys.readouterr()
        assert run_cli("hardlink", str(temp_dir)) == 0
        assert "No (non-hard-link) duplicates found." in capsys.readouterr().out


class TestAuditLogFile:
    def test_run_writes_log(self, temp_dir, log_dir):
        make_copies(temp_dir, ["a.txt", "b.txt"])
        assert run_cli("delete", str(temp_dir)) == 0

        (log_file,) = list(log_dir.iterdir())
        text = log_file.read_text(encoding="utf-8")
        assert f"Searching: {temp_dir}" in text
        assert "Mode: delete" in text
        assert f"Deleting duplicate: {temp_dir / 'b.txt'}" in text
        assert "Deleted 1 file" in text

    def test_log_dir_option(self, temp_dir, tmp_path):
        make_copies(temp_dir, ["a.txt", "b.txt"])
        target = tmp_path / "custom-logs"
        assert run_cli("--log-dir", str(target), str(temp_dir)) == 0
        assert len(list(target.iterdir())) == 1


class TestCancellation:
    def test_interrupt_during_resolution_exits_130(self, temp_dir, log_dir):
        files = make_copies(temp_dir, ["a.txt", "b.txt", "c.txt"])
        app = CLIApplication()

        def delete(path):
            os.unlink(path)
            app._stop_requested = True

        with mock.patch.object(FileService, "delete_file", side_effect=delete):
            with pytest.raises(SystemExit) as exc_info:
                app.run(["delete", str(temp_dir)])

        assert exc_info.value.code == 130
        assert not files[1].exists()
        assert files[2].exists()


class TestMain:
    def test_unexpected_error_exits_1(self, monkeypatch, capsys):
        monkeypatch.delenv("DEBUG", raising=False)
        with mock.patch.object(sys, "argv", ["linkdedup"]), \
                mock.patch.object(CLIApplication, "run", side_effect=RuntimeError("boom")):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1
        assert "boom" in capsys.readouterr().err

    def test_keyboard_interrupt_exits_130(self):
        with mock.patch.object(CLIApplication, "run", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 130
