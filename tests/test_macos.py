"""
Tests for the macOS adapter — defaults, systemsetup and pam.d edits.
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from setup_my_mac.adapters import macos
from setup_my_mac.core.engine.sudo import SudoSession
from setup_my_mac.core.errors import CommandError, FilesystemError

_RUN = "setup_my_mac.adapters.macos.subprocess.run"


def _done(rc: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess([], rc, stdout, stderr)


class TestDefaults:
    @pytest.mark.parametrize(
        ("stdout", "expected"),
        [("1\n", True), ("0\n", False), ("YES", True), ("false", False), ("garbage", None)],
    )
    def test_read_bool(self, stdout: str, expected):
        with patch(_RUN, return_value=_done(stdout=stdout)):
            assert macos.read_defaults_bool("com.example", "Key") is expected

    def test_read_decodes_leniently(self):
        with patch(_RUN, return_value=_done(stdout="\ufffd")) as run:
            assert macos.read_defaults_bool("com.example", "Key") is None
        assert run.call_args.kwargs["errors"] == "replace"

    def test_read_missing_key(self):
        with patch(_RUN, return_value=_done(rc=1, stderr="does not exist")):
            assert macos.read_defaults_bool("com.example", "Key") is None

    def test_read_missing_binary(self):
        with patch(_RUN, side_effect=FileNotFoundError("defaults")):
            assert macos.read_defaults_bool("com.example", "Key") is None

    def test_ensure_skips_matching_value(self):
        with patch(_RUN, return_value=_done(stdout="1")) as run:
            assert macos.ensure_defaults_bool("com.example", "Key", True) is False
        assert run.call_count == 1

    def test_ensure_writes_different_value(self):
        with patch(_RUN, side_effect=[_done(stdout="0"), _done()]) as run:
            assert macos.ensure_defaults_bool("com.example", "Key", True) is True
        assert run.call_args_list[1].args[0] == [
            "/usr/bin/defaults", "write", "com.example", "Key", "-bool", "TRUE",
        ]

    def test_ensure_write_failure(self):
        with patch(_RUN, side_effect=[_done(rc=1), _done(rc=1, stderr="read-only")]):
            with pytest.raises(CommandError, match="read-only"):
                macos.ensure_defaults_bool("com.example", "Key", False)


@pytest.fixture
def sudo() -> MagicMock:
    return MagicMock(spec=SudoSession)


class TestTimezone:
    def test_already_set(self, sudo: MagicMock):
        sudo.run_with_output.return_value = "Time Zone: Europe/Berlin"
        assert macos.ensure_timezone(sudo, "Europe/Berlin") is False
        sudo.run.assert_not_called()

    def test_changes_timezone(self, sudo: MagicMock):
        sudo.run_with_output.return_value = "Time Zone: America/Los_Angeles"
        assert macos.ensure_timezone(sudo, "Europe/Berlin") is True
        sudo.run.assert_called_once_with("/usr/sbin/systemsetup", ["-settimezone", "Europe/Berlin"])

    def test_unreadable_timezone_still_sets(self, sudo: MagicMock):
        sudo.run_with_output.side_effect = CommandError("/usr/sbin/systemsetup", "denied", 1)
        assert macos.ensure_timezone(sudo, "UTC") is True
        sudo.run.assert_called_once()


class TestTouchId:
    @pytest.fixture
    def pam(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
        pam_dir = tmp_path / "pam.d"
        pam_dir.mkdir()
        monkeypatch.setattr(macos, "PAM_SUDO_LOCAL", pam_dir / "sudo_local")
        monkeypatch.setattr(macos, "PAM_SUDO", pam_dir / "sudo")
        return pam_dir

    @staticmethod
    def _capture_copy(sudo: MagicMock) -> dict[str, str]:
        copied: dict[str, str] = {}

        def run(program, args=()):
            if program == "/bin/cp":
                copied[args[1]] = Path(args[0]).read_text()

        sudo.run.side_effect = run
        return copied

    def test_already_enabled(self, pam: Path, sudo: MagicMock):
        (pam / "sudo_local").write_text("auth sufficient pam_tid.so\n")
        assert macos.enable_touch_id(sudo) is False
        sudo.run.assert_not_called()

    def test_prepends_to_sudo_local(self, pam: Path, sudo: MagicMock):
        (pam / "sudo_local").write_text("# local\n")
        copied = self._capture_copy(sudo)

        assert macos.enable_touch_id(sudo) is True
        dest = str(pam / "sudo_local")
        assert copied[dest] == f"{macos.PAM_TID_LINE}\n# local\n"
        sudo.run.assert_called_with("/bin/chmod", ["644", dest])

    def test_falls_back_to_pam_sudo(self, pam: Path, sudo: MagicMock):
        (pam / "sudo").write_text("auth required pam_opendirectory.so\n")
        copied = self._capture_copy(sudo)

        assert macos.enable_touch_id(sudo) is True
        assert copied[str(pam / "sudo_local")].startswith(macos.PAM_TID_LINE)

    def test_fallback_already_enabled(self, pam: Path, sudo: MagicMock):
        (pam / "sudo").write_text("auth sufficient pam_tid.so\n")
        assert macos.enable_touch_id(sudo) is False

    def test_undecodable_pam_file(self, pam: Path, sudo: MagicMock):
        (pam / "sudo_local").write_bytes(b"auth \xff\n")
        with pytest.raises(FilesystemError, match="sudo_local"):
            macos.enable_touch_id(sudo)
        sudo.run.assert_not_called()

    def test_nothing_readable(self, pam: Path, sudo: MagicMock):
        with pytest.raises(FilesystemError, match="sudo"):
            macos.enable_touch_id(sudo)
