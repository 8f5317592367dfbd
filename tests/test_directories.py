from __future__ import annotations

from pathlib import Path

import pytest

from nano_banana.session.directories import is_protected_path, resolve_output_directory


@pytest.mark.parametrize("cwd", ["/usr/local/bin", "/home/alice/project", "/opt/app", "/tmp"])
def test_windows_always_uses_documents_folder(cwd: str) -> None:
    result = resolve_output_directory(platform="win32", cwd=cwd, home="/home/alice")
    assert result.parts[-2:] == ("Documents", "nano-banana-images")
    assert result == Path("/home/alice") / "Documents" / "nano-banana-images"


@pytest.mark.parametrize("cwd", ["/usr/lib/node", "/opt/tools", "/var/lib/app", "/usr"])
def test_protected_working_directory_falls_back_to_home(cwd: str) -> None:
    result = resolve_output_directory(platform="linux", cwd=cwd, home="/home/alice")
    assert result == Path("/home/alice/nano-banana-images")


@pytest.mark.parametrize("platform", ["linux", "darwin"])
def test_regular_working_directory_is_used(platform: str) -> None:
    result = resolve_output_directory(platform=platform, cwd="/home/alice/project", home="/home/alice")
    assert result == Path("/home/alice/project/generated_imgs")


def test_prefix_match_is_path_aware() -> None:
    assert is_protected_path("/usr/share")
    assert not is_protected_path("/usrdata/project")
    assert not is_protected_path("/home/var/project")


def test_defaults_come_from_process(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    result = resolve_output_directory(platform="linux", home="/home/alice")
    assert result == tmp_path / "generated_imgs"


def test_cygwin_is_treated_as_posix() -> None:
    result = resolve_output_directory(platform="cygwin", cwd="/home/alice/project", home="/home/alice")
    assert result == Path("/home/alice/project/generated_imgs")
