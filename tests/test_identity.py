"""Tests for home directory resolution and tilde expansion."""

from pathlib import Path

from themecrate.core.identity import Identity, expand_path, resolve_home


def _homes(tmp_path: Path, *users: str) -> Path:
    root = tmp_path / "home"
    for user in users:
        (root / user).mkdir(parents=True)
    return root


def test_sudo_user_wins_over_home(tmp_path: Path) -> None:
    root = _homes(tmp_path, "alice")
    env = {"SUDO_USER": "alice", "HOME": "/root", "USER": "root"}
    assert resolve_home(env, home_root=root) == root / "alice"


def test_doas_user_is_honoured(tmp_path: Path) -> None:
    root = _homes(tmp_path, "bob")
    assert resolve_home({"DOAS_USER": "bob"}, home_root=root) == root / "bob"


def test_home_variable_used_when_not_elevated(tmp_path: Path) -> None:
    root = _homes(tmp_path)
    own_home = tmp_path / "elsewhere"
    own_home.mkdir()
    assert resolve_home({"HOME": str(own_home)}, home_root=root) == own_home


def test_root_home_is_skipped_for_user_lookup(tmp_path: Path) -> None:
    root = _homes(tmp_path, "carol")
    env = {"HOME": "/root", "USER": "carol"}
    assert resolve_home(env, home_root=root) == root / "carol"


def test_falls_back_to_first_non_root_home(tmp_path: Path) -> None:
    root = _homes(tmp_path, "root", "dave")
    assert resolve_home({"USER": "root"}, home_root=root) == root / "dave"


def test_last_resort_is_cwd(tmp_path: Path) -> None:
    missing_root = tmp_path / "no-home"
    assert resolve_home({}, home_root=missing_root, cwd=tmp_path) == tmp_path


def test_expand_tilde_patterns(tmp_path: Path) -> None:
    home = tmp_path / "alice"
    assert expand_path("~", home) == home
    assert expand_path("~/.themes/", home) == home / ".themes"
    assert expand_path("/usr/share/icons/", home) == Path("/usr/share/icons")
    assert expand_path("relative/dir", home, cwd=tmp_path) == tmp_path / "relative" / "dir"


def test_identity_snapshot_reads_only_given_env() -> None:
    identity = Identity.from_env({"USER": "root", "HOME": "/root", "SUDO_USER": "alice"})
    assert identity == Identity(user="root", home="/root", sudo_user="alice")
    assert Identity.from_env({}).sudo_user is None
