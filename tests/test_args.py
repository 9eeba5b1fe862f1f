from pathlib import Path

import pytest

from themecrate import __version__
from themecrate.core.args import ArgsInit


def test_defaults() -> None:
    args = ArgsInit([])

    assert args.get_element("config") is None
    assert args.get_element("output_dir") is None
    assert not args.get_element("verbose")


def test_options() -> None:
    args = ArgsInit(["-c", "/tmp/t.toml", "-o", "/srv/themes", "-v"])

    assert args.get_element("config") == Path("/tmp/t.toml")
    assert args.get_element("output_dir") == Path("/srv/themes")
    assert args.get_element("verbose")


def test_version(capsys) -> None:
    with pytest.raises(SystemExit):
        ArgsInit(["-V"])

    assert __version__ in capsys.readouterr().out
