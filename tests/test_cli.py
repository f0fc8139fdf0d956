import pytest

from startupmovie import cli


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    # Leave pytest's log capture in charge of the root logger
    monkeypatch.setattr(cli, "configure_logging", lambda default_level: None)


def test_switch_rotates_and_prints_outcome(movies, isolated_user_config, capsys):
    movies.setup(active=b"DEFAULT", levels={"CNC-Walls": b"WALLS"})

    code = cli.main(["--movies-dir", str(movies.slots.root), "switch", "CNC-Field", "CNC-Walls"])

    assert code == 0
    out = capsys.readouterr().out
    assert "rotated: CNC-Field -> CNC-Walls" in out
    assert movies.active == b"WALLS"


def test_switch_failure_returns_error_code(movies, isolated_user_config, caplog):
    movies.setup(active=b"DEFAULT", levels={"CNC-Walls": b"WALLS"})
    movies.slots.state_file.mkdir()

    code = cli.main(["--movies-dir", str(movies.slots.root), "switch", "CNC-Field", "CNC-Walls"])

    assert code == 1
    assert "not writable" in caplog.text
    assert movies.active == b"DEFAULT"


def test_status_lists_slots(movies, isolated_user_config, capsys):
    movies.setup(
        active=b"WALLS",
        default=b"DEFAULT",
        levels={"CNC-Field": b"FIELD"},
        state=b"CNC-Walls",
    )

    code = cli.main(["--movies-dir", str(movies.slots.root), "status", "CNC-Field", "CNC-Islands"])

    assert code == 0
    out = capsys.readouterr().out
    assert "last loaded: CNC-Walls" in out
    assert "default clip: parked" in out
    assert "LoadingScreen_CNC-Field.bik" in out
    assert "CNC-Field: available" in out
    assert "CNC-Islands: not present" in out


def test_status_rejects_level_names_outside_movies_dir(movies, isolated_user_config, capsys, caplog):
    movies.setup(active=b"DEFAULT")

    code = cli.main(["--movies-dir", str(movies.slots.root), "status", "../x"])

    assert code == 1
    assert "path separator" in caplog.text
    assert capsys.readouterr().out == ""
