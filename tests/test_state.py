from pathlib import Path

import pytest

from startupmovie.errors import StateNotWritableError, StateWriteError
from startupmovie.state import TransitionState


def test_load_returns_none_on_first_run(tmp_path: Path):
    state = TransitionState(tmp_path / "LastLoaded.txt")
    assert state.load() is None
    assert not state.exists


def test_store_writes_exact_identifier_bytes(tmp_path: Path):
    path = tmp_path / "LastLoaded.txt"
    state = TransitionState(path)
    state.store("CNC-Walls")
    assert path.read_bytes() == b"CNC-Walls"
    assert state.load() == "CNC-Walls"


def test_store_truncates_previous_value(tmp_path: Path):
    state = TransitionState(tmp_path / "LastLoaded.txt")
    state.store("CNC-Islands-Long-Name")
    state.store("CNC-Lakeside")
    assert state.load() == "CNC-Lakeside"


def test_empty_or_undecodable_file_means_no_state(tmp_path: Path):
    path = tmp_path / "LastLoaded.txt"
    path.write_bytes(b"")
    assert TransitionState(path).load() is None

    path.write_bytes(b"\xff\xfe\xfa")
    assert TransitionState(path, encoding="utf-8").load() is None


def test_ensure_writable_creates_file_without_clobbering(tmp_path: Path):
    path = tmp_path / "LastLoaded.txt"
    state = TransitionState(path)
    state.ensure_writable()
    assert path.exists()
    assert path.read_bytes() == b""

    path.write_bytes(b"CNC-Field")
    state.ensure_writable()
    assert path.read_bytes() == b"CNC-Field"


def test_unwritable_location_raises(tmp_path: Path):
    # A directory in place of the state file cannot be opened for writing
    path = tmp_path / "LastLoaded.txt"
    path.mkdir()
    state = TransitionState(path)

    assert state.load() is None
    with pytest.raises(StateNotWritableError) as excinfo:
        state.ensure_writable()
    assert excinfo.value.path == path
    with pytest.raises(StateWriteError):
        state.store("CNC-Field")


@pytest.mark.parametrize("content", [b"..\\Secret", b"../Secret", b"CNC\x00Field"])
def test_record_that_is_not_a_level_name_means_no_state(tmp_path: Path, content):
    path = tmp_path / "LastLoaded.txt"
    path.write_bytes(content)
    assert TransitionState(path).load() is None


def test_overlong_record_is_truncated_like_host_names(tmp_path: Path):
    path = tmp_path / "LastLoaded.txt"
    path.write_bytes(b"L" * 300)
    assert TransitionState(path, max_bytes=255).load() == "L" * 255
