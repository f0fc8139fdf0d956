import pytest

from startupmovie.errors import IdentifierError
from startupmovie.identifiers import to_level_identifier


def test_short_names_pass_through():
    assert to_level_identifier("CNC-Walls") == "CNC-Walls"


def test_names_are_case_sensitive():
    assert to_level_identifier("cnc-walls") != to_level_identifier("CNC-Walls")


def test_long_ascii_name_is_truncated_to_byte_limit():
    name = "L" * 300
    result = to_level_identifier(name, max_bytes=255)
    assert result == "L" * 255


def test_truncation_never_splits_a_multibyte_character():
    name = "é" * 200  # two bytes each in utf-8
    result = to_level_identifier(name, encoding="utf-8", max_bytes=255)
    assert result == "é" * 127
    assert len(result.encode("utf-8")) == 254


@pytest.mark.parametrize("name", ["../Secret", "a\\b", "nul\x00byte"])
def test_path_separators_are_rejected(name):
    with pytest.raises(IdentifierError):
        to_level_identifier(name)


def test_unencodable_name_is_rejected():
    with pytest.raises(IdentifierError):
        to_level_identifier("Café", encoding="ascii")
