import pytest

from filevault.utils.validators import FileInputValidationError, normalize_display_name, parse_tags


def test_display_name_trimmed():
    assert normalize_display_name("  notes.txt  ") == "notes.txt"


def test_display_name_unicode_allowed():
    assert normalize_display_name("résumé 2024.pdf") == "résumé 2024.pdf"


@pytest.mark.parametrize(
    "name, expected_error",
    [
        (None, "File name is required"),
        ("", "File name is required"),
        ("dir/notes.txt", "File name must not contain path separators"),
        ("dir\\notes.txt", "File name must not contain path separators"),
        ("bad\nname", "File name must not contain control characters"),
        ("x" * 256, "File name must be at most 255 characters long"),
    ],
)
def test_display_name_invalid(name, expected_error):
    with pytest.raises(FileInputValidationError) as exc_info:
        normalize_display_name(name)
    assert expected_error in exc_info.value.errors


def test_parse_tags_empty():
    assert parse_tags(None) == []
    assert parse_tags("") == []
    assert parse_tags(" , ,") == []


def test_parse_tags_deduplicates_in_order():
    assert parse_tags("b, a ,b,c") == ["b", "a", "c"]


def test_parse_tags_too_long():
    with pytest.raises(FileInputValidationError):
        parse_tags("x" * 51)
