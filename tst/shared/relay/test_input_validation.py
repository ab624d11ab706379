import pytest

from leadrelay.shared.relay.errors import MissingField, InvalidName, InvalidContact
from leadrelay.shared.relay.input_validation import (
    TRUNCATION_MARKER,
    clean_handle,
    sanitize_message,
    validate_contact,
    validate_lead,
    validate_name,
)
from leadrelay.shared.relay.schemas import LeadRequest


@pytest.mark.parametrize("name", [
    "Иван",
    "Иван Иванов",
    "Ivan Petrov",
    "Ёжик",
    "Al",
    "А" * 50,
    "Anna Мария",
])
def test_valid_names(name):
    assert validate_name(name)


@pytest.mark.parametrize("name", [
    "",
    "I",
    "А" * 51,
    "Ivan2",
    "Ivan-Petrov",
    "O'Brien",
    "Иван!",
    "José",
    "<script>",
])
def test_invalid_names(name):
    assert not validate_name(name)


@pytest.mark.parametrize("handle", [
    "ivan_99",
    "abcde",
    "Ivan_Petrov",
    "a" + "b" * 30 + "c",
    "user123",
])
def test_valid_handles(handle):
    assert validate_contact(handle)
    assert validate_contact("@" + handle)


@pytest.mark.parametrize("handle", [
    "_bad",
    "bad_",
    "abcd",
    "a" * 33,
    "1user",
    "user name",
    "user-name",
    "юзернейм",
    "",
])
def test_invalid_handles(handle):
    assert not validate_contact(handle)
    assert not validate_contact("@" + handle)


def test_handle_length_bounds():
    assert validate_contact("a" * 5)
    assert validate_contact("a" * 32)
    assert not validate_contact("a" * 4)
    assert not validate_contact("a" * 33)


def test_clean_handle_strips_one_at_sign():
    assert clean_handle("@ivan_99") == "ivan_99"
    assert clean_handle("ivan_99") == "ivan_99"
    assert clean_handle("@@ivan_99") == "@ivan_99"


def test_trailing_newline_is_not_accepted():
    assert not validate_contact("ivan_99\n")


def test_sanitize_escapes_html():
    assert sanitize_message("<script>alert('x')</script>", 1000) == (
        "&lt;script&gt;alert(&#x27;x&#x27;)&lt;/script&gt;"
    )


def test_sanitize_truncates_with_marker():
    result = sanitize_message("a" * 1500, 1000)

    assert result.endswith(TRUNCATION_MARKER)
    assert len(result) == 1000 + len(TRUNCATION_MARKER)


def test_sanitize_keeps_short_message():
    assert sanitize_message("Хочу узнать цену", 1000) == "Хочу узнать цену"
    assert sanitize_message("", 1000) == ""


def test_validate_lead_builds_submission():
    lead = validate_lead(LeadRequest(name=" Иван ", contact=" @ivan_99 ", message=" <b>hi</b> "), 1000)

    assert lead.name == "Иван"
    assert lead.contact == "ivan_99"
    assert lead.message == "&lt;b&gt;hi&lt;/b&gt;"


def test_validate_lead_reports_missing_before_invalid():
    with pytest.raises(MissingField):
        validate_lead(LeadRequest(name="1", contact=""), 1000)


def test_validate_lead_errors():
    with pytest.raises(InvalidName):
        validate_lead(LeadRequest(name="1van", contact="_bad"), 1000)
    with pytest.raises(InvalidContact):
        validate_lead(LeadRequest(name="Ivan", contact="_bad"), 1000)
