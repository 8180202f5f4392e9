"""Field rules shared by the HTTP handler and the desktop form."""

from __future__ import annotations

import pytest

from school_directory.views import SchoolValidationError, validate_school


def _messages(exc_info) -> dict[str, str]:
    return {error.field: error.message for error in exc_info.value.errors}


def test_valid_record_is_returned_with_integer_contact(school_fields):
    submission = validate_school(school_fields)

    assert submission.name == "Springfield Elementary"
    assert submission.contact == "5551234567"
    assert submission.contact_number == 5551234567


def test_image_entry_is_ignored(school_fields):
    school_fields["image"] = object()

    assert validate_school(school_fields).email_id == "office@springfield.edu"


@pytest.mark.parametrize(
    ("contact", "accepted"),
    [
        ("12345", False),
        ("1234567890", True),
        ("123456789012345", True),
        ("12345678901234567", False),
        ("12345abcde", False),
    ],
)
def test_contact_length_and_digits(school_fields, contact, accepted):
    school_fields["contact"] = contact

    if accepted:
        assert validate_school(school_fields).contact == contact
    else:
        with pytest.raises(SchoolValidationError) as exc_info:
            validate_school(school_fields)
        assert "contact" in _messages(exc_info)


def test_contact_messages(school_fields):
    school_fields["contact"] = "12345"
    with pytest.raises(SchoolValidationError) as exc_info:
        validate_school(school_fields)
    assert _messages(exc_info)["contact"] == "Contact number must be at least 10 digits"

    school_fields["contact"] = "12345678901234567"
    with pytest.raises(SchoolValidationError) as exc_info:
        validate_school(school_fields)
    assert _messages(exc_info)["contact"] == "Contact number too long"

    school_fields["contact"] = "12345abcde"
    with pytest.raises(SchoolValidationError) as exc_info:
        validate_school(school_fields)
    assert _messages(exc_info)["contact"] == "Contact number must contain only digits"


@pytest.mark.parametrize(
    ("email", "accepted"),
    [
        ("not-an-email", False),
        ("a@b.com", True),
        ("missing-domain@", False),
    ],
)
def test_email_syntax(school_fields, email, accepted):
    school_fields["email_id"] = email

    if accepted:
        assert validate_school(school_fields).email_id == email
    else:
        with pytest.raises(SchoolValidationError) as exc_info:
            validate_school(school_fields)
        assert _messages(exc_info)["email_id"] == "Invalid email format"


def test_email_too_long(school_fields):
    school_fields["email_id"] = "a" * 60 + "@" + ("b" * 60 + ".") * 3 + "com"

    with pytest.raises(SchoolValidationError) as exc_info:
        validate_school(school_fields)
    assert _messages(exc_info)["email_id"] == "Email too long"


@pytest.mark.parametrize(
    ("field", "limit"),
    [("name", 200), ("address", 500), ("city", 100), ("state", 100)],
)
def test_text_fields_respect_max_length(school_fields, field, limit):
    school_fields[field] = "x" * limit
    validate_school(school_fields)

    school_fields[field] = "x" * (limit + 1)
    with pytest.raises(SchoolValidationError) as exc_info:
        validate_school(school_fields)
    assert list(_messages(exc_info)) == [field]


def test_every_failing_field_is_reported():
    with pytest.raises(SchoolValidationError) as exc_info:
        validate_school({"name": "", "city": "Shelbyville"})

    messages = _messages(exc_info)
    assert set(messages) == {"name", "address", "state", "contact", "email_id"}
    assert messages["name"] == "School name is required"
    assert messages["address"] == "Address is required"
