import pytest

from utils.pii_scrubber import scrub_pii


@pytest.mark.parametrize("value", [None, "", 42, 3.5, ["123-45-6789"], {"a": 1}])
def test_non_strings_and_empty_values_pass_through(value):
    assert scrub_pii(value) == value


def test_redacts_ssn_in_both_formats():
    assert scrub_pii("ssn 123-45-6789") == "ssn [REDACTED-SSN]"
    assert scrub_pii("ssn 123 45 6789") == "ssn [REDACTED-SSN]"


def test_redacts_card_numbers_before_phone_numbers():
    assert scrub_pii("card 4111111111111111") == "card [REDACTED-CARD]"
    assert scrub_pii("card 4111-1111-1111-1111") == "card [REDACTED-CARD]"
    assert scrub_pii("card 4111 1111 1111 1111") == "card [REDACTED-CARD]"


def test_redacts_phone_numbers():
    assert scrub_pii("call 5551234567 now") == "call [REDACTED-PHONE] now"
    assert scrub_pii("call 555-123-4567") == "call [REDACTED-PHONE]"
    assert scrub_pii("call +1 555 123 4567") == "call +[REDACTED-PHONE]"


def test_redacts_email_case_insensitively():
    assert scrub_pii("mail Jane.Doe@Example.ORG please") == "mail [REDACTED-EMAIL] please"


def test_redacts_every_occurrence():
    out = scrub_pii("a@b.io and c@d.io, 123-45-6789 / 987-65-4321")
    assert out == "[REDACTED-EMAIL] and [REDACTED-EMAIL], [REDACTED-SSN] / [REDACTED-SSN]"


def test_text_without_pii_is_unchanged():
    text = "Broken streetlight on Elm Street near house 42"
    assert scrub_pii(text) == text


@pytest.mark.parametrize("text", ["١٢٣-٤٥-٦٧٨٩", "٥٥٥١٢٣٤٥٦٧", "४१११११११११११११११"])
def test_only_ascii_digits_are_redacted(text):
    assert scrub_pii(text) == text
