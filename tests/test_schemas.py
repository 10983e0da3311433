"""Identity record — construction contract and immutability.

Tests:
    - Missing required fields fail with the first violation only
    - Optional fields default to empty strings
    - Records are frozen after construction
"""

import pytest
from pydantic import ValidationError

from conftest import JANE
from errors import ConfigValidationError
from schemas import IdentityRecord, build


def test_build_returns_record_with_all_fields():
    record = build(JANE)
    assert isinstance(record, IdentityRecord)
    assert record.display_name == "Jane Doe"
    assert record.canonical_url == "https://example.com/jane"
    assert record.github == "https://github.com/jane"
    assert record.phone == ""


def test_optional_fields_may_all_be_absent():
    record = build({"display_name": "A", "canonical_url": "https://a.example"})
    assert record.email == record.phone == ""
    assert record.bluesky == record.github == record.whatsapp == record.facebook == ""


def test_none_is_treated_as_empty():
    record = build({"display_name": "A", "canonical_url": "https://a", "email": None})
    assert record.email == ""


@pytest.mark.parametrize("missing", ["display_name", "canonical_url"])
def test_missing_required_field_is_reported(missing):
    fields = dict(JANE, **{missing: ""})
    with pytest.raises(ConfigValidationError) as exc:
        build(fields)
    assert exc.value.field == missing
    assert missing in exc.value.message


def test_display_name_reported_first_when_both_missing():
    with pytest.raises(ConfigValidationError) as exc:
        build({"email": "x@y.z"})
    assert exc.value.field == "display_name"


def test_unknown_keys_are_ignored():
    record = build(dict(JANE, twitter="https://x.com/jane"))
    assert not hasattr(record, "twitter")


def test_record_is_immutable():
    record = build(JANE)
    with pytest.raises(ValidationError):
        record.email = "other@example.com"
