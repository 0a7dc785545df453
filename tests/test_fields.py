from training.fields import get_field

from conftest import response


def test_reads_attribute_from_sdk_object():
    assert get_field(response(id="file-1"), "id") == "file-1"


def test_reads_key_from_mapping():
    assert get_field({"status": "processed"}, "status") == "processed"


def test_missing_field_is_empty():
    assert get_field(response(status="running"), "fine_tuned_model") == ""
    assert get_field({}, "id") == ""


def test_null_field_is_empty():
    assert get_field(response(fine_tuned_model=None), "fine_tuned_model") == ""


def test_none_response_is_empty():
    assert get_field(None, "id") == ""


def test_non_string_value_is_stringified():
    assert get_field({"trained_tokens": 1200}, "trained_tokens") == "1200"
