"""Unit tests for hobbies encoding, form cleaning and Customer model helpers."""
import pytest

from app.crm.modules.customers.models import Customer
from app.crm.modules.customers.utils import (
    clean_hobbies,
    clean_text,
    decode_hobbies,
    encode_hobbies,
    is_valid_email,
)


class TestHobbiesEncoding:
    def test_encode_is_compact_json(self):
        assert encode_hobbies(["reading", "traveling"]) == '["reading","traveling"]'

    def test_encode_empty_and_none(self):
        assert encode_hobbies([]) == "[]"
        assert encode_hobbies(None) == "[]"

    def test_encode_keeps_order(self):
        assert encode_hobbies(["b", "a", "c"]) == '["b","a","c"]'

    def test_decode(self):
        assert decode_hobbies('["reading","traveling"]') == ["reading", "traveling"]
        assert decode_hobbies('["a", "b"]') == ["a", "b"]

    @pytest.mark.parametrize("raw", [None, "", "   ", "[]"])
    def test_decode_empty(self, raw):
        assert decode_hobbies(raw) == []

    def test_decode_rejects_non_array(self):
        with pytest.raises(ValueError):
            decode_hobbies('{"a": 1}')


class TestFormCleaning:
    def test_clean_text(self):
        assert clean_text("  John ") == "John"
        assert clean_text("   ") is None
        assert clean_text(None) is None

    def test_clean_hobbies(self):
        assert clean_hobbies(None) == []
        assert clean_hobbies("Reading") == ["Reading"]
        assert clean_hobbies([" Reading ", "", "Gaming"]) == ["Reading", "Gaming"]

    @pytest.mark.parametrize(
        "email,ok",
        [
            ("john.doe@example.com", True),
            ("first+tag@sub.example.co", True),
            ("o'brien@example.com", True),
            ("a/b@example.com", True),
            ("a b@example.com", False),
            ("invalid-email", False),
            ("not-an-email", False),
            ("", False),
            (None, False),
        ],
    )
    def test_is_valid_email(self, email, ok):
        assert is_valid_email(email) is ok


class TestCustomerModel:
    def _customer(self, hobbies_json="[]"):
        return Customer(
            firstname="John",
            lastname="Doe",
            email="john@example.com",
            mobile="1234567890",
            gender="male",
            hobbies_json=hobbies_json,
        )

    def test_full_name(self):
        assert self._customer().full_name == "John Doe"

    def test_hobby_count(self):
        assert self._customer('["Reading","Gaming","Sports"]').hobby_count() == 3
        assert self._customer().hobby_count() == 0

    def test_hobbies_property_decodes_column(self):
        assert self._customer('["Cooking"]').hobbies == ["Cooking"]
