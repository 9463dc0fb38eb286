import copy
import logging
import re
from collections.abc import Mapping

from contact_service.core import SENSITIVE_FIELDS, FieldTransformer, transform_contact

ENCODED = re.compile(r"^[0-9a-f]{32}:[0-9a-f]+$")

FULL_CONTACT = {
    "firstName": "John",
    "middleName": "Quincy",
    "lastName": "Doe",
    "nickName": "JD",
    "phoneNumber": "64-990-611-3752",
    "email": "john@example.com",
    "address": {
        "street": "123 Main St",
        "city": "Sample City",
        "county": "Sample County",
        "country": "Nowhere",
        "postalCode": "12345",
    },
    "importantDates": {
        "dateOfBirth": "1990-05-17",
        "dateOfAnniversary": "2015-06-20",
    },
    "workInfo": {"company": "Acme", "jobTitle": "Engineer", "department": "R&D"},
    "notes": "Met at the conference",
    "profilePhoto": "https://example.com/photo.jpg",
    "website": "https://john.doe",
    "socialLinks": {
        "facebook": "https://facebook.com/john.doe",
        "twitter": "https://twitter.com/john_doe",
        "linkedin": "https://linkedin.com/in/john_doe",
        "instagram": "https://instagram.com/john_doe",
    },
}

CLEAR_FIELDS = ["workInfo", "profilePhoto", "website", "socialLinks"]


def mark(value: str) -> str:
    return f"transformed-{value}"


def test_sensitive_fields_come_from_schema():
    assert SENSITIVE_FIELDS == (
        "firstName",
        "middleName",
        "lastName",
        "nickName",
        "phoneNumber",
        "email",
        "address.street",
        "address.city",
        "address.county",
        "address.country",
        "address.postalCode",
        "importantDates.dateOfBirth",
        "importantDates.dateOfAnniversary",
        "notes",
    )


def test_transforms_exactly_the_sensitive_paths():
    calls = []

    def recording(value):
        calls.append(value)
        return mark(value)

    result = transform_contact(FULL_CONTACT, recording)

    assert len(calls) == 14
    for path in SENSITIVE_FIELDS:
        parent, _, child = path.partition(".")
        original = FULL_CONTACT[parent][child] if child else FULL_CONTACT[parent]
        value = result[parent][child] if child else result[parent]
        assert value == mark(original)
    for field in CLEAR_FIELDS:
        assert result[field] == FULL_CONTACT[field]


def test_input_is_not_mutated():
    snapshot = copy.deepcopy(FULL_CONTACT)
    result = transform_contact(FULL_CONTACT, mark)

    assert FULL_CONTACT == snapshot
    assert result is not FULL_CONTACT
    assert result["address"] is not FULL_CONTACT["address"]


def test_missing_fields_are_skipped():
    contact = {"firstName": "John", "phoneNumber": "64-990-611-3752"}
    result = transform_contact(contact, mark)

    assert result == {
        "firstName": "transformed-John",
        "phoneNumber": "transformed-64-990-611-3752",
    }


def test_partial_nested_object():
    contact = {"firstName": "John", "address": {"street": "Main St", "city": "Sample City"}}
    result = transform_contact(contact, mark)

    assert result["firstName"] == "transformed-John"
    assert result["address"] == {
        "street": "transformed-Main St",
        "city": "transformed-Sample City",
    }


def test_non_string_values_and_parents_are_skipped():
    contact = {
        "firstName": None,
        "lastName": 42,
        "address": "not an object",
        "importantDates": {"dateOfBirth": None},
        "notes": ["a", "list"],
    }
    assert transform_contact(contact, mark) == contact


class ReadOnlyMapping(Mapping):
    def __init__(self, data):
        self._data = dict(data)

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)


def test_nested_mapping_types_are_accepted():
    contact = {"address": ReadOnlyMapping({"street": "Main St"})}
    result = transform_contact(contact, mark)
    assert result["address"] == {"street": "transformed-Main St"}


def test_field_transformer_encrypts_and_decrypts(cipher):
    transformer = FieldTransformer(cipher, logging.getLogger("test"))

    encrypted = transformer.encrypt(FULL_CONTACT)

    for path in SENSITIVE_FIELDS:
        parent, _, child = path.partition(".")
        value = encrypted[parent][child] if child else encrypted[parent]
        assert ENCODED.match(value)
    for field in CLEAR_FIELDS:
        assert encrypted[field] == FULL_CONTACT[field]

    assert transformer.decrypt(encrypted) == FULL_CONTACT


def test_field_transformer_logs(cipher, caplog):
    logger = logging.getLogger("test.transform")
    transformer = FieldTransformer(cipher, logger)

    with caplog.at_level(logging.DEBUG, logger="test.transform"):
        transformer.decrypt(transformer.encrypt({"firstName": "John"}))

    assert "Encrypting contact" in caplog.messages
    assert "Decrypting contact" in caplog.messages
