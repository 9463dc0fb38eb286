import copy
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from contact_service.core.cipher import Cipher
from contact_service.models.contact import sensitive_paths

__all__ = ["SENSITIVE_FIELDS", "FieldTransformer", "transform_contact"]

type TextTransform = Callable[[str], str]

SENSITIVE_FIELDS: tuple[str, ...] = sensitive_paths()


def transform_contact(
    record: Mapping[str, Any],
    transform: TextTransform,
    fields: Iterable[str] = SENSITIVE_FIELDS,
) -> dict[str, Any]:
    """Return a copy of ``record`` with ``transform`` applied to each sensitive string.

    Paths are ``"field"`` or ``"parent.child"``. Missing fields, missing
    parents and non-string values are skipped. ``record`` is left untouched.
    """
    result = copy.deepcopy(dict(record))

    for path in fields:
        keys = path.split(".")
        if len(keys) == 1:
            value = result.get(keys[0])
            if isinstance(value, str):
                result[keys[0]] = transform(value)
        elif len(keys) == 2:
            parent, child = keys
            nested = result.get(parent)
            if not isinstance(nested, Mapping):
                continue
            if not isinstance(nested, dict):
                nested = result[parent] = dict(nested)
            if isinstance(nested.get(child), str):
                nested[child] = transform(nested[child])

    return result


class FieldTransformer:
    def __init__(
        self,
        cipher: Cipher,
        logger: logging.Logger,
        fields: Iterable[str] = SENSITIVE_FIELDS,
    ):
        self.cipher = cipher
        self.logger = logger
        self.fields = tuple(fields)

    def encrypt(self, record: Mapping[str, Any]) -> dict[str, Any]:
        self.logger.debug("Encrypting contact")
        return transform_contact(record, self.cipher.encrypt, self.fields)

    def decrypt(self, record: Mapping[str, Any]) -> dict[str, Any]:
        self.logger.debug("Decrypting contact")
        return transform_contact(record, self.cipher.decrypt, self.fields)
