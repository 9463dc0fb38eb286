from typing import Any
from uuid import uuid4

from pydantic.alias_generators import to_camel, to_snake
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Contact(SQLModel, table=True):
    """Stored form of a contact.

    Sensitive columns hold ``<ivHex>:<cipherHex>`` strings, never plaintext.
    Nested objects are kept as JSON documents.
    """

    row_id: int | None = Field(default=None, primary_key=True)
    id: str = Field(
        default_factory=lambda: uuid4().hex,
        unique=True,
        index=True,
        description="Public contact identifier",
    )

    first_name: str = Field(..., description="Encrypted first name")
    middle_name: str | None = Field(default=None)
    last_name: str | None = Field(default=None)
    nick_name: str | None = Field(default=None)
    phone_number: str = Field(..., unique=True, description="Encrypted phone number")
    email: str | None = Field(default=None, unique=True)

    address: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    important_dates: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))
    work_info: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))

    notes: str | None = Field(default=None)
    profile_photo: str | None = Field(default=None)
    website: str | None = Field(default=None)
    social_links: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON))

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Contact":
        contact = cls()
        contact.apply(document)
        return contact

    def apply(self, document: dict[str, Any]):
        """Set every top-level key of ``document``; nested objects are replaced whole."""
        for key, value in document.items():
            name = to_snake(key)
            if name not in DOCUMENT_FIELDS:
                raise KeyError(f"Unknown contact field: {key}")
            setattr(self, name, value)

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {"id": self.id}
        for name in DOCUMENT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                document[to_camel(name)] = value
        return document


DOCUMENT_FIELDS = tuple(
    name for name in Contact.model_fields if name not in ("row_id", "id")
)
