import logging
from typing import Any

from sqlalchemy import Engine, func
from sqlmodel import Session, select

from contact_service.models.schema import Contact

__all__ = ["ContactRepository"]

type Document = dict[str, Any]


class ContactRepository:
    """Blocking persistence for contact documents.

    Documents use the wire (camelCase) keys plus the generated ``id``.
    Uniqueness of phone number and email is left to the database.
    """

    def __init__(self, engine: Engine, logger: logging.Logger):
        self.engine = engine
        self.logger = logger

    def create(self, document: Document) -> Document:
        with Session(self.engine) as session:
            contact = Contact.from_document(document)
            session.add(contact)
            session.commit()
            session.refresh(contact)
            self.logger.debug("Inserted contact %s", contact.id)
            return contact.to_document()

    def find_by_id(self, contact_id: str) -> Document | None:
        with Session(self.engine) as session:
            contact = self.__get(session, contact_id)
            return contact.to_document() if contact else None

    def find(self, skip: int, limit: int) -> list[Document]:
        with Session(self.engine) as session:
            statement = select(Contact).order_by(Contact.row_id).offset(skip).limit(limit)
            return [contact.to_document() for contact in session.exec(statement)]

    def count_all(self) -> int:
        with Session(self.engine) as session:
            return session.exec(select(func.count()).select_from(Contact)).one()

    def find_by_id_and_update(self, contact_id: str, document: Document) -> Document | None:
        with Session(self.engine) as session:
            contact = self.__get(session, contact_id)
            if contact is None:
                return None

            contact.apply(document)
            session.add(contact)
            session.commit()
            session.refresh(contact)
            self.logger.debug("Updated contact %s", contact.id)
            return contact.to_document()

    def find_by_id_and_delete(self, contact_id: str) -> Document | None:
        with Session(self.engine) as session:
            contact = self.__get(session, contact_id)
            if contact is None:
                return None

            document = contact.to_document()
            session.delete(contact)
            session.commit()
            self.logger.debug("Deleted contact %s", contact_id)
            return document

    @staticmethod
    def __get(session: Session, contact_id: str) -> Contact | None:
        return session.exec(select(Contact).where(Contact.id == contact_id)).first()
