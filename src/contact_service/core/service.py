import logging
import math
from typing import Any

from starlette.concurrency import run_in_threadpool

from contact_service.core.repository import ContactRepository
from contact_service.core.transform import FieldTransformer
from contact_service.models.contact import validate_contact
from contact_service.shared.config import Pagination
from contact_service.shared.errors import NotFoundError, ValidationError
from contact_service.shared.http import server_error_handler

__all__ = ["MAX_PAGE_PARAM", "ContactService", "parse_page_param"]

# Keeps (page - 1) * limit inside a signed 64-bit storage integer
MAX_PAGE_PARAM = 2**31 - 1

type Document = dict[str, Any]


def parse_page_param(raw: str | int | None, default: int) -> int:
    """Positive integer from a query value.

    Falls back to ``default`` when the value is absent, non-numeric, below 1
    or above ``MAX_PAGE_PARAM``.
    """
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if 0 < value <= MAX_PAGE_PARAM else default


class ContactService:
    """Validate -> encrypt -> persist, and fetch -> decrypt -> serve.

    Records returned by ``create`` and ``update`` are the stored (encrypted)
    form; ``get`` and ``list`` always decrypt.
    """

    def __init__(
        self,
        repository: ContactRepository,
        transformer: FieldTransformer,
        pagination: Pagination,
        logger: logging.Logger,
    ):
        self.repository = repository
        self.transformer = transformer
        self.pagination = pagination
        self.logger = logger

    def _validate(self, payload: Any) -> Document:
        try:
            return validate_contact(payload)
        except ValidationError as e:
            self.logger.warning("Validation error %s", e.message)
            raise

    async def create(self, payload: Any) -> Document:
        self.logger.info("Creating contact")
        contact = self._validate(payload)
        encrypted = self.transformer.encrypt(contact)

        with server_error_handler(self.logger, "creating contact"):
            stored = await run_in_threadpool(self.repository.create, encrypted)

        self.logger.info("Contact %s saved successfully.", stored["id"])
        return stored

    async def list(
        self,
        base_url: str,
        limit: str | int | None = None,
        page: str | int | None = None,
    ) -> dict[str, Any]:
        limit = parse_page_param(limit, self.pagination.default_limit)
        page = parse_page_param(page, self.pagination.default_page)
        skip = (page - 1) * limit

        with server_error_handler(self.logger, "fetching contacts"):
            stored = await run_in_threadpool(self.repository.find, skip, limit)
            contacts = [self.transformer.decrypt(contact) for contact in stored]
            total_contacts = await run_in_threadpool(self.repository.count_all)

        total_pages = math.ceil(total_contacts / limit)

        next_page = None
        if page < total_pages:
            next_page = f"{base_url}?limit={limit}&page={page + 1}"

        return {
            "contacts": contacts,
            "pagination": {
                "currentPage": page,
                "totalPages": total_pages,
                "totalContacts": total_contacts,
                "nextPage": next_page,
            },
        }

    async def get(self, contact_id: str) -> Document:
        with server_error_handler(self.logger, "fetching contact"):
            stored = await run_in_threadpool(self.repository.find_by_id, contact_id)
            if stored is None:
                self.logger.warning("Contact not found.")
                raise NotFoundError()
            return self.transformer.decrypt(stored)

    async def update(self, contact_id: str, payload: Any) -> Document:
        contact = self._validate(payload)
        encrypted = self.transformer.encrypt(contact)

        with server_error_handler(self.logger, "updating contact"):
            stored = await run_in_threadpool(
                self.repository.find_by_id_and_update, contact_id, encrypted
            )

        if stored is None:
            self.logger.warning("Contact not found.")
            raise NotFoundError()

        self.logger.info("Contact %s updated successfully.", contact_id)
        return stored

    async def delete(self, contact_id: str) -> None:
        with server_error_handler(self.logger, "deleting contact"):
            deleted = await run_in_threadpool(
                self.repository.find_by_id_and_delete, contact_id
            )

        if deleted is None:
            self.logger.warning("Contact not found.")
            raise NotFoundError()

        self.logger.info("Contact %s deleted successfully.", contact_id)
