from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from contact_service.core import ContactService
from contact_service.models.requests import json_payload

router = APIRouter(prefix="/api/v1/contacts")


def get_contact_service(request: Request) -> ContactService:
    return request.app.state.contact_service


Service = Annotated[ContactService, Depends(get_contact_service)]
Payload = Annotated[Any, Depends(json_payload)]


@router.post("")
async def create_contact(service: Service, payload: Payload):
    contact = await service.create(payload)
    return JSONResponse(
        status_code=201,
        content={"success": True, "message": "Contact saved", "contact": contact},
    )


@router.get("")
async def get_contacts(
    request: Request,
    service: Service,
    limit: str | None = None,
    page: str | None = None,
):
    """List a page of decrypted contacts with pagination metadata."""
    base_url = str(request.url.replace(query=""))
    result = await service.list(base_url, limit=limit, page=page)
    return JSONResponse(content={"success": True, **result})


@router.get("/{contact_id}")
async def get_contact(contact_id: str, service: Service):
    contact = await service.get(contact_id)
    return JSONResponse(content={"success": True, "contact": contact})


@router.put("/{contact_id}")
async def update_contact(contact_id: str, service: Service, payload: Payload):
    contact = await service.update(contact_id, payload)
    return JSONResponse(content={"success": True, "contact": contact})


@router.delete("/{contact_id}")
async def delete_contact(contact_id: str, service: Service):
    await service.delete(contact_id)
    return JSONResponse(content={"success": True, "message": "Contact deleted"})
