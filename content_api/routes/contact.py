"""
Contact Routes.

``POST /contacts`` is the public contact form (stricter rate limit); the
remaining endpoints back the admin inbox.
"""

from logging import getLogger
from typing import Annotated, Any

from fastapi import APIRouter, Body, Request
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from content_api.configs import file_logger
from content_api.decorators import timed
from content_api.dependencies import ContactListDep, ContactRepoDep, ContactServiceDep
from content_api.managers import contact_limit
from content_api.schemas import (
    ContactCreate,
    ContactResponse,
    ContactStats,
    ContactUpdate,
    DataEnvelope,
    MessageDataEnvelope,
    PageEnvelope,
    error_examples,
)
from content_api.services.contact import RECEIVED_MESSAGE
from content_api.utils.filters import build_contact_query
from content_api.utils.helpers import host, user_agent

router = APIRouter(prefix="/contacts", tags=["✉️ Contacts"])

logger = file_logger(getLogger(__name__))


@router.post(
    "",
    response_model=MessageDataEnvelope[ContactResponse],
    status_code=HTTP_201_CREATED,
    summary="Submit the contact form",
    description="Stores the message and notifies the site operator by email.",
    responses=error_examples(400, 429),
    operation_id="contacts_submit",
)
@timed("/contacts/submit")
@contact_limit
async def submit_contact(
    request: Request,
    response: Response,
    contact: Annotated[
        ContactCreate,
        Body(
            openapi_examples={
                "basic": {
                    "summary": "Contact form",
                    "value": {
                        "name": "Jane Doe",
                        "email": "jane@example.com",
                        "subject": "Partnership enquiry",
                        "message": "Hello, I'd like to talk about...",
                    },
                },
            },
        ),
    ],
    service: ContactServiceDep,
) -> MessageDataEnvelope[ContactResponse]:
    """
    Submit a contact message.

    Parameters
    ----------
    request : Request
        Current request context; client address and user agent are stored.
    response : Response
        Response object for middleware/decorators.
    contact : ContactCreate
        Validated form payload.
    service : ContactService
        Submission workflow.

    Returns
    -------
    MessageDataEnvelope[ContactResponse]
        Confirmation message and the stored submission.
    """
    stored = await service.submit(
        contact,
        ip_address=host(request),
        user_agent=user_agent(request),
    )
    return MessageDataEnvelope[ContactResponse].model_validate(
        {"message": RECEIVED_MESSAGE, "data": stored},
    )


@router.get(
    "",
    response_model=PageEnvelope[ContactResponse],
    summary="List contact submissions",
    description="Filters: status, search (name, email, subject, message) and sort.",
    responses=error_examples(400, 429),
    operation_id="contacts_list",
)
@timed("/contacts/list")
async def list_contacts(
    request: Request,
    response: Response,
    query: ContactListDep,
    repo: ContactRepoDep,
) -> PageEnvelope[ContactResponse]:
    page = await repo.find_page(build_contact_query(query), query)
    return PageEnvelope[ContactResponse].model_validate(page.to_envelope())


@router.get(
    "/stats/summary",
    response_model=DataEnvelope[ContactStats],
    summary="Contact statistics",
    description="Total, received today and counts per status.",
    responses=error_examples(429),
    operation_id="contacts_stats",
)
@timed("/contacts/stats")
async def contact_stats(
    request: Request,
    response: Response,
    repo: ContactRepoDep,
) -> DataEnvelope[ContactStats]:
    return DataEnvelope[ContactStats].model_validate({"data": await repo.stats()})


@router.get(
    "/{contact_id}",
    response_model=DataEnvelope[ContactResponse],
    summary="Get a contact submission",
    description="Opening a new submission marks it as read.",
    responses=error_examples(404, 429),
    operation_id="contacts_get",
)
@timed("/contacts/get")
async def get_contact(
    request: Request,
    response: Response,
    contact_id: str,
    repo: ContactRepoDep,
) -> DataEnvelope[ContactResponse]:
    return DataEnvelope[ContactResponse].model_validate({"data": await repo.open(contact_id)})


@router.put(
    "/{contact_id}",
    response_model=DataEnvelope[ContactResponse],
    summary="Update a contact submission",
    description="Change the status and/or notes. Moving to 'replied' records repliedAt once.",
    responses=error_examples(400, 404, 429),
    operation_id="contacts_update",
)
@timed("/contacts/update")
async def update_contact(
    request: Request,
    response: Response,
    contact_id: str,
    changes: ContactUpdate,
    repo: ContactRepoDep,
) -> DataEnvelope[ContactResponse]:
    updated = await repo.update(contact_id, changes)
    logger.info(f"Updated contact {contact_id}")
    return DataEnvelope[ContactResponse].model_validate({"data": updated})


@router.delete(
    "/{contact_id}",
    response_model=DataEnvelope[dict[str, Any]],
    summary="Delete a contact submission",
    responses=error_examples(404, 429),
    operation_id="contacts_delete",
)
@timed("/contacts/delete")
async def delete_contact(
    request: Request,
    response: Response,
    contact_id: str,
    repo: ContactRepoDep,
) -> DataEnvelope[dict[str, Any]]:
    await repo.delete(contact_id)
    logger.info(f"Deleted contact {contact_id}")
    return DataEnvelope[dict[str, Any]](data={})
