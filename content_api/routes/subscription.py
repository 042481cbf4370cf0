"""
Subscription Routes.

Public subscribe/unsubscribe plus admin listing, updates, stats and the
mailing-list export. Operator updates write straight to the store and do not
go through the subscribe/unsubscribe rules.
"""

from logging import getLogger
from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, Request
from starlette.responses import Response
from starlette.status import HTTP_200_OK, HTTP_201_CREATED

from content_api.configs import file_logger
from content_api.decorators import timed
from content_api.dependencies import (
    SubscriptionListDep,
    SubscriptionRepoDep,
    SubscriptionServiceDep,
)
from content_api.managers import subscription_limit
from content_api.schemas import (
    DataEnvelope,
    ExportEntry,
    ExportEnvelope,
    MessageDataEnvelope,
    MessageEnvelope,
    PageEnvelope,
    SubscriptionCreate,
    SubscriptionPublic,
    SubscriptionResponse,
    SubscriptionStats,
    SubscriptionUpdate,
    error_examples,
)
from content_api.services.subscription import UNSUBSCRIBED_MESSAGE
from content_api.utils.filters import build_subscription_query
from content_api.utils.helpers import host

router = APIRouter(prefix="/subscriptions", tags=["📬 Subscriptions"])

logger = file_logger(getLogger(__name__))


@router.post(
    "",
    response_model=MessageDataEnvelope[SubscriptionPublic],
    status_code=HTTP_201_CREATED,
    summary="Subscribe to the mailing list",
    description=(
        "Creates a subscription (201) or reactivates an inactive one (200). "
        "An address that is already active is rejected."
    ),
    responses={
        200: {"description": "Inactive subscription reactivated"},
        **error_examples(400, 429),
    },
    operation_id="subscriptions_subscribe",
)
@timed("/subscriptions/subscribe")
@subscription_limit
async def subscribe(
    request: Request,
    response: Response,
    subscription: Annotated[
        SubscriptionCreate,
        Body(
            openapi_examples={
                "basic": {
                    "summary": "Newsletter signup",
                    "value": {
                        "email": "reader@example.com",
                        "name": "Reader",
                        "subscriptionType": "newsletter",
                    },
                },
            },
        ),
    ],
    service: SubscriptionServiceDep,
) -> MessageDataEnvelope[SubscriptionPublic]:
    """
    Subscribe an email address.

    Parameters
    ----------
    request : Request
        Current request context; the client address is stored.
    response : Response
        Status is switched to 200 when an existing record is reactivated.
    subscription : SubscriptionCreate
        Validated signup payload.
    service : SubscriptionService
        Subscription workflow.

    Returns
    -------
    MessageDataEnvelope[SubscriptionPublic]
        Confirmation message and the subscription without its token.

    Raises
    ------
    ConflictError
        If the address is already subscribed.
    """
    outcome = await service.subscribe(subscription, ip_address=host(request))
    if not outcome.created:
        response.status_code = HTTP_200_OK
    return MessageDataEnvelope[SubscriptionPublic].model_validate(
        {"message": outcome.message, "data": outcome.subscription},
    )


@router.get(
    "/unsubscribe/{token}",
    response_model=MessageEnvelope,
    summary="Unsubscribe with the link from an email",
    responses=error_examples(400, 429),
    operation_id="subscriptions_unsubscribe",
)
@timed("/subscriptions/unsubscribe")
async def unsubscribe(
    request: Request,
    response: Response,
    token: str,
    service: SubscriptionServiceDep,
) -> MessageEnvelope:
    await service.unsubscribe(token)
    return MessageEnvelope(message=UNSUBSCRIBED_MESSAGE)


@router.get(
    "",
    response_model=PageEnvelope[SubscriptionResponse],
    summary="List subscriptions",
    description="Filters: isActive, subscriptionType, verified, search (email, name) and sort.",
    responses=error_examples(400, 429),
    operation_id="subscriptions_list",
)
@timed("/subscriptions/list")
async def list_subscriptions(
    request: Request,
    response: Response,
    query: SubscriptionListDep,
    repo: SubscriptionRepoDep,
) -> PageEnvelope[SubscriptionResponse]:
    page = await repo.find_page(build_subscription_query(query), query)
    return PageEnvelope[SubscriptionResponse].model_validate(page.to_envelope())


@router.get(
    "/stats/summary",
    response_model=DataEnvelope[SubscriptionStats],
    summary="Subscription statistics",
    description="Totals, active subscriptions created today and active counts per type.",
    responses=error_examples(429),
    operation_id="subscriptions_stats",
)
@timed("/subscriptions/stats")
async def subscription_stats(
    request: Request,
    response: Response,
    repo: SubscriptionRepoDep,
) -> DataEnvelope[SubscriptionStats]:
    return DataEnvelope[SubscriptionStats].model_validate({"data": await repo.stats()})


@router.get(
    "/export/emails",
    response_model=ExportEnvelope[ExportEntry],
    summary="Export the mailing list",
    description=(
        "Active and verified subscriptions only, optionally narrowed to one "
        "subscriptionType. An isActive parameter is ignored."
    ),
    responses=error_examples(400, 429),
    operation_id="subscriptions_export",
)
@timed("/subscriptions/export")
async def export_emails(
    request: Request,
    response: Response,
    service: SubscriptionServiceDep,
    subscription_type: Annotated[str | None, Query(alias="subscriptionType")] = None,
) -> ExportEnvelope[ExportEntry]:
    entries = await service.export(subscription_type)
    return ExportEnvelope[ExportEntry].model_validate({"count": len(entries), "data": entries})


@router.get(
    "/{subscription_id}",
    response_model=DataEnvelope[SubscriptionResponse],
    summary="Get a subscription",
    responses=error_examples(404, 429),
    operation_id="subscriptions_get",
)
@timed("/subscriptions/get")
async def get_subscription(
    request: Request,
    response: Response,
    subscription_id: str,
    repo: SubscriptionRepoDep,
) -> DataEnvelope[SubscriptionResponse]:
    subscription = await repo.get_or_raise(subscription_id)
    return DataEnvelope[SubscriptionResponse].model_validate({"data": subscription})


@router.put(
    "/{subscription_id}",
    response_model=DataEnvelope[SubscriptionResponse],
    summary="Update a subscription",
    responses=error_examples(400, 404, 429),
    operation_id="subscriptions_update",
)
@timed("/subscriptions/update")
async def update_subscription(
    request: Request,
    response: Response,
    subscription_id: str,
    changes: SubscriptionUpdate,
    repo: SubscriptionRepoDep,
) -> DataEnvelope[SubscriptionResponse]:
    updated = await repo.update_by_id(subscription_id, changes.to_document())
    logger.info(f"Updated subscription {subscription_id}")
    return DataEnvelope[SubscriptionResponse].model_validate({"data": updated})


@router.delete(
    "/{subscription_id}",
    response_model=DataEnvelope[dict[str, Any]],
    summary="Delete a subscription",
    responses=error_examples(404, 429),
    operation_id="subscriptions_delete",
)
@timed("/subscriptions/delete")
async def delete_subscription(
    request: Request,
    response: Response,
    subscription_id: str,
    repo: SubscriptionRepoDep,
) -> DataEnvelope[dict[str, Any]]:
    await repo.delete(subscription_id)
    logger.info(f"Deleted subscription {subscription_id}")
    return DataEnvelope[dict[str, Any]](data={})
