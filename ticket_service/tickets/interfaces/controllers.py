"""
Ticket Controllers (API Routes)
================================

FastAPI routes for ticket CRUD.

Handlers are thin: parse path/query/body, call the repository, commit
when something changed, and shape the response. Errors raised by the
repository are mapped to HTTP responses by the app's exception handlers.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_service.infrastructure.database import get_session
from ticket_service.shared.infrastructure.logging import get_logger
from ticket_service.tickets.application import (
    TICKET_EXAMPLE,
    CountResponse,
    ITicketRepository,
    TicketCreate,
    TicketPatch,
    TicketReplace,
    TicketResponse,
    parse_filter,
    parse_where,
)
from ticket_service.tickets.infrastructure import SQLAlchemyTicketRepository

logger = get_logger(__name__)
router = APIRouter(prefix="/tickets", tags=["Tickets"])

FILTER_DESCRIPTION = (
    'JSON filter, e.g. {"where": {"precio": {"lt": 30}}, "order": "hora DESC", '
    '"limit": 10, "skip": 0, "fields": {"id": true, "precio": true}}'
)
WHERE_DESCRIPTION = 'JSON where clause, e.g. {"eventoId": 1, "silla": {"inq": [1, 2]}}'

NOT_FOUND_RESPONSE = {404: {"description": "Ticket not found"}}
BAD_FILTER_RESPONSE = {400: {"description": "Malformed filter or where clause"}}


# ========== Dependencies ==========

def get_ticket_repository(session: AsyncSession = Depends(get_session)) -> ITicketRepository:
    return SQLAlchemyTicketRepository(session)


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", "unknown")


# ========== Route Handlers ==========

@router.post(
    "",
    response_model=TicketResponse,
    response_model_exclude_unset=True,
    summary="Create a ticket",
    responses={
        200: {
            "description": "Ticket model instance",
            "content": {"application/json": {"example": {"id": "0b7f5d9e-3f7a-4a1e-9a55-1d1f0c6f7b21", **TICKET_EXAMPLE}}}
        },
        422: {"description": "Missing or mistyped required field"}
    }
)
async def create_ticket(
    request: Request,
    payload: TicketCreate,
    session: AsyncSession = Depends(get_session),
    repository: ITicketRepository = Depends(get_ticket_repository),
) -> Dict[str, Any]:
    ticket = await repository.create(payload.to_domain())
    await session.commit()

    logger.info(
        "Ticket created",
        extra={"correlation_id": _correlation_id(request), "ticket_id": ticket.id}
    )
    return ticket.to_document()


@router.get(
    "/count",
    response_model=CountResponse,
    summary="Count tickets",
    responses=BAD_FILTER_RESPONSE
)
async def count_tickets(
    where: Optional[str] = Query(None, description=WHERE_DESCRIPTION),
    repository: ITicketRepository = Depends(get_ticket_repository),
) -> CountResponse:
    count = await repository.count(parse_where(where))
    return CountResponse(count=count)


@router.get(
    "",
    response_model=List[TicketResponse],
    response_model_exclude_unset=True,
    summary="List tickets",
    responses=BAD_FILTER_RESPONSE
)
async def find_tickets(
    filter_: Optional[str] = Query(None, alias="filter", description=FILTER_DESCRIPTION),
    repository: ITicketRepository = Depends(get_ticket_repository),
) -> List[Dict[str, Any]]:
    ticket_filter = parse_filter(filter_)
    tickets = await repository.find(ticket_filter)
    return [ticket_filter.project(t.to_document()) for t in tickets]


@router.patch(
    "",
    response_model=CountResponse,
    summary="Update all matching tickets",
    responses={**BAD_FILTER_RESPONSE, 422: {"description": "Mistyped field"}}
)
async def update_all_tickets(
    request: Request,
    payload: TicketPatch,
    where: Optional[str] = Query(None, description=WHERE_DESCRIPTION),
    session: AsyncSession = Depends(get_session),
    repository: ITicketRepository = Depends(get_ticket_repository),
) -> CountResponse:
    count = await repository.update_all(payload.to_changes(), parse_where(where))
    await session.commit()

    logger.info(
        "Tickets updated",
        extra={"correlation_id": _correlation_id(request), "count": count}
    )
    return CountResponse(count=count)


@router.get(
    "/{ticket_id}",
    response_model=TicketResponse,
    response_model_exclude_unset=True,
    summary="Get a ticket by id",
    responses={**NOT_FOUND_RESPONSE, **BAD_FILTER_RESPONSE}
)
async def find_ticket_by_id(
    ticket_id: str,
    filter_: Optional[str] = Query(
        None, alias="filter", description="JSON filter; 'where' is ignored"
    ),
    repository: ITicketRepository = Depends(get_ticket_repository),
) -> Dict[str, Any]:
    ticket_filter = parse_filter(filter_, exclude_where=True)
    ticket = await repository.find_by_id(ticket_id)
    return ticket_filter.project(ticket.to_document())


@router.patch(
    "/{ticket_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Partially update a ticket",
    responses=NOT_FOUND_RESPONSE
)
async def update_ticket_by_id(
    request: Request,
    ticket_id: str,
    payload: TicketPatch,
    session: AsyncSession = Depends(get_session),
    repository: ITicketRepository = Depends(get_ticket_repository),
) -> Response:
    await repository.update_by_id(ticket_id, payload.to_changes(ticket_id))
    await session.commit()

    logger.info(
        "Ticket updated",
        extra={"correlation_id": _correlation_id(request), "ticket_id": ticket_id}
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{ticket_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Replace a ticket",
    responses=NOT_FOUND_RESPONSE
)
async def replace_ticket_by_id(
    request: Request,
    ticket_id: str,
    payload: TicketReplace,
    session: AsyncSession = Depends(get_session),
    repository: ITicketRepository = Depends(get_ticket_repository),
) -> Response:
    await repository.replace_by_id(ticket_id, payload.to_domain_for(ticket_id))
    await session.commit()

    logger.info(
        "Ticket replaced",
        extra={"correlation_id": _correlation_id(request), "ticket_id": ticket_id}
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{ticket_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a ticket",
    responses=NOT_FOUND_RESPONSE
)
async def delete_ticket_by_id(
    request: Request,
    ticket_id: str,
    session: AsyncSession = Depends(get_session),
    repository: ITicketRepository = Depends(get_ticket_repository),
) -> Response:
    await repository.delete_by_id(ticket_id)
    await session.commit()

    logger.info(
        "Ticket deleted",
        extra={"correlation_id": _correlation_id(request), "ticket_id": ticket_id}
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Export router for inclusion in main app
tickets_router = router
