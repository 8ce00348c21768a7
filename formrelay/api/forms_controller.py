import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.formparsers import MultiPartException

from formrelay.config import Settings
from formrelay.errors import UpstreamError
from formrelay.rate_limit import enforce_rate_limit
from formrelay.schemas.forms import (
    COMMERCIAL_POLICIES,
    INCIDENT_POLICIES,
    CommercialDemoForm,
    FormSubmission,
    IncidentReportForm,
    get_policy,
)
from formrelay.schemas.ticket import Requester
from formrelay.services.contacts import upsert_contact
from formrelay.services.freshdesk_client import FreshdeskClient
from formrelay.services.ticket_composer import (
    FALLBACK_NAME,
    compose_commercial,
    compose_incident,
    requester_name,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_freshdesk_client(request: Request) -> FreshdeskClient:
    return request.app.state.freshdesk


async def read_submission(request: Request) -> dict:
    """Reads a JSON or form-encoded body into a plain dict. Unreadable bodies come back empty."""
    content_type = request.headers.get("content-type", "")
    try:
        if "application/json" in content_type:
            data = await request.json()
            if not isinstance(data, dict):
                data = {}
        else:
            form = await request.form()
            data = {}
            for key in form.keys():
                values = form.getlist(key)
                data[key] = values if len(values) > 1 else values[0]
    except (ValueError, MultiPartException) as e:
        logger.warning("Could not parse %s body: %s", content_type or "request", e)
        return {}

    # Checkbox groups post as "interests[]".
    if "interests[]" in data and "interests" not in data:
        data["interests"] = data.pop("interests[]")
    return data


def parse_form(model: type[FormSubmission], data: dict) -> FormSubmission:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning("Discarding malformed %s fields: %s", model.__name__, e.error_count())
        return model()


def create_ticket(client: FreshdeskClient, settings: Settings, form: FormSubmission, compose) -> Response:
    if settings.contact_sync:
        contact = upsert_contact(client, form.name, form.email, form.phone, default_name=FALLBACK_NAME)
        requester = Requester.from_contact(contact)
    else:
        requester = Requester.from_fields(requester_name(form), form.email, form.phone)

    ticket = compose(form, requester)
    result = client.create_ticket(ticket)

    if not result.ok:
        raise UpstreamError(result.status_code, result.body)

    logger.info("Created Freshdesk ticket %r", ticket.subject)
    return Response(status_code=204)


async def handle_submission(request: Request, model, policy, compose, client: FreshdeskClient, settings: Settings) -> Response:
    form = parse_form(model, await read_submission(request))

    if form.is_spam:
        logger.info("Honeypot filled on %s, dropping submission", request.url.path)
        return Response(status_code=204)

    policy.check(form)

    try:
        return await run_in_threadpool(create_ticket, client, settings, form, compose)
    except UpstreamError:
        raise
    except Exception:
        logger.exception("Unexpected error handling %s", request.url.path)
        return JSONResponse(status_code=500, content={"error": "server_error"})


@router.post("/commercial-demo", dependencies=[Depends(enforce_rate_limit)])
async def commercial_demo(
    request: Request,
    client: FreshdeskClient = Depends(get_freshdesk_client),
    settings: Settings = Depends(get_settings),
):
    policy = get_policy(COMMERCIAL_POLICIES, settings.commercial_validation_policy)
    return await handle_submission(request, CommercialDemoForm, policy, compose_commercial, client, settings)


@router.post("/incident-report", dependencies=[Depends(enforce_rate_limit)])
async def incident_report(
    request: Request,
    client: FreshdeskClient = Depends(get_freshdesk_client),
    settings: Settings = Depends(get_settings),
):
    policy = get_policy(INCIDENT_POLICIES, settings.incident_validation_policy)
    return await handle_submission(request, IncidentReportForm, policy, compose_incident, client, settings)


@router.options("/{path:path}")
async def options(path: str):
    return Response(status_code=204)
