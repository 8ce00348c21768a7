from formrelay.prompts.descriptions import (
    WRAPPER_STYLE,
    commercial_description,
    incident_description,
    text_block,
)
from formrelay.sanitizer import escape, slugify
from formrelay.schemas.forms import CommercialDemoForm, IncidentReportForm
from formrelay.schemas.ticket import Requester, TicketPayload

PLACEHOLDER = "—"

FALLBACK_NAME = "Website contact"
FALLBACK_COMPANY = "Company not provided"
FALLBACK_INCIDENT_TITLE = "Untitled"

PRIORITY_LOW = 1
PRIORITY_MEDIUM = 2
PRIORITY_HIGH = 3
PRIORITY_URGENT = 4

# Checked top-down; the first tier with a matching keyword wins.
SEVERITY_LADDER = (
    (PRIORITY_URGENT, ("critical", "crít")),
    (PRIORITY_HIGH, ("high", "alta")),
    (PRIORITY_MEDIUM, ("medium", "méd", "media")),
)


def show(value) -> str:
    return escape(value) or PLACEHOLDER


def yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def priority_for_severity(severity: str) -> int:
    sev = (severity or "").lower()
    for priority, keywords in SEVERITY_LADDER:
        if any(keyword in sev for keyword in keywords):
            return priority
    return PRIORITY_LOW


def requester_name(form) -> str:
    return form.name or FALLBACK_NAME


def commercial_subject(form: CommercialDemoForm) -> str:
    return f"Commercial - {requester_name(form)} | {form.company or FALLBACK_COMPANY}"


def incident_subject(form: IncidentReportForm) -> str:
    title = form.summary or form.service or FALLBACK_INCIDENT_TITLE
    if form.company:
        return f"Incident - {title} - {form.company}"
    return f"Incident - {title}"


def _tags(*values: str) -> list[str]:
    tags = []
    for value in values:
        slug = slugify(value)
        if slug and slug not in tags:
            tags.append(slug)
    return tags


def compose_commercial(form: CommercialDemoForm, requester: Requester) -> TicketPayload:
    description = commercial_description.format(
        style=WRAPPER_STYLE,
        name=escape(requester_name(form)),
        company=escape(form.company or FALLBACK_COMPANY),
        email=show(form.email),
        phone=show(form.phone),
        company_size=show(form.company_size),
        interests=", ".join(escape(item) for item in form.interests) or PLACEHOLDER,
        origin=escape(form.origin or "LP"),
        channel=escape(form.channel or "Web"),
        consent=yes_no(form.consent),
        notes=text_block.format(label="Notes", text=show(form.message)),
    )

    return TicketPayload(
        **requester.model_dump(exclude_none=True),
        subject=commercial_subject(form),
        description=description,
        priority=PRIORITY_MEDIUM,
        tags=_tags("commercial", *form.interests),
    )


def compose_incident(form: IncidentReportForm, requester: Requester) -> TicketPayload:
    description = incident_description.format(
        style=WRAPPER_STYLE,
        name=show(form.name),
        company=show(form.company),
        email=show(form.email),
        phone=show(form.phone),
        service=show(form.service),
        severity=show(form.severity),
        impact=show(form.impact),
        start_time=show(form.start_time),
        environment=show(form.environment),
        summary=show(form.summary),
        origin=escape(form.origin or "Website - Incident form"),
        channel=escape(form.channel or "Web"),
        consent=yes_no(form.consent),
        details=text_block.format(label="Detailed description", text=show(form.detailed_description)),
        evidence=text_block.format(label="Evidence", text=show(form.evidence)),
    )

    return TicketPayload(
        **requester.model_dump(exclude_none=True),
        subject=incident_subject(form),
        description=description,
        priority=priority_for_severity(form.severity),
        type="Incident",
        tags=_tags("incident", form.service),
    )
