import logging

from formrelay.errors import UpstreamError
from formrelay.schemas.ticket import ContactRecord
from formrelay.services.freshdesk_client import FreshdeskClient

logger = logging.getLogger(__name__)


def resolve_contact(client: FreshdeskClient, email: str, phone: str) -> ContactRecord | None:
    """Finds an existing contact by email, falling back to phone. Returns the first match or None."""
    if email:
        matches = client.search_contacts_by_email(email)
        if matches:
            return matches[0]

    if phone:
        matches = client.search_contacts_by_phone(phone)
        if matches:
            return matches[0]

    return None


def contact_fields(name: str, email: str, phone: str) -> dict:
    fields = {"name": name, "email": email, "mobile": phone}
    return {key: value for key, value in fields.items() if value}


def needs_update(existing: ContactRecord, fields: dict) -> bool:
    return any(value != getattr(existing, key) for key, value in fields.items())


def upsert_contact(client: FreshdeskClient, name: str, email: str, phone: str, default_name: str = "") -> ContactRecord:
    """
    Returns a contact for the submitter, creating or updating it as needed.

    Creation failures raise UpstreamError. Update failures fall back to the
    contact that was already there. default_name only fills in a missing
    name on creation; it never overwrites an existing contact.
    """
    existing = resolve_contact(client, email, phone)
    fields = contact_fields(name, email, phone)

    if existing is None:
        contact = client.create_contact(contact_fields(name or default_name, email, phone))
        logger.info("Created Freshdesk contact %s", contact.id)
        return contact

    if not needs_update(existing, fields):
        return existing

    try:
        contact = client.update_contact(existing.id, fields)
    except UpstreamError as e:
        logger.warning("Updating contact %s failed (%s), keeping existing record", existing.id, e.status_code)
        return existing

    logger.info("Updated Freshdesk contact %s", contact.id)
    return contact
