from pydantic import BaseModel, model_validator

TICKET_STATUS_OPEN = 2
TICKET_SOURCE_PORTAL = 2


class ContactRecord(BaseModel):
    id: int | str
    name: str | None = None
    email: str | None = None
    mobile: str | None = None


class Requester(BaseModel):
    """Who a ticket is on behalf of: a contact id, or raw contact fields."""

    requester_id: int | str | None = None
    email: str | None = None
    name: str | None = None
    phone: str | None = None

    @classmethod
    def from_contact(cls, contact: ContactRecord) -> "Requester":
        return cls(requester_id=contact.id)

    @classmethod
    def from_fields(cls, name: str, email: str, phone: str) -> "Requester":
        return cls(email=email or None, name=name or None, phone=phone or None)


class TicketPayload(BaseModel):
    requester_id: int | str | None = None
    email: str | None = None
    name: str | None = None
    phone: str | None = None
    subject: str
    description: str
    priority: int = 1
    status: int = TICKET_STATUS_OPEN
    source: int = TICKET_SOURCE_PORTAL
    type: str | None = None
    tags: list[str] | None = None
    custom_fields: dict[str, str] | None = None

    @model_validator(mode="after")
    def _check_requester(self):
        if self.requester_id is None and not self.email:
            raise ValueError("a ticket needs a requester_id or an email")
        if not 1 <= self.priority <= 4:
            raise ValueError("priority must be between 1 and 4")
        return self

    def to_api(self) -> dict:
        return self.model_dump(exclude_none=True)


class TicketResult(BaseModel):
    ok: bool
    status_code: int
    body: str = ""
