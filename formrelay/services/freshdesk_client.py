import logging

import requests

from formrelay.errors import UpstreamError
from formrelay.schemas.ticket import ContactRecord, TicketPayload, TicketResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15


class FreshdeskClient:
    """
    Thin wrapper around the Freshdesk v2 REST API.

    Lookups treat any failure as "no match"; contact writes raise
    UpstreamError; ticket creation reports its outcome as a TicketResult.
    """

    def __init__(self, domain: str, api_key: str, timeout: int = DEFAULT_TIMEOUT, session: requests.Session | None = None):
        self.base_url = f"https://{domain}.freshdesk.com/api/v2"
        self.timeout = timeout
        self.session = session or requests.Session()
        # Freshdesk takes the API key as the username and ignores the password.
        self.session.auth = (api_key, "X")
        self.session.headers.update({"Accept": "application/json"})

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        return self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)

    def _search_contacts(self, params: dict) -> list[ContactRecord]:
        try:
            resp = self._request("GET", "/contacts", params=params)
        except requests.RequestException as e:
            logger.warning("Contact lookup %s failed: %s", list(params), e)
            return []

        if not resp.ok:
            logger.warning("Contact lookup %s returned %s", list(params), resp.status_code)
            return []

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Contact lookup %s returned invalid JSON", list(params))
            return []

        if not isinstance(data, list):
            return []
        return [ContactRecord.model_validate(item) for item in data if isinstance(item, dict) and "id" in item]

    def search_contacts_by_email(self, email: str) -> list[ContactRecord]:
        return self._search_contacts({"email": email})

    def search_contacts_by_phone(self, phone: str) -> list[ContactRecord]:
        return self._search_contacts({"mobile": phone})

    def _write_contact(self, method: str, path: str, fields: dict) -> ContactRecord:
        try:
            resp = self._request(method, path, json=fields)
        except requests.RequestException as e:
            raise UpstreamError(502, f"Network error calling Freshdesk: {str(e)}")

        if not resp.ok:
            raise UpstreamError(resp.status_code, resp.text)

        try:
            return ContactRecord.model_validate(resp.json())
        except ValueError:
            raise UpstreamError(502, f"Freshdesk contact response was not usable: {resp.text}")

    def create_contact(self, fields: dict) -> ContactRecord:
        return self._write_contact("POST", "/contacts", fields)

    def update_contact(self, contact_id: int | str, fields: dict) -> ContactRecord:
        return self._write_contact("PUT", f"/contacts/{contact_id}", fields)

    def create_ticket(self, payload: TicketPayload) -> TicketResult:
        try:
            resp = self._request("POST", "/tickets", json=payload.to_api())
        except requests.RequestException as e:
            return TicketResult(ok=False, status_code=502, body=f"Network error calling Freshdesk: {str(e)}")

        return TicketResult(ok=resp.ok, status_code=resp.status_code, body=resp.text)

    def close(self) -> None:
        self.session.close()
