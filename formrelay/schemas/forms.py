from dataclasses import dataclass

from pydantic import BaseModel, field_validator

from formrelay.errors import ConfigError, ConsentError, FormValidationError
from formrelay.sanitizer import normalize

CONSENT_VALUES = {"true", "on", "1", "yes", "y", "sim", "s"}


class FormSubmission(BaseModel):
    """Fields shared by every public form. All text is trimmed at the boundary."""

    website: str = ""  # honeypot
    name: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    origin: str = ""
    channel: str = ""
    consent: bool = False

    @field_validator("*", mode="before")
    @classmethod
    def _normalize_text(cls, value, info):
        if info.field_name in ("consent", "interests"):
            return value
        if info.field_name == "website" and value is not None and not isinstance(value, str):
            # any filled copy of the honeypot counts, whatever its type
            items = value if isinstance(value, (list, tuple)) else [value]
            return " ".join(filter(None, (str(item).strip() for item in items if item not in (None, False))))
        return normalize(value)

    @field_validator("consent", mode="before")
    @classmethod
    def _parse_consent(cls, value):
        if isinstance(value, list):
            value = value[-1] if value else None
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return value != 0
        return normalize(value).lower() in CONSENT_VALUES

    @property
    def is_spam(self) -> bool:
        return bool(self.website)


class CommercialDemoForm(FormSubmission):
    company_size: str = ""
    message: str = ""
    interests: list[str] = []

    @field_validator("interests", mode="before")
    @classmethod
    def _interests_as_list(cls, value):
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [str(item).strip() for item in value if item is not None and str(item).strip()]


class IncidentReportForm(FormSubmission):
    service: str = ""
    severity: str = ""
    impact: str = ""
    start_time: str = ""
    environment: str = ""
    summary: str = ""
    detailed_description: str = ""
    evidence: str = ""


@dataclass(frozen=True)
class ValidationPolicy:
    name: str
    required: tuple[str, ...]
    require_consent: bool = False

    def check(self, form: FormSubmission) -> None:
        missing = [field for field in self.required if not getattr(form, field)]
        if missing:
            raise FormValidationError("missing_fields", missing)
        if self.require_consent and not form.consent:
            raise ConsentError()


COMMERCIAL_POLICIES = {
    "minimal": ValidationPolicy("minimal", ("company", "email")),
    "strict": ValidationPolicy(
        "strict",
        ("name", "company", "email", "phone", "company_size"),
        require_consent=True,
    ),
}

INCIDENT_POLICIES = {
    "minimal": ValidationPolicy("minimal", ("email",)),
    "strict": ValidationPolicy(
        "strict",
        ("name", "email", "phone", "company", "service", "severity", "detailed_description"),
        require_consent=True,
    ),
}


def get_policy(policies: dict[str, ValidationPolicy], name: str) -> ValidationPolicy:
    try:
        return policies[name]
    except KeyError:
        raise ConfigError(f"Unknown validation policy {name!r}, expected one of {sorted(policies)}")
