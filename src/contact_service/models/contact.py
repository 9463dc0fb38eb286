import re
from datetime import date, datetime
from typing import Annotated, Any, get_args

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from contact_service.shared.errors import ValidationError

__all__ = [
    "PHONE_PATTERN",
    "Address",
    "ContactPayload",
    "ImportantDates",
    "SocialLinks",
    "WorkInfo",
    "first_error_message",
    "sensitive_paths",
    "validate_contact",
]

PHONE_PATTERN = r"^\d{2}-\d{3}-\d{3}-\d{4}$"

_uri_adapter = TypeAdapter(AnyUrl)


def sensitive(default: Any = ..., **kwargs) -> Any:
    """Field that is encrypted at rest."""
    return Field(default, json_schema_extra={"sensitive": True}, **kwargs)


def _check_email(value: str) -> str:
    if value == "":
        return value
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise PydanticCustomError("email", "must be a valid email") from e
    return value.lower()


def _check_uri(value: str) -> str:
    if value == "":
        return value
    try:
        _uri_adapter.validate_python(value)
    except PydanticValidationError as e:
        raise PydanticCustomError("uri", "must be a valid uri") from e
    return value


def _check_phone(value: str) -> str:
    # ASCII digits only; \d alone would accept any Unicode decimal digit
    if not re.fullmatch(PHONE_PATTERN, value, re.ASCII):
        raise PydanticCustomError(
            "string_pattern_mismatch",
            "String should match pattern '{pattern}'",
            {"pattern": PHONE_PATTERN},
        )
    return value


def _check_date(value: str) -> str:
    # The raw string is stored; parsing only proves it is a date
    for parse in (datetime.fromisoformat, date.fromisoformat):
        try:
            parse(value)
            return value
        except ValueError:
            continue
    raise PydanticCustomError("date", "must be a valid date")


PhoneNumber = Annotated[str, AfterValidator(_check_phone)]
Email = Annotated[str, AfterValidator(_check_email)]
Uri = Annotated[str, AfterValidator(_check_uri)]
DateString = Annotated[str, AfterValidator(_check_date)]


class _Document(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="forbid",
    )


class Address(_Document):
    street: str = sensitive("")
    city: str = sensitive("")
    county: str = sensitive("")
    country: str = sensitive("")
    postal_code: str = sensitive("")


class ImportantDates(_Document):
    date_of_birth: DateString | None = sensitive(None)
    date_of_anniversary: DateString | None = sensitive(None)


class WorkInfo(_Document):
    company: str = ""
    job_title: str = ""
    department: str = ""


class SocialLinks(_Document):
    facebook: Uri = ""
    twitter: Uri = ""
    linkedin: Uri = ""
    instagram: Uri = ""


class ContactPayload(_Document):
    """Create and update body. Field order is the order rules are reported in."""

    first_name: str = sensitive(min_length=1)
    middle_name: str = sensitive("")
    last_name: str = sensitive("")
    nick_name: str = sensitive("")
    phone_number: PhoneNumber = sensitive(min_length=1)
    email: Email = sensitive("")
    address: Address | None = None
    important_dates: ImportantDates | None = None
    work_info: WorkInfo | None = None
    notes: str = sensitive("")
    profile_photo: Uri = ""
    website: Uri = ""
    social_links: SocialLinks | None = None


def _nested_model(annotation: Any) -> type[BaseModel] | None:
    for candidate in (annotation, *get_args(annotation)):
        if isinstance(candidate, type) and issubclass(candidate, BaseModel):
            return candidate
    return None


def _is_sensitive(field) -> bool:
    extra = field.json_schema_extra
    return isinstance(extra, dict) and bool(extra.get("sensitive"))


def sensitive_paths(model: type[BaseModel] = ContactPayload) -> tuple[str, ...]:
    """Dotted wire paths of every field tagged sensitive, one level of nesting deep."""
    paths = []
    for name, field in model.model_fields.items():
        key = field.alias or name
        if _is_sensitive(field):
            paths.append(key)
            continue
        nested = _nested_model(field.annotation)
        if nested is None:
            continue
        for child_name, child in nested.model_fields.items():
            if _is_sensitive(child):
                paths.append(f"{key}.{child.alias or child_name}")
    return tuple(paths)


_MESSAGES = {
    "missing": '"{label}" is required',
    "string_type": '"{label}" must be a string',
    "string_too_short": '"{label}" is not allowed to be empty',
    "string_pattern_mismatch": (
        '"{label}" with value "{input}" fails to match the required pattern: /{pattern}/'
    ),
    "model_type": '"{label}" must be of type object',
    "model_attributes_type": '"{label}" must be of type object',
    "dict_type": '"{label}" must be of type object',
    "extra_forbidden": '"{label}" is not allowed',
}


def first_error_message(error: PydanticValidationError) -> str:
    """Render the first violated rule as a single caller-facing message."""
    detail = error.errors()[0]
    label = ".".join(str(part) for part in detail["loc"]) or "value"
    template = _MESSAGES.get(detail["type"])
    if template is None:
        return f'"{label}" {detail["msg"]}'
    return template.format(
        label=label,
        input=detail.get("input"),
        pattern=(detail.get("ctx") or {}).get("pattern", ""),
    )


def validate_contact(payload: Any) -> dict[str, Any]:
    """Validate a create/update body and return the fields the caller supplied.

    Raises ValidationError carrying the message of the first violated rule.
    """
    try:
        contact = ContactPayload.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(first_error_message(e)) from e
    return contact.model_dump(by_alias=True, exclude_unset=True)
