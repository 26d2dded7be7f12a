"""Validation of guest submissions against an event's custom fields.

Everything here is pure: it works on frozen ``CustomFieldDTO`` snapshots and
never touches the database, so it can run before the write transaction opens.
"""

import logging
from collections.abc import Mapping, Sequence

from src.rsvps.dtos import (
    MAX_VALUE_LENGTH,
    CustomFieldDTO,
    InvalidOption,
    InvalidResponseChoice,
    MissingName,
    MissingRequiredField,
    RsvpResponse,
    UnknownField,
    ValidatedAnswer,
    ValueTooLong,
)

logger = logging.getLogger(__name__)


def is_blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def parse_response_choice(choice: str | None) -> RsvpResponse:
    """Map a submitted button/choice label onto yes, maybe or no, ignoring case."""
    normalized = (choice or "").strip().lower()
    for response in RsvpResponse:
        if response.value == normalized:
            return response
    raise InvalidResponseChoice(choice)


def clean_name(name: str | None) -> str:
    if is_blank(name):
        raise MissingName()
    cleaned = name.strip()
    if len(cleaned) > MAX_VALUE_LENGTH:
        raise ValueTooLong("name", len(cleaned))
    return cleaned


def validate_answers(
    custom_fields: Sequence[CustomFieldDTO],
    answers: Mapping[str, str | None],
) -> tuple[ValidatedAnswer, ...]:
    """Check raw answers keyed by field id and return what should be stored.

    Required fields are checked first, over every field, so a submission
    missing several answers reports all of them. Then each non-blank answer is
    resolved to one of ``custom_fields`` and checked against its options and
    the length limit. Blank answers to optional fields are dropped.

    Raises a ``ValidationFailed`` subclass on the first problem found.
    """
    schema = tuple(sorted(custom_fields, key=lambda f: f.position))
    by_id = {str(custom_field.id): custom_field for custom_field in schema}

    missing = [
        str(custom_field.id)
        for custom_field in schema
        if custom_field.required and is_blank(answers.get(str(custom_field.id)))
    ]
    if missing:
        logger.info("Submission rejected, missing required fields %s", missing)
        raise MissingRequiredField(missing)

    validated: dict[str, ValidatedAnswer] = {}
    for field_id, raw_value in answers.items():
        if is_blank(raw_value):
            continue

        custom_field = by_id.get(str(field_id))
        if custom_field is None:
            logger.info("Submission rejected, unknown field %s", field_id)
            raise UnknownField(str(field_id))

        value = str(raw_value).strip()
        if len(value) > MAX_VALUE_LENGTH:
            logger.info("Submission rejected, answer to %s is %d chars", field_id, len(value))
            raise ValueTooLong(str(field_id), len(value))
        if custom_field.is_dropdown and value not in custom_field.options:
            logger.info("Submission rejected, %r is not an option of %s", value, field_id)
            raise InvalidOption(str(field_id), value)

        validated[str(custom_field.id)] = ValidatedAnswer(custom_field=custom_field, value=value)

    return tuple(
        validated[str(custom_field.id)]
        for custom_field in schema
        if str(custom_field.id) in validated
    )
