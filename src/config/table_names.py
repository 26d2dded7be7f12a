from enum import Enum


class TableNames(str, Enum):
    EVENTS = "events"
    CUSTOM_FIELDS = "custom_fields"
    RSVPS = "rsvps"
    CUSTOM_FIELD_RESPONSES = "custom_field_responses"
