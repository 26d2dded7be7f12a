CREATE_EVENT_URL = "/api/v1/events"
GET_EVENT_URL = "/api/v1/events/{public_id}"
EVENT_ADMIN_URL = "/api/v1/events/{public_id}/admin/{admin_token}"
SUBMIT_RSVP_URL = "/api/v1/events/{public_id}/rsvps"
CANCEL_RSVP_URL = "/api/v1/events/{public_id}/rsvps/{token}"
