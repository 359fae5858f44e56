LOOKUP_GUEST_URL = "/api/v1/guests/lookup"
GUESTS_URL = "/api/v1/guests"
GUEST_URL = "/api/v1/guests/{guest_id}"
GUEST_PARTNER_URL = "/api/v1/guests/{guest_id}/partner"

RSVPS_URL = "/api/v1/rsvps"
RSVP_SUMMARY_URL = "/api/v1/rsvps/summary"
