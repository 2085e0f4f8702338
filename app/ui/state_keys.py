FLOW = "checkin_flow"
SHARE_BASE_URL = "share_base_url"
FEEDBACK_SENT = "feedback_sent"
PARTNER_ERROR = "partner_token_error"
