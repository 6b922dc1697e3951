from __future__ import annotations

# Custom ids of persistent components; they must survive restarts unchanged.
TICKET_MENU_ID = "ticket_menu"
TICKET_BUTTON_ID = "ticket_button"
CLOSE_TICKET_ID = "close_ticket"
VERIFY_BUTTON_ID = "verify_button"

TICKET_CHANNEL_PREFIX = "ticket-"
GENERAL_TICKET_REASON = "general"

NON_TEXT_PLACEHOLDER = "[embed/attachment]"

MAX_CLEAR_MESSAGES = 100
DEFAULT_CLEAR_MESSAGES = 5
CLEAR_CONFIRMATION_SECONDS = 3.0
