"""
Organizer side of the call for papers: listing, exporting and reviewing
the proposals submitted to an event.
"""

import math

# Query-string value of the status filter, and the proposal columns it matches
STATUS_FILTERS = {
    "pending": {"deliberation_status": "PENDING"},
    "accepted": {"deliberation_status": "ACCEPTED"},
    "rejected": {"deliberation_status": "REJECTED"},
    # Accepted and announced to the speakers, who haven't answered yet
    "not-answered": {
        "deliberation_status": "ACCEPTED",
        "publication_status": "PUBLISHED",
        "confirmation_status": "PENDING",
    },
    "confirmed": {"confirmation_status": "CONFIRMED"},
    "declined": {"confirmation_status": "DECLINED"},
}

REVIEW_FILTERS = ["reviewed", "not-reviewed"]

SORT_OPTIONS = ["newest", "oldest", "highest", "lowest"]

RESULTS_BY_PAGE = 25


def page_count(total: int, per_page: int) -> int:
    if per_page < 1:
        raise ValueError("per_page must be positive")
    return math.ceil(total / per_page)
