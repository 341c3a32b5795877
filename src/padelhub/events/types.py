"""Event type constants.

Learn: Centralizing event types as constants prevents typos and
makes it easy to discover all event types in the system.
"""

# ─── Profiles ────────────────────────────────────────────

PROFILE_CREATED = "profile.created"
PROFILE_ROLE_RECONCILED = "profile.role_reconciled"

# ─── Coach links ─────────────────────────────────────────

PLAYER_LINKED = "coach.player_linked"
PLAYER_UNLINKED = "coach.player_unlinked"

# ─── Feedback ────────────────────────────────────────────

FEEDBACK_CREATED = "feedback.created"
FEEDBACK_DELETED = "feedback.deleted"

# ─── Shared library ──────────────────────────────────────

LIBRARY_ITEM_CREATED = "library.item_created"
LIBRARY_ITEM_DELETED = "library.item_deleted"
LIBRARY_SEEDED = "library.seeded"
