"""Type definitions, enums and reserved names for trello-collate."""

from enum import Enum


# Reserved names. Matching against board data is case-insensitive, so the
# lookup keys are stored lower-cased; display casing is not preserved.
WORK_BUCKETS_LIST = "work buckets"
FALLBACK_BUCKET = "none"

# Checklist names are created with this exact casing.
OPEN_CARDS_CHECKLIST = "Open Cards"
UNKNOWN_BUCKETS_CHECKLIST = "Unknown Buckets"


class BoardErrorPolicy(str, Enum):
    """What a pass does when one board fails."""

    ABORT = "abort"         # Stop the pass; remaining boards wait for the next period
    CONTINUE = "continue"   # Record the failure and move on to the next board


class CheckItemState(str, Enum):
    """Checklist item completion state as reported by Trello."""

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"


# Type aliases for common patterns
BucketKey = str   # Lower-cased tag text, or FALLBACK_BUCKET
Seconds = float
