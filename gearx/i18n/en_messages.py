"""English message constants used across routers and services.

Parser messages are surfaced verbatim to administrators next to the pasted
percentile data, so they reference the line the administrator sees.
"""


class PercentileMessages:
    """Percentile CSV parsing and import feedback."""

    EXPECTED_TWO_COLUMNS: str = 'Line {line}: Expected "marks, percentile"'
    NON_NUMERIC: str = 'Line {line}: Non-numeric values "{mark}", "{percentile}"'
    NO_VALID_ROWS: str = "No valid percentile rows found."
    EMPTY_TABLE: str = "Percentile map is empty"
    MALFORMED_TABLE: str = "Percentile map must be a sequence of finite numbers"
    MAX_MARKS_INVALID: str = "max_marks must be a non-negative integer"
    MAX_MARKS_TOO_LARGE: str = "max_marks must be <= {limit}"
    MAP_NOT_FOUND: str = "No percentile map stored for test {test_id}"
    TEST_ID_REQUIRED: str = "test_id is required"
    TEST_ID_MAX_LENGTH: str = "test_id must be <= 128 characters"


class AdminMessages:
    """Administrator access and upload feedback."""

    ADMIN_HEADER_REQUIRED: str = "X-Admin-Email header is required"
    ADMIN_ONLY: str = "Only administrators may manage percentile maps"
    FILE_MUST_BE_CSV: str = "Percentile file must be a .csv or .txt file"
    FILE_NOT_UTF8: str = "Percentile file must be UTF-8 encoded"


class ScoringMessages:
    """Submission scoring validation feedback."""

    ATTEMPTED_EXCEEDS_TOTAL: str = "{subject}: attempted ({attempted}) exceeds total questions ({total})"
    CORRECT_EXCEEDS_ATTEMPTED: str = "{subject}: correct ({correct}) exceeds attempted ({attempted})"
    DUPLICATE_SUBJECT: str = "Subject {subject} appears more than once"
