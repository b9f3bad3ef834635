"""
Failure Reasons
===============
Standardised constants for why a synthesis attempt produced no result.

Used by SynthesisResult.reason and StrategyResult.reason to give callers
and logs clean, machine-readable failure reasons.
"""


# ---------------------------------------------------------------------------
# Failure Reason Constants
# ---------------------------------------------------------------------------
MISSING_CREDENTIALS = "MISSING_CREDENTIALS"
TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
HTTP_ERROR = "HTTP_ERROR"
EMPTY_RESPONSE = "EMPTY_RESPONSE"
NO_JSON_FOUND = "NO_JSON_FOUND"
INVALID_JSON = "INVALID_JSON"
SCHEMA_VIOLATION = "SCHEMA_VIOLATION"

# All valid reasons (for validation)
ALL_FAILURE_REASONS = frozenset({
    MISSING_CREDENTIALS,
    TRANSPORT_FAILURE,
    HTTP_ERROR,
    EMPTY_RESPONSE,
    NO_JSON_FOUND,
    INVALID_JSON,
    SCHEMA_VIOLATION,
})


# ---------------------------------------------------------------------------
# Error kinds (maps reason → error kind)
# ---------------------------------------------------------------------------
ERROR_KINDS = {
    MISSING_CREDENTIALS: "configuration",
    TRANSPORT_FAILURE: "transport",
    HTTP_ERROR: "transport",
    EMPTY_RESPONSE: "transport",
    NO_JSON_FOUND: "no_match",
    INVALID_JSON: "no_match",
    SCHEMA_VIOLATION: "schema",
}


def get_error_kind(reason: str) -> str:
    """
    Map a failure reason to its error kind.

    Parameters
    ----------
    reason : str
        One of the failure reason constants.

    Returns
    -------
    str
        "configuration", "transport", "no_match", "schema", or "unknown".
    """
    return ERROR_KINDS.get(reason, "unknown")
