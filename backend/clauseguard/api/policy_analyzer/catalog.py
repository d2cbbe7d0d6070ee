"""Fixed catalogs: Dirty Dozen categories, grade and status orderings, policy types."""

from typing import Literal, NamedTuple

Grade = Literal["A", "B", "C", "D", "F", "?"]
FindingStatus = Literal["safe", "warning", "danger", "unknown"]

# Increasing risk. "?" is absent: it sorts below everything.
GRADE_ORDER: tuple[str, ...] = ("A", "B", "C", "D", "F")
STATUS_ORDER: tuple[str, ...] = ("safe", "unknown", "warning", "danger")

UNKNOWN_GRADE = "?"
DEFAULT_GRADE = "C"


class Category(NamedTuple):
    id: str
    name: str
    description: str


DIRTY_DOZEN: tuple[Category, ...] = (
    Category("data_sale", "Data Sale", "Sells your personal data to third parties"),
    Category("ai_training", "AI Training", "Uses your content to train AI models"),
    Category("forced_arbitration", "Forced Arbitration", "Waives your right to sue or join class actions"),
    Category("content_ownership", "Content Ownership", "Claims rights over your uploaded content"),
    Category("location_tracking", "Location Tracking", "Tracks and stores your location data"),
    Category("cross_site_tracking", "Cross-Site Tracking", "Tracks your activity across other websites"),
    Category("data_retention", "Data Retention", "Keeps your data indefinitely or for long periods"),
    Category("third_party_sharing", "Third-Party Sharing", "Shares data with unnamed third parties"),
    Category("policy_changes", "Silent Updates", "Can change terms without notifying you"),
    Category("account_termination", "Account Termination", "Can terminate your account without cause"),
    Category("biometric_collection", "Biometric Data", "Collects fingerprints, face data, or voice prints"),
    Category("children_data", "Children's Data", "Weak protections for minors' data"),
)

CATEGORY_IDS: frozenset[str] = frozenset(c.id for c in DIRTY_DOZEN)

GRADE_DESCRIPTIONS: dict[str, dict[str, str]] = {
    "A": {"label": "Excellent - User-friendly terms", "description": "This policy respects your privacy and rights."},
    "B": {"label": "Good - Minor concerns", "description": "Generally good, with a few areas to be aware of."},
    "C": {"label": "Fair - Some issues", "description": "Contains some concerning clauses worth reviewing."},
    "D": {"label": "Poor - Significant concerns", "description": "Multiple problematic clauses that affect your rights."},
    "F": {"label": "Fail - Major red flags", "description": "Serious privacy and rights concerns. Proceed with caution."},
    "?": {"label": "Unknown - Not yet analyzed", "description": "The analysis could not determine a grade."},
}

POLICY_TYPES: dict[str, str] = {
    "privacy": "Privacy Policy",
    "terms": "Terms of Service",
    "eula": "End User License Agreement",
    "cookie": "Cookie Policy",
    "data": "Data Protection Policy",
    "acceptable": "Acceptable Use Policy",
    "unknown": "Legal Document",
}


def grade_rank(grade: str) -> int:
    """Index of *grade* in GRADE_ORDER, -1 for anything outside it."""
    try:
        return GRADE_ORDER.index(grade)
    except ValueError:
        return -1


def status_rank(status: str) -> int:
    """Index of *status* in STATUS_ORDER, -1 for anything outside it."""
    try:
        return STATUS_ORDER.index(status)
    except ValueError:
        return -1


def resolve_policy_type(value: str | None) -> str:
    """Map a short policy key (``privacy``, ``terms``...) to its label; other text passes through."""
    candidate = (value or "").strip()
    if not candidate:
        return POLICY_TYPES["unknown"]
    return POLICY_TYPES.get(candidate.lower(), candidate)
