"""Fuzzy matching of participant identities.

Invitee emails are typed by hand and never validated before they reach
the status reducer, so the same person can show up as ``J.Doe@Gmail.com``
in a response and ``jdoe@gmailcom`` on the invitation. Matching tolerates
such cosmetic differences instead of creating a second participant:

1. Normalize: lowercase, trim, drop dots from the local part.
2. Equal after normalization.
3. Same local part and same domain once dots are stripped from both
   domains, or once known domain typos are corrected.
4. Similarity ratio (normalized Levenshtein distance) above the
   configured threshold, 0.9 by default.

This is a heuristic. Distinct addresses that differ by one character in a
long string can be merged, and badly mangled ones can be missed. Ratios
in the band just below the threshold are reported as ambiguous by
``resolve_identity`` so callers can refuse rather than guess.
"""

from dataclasses import dataclass
from typing import Sequence

from cnnct.core.config import settings
from cnnct.models.participant import Participant

# Dot-stripped domain typos seen in invitation lists, mapped to the
# dot-stripped intended domain.
DOMAIN_CORRECTIONS = {
    "gmialcom": "gmailcom",
    "gmalcom": "gmailcom",
    "gmailco": "gmailcom",
    "gmailcm": "gmailcom",
    "gnailcom": "gmailcom",
    "googlemailcom": "gmailcom",
    "yahocom": "yahoocom",
    "yahooco": "yahoocom",
    "hotmialcom": "hotmailcom",
    "hotmalcom": "hotmailcom",
    "hotmailco": "hotmailcom",
    "outlokcom": "outlookcom",
    "outlookco": "outlookcom",
    "iclodcom": "icloudcom",
}


def split_identity(value: str) -> tuple[str, str]:
    """Split an email into (local part, domain). Domain is "" if absent."""
    local, sep, domain = value.rpartition("@")
    if not sep:
        return value, ""
    return local, domain


def normalize_identity(value: str) -> str:
    """Lowercase, trim, and remove dots from the local part of an email."""
    local, domain = split_identity(value.strip().lower())
    local = local.replace(".", "")
    if not domain:
        return local
    return f"{local}@{domain}"


def _canonical_domain(domain: str) -> str:
    stripped = domain.replace(".", "")
    return DOMAIN_CORRECTIONS.get(stripped, stripped)


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings (insert, delete, substitute)."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + (char_a != char_b),  # substitution
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """
    Similarity ratio of two identities after normalization.

    ``1 - levenshtein(a, b) / max(len(a), len(b))``, so 1.0 means equal and
    0.0 means nothing in common. Two empty strings are equal.
    """
    a, b = normalize_identity(a), normalize_identity(b)
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - levenshtein(a, b) / longest


def _same_mailbox(a: str, b: str) -> bool:
    """Exact or domain-typo match of two normalized identities."""
    if a == b:
        return True
    local_a, domain_a = split_identity(a)
    local_b, domain_b = split_identity(b)
    if not (local_a and domain_a and local_b and domain_b):
        return False
    return local_a == local_b and _canonical_domain(domain_a) == _canonical_domain(domain_b)


def matches(a: str, b: str) -> bool:
    """
    Decide whether two identity strings name the same person.

    Symmetric and reflexive. Blank strings only match each other.
    """
    norm_a, norm_b = normalize_identity(a), normalize_identity(b)
    if _same_mailbox(norm_a, norm_b):
        return True
    if not norm_a or not norm_b:
        return False
    return similarity(norm_a, norm_b) > settings.match_threshold


@dataclass(frozen=True)
class IdentityMatch:
    """Outcome of looking an identity up in a participant list.

    Attributes:
        index: Position of the matching participant, or None.
        ratio: Best similarity ratio seen.
        candidate: Identity of the closest participant, even if it did
            not match.
        ambiguous: True when nothing matched but the closest participant
            was within the ambiguous band.
    """
    index: int | None
    ratio: float = 0.0
    candidate: str | None = None
    ambiguous: bool = False

    @property
    def found(self) -> bool:
        return self.index is not None


def resolve_identity(participants: Sequence[Participant], identity: str) -> IdentityMatch:
    """
    Find the participant an identity refers to.

    Exact and domain-typo matches win over similarity matches; among
    similarity matches the highest ratio wins, earliest on ties.
    """
    target = normalize_identity(identity)
    best_index: int | None = None
    best_ratio = 0.0

    for index, participant in enumerate(participants):
        stored = normalize_identity(participant.identity)
        if _same_mailbox(stored, target):
            return IdentityMatch(index=index, ratio=1.0, candidate=participant.identity)
        ratio = similarity(stored, target)
        if ratio > best_ratio:
            best_index, best_ratio = index, ratio

    if best_index is None:
        return IdentityMatch(index=None)

    candidate = participants[best_index].identity
    if best_ratio > settings.match_threshold:
        return IdentityMatch(index=best_index, ratio=best_ratio, candidate=candidate)

    ambiguous = best_ratio >= settings.ambiguous_threshold
    return IdentityMatch(index=None, ratio=best_ratio, candidate=candidate, ambiguous=ambiguous)
