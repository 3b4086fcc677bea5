"""Email normalization and advisory donor/member matching.

Nothing here links records on its own. Every function returns plain data for
a person to review, and none of them raise on odd input.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..constants.categories import ANONYMOUS_DONOR
from ..models.member import Member

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_EMAIL_LENGTH = 320  # RFC 3696
DISPOSABLE_DOMAINS = frozenset({"10minutemail.com", "temp-mail.org", "guerrillamail.com"})
_TOKEN_SPLIT = re.compile(r"[^\w]+")


def normalize_email(raw: Optional[str]) -> Optional[str]:
    """Trim and lowercase; blank or missing input means "no email" (None)."""

    if not raw or not isinstance(raw, str):
        return None
    cleaned = raw.strip().lower()
    return cleaned or None


def find_by_email(members: Iterable[Member], email: Optional[str]) -> Optional[Member]:
    """Return the first member whose normalized email equals ``email``."""

    target = normalize_email(email)
    if target is None:
        return None
    for member in members:
        if normalize_email(member.email) == target:
            return member
    return None


def is_email_taken(
    members: Iterable[Member], email: Optional[str], exclude_id: Optional[int] = None
) -> bool:
    """True when another member (not ``exclude_id``) already uses the email."""

    target = normalize_email(email)
    if target is None:
        return False
    return any(
        member.id != exclude_id and normalize_email(member.email) == target
        for member in members
    )


def members_with_emails(members: Iterable[Member]) -> list[Member]:
    return [m for m in members if normalize_email(m.email) is not None]


def find_duplicate_groups(members: Iterable[Member]) -> dict[str, list[Member]]:
    """Group members sharing a normalized email; singletons are left out."""

    groups: dict[str, list[Member]] = {}
    for member in members:
        key = normalize_email(member.email)
        if key is None:
            continue
        groups.setdefault(key, []).append(member)
    return {email: group for email, group in groups.items() if len(group) > 1}


@dataclass(frozen=True, slots=True)
class EmailValidation:
    is_valid: bool
    message: str


def validate_email_uniqueness(
    members: Iterable[Member], email: Optional[str], exclude_id: Optional[int] = None
) -> EmailValidation:
    """Check format, length, disposable domains and uniqueness, in that order."""

    target = normalize_email(email)
    if target is None:
        return EmailValidation(False, "Email address is required.")
    if not EMAIL_PATTERN.match(target):
        return EmailValidation(False, "Please enter a valid email address.")
    if len(target) > MAX_EMAIL_LENGTH:
        return EmailValidation(False, "Email address is too long.")
    domain = target.rsplit("@", 1)[-1]
    if domain in DISPOSABLE_DOMAINS:
        return EmailValidation(False, "Disposable email addresses are not allowed.")
    if is_email_taken(members, target, exclude_id=exclude_id):
        return EmailValidation(
            False, "This email address is already associated with another member."
        )
    return EmailValidation(True, "Email address is valid.")


@dataclass(frozen=True, slots=True)
class MatchSuggestion:
    """A candidate member for a human to confirm; ``reason`` is "email" or "name"."""

    member: Member
    reason: str
    score: float


def _name_tokens(name: str) -> set[str]:
    return {token for token in _TOKEN_SPLIT.split(name.lower()) if len(token) > 1}


def _name_score(candidate: str, target: str) -> float:
    cand, tgt = candidate.strip().lower(), target.strip().lower()
    if not cand or not tgt:
        return 0.0
    if cand == tgt:
        return 1.0
    if tgt in cand or cand in tgt:
        return 0.75
    cand_tokens, tgt_tokens = _name_tokens(cand), _name_tokens(tgt)
    overlap = cand_tokens & tgt_tokens
    if not overlap:
        return 0.0
    return 0.5 * len(overlap) / len(cand_tokens | tgt_tokens)


def suggest_matches(
    members: Sequence[Member],
    target_email: Optional[str],
    target_name: Optional[str],
) -> list[MatchSuggestion]:
    """Suggest members that might be the same person as the target.

    An exact normalized-email match wins outright. Without one, fall back to
    case-insensitive substring or token overlap on names, best first.
    """

    email = normalize_email(target_email)
    if email is not None:
        exact = [m for m in members if normalize_email(m.email) == email]
        if exact:
            return [MatchSuggestion(member=m, reason="email", score=1.0) for m in exact]

    if not target_name or not target_name.strip():
        return []

    scored = [
        MatchSuggestion(member=m, reason="name", score=score)
        for m in members
        if (score := _name_score(m.name or "", target_name)) > 0
    ]
    return sorted(scored, key=lambda s: s.score, reverse=True)


@dataclass(frozen=True, slots=True)
class DonorIdentity:
    """Who a gift came from.

    ``display_name`` is the literal donor name (or "Anonymous") and is what
    donor profiles group on. ``key`` is the lowercased, whitespace-collapsed
    form used for member lookup. ``member_id`` is set only on an unambiguous
    name match.
    """

    key: str
    display_name: str
    member_id: Optional[int] = None

    @property
    def is_anonymous(self) -> bool:
        return self.display_name == ANONYMOUS_DONOR


def donor_display_name(donor_name: Optional[str]) -> str:
    """The grouping label for a gift: its donor name, or "Anonymous" when blank."""

    return donor_name if donor_name else ANONYMOUS_DONOR


def normalize_donor_name(donor_name: Optional[str]) -> str:
    return " ".join(donor_display_name(donor_name).split()).lower()


def resolve_donor_identity(
    donor_name: Optional[str], members: Iterable[Member] = ()
) -> DonorIdentity:
    """Build the identity for a donor name, attaching a member on a unique match."""

    display = donor_display_name(donor_name)
    key = normalize_donor_name(donor_name)
    member_id = None
    if display != ANONYMOUS_DONOR:
        matches = [m for m in members if normalize_donor_name(m.name) == key]
        if len(matches) == 1:
            member_id = matches[0].id
    return DonorIdentity(key=key, display_name=display, member_id=member_id)
