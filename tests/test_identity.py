"""Tests for email normalization and advisory member matching."""

from __future__ import annotations

from churchledger.models import Member
from churchledger.services.identity import (
    find_by_email,
    find_duplicate_groups,
    is_email_taken,
    members_with_emails,
    normalize_email,
    resolve_donor_identity,
    suggest_matches,
    validate_email_uniqueness,
)


def _members():
    return [
        Member(id=1, name="Grace Lee", email="Grace.Lee@Example.com"),
        Member(id=2, name="Samuel Okafor", email="sam@example.com"),
        Member(id=3, name="Samuel O.", email=" SAM@example.com "),
        Member(id=4, name="Ruth Adams", email=None),
        Member(id=5, name="Ruth Adams-Boaz", email=""),
    ]


class TestNormalization:
    def test_trims_and_lowercases(self):
        assert normalize_email("  Grace.Lee@Example.COM ") == "grace.lee@example.com"
        assert normalize_email("  Grace.Lee@Example.COM ") == normalize_email("grace.lee@example.com")

    def test_blank_means_no_email(self):
        assert normalize_email(None) is None
        assert normalize_email("") is None
        assert normalize_email("   ") is None

    def test_members_with_emails_skips_blanks(self):
        assert [m.id for m in members_with_emails(_members())] == [1, 2, 3]

    def test_find_by_email(self):
        assert find_by_email(_members(), "grace.lee@example.com").id == 1
        assert find_by_email(_members(), "nobody@example.com") is None
        assert find_by_email(_members(), "") is None


class TestUniqueness:
    def test_taken_is_case_insensitive(self):
        assert is_email_taken(_members(), "GRACE.LEE@example.com") is True

    def test_excluding_own_record(self):
        members = _members()[:2]

        assert is_email_taken(members, "grace.lee@example.com", exclude_id=1) is False
        assert is_email_taken(members, "sam@example.com", exclude_id=1) is True

    def test_blank_email_is_never_taken(self):
        assert is_email_taken(_members(), "  ") is False

    def test_duplicate_groups(self):
        groups = find_duplicate_groups(_members())

        assert list(groups) == ["sam@example.com"]
        assert [m.id for m in groups["sam@example.com"]] == [2, 3]

    def test_validate_email_uniqueness_messages(self):
        members = _members()

        assert validate_email_uniqueness(members, "new@example.org").is_valid
        assert not validate_email_uniqueness(members, "").is_valid
        assert not validate_email_uniqueness(members, "not-an-email").is_valid
        assert not validate_email_uniqueness(members, "x@10minutemail.com").is_valid
        assert not validate_email_uniqueness(members, "x" * 320 + "@example.com").is_valid

        taken = validate_email_uniqueness(members, "Sam@Example.com", exclude_id=2)
        assert not taken.is_valid
        assert "another member" in taken.message


class TestSuggestions:
    def test_email_match_wins_outright(self):
        suggestions = suggest_matches(_members(), "sam@EXAMPLE.com", "Grace Lee")

        assert [s.member.id for s in suggestions] == [2, 3]
        assert all(s.reason == "email" for s in suggestions)

    def test_falls_back_to_names_best_first(self):
        suggestions = suggest_matches(_members(), "unknown@example.com", "ruth adams")

        assert [s.member.id for s in suggestions] == [4, 5]
        assert suggestions[0].score == 1.0
        assert suggestions[1].reason == "name"

    def test_token_overlap(self):
        suggestions = suggest_matches(_members(), None, "Lee Grace")

        assert [s.member.id for s in suggestions] == [1]
        assert 0 < suggestions[0].score < 0.75

    def test_nothing_to_match_on(self):
        assert suggest_matches(_members(), None, "  ") == []
        assert suggest_matches(_members(), None, "Zebedee") == []


class TestDonorIdentity:
    def test_blank_name_is_anonymous(self):
        identity = resolve_donor_identity(None, _members())

        assert identity.is_anonymous
        assert identity.display_name == "Anonymous"
        assert identity.member_id is None

    def test_unique_name_match_attaches_member(self):
        identity = resolve_donor_identity("  grace   LEE", _members())

        assert identity.key == "grace lee"
        assert identity.display_name == "  grace   LEE"
        assert identity.member_id == 1

    def test_ambiguous_name_is_left_unlinked(self):
        members = [Member(id=8, name="John Smith"), Member(id=9, name="john smith")]

        assert resolve_donor_identity("John Smith", members).member_id is None
