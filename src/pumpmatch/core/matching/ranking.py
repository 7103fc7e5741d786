"""Ordering and projection of scored candidates."""

from collections.abc import Iterable

from pumpmatch.constants.matching import RANKING_TIE_BAND
from pumpmatch.core.scoring.badges import system_score
from pumpmatch.models.identity import IdentityState
from pumpmatch.models.match import MatchProfile, MatchResult
from pumpmatch.models.member import MemberProfile


def build_match_profile(candidate: MemberProfile, result: MatchResult) -> MatchProfile:
    """Project a candidate plus its match result into the presented shape."""
    return MatchProfile(
        id=candidate.id,
        address=candidate.address,
        username=candidate.username,
        role=candidate.role,
        trust_score=candidate.trust_score,
        tags=list(candidate.tags),
        intent=candidate.intent,
        identity_state=candidate.identity_state,
        social_proof=candidate.social_proof,
        active_badges=list(candidate.active_badges),
        match_confidence=result.confidence,
        match_reason=result.reason,
        confidence_breakdown=result.breakdown,
        match_reasons=list(result.match_reasons),
    )


def _confidence_key(profile: MatchProfile) -> tuple[int, str, str]:
    return (-profile.match_confidence, profile.id, profile.address)


def _tie_break_key(profile: MatchProfile) -> tuple[bool, float, int, str, str]:
    return (
        profile.identity_state != IdentityState.VERIFIED,
        -system_score(profile.active_badges),
        -profile.match_confidence,
        profile.id,
        profile.address,
    )


def rank_matches(profiles: Iterable[MatchProfile]) -> list[MatchProfile]:
    """Sort by confidence, treating gaps of <= 2 points as ties.

    Profiles are walked from the highest confidence down and grouped: a
    profile joins the current group while it sits within the tie band of
    the group's leader. Inside a group, VERIFIED identity ranks first, then
    System Score, then raw confidence. The result does not depend on the
    input order.
    """
    ranked: list[MatchProfile] = []
    group: list[MatchProfile] = []

    for profile in sorted(profiles, key=_confidence_key):
        if group and group[0].match_confidence - profile.match_confidence > RANKING_TIE_BAND:
            ranked.extend(sorted(group, key=_tie_break_key))
            group = []
        group.append(profile)

    ranked.extend(sorted(group, key=_tie_break_key))
    return ranked
