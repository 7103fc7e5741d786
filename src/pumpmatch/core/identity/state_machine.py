"""Identity hierarchy: GHOST -> REACHABLE -> VERIFIED.

Only three transitions exist:

- LINK_CONTACT: GHOST -> REACHABLE (no-op otherwise)
- REMOVE_ALL_CONTACTS: REACHABLE -> GHOST (VERIFIED is immune)
- PASS_VERIFICATION: any -> VERIFIED (irreversible)
"""

from enum import Enum

from pumpmatch.models.identity import IdentityState


class IdentityTransition(str, Enum):
    LINK_CONTACT = "LINK_CONTACT"
    REMOVE_ALL_CONTACTS = "REMOVE_ALL_CONTACTS"
    PASS_VERIFICATION = "PASS_VERIFICATION"


def link_contact_channel(state: IdentityState) -> IdentityState:
    if state == IdentityState.GHOST:
        return IdentityState.REACHABLE
    return state


def remove_contact_channels(state: IdentityState) -> IdentityState:
    if state == IdentityState.REACHABLE:
        return IdentityState.GHOST
    return state


def pass_verification(state: IdentityState) -> IdentityState:
    return IdentityState.VERIFIED


_TRANSITIONS = {
    IdentityTransition.LINK_CONTACT: link_contact_channel,
    IdentityTransition.REMOVE_ALL_CONTACTS: remove_contact_channels,
    IdentityTransition.PASS_VERIFICATION: pass_verification,
}


def apply_transition(state: IdentityState, transition: IdentityTransition) -> IdentityState:
    """Apply a single transition and return the resulting state."""
    return _TRANSITIONS[transition](state)
