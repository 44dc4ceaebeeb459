"""
Edit form state machine

The Edition and Publication forms walk the editor through three tabs
(aliases, data, revision note) and then submit. State is an immutable
value; every transition returns a new state.
"""
from dataclasses import dataclass, replace
from typing import Optional

FIRST_TAB = 1
LAST_TAB = 3


@dataclass(frozen=True)
class FormState:
    tab: int = FIRST_TAB
    aliases_valid: bool = True
    data_valid: bool = True
    submitting: bool = False
    error: Optional[str] = None


def _clamp(tab: int) -> int:
    return max(FIRST_TAB, min(LAST_TAB, tab))


def set_tab(state: FormState, tab: int, aliases_valid: bool, data_valid: bool) -> FormState:
    """Switch tab, recording the validity of the aliases and data tabs"""
    return replace(
        state,
        tab=_clamp(tab),
        aliases_valid=aliases_valid,
        data_valid=data_valid,
    )


def next_tab(state: FormState, aliases_valid: bool, data_valid: bool) -> FormState:
    return set_tab(state, state.tab + 1, aliases_valid, data_valid)


def back_tab(state: FormState, aliases_valid: bool, data_valid: bool) -> FormState:
    return set_tab(state, state.tab - 1, aliases_valid, data_valid)


def submit_enabled(state: FormState) -> bool:
    return state.aliases_valid and state.data_valid and not state.submitting


def begin_submit(state: FormState) -> FormState:
    """Mark the form as waiting on the server"""
    if not submit_enabled(state):
        raise ValueError("Form cannot be submitted in its current state")
    return replace(state, submitting=True, error=None)


def submit_failed(state: FormState, error: str) -> FormState:
    return replace(state, submitting=False, error=error)


def redirect_target(kind: str, response_body: Optional[dict]) -> str:
    """
    Where the browser goes after a successful POST.

    A body without an entity means the editor is not logged in.
    """
    entity = (response_body or {}).get('entity')
    if not entity:
        return '/login'
    return f"/{kind.lower()}/{entity['entity_gid']}"
