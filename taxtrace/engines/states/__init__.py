"""State rule modules, keyed by two-letter state code."""

from taxtrace.engines.states.base import StateModule, apportionment_ratio, residency_days
from taxtrace.engines.states.california import California
from taxtrace.engines.states.illinois import Illinois
from taxtrace.engines.states.north_carolina import NorthCarolina
from taxtrace.exceptions import UnsupportedJurisdictionError

STATE_MODULES: dict[str, StateModule] = {
    module.code: module for module in (California(), Illinois(), NorthCarolina())
}


def get_state_module(state_code: str) -> StateModule:
    try:
        return STATE_MODULES[state_code.strip().upper()]
    except KeyError:
        raise UnsupportedJurisdictionError(state_code, sorted(STATE_MODULES)) from None


__all__ = [
    "STATE_MODULES",
    "StateModule",
    "apportionment_ratio",
    "get_state_module",
    "residency_days",
]
