"""Request lifecycle engine: guards, transitions and per-kind effects."""

from .context import LifecycleContext
from .registry import EFFECTS, TRANSITIONS, TransitionRule, allowed_actions, get_effect, get_rule
from .state_machine import RequestStateMachine
from .submissions import SUBMISSIONS, SubmissionPlan, SubmissionRule, open_request

__all__ = [
    "EFFECTS",
    "LifecycleContext",
    "RequestStateMachine",
    "SUBMISSIONS",
    "SubmissionPlan",
    "SubmissionRule",
    "TRANSITIONS",
    "TransitionRule",
    "allowed_actions",
    "get_effect",
    "get_rule",
    "open_request",
]
