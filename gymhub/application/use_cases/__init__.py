"""Aggregate application use cases."""

from .directory import list_freelance_instructors, list_gym_instructors
from .requests import (
    decide_request,
    get_request,
    list_inbox,
    list_my_requests,
    submit_request,
)

__all__ = [
    "decide_request",
    "get_request",
    "list_freelance_instructors",
    "list_gym_instructors",
    "list_inbox",
    "list_my_requests",
    "submit_request",
]
