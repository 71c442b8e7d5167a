"""Use cases for the request lifecycle."""

from .decide_request import decide_request
from .get_request import get_request
from .list_inbox import list_inbox
from .list_my_requests import list_my_requests
from .submit_request import submit_request

__all__ = [
    "decide_request",
    "get_request",
    "list_inbox",
    "list_my_requests",
    "submit_request",
]
