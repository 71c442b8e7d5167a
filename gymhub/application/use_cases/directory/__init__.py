"""Use cases for browsing gyms and instructors."""

from .list_freelance_instructors import list_freelance_instructors
from .list_gym_instructors import list_gym_instructors

__all__ = ["list_freelance_instructors", "list_gym_instructors"]
