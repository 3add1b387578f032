"""Explicit caller context passed from the API layer into services."""
from dataclasses import dataclass

from timedesk.models.employee import Employee
from timedesk.models.user import User


@dataclass
class ActorContext:
    """Who is calling and which employee they act as.

    ``employee`` is the impersonated profile when ``impersonating`` is set,
    otherwise the caller's own profile.
    """

    user: User
    employee: Employee
    impersonating: bool = False
    locale: str = "en"
