"""
The authenticated caller, passed explicitly into every test-taking service.

Views build it from the request once; services never look at the request.
"""
from dataclasses import dataclass

from rest_framework.exceptions import NotAuthenticated


@dataclass(frozen=True)
class Identity:
    user_id: int
    role: str = "candidate"
    is_staff: bool = False

    @property
    def is_admin(self):
        return self.is_staff or self.role == "admin"

    @property
    def is_elevated(self):
        """Admins and master practitioners can see inactive questions."""
        return self.is_admin or self.role == "master_practitioner"

    @classmethod
    def from_user(cls, user):
        if user is None or not user.is_authenticated:
            raise NotAuthenticated()
        return cls(user_id=user.pk, role=getattr(user, 'role', 'candidate'), is_staff=user.is_staff)

    @classmethod
    def from_request(cls, request):
        return cls.from_user(getattr(request, 'user', None))
