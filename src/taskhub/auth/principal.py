"""The authenticated identity attached to a request."""

from dataclasses import dataclass

from taskhub.auth.roles import Role


@dataclass(frozen=True)
class Principal:
    """Who is making the request, as stated by a verified token.

    Learn: Built purely from token claims — the user row is never
    re-read per request. The role is the one held when the token was
    issued; a later role change only shows up after re-login.
    """

    id: int
    name: str
    email: str
    role: Role

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
        }
