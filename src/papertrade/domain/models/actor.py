"""Authenticated caller identity."""

from dataclasses import dataclass

from papertrade.domain.models.enums import Role


@dataclass(frozen=True)
class Actor:
    """
    Caller identity as supplied by the upstream session layer.

    Trusted as given; no credential verification happens here.
    """

    account_id: str
    role: Role

    def __post_init__(self) -> None:
        if isinstance(self.role, str):
            object.__setattr__(self, "role", Role(self.role))

    @property
    def is_teacher(self) -> bool:
        return self.role == Role.TEACHER
