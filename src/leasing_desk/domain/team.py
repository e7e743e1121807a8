from dataclasses import dataclass

from leasing_desk.domain.value_objects import UserRole


@dataclass(frozen=True)
class TeamMember:
    name: str
    role: UserRole
    email: str


DEFAULT_TEAM: tuple[TeamMember, ...] = (
    TeamMember(name="Administrador", role=UserRole.ADMIN, email="admin@sauma.cl"),
    TeamMember(name="Juan Pérez", role=UserRole.EXECUTIVE, email="juan@sauma.cl"),
    TeamMember(name="Maria Gomez", role=UserRole.OPERATIONS, email="maria@sauma.cl"),
)


def executive_names(team: tuple[TeamMember, ...] = DEFAULT_TEAM) -> list[str]:
    """Names that appear in visit reports: every non-admin member."""
    return [m.name for m in team if m.role != UserRole.ADMIN]


def role_can_delete_properties(role: UserRole) -> bool:
    return role == UserRole.ADMIN


__all__ = [
    "DEFAULT_TEAM",
    "TeamMember",
    "executive_names",
    "role_can_delete_properties",
]
