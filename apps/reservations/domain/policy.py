"""
Authorization Policy

Maps a club role to its capabilities and to the resources it may book.
The table is enforced by the booking service on every write; what a
client chose to offer in its forms is irrelevant.

    Role          create  delete  view-restricted  read  export
    admin         yes     yes     yes              yes   yes
    board_member  yes     yes     yes              yes   no
    standard      yes     no      no               yes   no
    observer      no      no      no               yes   no
"""

from enum import Enum
import logging
from typing import Iterable, List, Mapping

from apps.reservations.catalog import RESOURCES, Resource
from apps.reservations.exceptions import PermissionDenied

logger = logging.getLogger(__name__)


class Capability(str, Enum):
    CREATE = "create"
    DELETE = "delete"
    VIEW_RESTRICTED = "view-restricted"
    READ = "read"
    EXPORT = "export"


class Role(str, Enum):
    ADMIN = "admin"
    BOARD_MEMBER = "board_member"
    STANDARD = "standard"
    OBSERVER = "observer"


DEFAULT_CAPABILITIES: Mapping[str, frozenset] = {
    Role.ADMIN.value: frozenset(Capability),
    Role.BOARD_MEMBER.value: frozenset({
        Capability.CREATE, Capability.DELETE, Capability.VIEW_RESTRICTED, Capability.READ,
    }),
    Role.STANDARD.value: frozenset({Capability.CREATE, Capability.READ}),
    Role.OBSERVER.value: frozenset({Capability.READ}),
}


class AuthorizationPolicy:
    """
    Role -> capability table

    Unknown roles have no capabilities at all.
    """

    def __init__(
        self,
        table: Mapping[str, Iterable[Capability]] | None = None,
        resources: Iterable[Resource] = RESOURCES,
    ):
        table = DEFAULT_CAPABILITIES if table is None else table
        self._table = {str(_value(role)): frozenset(caps) for role, caps in table.items()}
        self._resources = tuple(resources)

    def capabilities(self, role: str) -> frozenset:
        return self._table.get(_value(role), frozenset())

    def can(self, role: str, capability: Capability) -> bool:
        return capability in self.capabilities(role)

    def can_book(self, role: str, resource: Resource) -> bool:
        if not self.can(role, Capability.CREATE):
            return False
        return not resource.restricted or self.can(role, Capability.VIEW_RESTRICTED)

    def allowed_resources(self, role: str) -> List[Resource]:
        """Resources the role may book, in catalog order"""
        return [r for r in self._resources if self.can_book(role, r)]

    def require(self, role: str, capability: Capability) -> None:
        if not self.can(role, capability):
            logger.warning(f"Role {role!r} lacks capability {capability.value!r}")
            raise PermissionDenied(
                f"Role {role!r} is not allowed to {capability.value} reservations",
                capability=capability.value,
            )

    def require_resource(self, role: str, resource: Resource) -> None:
        self.require(role, Capability.CREATE)
        if not self.can_book(role, resource):
            logger.warning(f"Role {role!r} may not book restricted resource {resource.name!r}")
            raise PermissionDenied(
                f"Role {role!r} may not book {resource.name!r}",
                resource=resource.name,
            )


def _value(role) -> str:
    return role.value if isinstance(role, Enum) else role
