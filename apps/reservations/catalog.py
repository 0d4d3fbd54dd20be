"""Catalog of bookable resources and requesting groups.

The club owns a fixed set of resources. Vehicles need a trip
destination, every other resource needs a purpose. The halls are
restricted to roles allowed to see restricted resources.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    VEHICLE = "Vehicle"
    OTHER = "Other"


@dataclass(frozen=True)
class Resource:
    name: str
    category: Category = Category.OTHER
    restricted: bool = False

    @property
    def is_vehicle(self) -> bool:
        return self.category is Category.VEHICLE


RESOURCES: tuple[Resource, ...] = (
    Resource("Halle 1", restricted=True),
    Resource("Halle 2", restricted=True),
    Resource("Halle 3", restricted=True),
    Resource("Bus Opel", Category.VEHICLE),
    Resource("VW Bus weiß", Category.VEHICLE),
    Resource("VW Bus silber", Category.VEHICLE),
    Resource("Besprechungsraum"),
    Resource("Kiosk"),
    Resource("Vereinsheim"),
    Resource("Raum Frankenried"),
    Resource("Raum Steinholz"),
    Resource("Zelt Sportplatz"),
    Resource("JBL Box"),
)

GROUPS: tuple[str, ...] = ("Fußball", "Volleyball", "Gymnastik", "Sonstige")

_BY_NAME = {resource.name: resource for resource in RESOURCES}


def get_resource(name: str) -> Resource | None:
    return _BY_NAME.get(name)


def resource_choices() -> list[tuple[str, str]]:
    return [(resource.name, resource.name) for resource in RESOURCES]


def group_choices() -> list[tuple[str, str]]:
    return [(group, group) for group in GROUPS]
