# app/core/scoping.py
"""
Role-based visibility for hostel data.

Every view (dashboards, hostel manager, inventory, approvals) builds its
queries through a HostelScope instead of filtering full tables itself:

- admin          -> every hostel type
- male-warden    -> hostels of type "male"
- female-warden  -> hostels of type "female"

Rooms, occupants and inventory follow the visibility of their hostel.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlmodel import select

from app.models.enums import HostelType, ProfileRole
from app.models.hostel import Hostel, Room, RoomOccupant
from app.models.inventory import InventoryItem
from app.models.approval import WardenApproval
from app.models.user import UserProfile

ROLE_HOSTEL_TYPE = {
    ProfileRole.Admin: None,
    ProfileRole.MaleWarden: HostelType.Male,
    ProfileRole.FemaleWarden: HostelType.Female,
}


@dataclass(frozen=True)
class HostelScope:
    role: ProfileRole
    profile_id: Optional[UUID] = None
    # None means "all types"
    hostel_type: Optional[HostelType] = None

    @classmethod
    def for_profile(cls, profile: UserProfile) -> "HostelScope":
        role = ProfileRole(profile.role)
        return cls(role=role, profile_id=profile.id, hostel_type=ROLE_HOSTEL_TYPE[role])

    @classmethod
    def for_role(cls, role: ProfileRole) -> "HostelScope":
        role = ProfileRole(role)
        return cls(role=role, hostel_type=ROLE_HOSTEL_TYPE[role])

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.Admin

    def covers(self, hostel: Optional[Hostel]) -> bool:
        if hostel is None:
            return False
        return self.hostel_type is None or hostel.type == self.hostel_type

    # ------------------------------------------------------------
    # Query builders
    # ------------------------------------------------------------
    def hostels(self):
        query = select(Hostel)
        if self.hostel_type is not None:
            query = query.where(Hostel.type == self.hostel_type)
        return query

    def hostel_ids(self):
        query = select(Hostel.id)
        if self.hostel_type is not None:
            query = query.where(Hostel.type == self.hostel_type)
        return query

    def rooms(self):
        query = select(Room)
        if self.hostel_type is not None:
            query = query.where(Room.hostel_id.in_(self.hostel_ids()))
        return query

    def occupants(self):
        query = select(RoomOccupant)
        if self.hostel_type is not None:
            visible_rooms = select(Room.id).where(Room.hostel_id.in_(self.hostel_ids()))
            query = query.where(RoomOccupant.room_id.in_(visible_rooms))
        return query

    def inventory(self):
        """Admin sees every item (including ones not yet placed in a hostel)."""
        query = select(InventoryItem)
        if self.hostel_type is not None:
            query = query.where(InventoryItem.hostel_id.in_(self.hostel_ids()))
        return query

    def approvals(self):
        """Admin sees every request, a warden only their own."""
        query = select(WardenApproval)
        if not self.is_admin:
            query = query.where(WardenApproval.warden_id == self.profile_id)
        return query
