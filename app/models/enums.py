from enum import Enum

from sqlalchemy import Enum as SAEnum


class ProfileRole(str, Enum):
    Admin = "admin"
    MaleWarden = "male-warden"
    FemaleWarden = "female-warden"


# user_roles stores the underscore spelling of the same roles
class AppRole(str, Enum):
    Admin = "admin"
    MaleWarden = "male_warden"
    FemaleWarden = "female_warden"


class ProfileStatus(str, Enum):
    Active = "active"
    Inactive = "inactive"
    Suspended = "suspended"


class HostelType(str, Enum):
    Male = "male"
    Female = "female"
    Mixed = "mixed"


class RoomStatus(str, Enum):
    Available = "available"
    Occupied = "occupied"
    Maintenance = "maintenance"
    Closed = "closed"


class ItemStatus(str, Enum):
    Available = "available"
    Assigned = "assigned"
    Maintenance = "maintenance"
    Damaged = "damaged"


class ItemCondition(str, Enum):
    Good = "good"
    Fair = "fair"
    Poor = "poor"
    Damaged = "damaged"


class ApprovalStatus(str, Enum):
    Pending = "pending"
    Approved = "approved"
    Rejected = "rejected"


class RequestType(str, Enum):
    InventoryAdd = "inventory_add"
    MaintenanceRequest = "maintenance_request"
    RoomAssignment = "room_assignment"


def enum_type(enum_cls, name: str) -> SAEnum:
    """Column type persisting the enum *values* ("male-warden"), not member names."""
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
    )
