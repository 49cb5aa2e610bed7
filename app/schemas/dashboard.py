from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from datetime import datetime


class CategoryStock(BaseModel):
    category_id: UUID
    name: str
    count: int
    available: int
    status: str


class StockTransaction(BaseModel):
    item_id: UUID
    type: str
    item: str
    quantity: int
    room: str
    status: str
    time: datetime


class WardenDashboard(BaseModel):
    role: str
    hostel_type: Optional[str] = None
    assigned_rooms: int
    total_items: int
    maintenance_items: int
    available_items: int
    categories: List[CategoryStock]
    recent_transactions: List[StockTransaction]


class Activity(BaseModel):
    approval_id: UUID
    action: str
    user: str
    role: str
    item: str
    time: datetime
    status: str


class WardenStat(BaseModel):
    warden_id: UUID
    name: str
    role: str
    hostel: str
    approved: int
    total: int
    efficiency: int
    status: str


class AdminDashboard(BaseModel):
    total_items: int
    active_wardens: int
    low_stock_items: int
    pending_approvals: int
    recent_activities: List[Activity]
    warden_stats: List[WardenStat]
