from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role of the acting principal, supplied by the session provider."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class CheckType(str, Enum):
    IN = "IN"
    OUT = "OUT"


class RequestStatus(str, Enum):
    """Approval lifecycle shared by every request kind."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class RequestKind(str, Enum):
    LEAVE = "leave"
    MAKEUP = "makeup"
    CAR = "car"


class ReviewMode(str, Enum):
    """Supervisor mode sees direct reports only; admin mode sees the whole company."""

    SUPERVISOR = "supervisor"
    ADMIN = "admin"


class CarStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    IN_USE = "IN_USE"
    MAINTENANCE = "MAINTENANCE"
