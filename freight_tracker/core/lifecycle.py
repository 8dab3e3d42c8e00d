# freight_tracker/core/lifecycle.py

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Iterable, List, Optional, Union


class LifecycleError(Exception):
    """Base class for shipment lifecycle failures."""
    pass


class UnknownStatusKind(LifecycleError):
    """Raised when a status name is not part of the lifecycle."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown status type: {name}")


class StatusKind(str, Enum):
    """Shipment lifecycle states."""
    PENDING = "pending"
    DEPARTED = "departed"
    IN_TRANSIT = "in_transit"
    ARRIVED = "arrived"
    DELAYED = "delayed"
    CANCELLED = "cancelled"


# Single source of truth for lifecycle transitions
STATUS_TRANSITIONS = {
    StatusKind.PENDING: {StatusKind.DEPARTED, StatusKind.CANCELLED},
    StatusKind.DEPARTED: {StatusKind.IN_TRANSIT, StatusKind.DELAYED, StatusKind.CANCELLED},
    StatusKind.IN_TRANSIT: {StatusKind.ARRIVED, StatusKind.DELAYED},
    StatusKind.DELAYED: {StatusKind.DEPARTED, StatusKind.IN_TRANSIT, StatusKind.ARRIVED, StatusKind.CANCELLED},
    StatusKind.ARRIVED: set(),  # Terminal state
    StatusKind.CANCELLED: set(),  # Terminal state
}


# ==================================================
# PRESENTATION: description, color, icon, priority
# ==================================================
# Priority 1 is the most urgent.
STATUS_PRESENTATION = {
    StatusKind.PENDING: ("Shipment awaiting assignment to flight", "yellow", "⏳", 2),
    StatusKind.DEPARTED: ("Shipment has departed from origin", "blue", "✈️", 3),
    StatusKind.IN_TRANSIT: ("Shipment is currently in transit", "indigo", "🚀", 4),
    StatusKind.ARRIVED: ("Shipment has arrived at destination", "green", "✅", 5),
    StatusKind.DELAYED: ("Shipment delayed: {reason}", "red", "⚠️", 1),
    StatusKind.CANCELLED: ("Shipment cancelled: {reason}", "gray", "❌", 6),
}

DEFAULT_REASONS = {
    StatusKind.DELAYED: "Unknown reason",
    StatusKind.CANCELLED: "No reason provided",
}


StatusLike = Union[str, StatusKind]


def _lookup(name: StatusLike) -> Optional[StatusKind]:
    if isinstance(name, StatusKind):
        return name
    try:
        return StatusKind(str(name).lower())
    except ValueError:
        return None


def parse_status(name: StatusLike) -> StatusKind:
    """
    Resolve a status name (case-insensitive) to its kind.

    Raises UnknownStatusKind if the name is not recognized.
    """
    kind = _lookup(name)
    if kind is None:
        raise UnknownStatusKind(str(name))
    return kind


def valid_statuses() -> List[str]:
    """All status names in lifecycle order."""
    return [kind.value for kind in StatusKind]


def can_transition(current: StatusLike, next_status: StatusLike) -> bool:
    """
    Check whether a lifecycle transition is allowed.

    Pure table lookup; unknown names are simply not allowed.
    """
    current_kind = _lookup(current)
    next_kind = _lookup(next_status)
    if current_kind is None or next_kind is None:
        return False
    return next_kind in STATUS_TRANSITIONS[current_kind]


def is_terminal(name: StatusLike) -> bool:
    """True for states with no outgoing transitions."""
    return not STATUS_TRANSITIONS[parse_status(name)]


@dataclass(frozen=True)
class ShipmentStatus:
    """A shipment status as recorded at a point in time."""
    name: StatusKind
    description: str
    color: str
    icon: str
    priority: int
    reason: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_terminal(self) -> bool:
        return not STATUS_TRANSITIONS[self.name]

    def can_transition_to(self, next_status: StatusLike) -> bool:
        return can_transition(self.name, next_status)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name.value,
            "timestamp": self.timestamp.isoformat(),
            "description": self.description,
            "color": self.color,
            "icon": self.icon,
            "priority": self.priority,
        }
        if self.reason is not None:
            data["reason"] = self.reason
        return data


def create_status(name: StatusLike, reason: Optional[str] = None) -> ShipmentStatus:
    """
    Create a ShipmentStatus by name.

    Args:
        name: Status name (case-insensitive)
        reason: Free-text reason, only kept for delayed/cancelled

    Returns:
        ShipmentStatus with presentation fields filled in

    Raises:
        UnknownStatusKind: If name is not a lifecycle state
    """
    kind = parse_status(name)
    description, color, icon, priority = STATUS_PRESENTATION[kind]

    status_reason = None
    if kind in DEFAULT_REASONS:
        status_reason = reason or DEFAULT_REASONS[kind]
        description = description.format(reason=status_reason)

    return ShipmentStatus(
        name=kind,
        description=description,
        color=color,
        icon=icon,
        priority=priority,
        reason=status_reason,
    )


def sort_by_urgency(statuses: Iterable[ShipmentStatus]) -> List[ShipmentStatus]:
    """Most urgent first (delayed, pending, ... cancelled)."""
    return sorted(statuses, key=lambda s: s.priority)


# ==================================================
# STATUS CHANGE REQUESTS
# ==================================================

@dataclass(frozen=True)
class TransitionDecision:
    """Outcome of a status change request."""
    accepted: bool
    status: Optional[ShipmentStatus]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accepted": self.accepted,
            "status": self.status.to_dict() if self.status else None,
            "message": self.message,
        }


def request_transition(
    current_status: StatusLike,
    requested_status: StatusLike,
    reason: Optional[str] = None,
) -> TransitionDecision:
    """
    Decide a status change request.

    Illegal transitions are rejected, not raised. Unknown names raise
    UnknownStatusKind so the caller can report a client error.
    """
    current_kind = parse_status(current_status)
    requested_kind = parse_status(requested_status)

    if not can_transition(current_kind, requested_kind):
        return TransitionDecision(
            accepted=False,
            status=None,
            message=f"Invalid transition: {current_kind.value} → {requested_kind.value}",
        )

    status = create_status(requested_kind, reason)
    return TransitionDecision(
        accepted=True,
        status=status,
        message=f"{current_kind.value} → {requested_kind.value}",
    )
