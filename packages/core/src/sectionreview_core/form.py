"""Property form layer — live field values edited by the reviewer.

Each field has a FieldControl, a small state machine:

    Idle ──edit()──▶ Pending(local) ──acknowledge()──▶ Confirmed
      ▲                   │
      └─────reject()──────┘

While a control is Pending, values arriving from upstream (a reload, another
tab) are ignored so they cannot overwrite what the user is typing. The
transition out of Pending is driven by the store acknowledging the write, not
by how much time has passed.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any


class ControlState(Enum):
    IDLE = "idle"
    PENDING = "pending"
    CONFIRMED = "confirmed"


class FieldControl:
    def __init__(self, name: str, value: Any = None):
        self.name = name
        self.state = ControlState.IDLE
        self.confirmed_value = value
        self.local_value: Any = None

    @property
    def value(self) -> Any:
        """The value to display: the local edit while pending, else the confirmed one."""
        if self.state is ControlState.PENDING:
            return self.local_value
        return self.confirmed_value

    def edit(self, value: Any) -> None:
        self.local_value = value
        self.state = ControlState.PENDING

    def acknowledge(self, value: Any) -> bool:
        """The store confirmed a write. Returns False for a stale acknowledgement."""
        if self.state is not ControlState.PENDING or value != self.local_value:
            return False
        self.confirmed_value = value
        self.local_value = None
        self.state = ControlState.CONFIRMED
        return True

    def reject(self) -> None:
        """The store refused the write; fall back to the last confirmed value."""
        self.local_value = None
        self.state = ControlState.IDLE

    def receive(self, value: Any) -> bool:
        """Adopt an upstream value unless a local edit is in flight."""
        if self.state is ControlState.PENDING:
            return False
        self.confirmed_value = value
        self.state = ControlState.IDLE
        return True


class PropertyForm:
    """The live field values of one property, one FieldControl per field."""

    def __init__(self, values: dict[str, Any] | None = None):
        self._controls: dict[str, FieldControl] = {}
        for name, value in (values or {}).items():
            self._controls[name] = FieldControl(name, copy.deepcopy(value))

    def control(self, name: str) -> FieldControl:
        if name not in self._controls:
            self._controls[name] = FieldControl(name)
        return self._controls[name]

    def values(self) -> dict[str, Any]:
        """Confirmed values only: what the backing store is known to hold."""
        return {name: c.confirmed_value for name, c in self._controls.items()}

    def edit(self, name: str, value: Any) -> None:
        self.control(name).edit(value)

    def acknowledge(self, name: str) -> dict[str, Any]:
        """Confirm the pending edit of ``name`` and return the change it produced."""
        control = self.control(name)
        if control.state is not ControlState.PENDING:
            return {}
        value = control.local_value
        control.acknowledge(value)
        return {name: value}

    def reject(self, name: str) -> None:
        self.control(name).reject()

    def receive(self, upstream: dict[str, Any]) -> dict[str, Any]:
        """Merge upstream values, skipping pending fields. Returns what was adopted."""
        adopted = {}
        for name, value in upstream.items():
            control = self.control(name)
            if control.state is not ControlState.PENDING and control.confirmed_value == value:
                continue
            if control.receive(copy.deepcopy(value)):
                adopted[name] = value
        return adopted
