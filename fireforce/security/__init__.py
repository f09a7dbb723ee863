# fireforce/security/__init__.py
"""
Security components for the zone monitor.

Modules:
- auth_gate: Client-local authentication flag
- logging_system: Structured logging with audit trail and alarms
"""

from fireforce.security.auth_gate import AUTH_KEY, AuthGate, LocalStore
from fireforce.security.logging_system import (
    AlarmState,
    DashboardLogger,
    EventCategory,
    EventSeverity,
    configure_logging,
    get_logger,
)

__all__ = [
    # Authentication flag
    "AUTH_KEY",
    "AuthGate",
    "LocalStore",
    # Logging
    "AlarmState",
    "DashboardLogger",
    "EventCategory",
    "EventSeverity",
    "configure_logging",
    "get_logger",
]
