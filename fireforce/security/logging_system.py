# fireforce/security/logging_system.py
"""
Structured logging system for the zone monitor.

Provides:
- Structured logging (JSON and plain text formats)
- Audit trail management (login, logout, activation)
- Alarm event logging for zone incidents
- Log rotation

Event classification follows the same severity/category scheme for
console output and JSON files, so an operator console and a log shipper
see identical events.
"""

import asyncio
import json
import logging
import logging.handlers
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = [
    "EventSeverity",
    "EventCategory",
    "AlarmState",
    "LogEntry",
    "JSONFormatter",
    "DashboardLogger",
    "configure_logging",
    "get_logger",
]

# ----------------------------------------------------------------
# Event Classification
# ----------------------------------------------------------------


class EventSeverity(Enum):
    """
    Event severity levels.

    Lower number = higher severity
    """

    CRITICAL = 1  # Active fire, evacuation under way
    ALERT = 2  # Immediate action required
    ERROR = 3  # Error conditions, degraded operation
    WARNING = 4  # Potential issues, fallback engaged
    NOTICE = 5  # Normal but significant events
    INFO = 6  # Informational messages
    DEBUG = 7  # Debug/diagnostic information


class EventCategory(Enum):
    """Monitor event categories."""

    SAFETY = "safety"  # Zone incidents
    AUDIT = "audit"  # Login/logout and activation
    SYSTEM = "system"  # Lifecycle events
    COMMUNICATION = "communication"  # Remote source and event channel


class AlarmState(Enum):
    ACTIVE = "ACTIVE"
    CLEARED = "CLEARED"


LOGGING_TO_SEVERITY = {
    logging.CRITICAL: EventSeverity.CRITICAL,
    logging.ERROR: EventSeverity.ERROR,
    logging.WARNING: EventSeverity.WARNING,
    logging.INFO: EventSeverity.INFO,
    logging.DEBUG: EventSeverity.DEBUG,
}


# ----------------------------------------------------------------
# Structured Log Entry
# ----------------------------------------------------------------


@dataclass
class LogEntry:
    """Structured log entry for monitor events."""

    wall_time: float
    severity: EventSeverity
    category: EventCategory
    message: str

    # Context
    zone: str = ""  # Zone identifier
    component: str = ""  # Component/subsystem
    user: str = ""  # User if applicable

    event_id: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    alarm_state: AlarmState | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialisation."""
        entry_dict = {
            "wall_time": self.wall_time,
            "severity": self.severity.name,
            "category": self.category.value,
            "message": self.message,
        }

        if self.zone:
            entry_dict["zone"] = self.zone
        if self.component:
            entry_dict["component"] = self.component
        if self.user:
            entry_dict["user"] = self.user
        if self.event_id:
            entry_dict["event_id"] = self.event_id
        if self.data:
            entry_dict["data"] = json.dumps(self.data)
        if self.alarm_state:
            entry_dict["alarm_state"] = self.alarm_state.value

        return entry_dict

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def to_human_readable(self) -> str:
        severity_str = f"[{self.severity.name:8s}]"
        zone_str = f"{self.zone}:" if self.zone else ""
        component_str = f"{self.component}:" if self.component else ""
        return f"{severity_str} {zone_str}{component_str} {self.message}"


# ----------------------------------------------------------------
# JSON Formatter for Python logging
# ----------------------------------------------------------------


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        severity = LOGGING_TO_SEVERITY.get(record.levelno, EventSeverity.INFO)

        log_entry = LogEntry(
            wall_time=record.created,
            severity=severity,
            category=EventCategory.SYSTEM,
            message=record.getMessage(),
            component=record.name,
        )

        if record.exc_info:
            log_entry.data["exception"] = self.formatException(record.exc_info)

        return log_entry.to_json()


# ----------------------------------------------------------------
# Dashboard Logger
# ----------------------------------------------------------------


class DashboardLogger:
    """
    Logger for monitor components.

    Wraps Python's logging with:
    - Console output and optional rotating JSON files
    - Event classification
    - In-memory audit trail
    - Alarm logging for zone incidents
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
        max_audit_entries: int = 1000,
    ):
        """
        Initialise dashboard logger.

        Args:
            name: Logger name (typically module name)
            log_dir: Directory for log files (None = no file logging)
            enable_json: Enable JSON formatted logs (requires log_dir)
            enable_console: Enable console output
            max_audit_entries: Maximum audit trail entries to retain
        """
        self.name = name
        self.log_dir = Path(log_dir) if log_dir else None

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        self.logger.handlers.clear()

        if enable_console:
            self._add_console_handler()

        if enable_json and self.log_dir:
            self._add_json_handler()

        self.audit_trail: list[LogEntry] = []
        self._audit_lock = asyncio.Lock()
        self._max_audit_entries = max_audit_entries

    def _add_console_handler(self) -> None:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        self.logger.addHandler(handler)

    def _add_json_handler(self) -> None:
        """Add JSON file handler with rotation."""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = self.log_dir / "fireforce.json.log"

        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(JSONFormatter())
        self.logger.addHandler(handler)

    # ----------------------------------------------------------------
    # Standard logging methods
    # ----------------------------------------------------------------

    def debug(self, message: str, **kwargs) -> None:
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self.logger.error(message, **kwargs)

    def critical(self, message: str, **kwargs) -> None:
        self.logger.critical(message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        self.logger.exception(message, **kwargs)

    # ----------------------------------------------------------------
    # Structured events
    # ----------------------------------------------------------------

    async def log_event(
        self,
        severity: EventSeverity,
        category: EventCategory,
        message: str,
        **kwargs,
    ) -> LogEntry:
        """
        Log structured monitor event.

        Args:
            severity: Event severity level
            category: Event category
            message: Event message
            **kwargs: Additional context (zone, user, data, alarm_state)

        Returns:
            LogEntry that was created
        """
        entry = LogEntry(
            wall_time=time.time(),
            severity=severity,
            category=category,
            message=message,
            zone=kwargs.get("zone", ""),
            component=kwargs.get("component", self.name),
            user=kwargs.get("user", ""),
            event_id=str(uuid.uuid4()),
            data=kwargs.get("data", {}),
            alarm_state=kwargs.get("alarm_state"),
        )

        level = {
            EventSeverity.CRITICAL: logging.CRITICAL,
            EventSeverity.ALERT: logging.CRITICAL,
            EventSeverity.ERROR: logging.ERROR,
            EventSeverity.WARNING: logging.WARNING,
            EventSeverity.NOTICE: logging.INFO,
            EventSeverity.INFO: logging.INFO,
            EventSeverity.DEBUG: logging.DEBUG,
        }[severity]
        self.logger.log(level, entry.to_human_readable())

        if category == EventCategory.AUDIT:
            async with self._audit_lock:
                self.audit_trail.append(entry)
                if len(self.audit_trail) > self._max_audit_entries:
                    self.audit_trail = self.audit_trail[-self._max_audit_entries :]

        return entry

    async def log_audit(
        self,
        message: str,
        user: str = "",
        action: str = "",
        result: str = "SUCCESS",
        **kwargs,
    ) -> LogEntry:
        """
        Log audit trail event.

        Args:
            message: Audit message
            user: User performing action
            action: Action performed (login, logout, activate)
            result: Action result (SUCCESS, DENIED)
        """
        data = kwargs.pop("data", {})
        data.update({"action": action, "result": result})

        return await self.log_event(
            severity=EventSeverity.NOTICE,
            category=EventCategory.AUDIT,
            message=message,
            user=user,
            data=data,
            **kwargs,
        )

    async def log_alarm(
        self,
        message: str,
        zone: str,
        state: AlarmState = AlarmState.ACTIVE,
        **kwargs,
    ) -> LogEntry:
        """
        Log zone incident alarm.

        Args:
            message: Alarm message
            zone: Zone identifier
            state: Whether the alarm was raised or cleared
        """
        severity = EventSeverity.CRITICAL if state == AlarmState.ACTIVE else EventSeverity.NOTICE
        return await self.log_event(
            severity=severity,
            category=EventCategory.SAFETY,
            message=message,
            zone=zone,
            alarm_state=state,
            **kwargs,
        )

    async def get_audit_trail(
        self,
        limit: int | None = None,
        user: str | None = None,
    ) -> list[LogEntry]:
        """Return audit entries, newest last, optionally filtered by user."""
        async with self._audit_lock:
            entries = self.audit_trail.copy()

        if user:
            entries = [e for e in entries if e.user == user]
        if limit:
            entries = entries[-limit:]
        return entries


# ----------------------------------------------------------------
# Global logger registry
# ----------------------------------------------------------------

_loggers: dict[str, DashboardLogger] = {}
_loggers_lock = threading.Lock()
_default_log_dir: Path | None = None


def configure_logging(log_dir: Path | str | None = None) -> None:
    """
    Configure global logging settings.

    Args:
        log_dir: Directory for JSON log files (None disables file logging)
    """
    global _default_log_dir

    if log_dir:
        _default_log_dir = Path(log_dir)
        _default_log_dir.mkdir(parents=True, exist_ok=True)
    else:
        _default_log_dir = None


def get_logger(name: str, **kwargs) -> DashboardLogger:
    """
    Get or create a dashboard logger.

    Thread-safe logger factory.

    Args:
        name: Logger name (typically __name__)
        **kwargs: Additional DashboardLogger arguments

    Returns:
        DashboardLogger instance
    """
    with _loggers_lock:
        if name not in _loggers:
            if "log_dir" not in kwargs and _default_log_dir:
                kwargs["log_dir"] = _default_log_dir
            _loggers[name] = DashboardLogger(name, **kwargs)

        return _loggers[name]
