# config/config_loader.py
"""
Config loader module for modular YAML configuration.
"""

import logging
import os
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT_ENV = "FIREFORCE_API_ENDPOINT"


class ConfigLoader:
    """Loads and merges modular configuration files."""

    def __init__(self, config_dir="config", environ=None):
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.environ = os.environ if environ is None else environ

    def load_all(self):
        """Load all configuration files and merge them."""
        config = {}

        # Load dashboard config
        dashboard_path = self.config_dir / "dashboard.yml"
        if dashboard_path.exists():
            with open(dashboard_path) as f:
                dashboard_data = yaml.safe_load(f) or {}
            config["dashboard"] = self._dashboard_section(
                dashboard_data.get("dashboard") or {}
            )
        else:
            config["dashboard"] = self._create_default_dashboard()
            self._save_dashboard(config["dashboard"])

        # Load remote source config
        remote_path = self.config_dir / "remote_source.yml"
        if remote_path.exists():
            with open(remote_path) as f:
                remote_data = yaml.safe_load(f) or {}
            remote = remote_data.get("remote_source") or {}
        else:
            remote = {}

        endpoint_env = remote.get("endpoint_env") or DEFAULT_ENDPOINT_ENV
        stale_after = remote.get("stale_after")
        if stale_after is not None:
            # None disables the staleness window
            stale_after = self._positive(stale_after, "stale_after", None)

        config["remote_source"] = {
            "endpoint": self.environ.get(endpoint_env) or remote.get("endpoint"),
            "endpoint_env": endpoint_env,
            "timeout": self._positive(remote.get("timeout", 5.0), "timeout", 5.0),
            "stale_after": stale_after,
        }

        return config

    def _dashboard_section(self, data):
        defaults = self._create_default_dashboard()

        zones = data.get("zones", defaults["zones"])
        if not zones:
            logger.warning("No zones configured, using default zone set")
            zones = defaults["zones"]

        return {
            "zones": [str(zone) for zone in zones],
            "refresh_interval": self._positive(
                data.get("refresh_interval", 8.0), "refresh_interval", 8.0
            ),
            "drift_interval": self._positive(
                data.get("drift_interval", 2.0), "drift_interval", 2.0
            ),
            "initial_incident_zone": data.get(
                "initial_incident_zone", defaults["initial_incident_zone"]
            ),
            "incident_policy": data.get("incident_policy", defaults["incident_policy"]),
            "metrics": data.get("metrics") or {},
            "auth": {**defaults["auth"], **(data.get("auth") or {})},
            "logging": {**defaults["logging"], **(data.get("logging") or {})},
        }

    def _positive(self, value, name, default):
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            logger.warning(f"Invalid {name} {value}, using default {default}")
            return default
        return value

    def _create_default_dashboard(self):
        """Create default dashboard configuration."""
        return {
            "zones": ["Z1", "Z2", "Z3", "Z4", "Z5", "Z6"],
            "refresh_interval": 8.0,
            "drift_interval": 2.0,
            "initial_incident_zone": "Z3",
            "incident_policy": "reroll",
            "metrics": {},
            "auth": {"store_path": "data/local_storage.json"},
            "logging": {"log_dir": "logs"},
        }

    def _save_dashboard(self, dashboard):
        """Save dashboard configuration to file."""
        dashboard_path = self.config_dir / "dashboard.yml"
        with open(dashboard_path, "w") as f:
            yaml.dump({"dashboard": dashboard}, f, default_flow_style=False)
        logger.info(f"Created default dashboard config at {dashboard_path}")
