# fireforce/sync/__init__.py
"""
Zone-state synchronisation with the remote zone source.

- connectivity: per-channel connected/disconnected tracking
- zone_source: bounded-time HTTP client and failure taxonomy
- sync_engine: refresh arbitration and the periodic refresh/drift triggers
- session: scoped dashboard activation tied to the authentication flag
"""
