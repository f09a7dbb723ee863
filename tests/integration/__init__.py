# tests/integration/__init__.py
"""
Integration tests for the FireForce zone monitor.

These tests run the session, sync engine, config loader and renderer
together with real timers at short intervals. Only the network is
faked, using httpx.MockTransport.

Running Integration Tests:
    pytest tests/integration/                    # All integration tests
    pytest tests/integration/ -m integration     # Tagged as integration
    pytest tests/integration/ -k lifecycle       # Lifecycle tests only
"""
