"""
Tests Package - Unit and Scenario Tests

Test structure:
- tests/conftest.py - Shared fixtures (settings factory, fake AccessPlanIt API)
- tests/test_*.py - One module per component

HTTP is faked with httpx.MockTransport; the scheduler spawns real, short-lived
Python child processes.
"""
