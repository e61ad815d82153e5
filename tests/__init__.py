"""Test suite for formguard.

This package contains tests for:
- Validation engine (required fields, format rules, hidden fields)
- Conditional field resolver
- Form state transitions and the lifecycle state machine
- Schema declarations and declarative definitions
- Event system (emission, serialization)
- Integration scenarios for the built-in forms
"""
