"""
Core primitives shared across the SafetyNet service.

This package hosts configuration, the error taxonomy, logging setup and the
readers-writer lock guarding the in-memory store. Services and routers depend
on these instead of reading os.environ or configuring logging themselves.
"""
