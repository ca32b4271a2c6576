"""SafetyNet Alerts: emergency-response records and alert queries."""

__version__ = "1.0.0"
