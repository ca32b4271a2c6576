"""
FastAPI routers grouped by resource (persons, fire stations, medical records)
plus the alert endpoints.

Each module exposes an APIRouter included by safetynet.app.create_app; the
services they call live on app.state.
"""
