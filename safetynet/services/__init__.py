"""
Use cases for the SafetyNet API.

store.Store owns the collections and every mutation; query_service.QueryService
answers the alert queries on top of it. Routers call these services instead of
touching the collections or the data file directly.
"""
