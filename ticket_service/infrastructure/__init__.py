"""
Infrastructure Layer
=====================

Technical adapters shared across modules:
- Database data source (engine, sessions, schema)
"""
