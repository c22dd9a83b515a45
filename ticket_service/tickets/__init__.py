"""
Tickets Module
==============

CRUD over the Ticket entity.

Layers:
- domain: Ticket entity and document mapping
- application: DTOs, filter language, repository interface
- infrastructure: SQLAlchemy model and repository
- interfaces: FastAPI routes
"""
