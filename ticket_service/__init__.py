"""Ticket Service: CRUD microservice for event tickets."""

__version__ = "1.0.0"
