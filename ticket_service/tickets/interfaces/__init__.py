"""
Ticket Interfaces Layer
========================

FastAPI route handlers for the ticket resource.
"""

from ticket_service.tickets.interfaces.controllers import tickets_router

__all__ = ["tickets_router"]
