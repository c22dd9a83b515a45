"""
Serverless entry point for the Ticket Service API
"""
import os

# No table creation from a cold-starting function
os.environ.setdefault("ENVIRONMENT", "production")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from mangum import Mangum  # noqa: E402

from ticket_service.main import app  # noqa: E402

# Lifespan stays on: it connects and disconnects the data source
handler = Mangum(app, lifespan="auto")
