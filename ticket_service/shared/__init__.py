"""
Shared Kernel Module
====================

Generic infrastructure and API plumbing used by the ticket module.

DO NOT add ticket business rules to the shared kernel.
"""
