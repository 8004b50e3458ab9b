"""
Logistics Back-Office Core
==========================
Shared building blocks behind the back-office API.

Subpackages:
- normalization: date/time string normalization
- analytics: exception, express, inventory and container summaries
- storage: table definitions and the record repository
"""

__version__ = "1.0.0"
