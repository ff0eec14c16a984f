"""
LightBnB data-access layer.
Query functions for users, properties and reservations over PostgreSQL.
"""

__version__ = "1.0.0"
