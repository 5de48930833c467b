"""
Database module for Unctico.

Provides the alert repository interface and its storage backends.
"""

from unctico.db.client import client_for, get_client, get_admin_client, reset_clients, SupabaseClient
from unctico.db.repositories import (
  AlertRepository,
  InMemoryAlertRepository,
  JsonFileAlertRepository,
  SupabaseAlertRepository,
)

__all__ = [
  "client_for",
  "get_client",
  "get_admin_client",
  "reset_clients",
  "SupabaseClient",
  "AlertRepository",
  "InMemoryAlertRepository",
  "JsonFileAlertRepository",
  "SupabaseAlertRepository",
]
