"""
Supabase client wrapper for Unctico.

Provides singleton access to a Supabase client built from the Unctico
configuration.
"""

from typing import Optional

from supabase import create_client, Client

from unctico.config import SafetyConfig, get_config
from unctico.errors import ConfigurationError


class SupabaseClient:
  """
  Thin wrapper around the Supabase client.

  Repositories only need table access; keeping the wrapper lets tests pass a
  stand-in with the same ``table()`` method.
  """

  def __init__(self, client: Client):
    self._client = client

  @property
  def client(self) -> Client:
    """Get the underlying Supabase client."""
    return self._client

  def table(self, name: str):
    """Get a table reference for queries."""
    return self._client.table(name)

_client: Optional[SupabaseClient] = None
_admin_client: Optional[SupabaseClient] = None


def get_client(config: Optional[SafetyConfig] = None) -> SupabaseClient:
  """
  Get the Supabase client (singleton).

  Uses the anon key, which respects Row Level Security.
  """
  global _client
  if _client is None:
    config = config or get_config()
    if not config.supabase_configured:
      raise ConfigurationError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
    _client = SupabaseClient(create_client(config.supabase_url, config.supabase_anon_key))
  return _client


def get_admin_client(config: Optional[SafetyConfig] = None) -> SupabaseClient:
  """
  Get the admin Supabase client (singleton).

  Uses the service_role key, which bypasses Row Level Security.
  """
  global _admin_client
  if _admin_client is None:
    config = config or get_config()
    if not config.supabase_url:
      raise ConfigurationError("SUPABASE_URL environment variable not set")
    if not config.supabase_service_key:
      raise ConfigurationError("SUPABASE_SERVICE_KEY environment variable not set")
    _admin_client = SupabaseClient(create_client(config.supabase_url, config.supabase_service_key))
  return _admin_client


def client_for(config: Optional[SafetyConfig] = None) -> SupabaseClient:
  """Admin client when a service key is configured, anon client otherwise."""
  config = config or get_config()
  if config.supabase_service_key:
    return get_admin_client(config)
  return get_client(config)


def reset_clients() -> None:
  """Reset client singletons (useful for testing)."""
  global _client, _admin_client
  _client = None
  _admin_client = None
