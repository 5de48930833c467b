"""
Runtime configuration for Unctico.

Settings come from environment variables; access goes through a process-wide
singleton so the CLI and the server read the same values.
"""

import os
from pathlib import Path
from typing import Optional

from unctico.errors import ConfigurationError

STORAGE_BACKENDS = ("memory", "json", "supabase")


class SafetyConfig:
  """Configuration for storage and logging."""

  def __init__(self):
    self.storage = os.environ.get("UNCTICO_STORAGE", "json").strip().lower()
    self.data_dir = Path(
      os.environ.get("UNCTICO_DATA_DIR", str(Path.home() / ".unctico"))
    ).expanduser()
    self.log_level = os.environ.get("UNCTICO_LOG_LEVEL", "WARNING").upper()
    self.supabase_url = os.environ.get("SUPABASE_URL")
    self.supabase_anon_key = os.environ.get("SUPABASE_ANON_KEY")
    self.supabase_service_key = os.environ.get("SUPABASE_SERVICE_KEY")

  @property
  def uses_supabase(self) -> bool:
    return self.storage == "supabase"

  @property
  def supabase_configured(self) -> bool:
    """Check if Supabase is properly configured."""
    return bool(self.supabase_url and self.supabase_anon_key)

  def validate(self) -> None:
    """Raise error if not properly configured."""
    if self.storage not in STORAGE_BACKENDS:
      raise ConfigurationError(
        f"UNCTICO_STORAGE must be one of {', '.join(STORAGE_BACKENDS)}, got {self.storage!r}"
      )
    if self.uses_supabase:
      if not self.supabase_url:
        raise ConfigurationError("SUPABASE_URL environment variable not set")
      if not self.supabase_anon_key:
        raise ConfigurationError("SUPABASE_ANON_KEY environment variable not set")


_config: Optional[SafetyConfig] = None


def get_config() -> SafetyConfig:
  """Get the configuration (singleton)."""
  global _config
  if _config is None:
    _config = SafetyConfig()
  return _config


def reset_config() -> None:
  """Reset the configuration singleton (useful for testing)."""
  global _config
  _config = None
