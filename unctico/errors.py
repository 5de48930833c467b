"""
Exceptions raised by the safety engine.
"""


class SafetyError(Exception):
  """Base class for safety engine errors."""


class AlertNotFoundError(SafetyError, LookupError):
  """
  Raised when an alert id has no matching record.

  Alert ids are created internally and handed back by reference, so callers
  should treat this as a logic error rather than a user mistake.
  """

  def __init__(self, alert_id: str, detail: str = "no matching alert"):
    self.alert_id = alert_id
    super().__init__(f"{detail}: {alert_id}")


class RepositoryError(SafetyError):
  """Raised when the persistence layer cannot read or write alerts."""


class ConfigurationError(SafetyError, ValueError):
  """Raised when the environment configuration is invalid."""
