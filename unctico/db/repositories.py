"""
Repository classes for alert persistence.

The safety engine talks to storage only through ``AlertRepository``. Three
implementations are provided: in-memory (tests, throwaway sessions), JSON
files on disk (single-practice installs), and Supabase tables.

Repository updates against an unknown id are a no-op that returns False;
stricter rules belong to the alert store.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from unctico.db.client import SupabaseClient, client_for
from unctico.errors import RepositoryError
from unctico.models import ContraindicationAlert, RedFlagAlert

logger = logging.getLogger(__name__)


class AlertRepository(ABC):
  """Persistence boundary for contraindication and red-flag alerts."""

  @abstractmethod
  def get_all_contraindications(self) -> list[ContraindicationAlert]:
    ...

  @abstractmethod
  def get_all_red_flags(self) -> list[RedFlagAlert]:
    ...

  @abstractmethod
  def save_contraindication(self, alert: ContraindicationAlert) -> None:
    ...

  @abstractmethod
  def update_contraindication(self, alert: ContraindicationAlert) -> bool:
    ...

  @abstractmethod
  def save_red_flag(self, alert: RedFlagAlert) -> None:
    ...

  @abstractmethod
  def update_red_flag(self, alert: RedFlagAlert) -> bool:
    ...

  def get_contraindications_for_client(self, client_id: str) -> list[ContraindicationAlert]:
    """Get all contraindications recorded for a client."""
    return [a for a in self.get_all_contraindications() if a.client_id == client_id]

  def get_red_flags_for_client(self, client_id: str) -> list[RedFlagAlert]:
    """Get all red flags recorded for a client."""
    return [a for a in self.get_all_red_flags() if a.client_id == client_id]


def _replace_by_id(records: list, record: BaseModel) -> bool:
  for index, existing in enumerate(records):
    if existing.id == record.id:
      records[index] = record
      return True
  return False


class InMemoryAlertRepository(AlertRepository):
  """Repository holding alerts in process memory."""

  def __init__(
    self,
    contraindications: Optional[list[ContraindicationAlert]] = None,
    red_flags: Optional[list[RedFlagAlert]] = None,
  ):
    self._contraindications = list(contraindications or [])
    self._red_flags = list(red_flags or [])

  def get_all_contraindications(self) -> list[ContraindicationAlert]:
    return list(self._contraindications)

  def get_all_red_flags(self) -> list[RedFlagAlert]:
    return list(self._red_flags)

  def save_contraindication(self, alert: ContraindicationAlert) -> None:
    self._contraindications.append(alert)

  def update_contraindication(self, alert: ContraindicationAlert) -> bool:
    return _replace_by_id(self._contraindications, alert)

  def save_red_flag(self, alert: RedFlagAlert) -> None:
    self._red_flags.append(alert)

  def update_red_flag(self, alert: RedFlagAlert) -> bool:
    return _replace_by_id(self._red_flags, alert)


class JsonFileAlertRepository(AlertRepository):
  """
  Repository storing each collection as a JSON array on disk.

  Files are rewritten whole on every change, via a temp file and an atomic
  rename, so a crash never leaves a half-written collection behind.
  """

  contraindications_file = "contraindications.json"
  red_flags_file = "red_flags.json"

  def __init__(self, data_dir: Path | str):
    self.data_dir = Path(data_dir)

  @property
  def contraindications_path(self) -> Path:
    return self.data_dir / self.contraindications_file

  @property
  def red_flags_path(self) -> Path:
    return self.data_dir / self.red_flags_file

  # -------------------------------------------------------------------------
  # Contraindications
  # -------------------------------------------------------------------------

  def get_all_contraindications(self) -> list[ContraindicationAlert]:
    return self._load(self.contraindications_path, ContraindicationAlert)

  def save_contraindication(self, alert: ContraindicationAlert) -> None:
    records = self.get_all_contraindications()
    records.append(alert)
    self._write(self.contraindications_path, records)

  def update_contraindication(self, alert: ContraindicationAlert) -> bool:
    records = self.get_all_contraindications()
    if not _replace_by_id(records, alert):
      return False
    self._write(self.contraindications_path, records)
    return True

  # -------------------------------------------------------------------------
  # Red flags
  # -------------------------------------------------------------------------

  def get_all_red_flags(self) -> list[RedFlagAlert]:
    return self._load(self.red_flags_path, RedFlagAlert)

  def save_red_flag(self, alert: RedFlagAlert) -> None:
    records = self.get_all_red_flags()
    records.append(alert)
    self._write(self.red_flags_path, records)

  def update_red_flag(self, alert: RedFlagAlert) -> bool:
    records = self.get_all_red_flags()
    if not _replace_by_id(records, alert):
      return False
    self._write(self.red_flags_path, records)
    return True

  # -------------------------------------------------------------------------
  # File handling
  # -------------------------------------------------------------------------

  def _load(self, path: Path, model: type[BaseModel]) -> list:
    if not path.exists():
      logger.debug("no file at %s, starting empty", path)
      return []
    try:
      raw = json.loads(path.read_text(encoding="utf-8"))
      return [model.model_validate(item) for item in raw]
    except (OSError, ValueError, ValidationError) as e:
      raise RepositoryError(f"Cannot read {path}: {e}") from e

  def _write(self, path: Path, records: list[BaseModel]) -> None:
    data = [r.model_dump(mode="json") for r in records]
    try:
      path.parent.mkdir(parents=True, exist_ok=True)
      fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}-", suffix=".tmp")
    except OSError as e:
      raise RepositoryError(f"Cannot write {path}: {e}") from e
    try:
      with os.fdopen(fd, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
      os.replace(tmp_name, path)
    except OSError as e:
      Path(tmp_name).unlink(missing_ok=True)
      raise RepositoryError(f"Cannot write {path}: {e}") from e
    logger.debug("wrote %d record(s) to %s", len(records), path)


class SupabaseAlertRepository(AlertRepository):
  """Repository backed by Supabase tables."""

  contraindications_table = "contraindication_alerts"
  red_flags_table = "red_flag_alerts"

  def __init__(self, client: Optional[SupabaseClient] = None):
    """
    Initialize repository with optional client.

    Args:
      client: Supabase client to use. If None, one is built from configuration.
    """
    self._client = client or client_for()

  def _to_dict(self, obj: Any) -> dict:
    """Convert object to dict for storage."""
    if hasattr(obj, "model_dump"):
      return obj.model_dump(mode="json")
    elif isinstance(obj, dict):
      return obj
    else:
      raise ValueError(f"Cannot convert {type(obj)} to dict")

  def _select_all(self, table_name: str) -> list[dict]:
    response = self._client.table(table_name).select("*").order("detected_date").execute()
    return response.data or []

  def _insert(self, table_name: str, obj: Any) -> None:
    self._client.table(table_name).insert(self._to_dict(obj)).execute()

  def _update(self, table_name: str, obj: Any) -> bool:
    data = self._to_dict(obj)
    response = self._client.table(table_name).update(data).eq("id", data["id"]).execute()
    return bool(response.data)

  def get_all_contraindications(self) -> list[ContraindicationAlert]:
    return [ContraindicationAlert.model_validate(row) for row in self._select_all(self.contraindications_table)]

  def get_all_red_flags(self) -> list[RedFlagAlert]:
    return [RedFlagAlert.model_validate(row) for row in self._select_all(self.red_flags_table)]

  def save_contraindication(self, alert: ContraindicationAlert) -> None:
    self._insert(self.contraindications_table, alert)

  def update_contraindication(self, alert: ContraindicationAlert) -> bool:
    return self._update(self.contraindications_table, alert)

  def save_red_flag(self, alert: RedFlagAlert) -> None:
    self._insert(self.red_flags_table, alert)

  def update_red_flag(self, alert: RedFlagAlert) -> bool:
    return self._update(self.red_flags_table, alert)

  def get_contraindications_for_client(self, client_id: str) -> list[ContraindicationAlert]:
    response = (
      self._client.table(self.contraindications_table)
      .select("*").eq("client_id", client_id).order("detected_date").execute()
    )
    return [ContraindicationAlert.model_validate(row) for row in response.data or []]

  def get_red_flags_for_client(self, client_id: str) -> list[RedFlagAlert]:
    response = (
      self._client.table(self.red_flags_table)
      .select("*").eq("client_id", client_id).order("detected_date").execute()
    )
    return [RedFlagAlert.model_validate(row) for row in response.data or []]
