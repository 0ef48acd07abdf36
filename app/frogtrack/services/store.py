from datetime import date, datetime, UTC
from pathlib import Path
from typing import Protocol
import json
import logging
import os
import tempfile
import threading
import time
from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from frogtrack.core.config import get_settings
from frogtrack.db.session import get_db
from frogtrack.models import Certification
from frogtrack.schemas.api import CertificationCreate
from frogtrack.services.certifications import parse_date

logger = logging.getLogger(__name__)

# serializes read-modify-write cycles on the JSON store file
_file_lock = threading.Lock()


class RecordStoreError(Exception):
    pass


class RecordStore(Protocol):
    def list(self) -> list[dict]: ...

    def create(self, payload: CertificationCreate) -> dict: ...

    def ping(self) -> str: ...


def _sort_key(row: dict):
    expiry = parse_date(row.get("expiry_date"))
    return (expiry is None, expiry or date.min, row.get("name") or "")


class SqlRecordStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list(self) -> list[dict]:
        try:
            rows = self.db.scalars(
                select(Certification).order_by(
                    Certification.expiry_date.asc().nulls_last(),
                    Certification.name.asc(),
                )
            ).all()
        except SQLAlchemyError as exc:
            raise RecordStoreError("Failed to fetch certifications") from exc
        return [c.as_row() for c in rows]

    def create(self, payload: CertificationCreate) -> dict:
        cert = Certification(**payload.model_dump())
        try:
            self.db.add(cert)
            self.db.commit()
            self.db.refresh(cert)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise RecordStoreError("Failed to create certification") from exc
        return cert.as_row()

    def ping(self) -> str:
        try:
            now = self.db.execute(select(func.current_timestamp())).scalar_one()
        except SQLAlchemyError as exc:
            raise RecordStoreError(str(exc)) from exc
        return str(now)


class JsonFileRecordStore:
    """Keeps records in a single JSON file, for single-user installs without a database."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise RecordStoreError(f"Could not read {self.path}") from exc
        if not isinstance(data, list):
            raise RecordStoreError(f"{self.path} does not contain a list")
        return data

    def _write(self, rows: list[dict]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.path.parent, suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                json.dump(rows, tmp, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise RecordStoreError(f"Could not write {self.path}") from exc

    def _next_id(self, rows: list[dict]) -> int:
        new_id = int(time.time() * 1000)
        taken = {row.get("id") for row in rows}
        while new_id in taken:
            new_id += 1
        return new_id

    def list(self) -> list[dict]:
        return sorted(self._read(), key=_sort_key)

    def create(self, payload: CertificationCreate) -> dict:
        with _file_lock:
            rows = self._read()
            row = {"id": self._next_id(rows), **payload.model_dump(mode="json")}
            rows.insert(0, row)
            self._write(rows)
        return row

    def ping(self) -> str:
        self._read()
        return datetime.now(UTC).isoformat()


def get_store(db: Session = Depends(get_db)) -> RecordStore:
    settings = get_settings()
    if settings.record_store == "file":
        return JsonFileRecordStore(settings.record_store_path)
    return SqlRecordStore(db)
