"""
Backup and Restore

A backup is one JSON document holding the whole dashboard state:

    {
        "transactions": [...],
        "userType": "freelancer" | null,
        "exportDate": "2024-03-01T10:00:00",
        "version": "1.0"
    }

Restoring requires a "transactions" list. Records inside it that do not
build a valid Transaction are skipped and logged, the same way loading
from storage treats them.
"""

import json
from datetime import datetime
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from finsight.logger import get_logger
from finsight.models.transaction import Transaction, UserProfile
from finsight.store import TransactionStore
from finsight.validation import filter_valid


logger = get_logger(__name__)

BACKUP_VERSION = "1.0"


class BackupFormatError(Exception):
    """The backup document is not in the expected format."""
    pass


class Backup(BaseModel):
    """Parsed contents of a backup document."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    transactions: list[Transaction] = Field(default_factory=list)
    user_type: Optional[UserProfile] = None
    export_date: Optional[datetime] = None
    version: str = BACKUP_VERSION


def create_backup(
    transactions: Sequence[Transaction],
    user_type: Optional[UserProfile] = None,
    export_date: Optional[datetime] = None,
) -> str:
    """Serialize the full state to a backup document."""
    payload = {
        "transactions": [t.to_record() for t in transactions],
        "userType": user_type.value if user_type else None,
        "exportDate": (export_date or datetime.now()).isoformat(),
        "version": BACKUP_VERSION,
    }
    logger.info("backup_created", transaction_count=len(transactions))
    return json.dumps(payload, indent=2)


def _parse_user_type(raw: object) -> Optional[UserProfile]:
    if raw is None or raw == "":
        return None
    try:
        return UserProfile(raw)
    except ValueError:
        logger.warning("backup_user_type_ignored", value=raw)
        return None


def _parse_export_date(raw: object) -> Optional[datetime]:
    if not isinstance(raw, str):
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("backup_export_date_ignored", value=raw)
        return None


def parse_backup(text: str) -> Backup:
    """
    Parse a backup document.

    Raises:
        BackupFormatError: If the text is not JSON, is not an object, or
            has no "transactions" list
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise BackupFormatError(f"Invalid backup file format: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("transactions"), list):
        raise BackupFormatError("Invalid backup file format: missing transactions list")

    records = data["transactions"]
    transactions = []
    seen_ids: set[str] = set()
    for t in filter_valid(records):
        if t.id in seen_ids:
            logger.warning("duplicate_transaction_skipped", transaction_id=t.id)
            continue
        seen_ids.add(t.id)
        transactions.append(t)
    skipped = len(records) - len(transactions)

    backup = Backup(
        transactions=transactions,
        user_type=_parse_user_type(data.get("userType")),
        export_date=_parse_export_date(data.get("exportDate")),
        version=str(data.get("version", BACKUP_VERSION)),
    )
    logger.info(
        "backup_parsed",
        transaction_count=len(transactions),
        skipped=skipped,
        version=backup.version,
    )
    return backup


def restore_backup(store: TransactionStore, text: str) -> Backup:
    """
    Replace the store contents with a backup.

    The profile is only changed when the backup names one. Nothing is
    written when the document is rejected, and the store applies the
    list and the profile as a single change.
    """
    backup = parse_backup(text)
    store.restore(backup.transactions, user_type=backup.user_type)
    logger.info("backup_restored", transaction_count=len(backup.transactions))
    return backup
