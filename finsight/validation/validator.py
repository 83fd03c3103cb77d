"""
Two-Stage Transaction Validation

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Known transaction type
- Finite, non-negative amount
- Parseable date

STAGE 2 - SEMANTIC VALIDATION:
- Future date detection
- Implausible amount detection
- Flags that do not fit the type (tax-deductible income)
- Balance-sheet types that analytics will not classify

Analytics assume clean numbers. Anything that fails stage 1 must be
kept away from them; `filter_valid` does exactly that for bulk input.

IMPORTANT: Validation never silently fixes issues. It reports them.
"""

from datetime import datetime, timedelta
from typing import Any, Iterable, Optional, Union

from pydantic import ValidationError

from finsight.config import AppSettings, get_settings
from finsight.logger import get_logger
from finsight.models.transaction import Transaction
from finsight.models.validation import ValidationIssue, ValidationResult


logger = get_logger(__name__)


class TransactionValidator:
    """Validates raw transaction input (form data or stored records)."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def _validate_schema(
        self,
        raw: dict[str, Any],
    ) -> tuple[Optional[Transaction], list[ValidationIssue]]:
        """
        Stage 1: build the model and translate its errors into issues.

        Returns: (transaction or None, list_of_issues)
        """
        try:
            return Transaction.model_validate(raw), []
        except ValidationError as e:
            issues = []
            for error in e.errors():
                field = ".".join(str(part) for part in error["loc"]) or "transaction"
                issue_type = "missing" if error["type"] == "missing" else "invalid_value"
                issues.append(ValidationIssue(
                    field=field,
                    issue_type=issue_type,
                    message=error["msg"],
                    severity="error",
                ))
            return None, issues

    def _validate_semantic(
        self,
        transaction: Transaction,
        now: datetime,
    ) -> list[ValidationIssue]:
        """Stage 2: plausibility checks. Produces warnings only."""
        issues = []

        max_future = now + timedelta(days=self._settings.future_date_tolerance_days)
        if transaction.date > max_future:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Transaction date ({transaction.date.date()}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        if transaction.amount > self._settings.max_transaction_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({transaction.amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))
        elif transaction.amount == 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message="Amount is zero",
                severity="warning",
                suggested_fix="Zero-amount transactions do not affect any totals",
            ))

        if transaction.tax_deductible and transaction.type.is_inflow:
            issues.append(ValidationIssue(
                field="taxDeductible",
                issue_type="inconsistent",
                message=f"A {transaction.type.value} transaction is marked tax deductible",
                severity="warning",
                suggested_fix="Deductions usually apply to expenses and purchases",
            ))

        if not transaction.type.is_cash_flow:
            issues.append(ValidationIssue(
                field="type",
                issue_type="not_cash_flow",
                message=(
                    f"{transaction.type.value.title()} transactions are recorded "
                    "but not counted as inflow or outflow"
                ),
                severity="info",
            ))

        return issues

    def validate(
        self,
        raw: Union[dict[str, Any], Transaction],
        now: Optional[datetime] = None,
    ) -> ValidationResult:
        """
        Run both stages. Stage 2 is skipped when stage 1 fails.

        Args:
            raw: Form data / stored record, or an existing Transaction
            now: Reference time for the future-date check
        """
        if isinstance(raw, Transaction):
            transaction, issues = raw, []
        else:
            transaction, issues = self._validate_schema(raw)

        if transaction is not None:
            issues.extend(self._validate_semantic(transaction, now or datetime.now()))

        return ValidationResult(
            schema_valid=transaction is not None,
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
            transaction=transaction,
        )


def filter_valid(records: Iterable[Any]) -> list[Transaction]:
    """
    Keep only records that build a valid Transaction.

    Transactions pass through; dicts are validated; anything else is
    dropped. Dropped records are logged, not raised.
    """
    valid = []
    for index, record in enumerate(records):
        if isinstance(record, Transaction):
            valid.append(record)
            continue
        if not isinstance(record, dict):
            logger.warning("record_skipped", index=index, reason="not an object")
            continue
        try:
            valid.append(Transaction.model_validate(record))
        except ValidationError as e:
            logger.warning(
                "record_skipped",
                index=index,
                record_id=record.get("id"),
                errors=e.error_count(),
            )
    return valid
