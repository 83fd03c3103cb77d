"""Transaction validation package."""

from finsight.validation.validator import TransactionValidator, filter_valid

__all__ = ["TransactionValidator", "filter_valid"]
