"""
Main Orchestrator for FinSight

This module ties the store to everything derived from it:
1. Financial summary
2. Spending / income patterns
3. Ranked insights
4. Weekly cash flow predictions

DESIGN DECISION: Nothing is updated incrementally. Every store change
triggers a full recompute from the current snapshot, so the derived
views can never drift from the transaction list.
"""

from datetime import datetime
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from finsight.analytics import (
    detect_patterns,
    financial_risk,
    forecast_cash_flow,
    generate_insights,
)
from finsight.config import Settings, get_settings
from finsight.logger import get_logger
from finsight.models.analytics import AIInsight, CashFlowPrediction, FinancialPattern
from finsight.models.reports import FinancialSummary
from finsight.models.transaction import Transaction
from finsight.reports import build_summary
from finsight.services.storage import InMemoryStorage, JsonFileStorage, KeyValueStorage
from finsight.store import TransactionStore


logger = get_logger(__name__)


class DashboardState(BaseModel):
    """Everything the dashboard shows, computed from one snapshot."""
    model_config = ConfigDict(frozen=True)

    transactions: tuple[Transaction, ...] = ()
    summary: FinancialSummary = Field(default_factory=FinancialSummary)
    patterns: list[FinancialPattern] = Field(default_factory=list)
    insights: list[AIInsight] = Field(default_factory=list)
    predictions: list[CashFlowPrediction] = Field(default_factory=list)
    risk_score: float = Field(default=0.5, ge=0.0, le=1.0)
    computed_at: datetime = Field(default_factory=datetime.now)


class FinanceDashboard:
    """
    Keeps a DashboardState in step with a TransactionStore.

    Flow:
    1. Store mutation → subscriber callback
    2. Recompute summary, patterns, insights, predictions
    3. Publish the new state to any listeners (the UI)
    """

    def __init__(
        self,
        store: TransactionStore,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self._settings = settings or get_settings()
        self._clock = clock or datetime.now
        self._listeners: list[Callable[[DashboardState], None]] = []
        self._state = DashboardState()
        self._unsubscribe = store.subscribe(self._on_store_change)

    @property
    def store(self) -> TransactionStore:
        return self._store

    @property
    def state(self) -> DashboardState:
        return self._state

    def on_change(self, listener: Callable[[DashboardState], None]) -> None:
        self._listeners.append(listener)

    def close(self) -> None:
        """Stop following the store."""
        self._unsubscribe()

    def _on_store_change(self, transactions: tuple[Transaction, ...]) -> None:
        self.recompute(transactions)

    def recompute(self, transactions: Optional[tuple[Transaction, ...]] = None) -> DashboardState:
        """
        Rebuild every derived collection from a snapshot.

        Args:
            transactions: Snapshot to use; defaults to the store's current one
        """
        snapshot = tuple(self._store.transactions if transactions is None else transactions)
        rules = self._settings.analytics
        currency_symbol = self._settings.app.currency_symbol
        now = self._clock()

        patterns = detect_patterns(snapshot, rules.min_pattern_transactions)
        self._state = DashboardState(
            transactions=snapshot,
            summary=build_summary(snapshot),
            patterns=patterns,
            insights=generate_insights(snapshot, patterns, rules, currency_symbol),
            predictions=forecast_cash_flow(
                snapshot,
                now=now,
                weeks=rules.forecast_weeks,
                min_transactions=rules.min_forecast_transactions,
            ),
            risk_score=financial_risk(snapshot, rules.min_risk_transactions),
            computed_at=now,
        )

        logger.debug(
            "dashboard_recomputed",
            transaction_count=len(snapshot),
            pattern_count=len(patterns),
            insight_count=len(self._state.insights),
            prediction_count=len(self._state.predictions),
        )
        for listener in list(self._listeners):
            listener(self._state)
        return self._state


def create_storage(settings: Optional[Settings] = None) -> KeyValueStorage:
    """Build the configured storage backend."""
    storage_settings = (settings or get_settings()).storage
    if storage_settings.backend == "memory":
        return InMemoryStorage()
    return JsonFileStorage(storage_settings.path)


def create_dashboard(
    storage: Optional[KeyValueStorage] = None,
    settings: Optional[Settings] = None,
) -> FinanceDashboard:
    """
    Factory function to create all application components.

    Args:
        storage: Storage backend. Built from settings when omitted.
        settings: Settings to use. Defaults to the cached ones.

    Returns:
        A dashboard whose store has already been loaded
    """
    settings = settings or get_settings()
    storage = storage or create_storage(settings)

    store = TransactionStore(
        storage,
        transactions_key=settings.storage.transactions_key,
        user_type_key=settings.storage.user_type_key,
    )
    dashboard = FinanceDashboard(store, settings)
    store.load()

    logger.info(
        "dashboard_created",
        backend=type(storage).__name__,
        transaction_count=len(store),
    )
    return dashboard
