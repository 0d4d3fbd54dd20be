"""
Unit of Work Pattern

Manages database transactions and runs follow-up callbacks only after a
successful commit.
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from django.db import transaction

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""
        pass

    @abstractmethod
    def after_commit(self, callback: Callable[[], None]):
        """Register a callback to run once the transaction is committed"""
        pass


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with DjangoUnitOfWork() as uow:
            # Lock the key row
            ResourceDay.objects.select_for_update().get(pk=key_id)

            # Re-check and write
            reservation = Reservation.objects.create(...)

            uow.after_commit(lambda: logger.info("stored %s", reservation.pk))

            # Transaction commits here
        # Callbacks run after commit
    """

    def __init__(self, using: str | None = None):
        self._using = using
        self._callbacks: List[Callable[[], None]] = []
        self._transaction = None

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic(using=self._using)
        self._transaction.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def commit(self):
        """
        Schedule collected callbacks

        Callbacks go through Django's transaction.on_commit() so they only
        run after the outermost atomic block commits.
        """
        callbacks = self._callbacks.copy()
        self._callbacks.clear()
        logger.debug(f"Committing transaction with {len(callbacks)} callbacks")

        for callback in callbacks:
            transaction.on_commit(callback, using=self._using)

    def rollback(self):
        """Rollback changes and discard callbacks"""
        if self._callbacks:
            logger.debug(f"Rolling back transaction, discarding {len(self._callbacks)} callbacks")
        self._callbacks.clear()

    def after_commit(self, callback: Callable[[], None]):
        self._callbacks.append(callback)
