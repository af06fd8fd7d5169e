"""Reconciliation of desired vs. last-known upstream subscriptions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReconcilePlan:
    """Addresses to subscribe and unsubscribe (sorted, for stable API calls)."""

    to_add: tuple[str, ...] = ()
    to_remove: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


def reconcile(desired: Iterable[str], actual: Iterable[str]) -> ReconcilePlan:
    """Return the diff that moves actual to desired.

    to_add = desired - actual, to_remove = actual - desired. Blank addresses are ignored.
    """
    desired_set = {a.strip() for a in desired if a and a.strip()}
    actual_set = {a.strip() for a in actual if a and a.strip()}
    return ReconcilePlan(
        to_add=tuple(sorted(desired_set - actual_set)),
        to_remove=tuple(sorted(actual_set - desired_set)),
    )
