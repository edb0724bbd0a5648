"""Reconciliation of regenerated scaffolds with previously emitted ones."""

from scenariotree.core.reconcile.drift import DriftEntry, DriftKind, DriftReport, compute_drift
from scenariotree.core.reconcile.reconciler import ReconcileResult, Reconciler, reconcile
from scenariotree.core.reconcile.store import ArtifactStore

__all__ = [
    "ArtifactStore",
    "DriftEntry",
    "DriftKind",
    "DriftReport",
    "ReconcileResult",
    "Reconciler",
    "compute_drift",
    "reconcile",
]
