"""Grouping membership reconciliation."""

from __future__ import annotations

from .plan import MembershipPlan, plan_membership
from .reconciler import GroupingReconciler, ReconcileResult

__all__ = ["GroupingReconciler", "MembershipPlan", "ReconcileResult", "plan_membership"]
