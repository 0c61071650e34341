"""
Reconciliation planner module.
"""

from .planner import PlanResponseElement, plan, plan_acl, plan_quota, plan_topic

__all__ = ["PlanResponseElement", "plan", "plan_acl", "plan_quota", "plan_topic"]
