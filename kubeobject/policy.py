"""Management policies: gate which lifecycle actions may reach the external resource.

A management policy is declared on every Object. Before the controller issues
a create, update or delete call it asks the gate whether the action is
permitted. The four policies form two independent grants:

- "may mutate forward" (create/update): Default, ObserveCreateUpdate
- "may remove" (delete): Default, ObserveDelete

Unrecognized policies collapse to UNKNOWN, which grants nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class ManagementPolicy(Enum):
    """What the provider may do with the underlying external resource."""

    DEFAULT = "Default"  # Fully managed
    OBSERVE_CREATE_UPDATE = "ObserveCreateUpdate"  # Observe, create, update; never delete
    OBSERVE_DELETE = "ObserveDelete"  # Observe or delete; never create or update
    OBSERVE = "Observe"  # Observe only
    UNKNOWN = "Unknown"  # Any value outside the four above

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN

    @classmethod
    def known(cls) -> list[ManagementPolicy]:
        return [p for p in cls if p is not cls.UNKNOWN]

    def is_action_allowed(self, action: ObjectAction | str) -> bool:
        return is_action_allowed(self, action)


class ObjectAction(Enum):
    """Lifecycle actions the controller performs against the external resource."""

    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


_MAY_MUTATE = frozenset({ManagementPolicy.DEFAULT, ManagementPolicy.OBSERVE_CREATE_UPDATE})
_MAY_DELETE = frozenset({ManagementPolicy.DEFAULT, ManagementPolicy.OBSERVE_DELETE})


@dataclass(frozen=True)
class PolicyDecision:
    """Result of asking the gate about one action."""

    policy: ManagementPolicy
    action: ObjectAction | None
    allowed: bool

    @property
    def reason(self) -> str:
        if self.action is None:
            return "unknown action is never allowed"
        verdict = "allows" if self.allowed else "denies"
        return f"policy {self.policy.value} {verdict} {self.action.value}"


def is_action_allowed(policy: ManagementPolicy | str, action: ObjectAction | str) -> bool:
    """Determine whether ``action`` may be performed under ``policy``.

    Never raises: unknown policies and unknown actions are denied.
    """
    return evaluate(policy, action).allowed


def evaluate(policy: ManagementPolicy | str, action: ObjectAction | str) -> PolicyDecision:
    """Evaluate a policy against an action and return the full decision."""
    policy = _coerce_policy(policy)
    action = _coerce_action(action)

    if action is None:
        allowed = False
    elif action in (ObjectAction.CREATE, ObjectAction.UPDATE):
        allowed = policy in _MAY_MUTATE
    else:
        allowed = policy in _MAY_DELETE

    decision = PolicyDecision(policy=policy, action=action, allowed=allowed)
    logger.debug("Policy gate: %s", decision.reason)
    return decision


def decision_table() -> list[PolicyDecision]:
    """All decisions for the four known policies, row by row."""
    return [
        evaluate(policy, action)
        for policy in ManagementPolicy.known()
        for action in ObjectAction
    ]


def _coerce_policy(policy) -> ManagementPolicy:
    if isinstance(policy, ManagementPolicy):
        return policy
    return ManagementPolicy(policy)


def _coerce_action(action) -> ObjectAction | None:
    if isinstance(action, ObjectAction):
        return action
    try:
        return ObjectAction(action)
    except ValueError:
        return None
