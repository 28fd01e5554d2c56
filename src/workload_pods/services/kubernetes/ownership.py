"""Ownership resolution between workloads, replica sets and pods.

Pure functions over display models; nothing here talks to the API server.

A Deployment does not point at its current ReplicaSet. The current one is the
ReplicaSet it controls whose pod template equals the Deployment's template once
the controller-injected ``pod-template-hash`` label is ignored. When several
match, the oldest wins, the same rule ``kubectl describe`` applies.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from workload_pods.integrations.kubernetes.models.base import K8sEntityBase, OwnedEntity
from workload_pods.integrations.kubernetes.models.workloads import (
    DeploymentSummary,
    ReplicaSetSummary,
    StatefulSetSummary,
)

DEFAULT_DEPLOYMENT_UNIQUE_LABEL_KEY = "pod-template-hash"
CONTROLLER_REVISION_HASH_LABEL_KEY = "controller-revision-hash"

_EPOCH = datetime.min.replace(tzinfo=UTC)


def is_controlled_by(
    candidate: OwnedEntity,
    owner: K8sEntityBase,
) -> bool:
    """Check whether ``owner`` is the controller of ``candidate``.

    True iff one of the candidate's owner references names the owner's kind
    (exact match) and name, and is flagged as the controller reference.
    """
    return any(
        ref.controller and ref.kind == owner.kind and ref.name == owner.name
        for ref in candidate.owner_references
    )


def canonicalize_template(template: dict[str, Any] | None) -> dict[str, Any] | None:
    """Return a copy of a pod template without the ``pod-template-hash`` label.

    The input is never modified. A template without metadata, labels, or the
    label itself comes back as an equal copy.
    """
    if template is None:
        return None
    canonical = copy.deepcopy(template)
    labels = (canonical.get("metadata") or {}).get("labels")
    if isinstance(labels, dict):
        labels.pop(DEFAULT_DEPLOYMENT_UNIQUE_LABEL_KEY, None)
    return canonical


def _creation_order(replica_set: ReplicaSetSummary) -> tuple[bool, datetime]:
    # Missing timestamps sort first
    created = replica_set.created_at
    return (created is not None, created or _EPOCH)


def select_current_generation(
    deployment: DeploymentSummary,
    candidates: Iterable[ReplicaSetSummary],
) -> ReplicaSetSummary | None:
    """Pick the ReplicaSet currently serving ``deployment``'s pod template.

    Args:
        deployment: The owning Deployment.
        candidates: ReplicaSets to consider, typically every ReplicaSet in the
            Deployment's namespace.

    Returns:
        The earliest-created ReplicaSet controlled by the Deployment whose
        canonical template equals the Deployment's, or None if none does.
    """
    owned = sorted(
        (rs for rs in candidates if is_controlled_by(rs, deployment)),
        key=_creation_order,
    )
    wanted = canonicalize_template(deployment.template)
    for replica_set in owned:
        if canonicalize_template(replica_set.template) == wanted:
            return replica_set
    return None


def current_revision_selector(statefulset: StatefulSetSummary) -> str | None:
    """Build the label selector matching pods of the current revision.

    Returns:
        ``controller-revision-hash=<revision>``, or None when the StatefulSet
        has not published a current revision yet.
    """
    if not statefulset.current_revision:
        return None
    return f"{CONTROLLER_REVISION_HASH_LABEL_KEY}={statefulset.current_revision}"
