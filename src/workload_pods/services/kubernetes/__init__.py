"""Kubernetes services.

Object access plus the ownership resolution built on top of it.
"""

from workload_pods.services.kubernetes.accessor import ObjectAccessor, model_for_kind
from workload_pods.services.kubernetes.ownership import (
    CONTROLLER_REVISION_HASH_LABEL_KEY,
    DEFAULT_DEPLOYMENT_UNIQUE_LABEL_KEY,
    canonicalize_template,
    current_revision_selector,
    is_controlled_by,
    select_current_generation,
)
from workload_pods.services.kubernetes.pod_resolver import PodResolver

__all__ = [
    "CONTROLLER_REVISION_HASH_LABEL_KEY",
    "DEFAULT_DEPLOYMENT_UNIQUE_LABEL_KEY",
    "ObjectAccessor",
    "PodResolver",
    "canonicalize_template",
    "current_revision_selector",
    "is_controlled_by",
    "model_for_kind",
    "select_current_generation",
]
