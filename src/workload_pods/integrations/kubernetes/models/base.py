"""Base display models and SDK extraction helpers.

Display models are read-only snapshots built from kubernetes SDK objects (or
anything shaped like them) by ``from_k8s_object``. Extraction never raises on
missing attributes; absent values become None or the field default.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class OwnerReference(BaseModel):
    """One entry of ``metadata.ownerReferences``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    api_version: str | None = None
    kind: str | None = None
    name: str | None = None
    uid: str | None = None
    controller: bool = Field(
        default=False, description="Set only on the reference to the managing controller"
    )

    @classmethod
    def from_k8s_object(cls, obj: Any) -> OwnerReference:
        """Create from a kubernetes V1OwnerReference object."""
        if obj is None:
            return cls()
        return cls(
            api_version=getattr(obj, "api_version", None),
            kind=getattr(obj, "kind", None),
            name=getattr(obj, "name", None),
            uid=getattr(obj, "uid", None),
            # The SDK leaves the flag as None unless the server sent it
            controller=getattr(obj, "controller", None) is True,
        )


class K8sEntityBase(BaseModel):
    """Common metadata of every display model.

    ``kind`` is the exact API kind of the concrete model. Owner references
    name their owner by this value, so it is compared case-sensitively.
    """

    model_config = ConfigDict(extra="ignore")

    kind: ClassVar[str] = ""

    name: str
    namespace: str | None = None
    uid: str | None = None
    creation_timestamp: str | None = Field(default=None, description="ISO 8601 creation time")
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None

    @classmethod
    def _metadata(cls, obj: Any) -> dict[str, Any]:
        """Constructor arguments taken from ``obj.metadata``."""
        return {
            "name": _safe_get(obj, "metadata", "name", default=""),
            "namespace": _safe_get(obj, "metadata", "namespace"),
            "uid": _safe_get(obj, "metadata", "uid"),
            "creation_timestamp": _get_timestamp(
                _safe_get(obj, "metadata", "creation_timestamp")
            ),
            "labels": _get_mapping(obj, "labels"),
            "annotations": _get_mapping(obj, "annotations"),
        }

    @property
    def created_at(self) -> datetime | None:
        """Creation time as an aware datetime; None if absent or unparsable.

        Timestamps without an offset are taken as UTC.
        """
        if not self.creation_timestamp:
            return None
        try:
            created = datetime.fromisoformat(self.creation_timestamp.replace("Z", "+00:00"))
        except ValueError:
            return None
        return created if created.tzinfo else created.replace(tzinfo=UTC)

    @property
    def age(self) -> str:
        """Age in the largest whole unit, kubectl style (``3d``, ``5h``, ``12m``)."""
        created = self.created_at
        if created is None:
            return "Unknown"
        seconds = max(int((datetime.now(UTC) - created).total_seconds()), 0)
        for unit, size in (("d", 86400), ("h", 3600)):
            if seconds >= size:
                return f"{seconds // size}{unit}"
        return f"{seconds // 60}m"


class OwnedEntity(K8sEntityBase):
    """A display model whose owners matter for resolution (ReplicaSets, Pods)."""

    owner_references: list[OwnerReference] = Field(
        default_factory=list, description="Owners, in the order the API server lists them"
    )

    @classmethod
    def _metadata(cls, obj: Any) -> dict[str, Any]:
        return {**super()._metadata(obj), "owner_references": _get_owner_references(obj)}


# =============================================================================
# Extraction helpers
# =============================================================================


def _safe_get(obj: Any, *attrs: str, default: Any = None) -> Any:
    """Follow ``attrs`` through nested objects, stopping at the first None."""
    for attr in attrs:
        if obj is None:
            return default
        obj = getattr(obj, attr, None)
    return default if obj is None else obj


def _get_timestamp(value: Any) -> str | None:
    """ISO string for a datetime; strings pass through."""
    if value is None:
        return None
    return value.isoformat() if isinstance(value, datetime) else str(value)


def _get_mapping(obj: Any, field: str) -> dict[str, str] | None:
    """Copy of ``metadata.<field>`` (labels, annotations); None when empty."""
    mapping = _safe_get(obj, "metadata", field)
    return dict(mapping) if mapping else None


def _get_owner_references(obj: Any) -> list[OwnerReference]:
    return [
        OwnerReference.from_k8s_object(ref)
        for ref in _safe_get(obj, "metadata", "owner_references", default=[])
    ]


def _get_template(obj: Any) -> dict[str, Any] | None:
    """``spec.template`` as a plain nested dict.

    SDK models are converted with ``to_dict()`` (snake_case keys); dicts pass
    through unchanged.
    """
    template = _safe_get(obj, "spec", "template")
    if template is None or isinstance(template, dict):
        return template
    to_dict = getattr(template, "to_dict", None)
    result = to_dict() if callable(to_dict) else None
    return result if isinstance(result, dict) else None
