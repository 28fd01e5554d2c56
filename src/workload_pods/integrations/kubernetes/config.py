"""Cluster selection and request settings.

Settings come from the ``kubernetes:`` section of ``~/.config/wpods/config.yaml``
(optional) with ``WPODS_K8S_*`` environment variables applied on top.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

CONFIG_DIR = Path.home() / ".config" / "wpods"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

DEFAULT_NAMESPACE = "default"
DEFAULT_TIMEOUT = 30

# Environment variable -> (section, key, converter); "" is the top level
_SCALAR_OVERRIDES: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "WPODS_K8S_CONTEXT": ("", "active_cluster", str),
    "WPODS_K8S_TIMEOUT": ("defaults", "timeout", int),
    "WPODS_K8S_RETRIES": ("defaults", "retry_attempts", int),
    "WPODS_K8S_OUTPUT": ("", "output_format", str),
}


class ConfigError(Exception):
    """A config file could not be read or does not validate."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


def _positive_timeout(value: int) -> int:
    if value <= 0:
        raise ValueError("timeout must be positive")
    return value


class ClusterConfig(BaseModel):
    """One named cluster: a kubeconfig context plus its defaults.

    An empty ``context`` selects the kubeconfig's current-context. With no
    ``kubeconfig`` the SDK default applies (``$KUBECONFIG``, then
    ``~/.kube/config``).
    """

    model_config = ConfigDict(extra="forbid")

    context: str = ""
    kubeconfig: str | None = None
    namespace: str = DEFAULT_NAMESPACE
    timeout: int = DEFAULT_TIMEOUT

    @field_validator("timeout")
    @classmethod
    def positive_timeout(cls, v: int) -> int:
        return _positive_timeout(v)

    @field_validator("kubeconfig")
    @classmethod
    def expand_kubeconfig(cls, v: str | None) -> str | None:
        return str(Path(v).expanduser()) if v else None


class KubernetesDefaultsConfig(BaseModel):
    """Request settings used when the active cluster does not override them."""

    model_config = ConfigDict(extra="forbid")

    timeout: int = DEFAULT_TIMEOUT
    retry_attempts: int = 3

    @field_validator("timeout")
    @classmethod
    def positive_timeout(cls, v: int) -> int:
        return _positive_timeout(v)

    @field_validator("retry_attempts")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("retry_attempts must be at least 1")
        return v


class KubernetesConfig(BaseModel):
    """The ``kubernetes:`` config section."""

    model_config = ConfigDict(extra="forbid")

    clusters: dict[str, ClusterConfig] = {}
    active_cluster: str | None = None
    defaults: KubernetesDefaultsConfig = KubernetesDefaultsConfig()
    output_format: Literal["table", "json", "yaml"] = "table"

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> KubernetesConfig:
        """Validate ``base_config`` with environment overrides applied.

        ``WPODS_K8S_CONTEXT``, ``WPODS_K8S_TIMEOUT``, ``WPODS_K8S_RETRIES`` and
        ``WPODS_K8S_OUTPUT`` replace single settings. ``WPODS_K8S_KUBECONFIG``
        and ``WPODS_K8S_NAMESPACE`` apply to every configured cluster; with no
        clusters configured they define an implicit ``default`` one.

        Raises:
            ValueError: An override or the resulting config is invalid.
        """
        data = dict(base_config or {})
        data["defaults"] = dict(data.get("defaults") or {})

        for var, (section, key, convert) in _SCALAR_OVERRIDES.items():
            if raw := os.environ.get(var):
                (data[section] if section else data)[key] = convert(raw)

        instance = cls.model_validate(data)

        per_cluster = {
            key: value
            for key, value in (
                ("kubeconfig", os.environ.get("WPODS_K8S_KUBECONFIG")),
                ("namespace", os.environ.get("WPODS_K8S_NAMESPACE")),
            )
            if value
        }
        if not per_cluster:
            return instance

        if not instance.clusters:
            instance.clusters["default"] = ClusterConfig(
                context=instance.active_cluster or "", timeout=instance.defaults.timeout
            )
            instance.active_cluster = "default"
        for name, cluster in list(instance.clusters.items()):
            instance.clusters[name] = ClusterConfig.model_validate(
                {**cluster.model_dump(), **per_cluster}
            )
        return instance

    def get_active_cluster(self) -> ClusterConfig | None:
        """The named active cluster, else the first configured one."""
        if self.active_cluster and self.active_cluster in self.clusters:
            return self.clusters[self.active_cluster]
        return next(iter(self.clusters.values()), None)

    def get_active_context(self) -> str | None:
        """Kubeconfig context to load; None means its current-context.

        An ``active_cluster`` that names no configured cluster is taken as a
        context name itself.
        """
        if self.active_cluster and self.active_cluster not in self.clusters:
            return self.active_cluster
        cluster = self.get_active_cluster()
        return (cluster.context or None) if cluster else None

    def get_active_namespace(self) -> str:
        cluster = self.get_active_cluster()
        return cluster.namespace if cluster else DEFAULT_NAMESPACE

    def get_active_timeout(self) -> int:
        if self.active_cluster and self.active_cluster in self.clusters:
            return self.clusters[self.active_cluster].timeout
        return self.defaults.timeout


def _read_section(config_path: Path) -> dict[str, Any]:
    try:
        document = yaml.safe_load(config_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file: {e}", path=config_path) from e
    if not isinstance(document, dict):
        raise ConfigError("Config file must contain a mapping", path=config_path)
    section = document.get("kubernetes") or {}
    if not isinstance(section, dict):
        raise ConfigError("'kubernetes' section must be a mapping", path=config_path)
    return section


def load_config(path: Path | None = None) -> KubernetesConfig:
    """Load configuration from a YAML file, then apply environment overrides.

    Example file::

        kubernetes:
          active_cluster: staging
          clusters:
            staging:
              context: staging-admin
              namespace: web

    Args:
        path: Config file path. Defaults to ``~/.config/wpods/config.yaml``,
            which may be absent; an explicit path must exist.

    Raises:
        ConfigError: If the file is unreadable, not valid YAML, or fails validation.
    """
    config_path = path or CONFIG_FILE
    if config_path.exists():
        base = _read_section(config_path)
    elif path is not None:
        raise ConfigError(f"Config file not found: {config_path}", path=config_path)
    else:
        base = {}

    try:
        return KubernetesConfig.from_env(base)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}", path=config_path) from e
