"""TOML-based provider and cluster configuration.

Loads ~/.scylla-cloud/defaults.toml (global) and scylla-cloud.toml (project),
merges them, and resolves named clusters into attribute stores ready for
ClusterResource operations.

Example scylla-cloud.toml::

    [provider]
    endpoint = "https://cloud.scylladb.com/api/v0"

    [provider.timeouts]
    create = 3600

    [clusters.analytics]
    name = "analytics"
    region = "us-east-1"
    node_count = 3
    node_type = "i3.xlarge"
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from scylla_cloud.schema import MemoryResourceData

RawConfig: TypeAlias = dict[str, Any]

GLOBAL_CONFIG_PATH = Path.home() / ".scylla-cloud" / "defaults.toml"
PROJECT_CONFIG_NAME = "scylla-cloud.toml"

DEFAULT_ENDPOINT = "https://cloud.scylladb.com/api/v0"
TOKEN_ENV = "SCYLLA_CLOUD_TOKEN"
ENDPOINT_ENV = "SCYLLA_CLOUD_ENDPOINT"


@dataclass(frozen=True, slots=True)
class ResourceTimeouts:
    """Operation deadlines in seconds.

    Args:
        create: Ceiling for create and for read-time reconciliation. Default: 40 min.
        update: Reserved for update. Update is always rejected before any
            remote call, so this value is currently never read. Default: 40 min.
        delete: Ceiling for delete. Default: 90 min.
    """

    create: float = 40 * 60
    update: float = 40 * 60
    delete: float = 90 * 60


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """ScyllaDB Cloud provider configuration.

    Args:
        token: API token. Falls back to SCYLLA_CLOUD_TOKEN env var.
        endpoint: API base URL. Falls back to SCYLLA_CLOUD_ENDPOINT env var.
        request_timeout: Per-request HTTP timeout in seconds. Default: 60.
        poll_interval: Seconds between request status polls. Default: 10.
        timeouts: Operation deadlines.
    """

    token: str | None = None
    endpoint: str = field(default_factory=lambda: os.environ.get(ENDPOINT_ENV, DEFAULT_ENDPOINT))
    request_timeout: float = 60.0
    poll_interval: float = 10.0
    timeouts: ResourceTimeouts = field(default_factory=ResourceTimeouts)

    def require_token(self) -> str:
        token = self.token or os.environ.get(TOKEN_ENV)
        if not token:
            raise ValueError(
                f"ScyllaDB Cloud API token not configured. Set 'token' or {TOKEN_ENV}."
            )
        return token


def _deep_merge(base: RawConfig, override: RawConfig) -> RawConfig:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> RawConfig:
    if not path.is_file():
        return {}
    with path.open("rb") as f:
        return tomllib.load(f)


def load_config(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> RawConfig:
    global_cfg = _read_toml(global_path or GLOBAL_CONFIG_PATH)
    project_path = (project_dir or Path.cwd()) / PROJECT_CONFIG_NAME
    project_cfg = _read_toml(project_path)

    merged = _deep_merge(global_cfg, project_cfg)
    merged.setdefault("provider", {})
    merged.setdefault("clusters", {})
    return merged


def build_provider_config(raw: RawConfig) -> ProviderConfig:
    raw = dict(raw)
    raw_timeouts = raw.pop("timeouts", None)
    timeouts = ResourceTimeouts(**raw_timeouts) if raw_timeouts else ResourceTimeouts()
    return ProviderConfig(timeouts=timeouts, **raw)


def resolve_provider(
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> ProviderConfig:
    config = load_config(project_dir=project_dir, global_path=global_path)
    return build_provider_config(config["provider"])


def resolve_cluster(
    name: str,
    *,
    project_dir: Path | None = None,
    global_path: Path | None = None,
) -> MemoryResourceData:
    """Build an attribute store seeded with a named cluster's declared values."""
    from scylla_cloud.schema import CLUSTER_SCHEMA, MemoryResourceData

    config = load_config(project_dir=project_dir, global_path=global_path)

    clusters = config["clusters"]
    if name not in clusters:
        raise KeyError(f"Cluster '{name}' not found. Available: {', '.join(clusters) or 'none'}")

    raw_cluster = dict(clusters[name])
    unknown = [k for k in raw_cluster if k not in CLUSTER_SCHEMA or CLUSTER_SCHEMA[k].is_output]
    if unknown:
        raise ValueError(f"Cluster '{name}' has unknown or computed-only attributes: {', '.join(unknown)}")

    return MemoryResourceData(CLUSTER_SCHEMA, raw_cluster)
