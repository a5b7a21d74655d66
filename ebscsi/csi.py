"""Messages, status codes and capability values of the container storage interface."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime


class Code(enum.IntEnum):
    """Status codes carried by a failed call."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class CsiError(Exception):
    """A call failed with a status code and a message."""

    def __init__(self, code: Code, message: str = "") -> None:
        super().__init__(code, message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"rpc error: code = {self.code.name} desc = {self.message}"


class AccessMode(enum.IntEnum):
    """How a volume may be accessed by nodes."""

    UNKNOWN = 0
    SINGLE_NODE_WRITER = 1
    SINGLE_NODE_READER_ONLY = 2
    MULTI_NODE_READER_ONLY = 3
    MULTI_NODE_SINGLE_WRITER = 4
    MULTI_NODE_MULTI_WRITER = 5


class ControllerCapability(enum.IntEnum):
    """Operations a controller service may advertise."""

    UNKNOWN = 0
    CREATE_DELETE_VOLUME = 1
    PUBLISH_UNPUBLISH_VOLUME = 2
    LIST_VOLUMES = 3
    GET_CAPACITY = 4
    CREATE_DELETE_SNAPSHOT = 5
    LIST_SNAPSHOTS = 6
    CLONE_VOLUME = 7
    PUBLISH_READONLY = 8
    EXPAND_VOLUME = 9


class PluginCapability(enum.IntEnum):
    """Services a plugin may advertise."""

    UNKNOWN = 0
    CONTROLLER_SERVICE = 1
    VOLUME_ACCESSIBILITY_CONSTRAINTS = 2


@dataclass
class VolumeCapability:
    """Access mode and access type requested for a volume."""

    access_mode: AccessMode | None = None
    block: bool = False
    fs_type: str = ""
    mount_flags: list[str] = field(default_factory=list)


@dataclass
class CapacityRange:
    required_bytes: int = 0
    limit_bytes: int = 0


@dataclass
class Topology:
    segments: dict[str, str] = field(default_factory=dict)


@dataclass
class TopologyRequirement:
    requisite: list[Topology] = field(default_factory=list)
    preferred: list[Topology] = field(default_factory=list)


@dataclass
class SnapshotSource:
    """A volume content source naming the snapshot to restore."""

    snapshot_id: str = ""


@dataclass
class CreateVolumeRequest:
    name: str = ""
    capacity_range: CapacityRange | None = None
    volume_capabilities: list[VolumeCapability] = field(default_factory=list)
    parameters: dict[str, str] = field(default_factory=dict)
    accessibility_requirements: TopologyRequirement | None = None
    volume_content_source: object | None = None


@dataclass
class Volume:
    volume_id: str = ""
    capacity_bytes: int = 0
    volume_context: dict[str, str] = field(default_factory=dict)
    accessible_topology: list[Topology] = field(default_factory=list)
    content_source: SnapshotSource | None = None


@dataclass
class CreateVolumeResponse:
    volume: Volume


@dataclass
class DeleteVolumeRequest:
    volume_id: str = ""


@dataclass
class ControllerPublishVolumeRequest:
    volume_id: str = ""
    node_id: str = ""
    volume_capability: VolumeCapability | None = None
    readonly: bool = False
    volume_context: dict[str, str] = field(default_factory=dict)


@dataclass
class ControllerPublishVolumeResponse:
    publish_context: dict[str, str] = field(default_factory=dict)


@dataclass
class ControllerUnpublishVolumeRequest:
    volume_id: str = ""
    node_id: str = ""


@dataclass
class ValidateVolumeCapabilitiesRequest:
    volume_id: str = ""
    volume_capabilities: list[VolumeCapability] = field(default_factory=list)


@dataclass
class ValidateVolumeCapabilitiesResponse:
    """``confirmed`` holds the capabilities when all are supported, else None."""

    confirmed: list[VolumeCapability] | None = None


@dataclass
class ControllerExpandVolumeRequest:
    volume_id: str = ""
    capacity_range: CapacityRange | None = None
    volume_capability: VolumeCapability | None = None


@dataclass
class ControllerExpandVolumeResponse:
    capacity_bytes: int = 0
    node_expansion_required: bool = False


@dataclass
class CreateSnapshotRequest:
    name: str = ""
    source_volume_id: str = ""
    parameters: dict[str, str] = field(default_factory=dict)


@dataclass
class CsiSnapshot:
    snapshot_id: str = ""
    source_volume_id: str = ""
    size_bytes: int = 0
    creation_time: datetime | None = None
    ready_to_use: bool = False


@dataclass
class CreateSnapshotResponse:
    snapshot: CsiSnapshot


@dataclass
class DeleteSnapshotRequest:
    snapshot_id: str = ""


@dataclass
class ListSnapshotsRequest:
    snapshot_id: str = ""
    source_volume_id: str = ""
    max_entries: int = 0
    starting_token: str = ""


@dataclass
class ListSnapshotsResponse:
    entries: list[CsiSnapshot] = field(default_factory=list)
    next_token: str = ""


@dataclass(frozen=True)
class PluginInfo:
    name: str
    vendor_version: str