"""The cloud provider interface used by the controller service."""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from datetime import datetime

GIB = 1024 * 1024 * 1024

DEFAULT_VOLUME_SIZE = 100 * GIB

VOLUME_NAME_TAG_KEY = "CSIVolumeName"
SNAPSHOT_NAME_TAG_KEY = "CSIVolumeSnapshotName"
AWS_EBS_DRIVER_TAG_KEY = "ebs.csi.aws.com/cluster"

VOLUME_TYPE_IO1 = "io1"
VOLUME_TYPE_IO2 = "io2"
VOLUME_TYPE_GP2 = "gp2"
VOLUME_TYPE_GP3 = "gp3"
VOLUME_TYPE_SC1 = "sc1"
VOLUME_TYPE_ST1 = "st1"
VOLUME_TYPE_STANDARD = "standard"


class CloudError(Exception):
    """Base class of errors reported by a cloud provider."""

    default_message = "cloud provider error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class NotFoundError(CloudError):
    default_message = "Resource was not found"


class IdempotentParameterMismatchError(CloudError):
    default_message = (
        "Parameters on this idempotent request are inconsistent with parameters "
        "used in previous request(s)"
    )


class VolumeInUseError(CloudError):
    default_message = "Request volume is already attached to an instance"


class InvalidMaxResultsError(CloudError):
    default_message = "MaxResults parameter must be 0 or greater than or equal to 5"


class MultiSnapshotsError(CloudError):
    default_message = "Multiple snapshots with the same name found"


@dataclass
class Disk:
    volume_id: str = ""
    capacity_gib: int = 0
    availability_zone: str = ""
    outpost_arn: str = ""
    snapshot_id: str = ""
    attachments: list[str] = field(default_factory=list)


@dataclass
class Snapshot:
    snapshot_id: str = ""
    source_volume_id: str = ""
    size: int = 0
    creation_time: datetime | None = None
    ready_to_use: bool = False


@dataclass
class DiskOptions:
    capacity_bytes: int = 0
    tags: dict[str, str] = field(default_factory=dict)
    volume_type: str = ""
    iops_per_gb: int = 0
    allow_iops_per_gb_increase: bool = False
    iops: int = 0
    throughput: int = 0
    availability_zone: str = ""
    outpost_arn: str = ""
    encrypted: bool = False
    kms_key_id: str = ""
    snapshot_id: str = ""


@dataclass
class SnapshotOptions:
    tags: dict[str, str] = field(default_factory=dict)


@dataclass
class SnapshotPage:
    """One page of a snapshot listing."""

    snapshots: list[Snapshot] = field(default_factory=list)
    next_token: str = ""


class Cloud(abc.ABC):
    """Operations on block volumes and snapshots offered by a cloud provider."""

    @abc.abstractmethod
    def create_disk(self, name: str, options: DiskOptions) -> Disk:
        """Create a disk, or return the existing one of the same name."""

    @abc.abstractmethod
    def delete_disk(self, volume_id: str) -> bool:
        """Delete a disk; raise NotFoundError if it does not exist."""

    @abc.abstractmethod
    def attach_disk(self, volume_id: str, node_id: str) -> str:
        """Attach a disk to a node and return its device path."""

    @abc.abstractmethod
    def detach_disk(self, volume_id: str, node_id: str) -> None:
        """Detach a disk from a node."""

    @abc.abstractmethod
    def resize_disk(self, volume_id: str, new_size_bytes: int) -> int:
        """Grow a disk and return its new size in GiB."""

    @abc.abstractmethod
    def get_disk_by_id(self, volume_id: str) -> Disk:
        """Look up a disk; raise NotFoundError if it does not exist."""

    @abc.abstractmethod
    def instance_exists(self, node_id: str) -> bool:
        """Tell whether the node instance exists."""

    @abc.abstractmethod
    def create_snapshot(self, volume_id: str, options: SnapshotOptions) -> Snapshot:
        """Take a snapshot of a disk."""

    @abc.abstractmethod
    def delete_snapshot(self, snapshot_id: str) -> bool:
        """Delete a snapshot; raise NotFoundError if it does not exist."""

    @abc.abstractmethod
    def get_snapshot_by_name(self, name: str) -> Snapshot:
        """Look up a snapshot by name; raise NotFoundError if there is none."""

    @abc.abstractmethod
    def get_snapshot_by_id(self, snapshot_id: str) -> Snapshot:
        """Look up a snapshot by identifier; raise NotFoundError if there is none."""

    @abc.abstractmethod
    def list_snapshots(self, volume_id: str, max_results: int, next_token: str) -> SnapshotPage:
        """List snapshots, optionally of one volume, one page at a time."""


class MetadataService(abc.ABC):
    """Information about the instance the driver runs on."""

    @abc.abstractmethod
    def get_region(self) -> str:
        """Return the region the instance runs in."""