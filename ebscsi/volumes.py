"""Size arithmetic, topology handling and response building for volumes and snapshots."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import NamedTuple

from .cloud import DEFAULT_VOLUME_SIZE, GIB, Disk, Snapshot, SnapshotPage
from .csi import (
    AccessMode,
    CapacityRange,
    Code,
    CreateVolumeResponse,
    CsiError,
    CsiSnapshot,
    ListSnapshotsResponse,
    SnapshotSource,
    Topology,
    TopologyRequirement,
    Volume,
    VolumeCapability,
)

logger = logging.getLogger(__name__)

DRIVER_NAME = "ebs.csi.aws.com"
AWS_PARTITION_KEY = f"topology.{DRIVER_NAME}/partition"
AWS_ACCOUNT_ID_KEY = f"topology.{DRIVER_NAME}/account-id"
AWS_REGION_KEY = f"topology.{DRIVER_NAME}/region"
AWS_OUTPOST_ID_KEY = f"topology.{DRIVER_NAME}/outpost-id"

WELL_KNOWN_TOPOLOGY_KEY = "topology.kubernetes.io/zone"
# Deprecated: use WELL_KNOWN_TOPOLOGY_KEY instead.
TOPOLOGY_KEY = f"topology.{DRIVER_NAME}/zone"

VOLUME_ATTRIBUTE_PARTITION = "partition"

SUPPORTED_ACCESS_MODES = frozenset({AccessMode.SINGLE_NODE_WRITER})

SIZE_EXCEEDS_LIMIT_MSG = "After round-up, volume size exceeds the limit specified"

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")


class _Arn(NamedTuple):
    partition: str
    service: str
    region: str
    account_id: str
    resource: str

    def __str__(self) -> str:
        return ":".join(
            ("arn", self.partition, self.service, self.region, self.account_id, self.resource)
        )


def round_up_bytes(size_bytes: int) -> int:
    """Round a size in bytes up to a whole number of GiB, returned in bytes."""
    return (size_bytes + GIB - 1) // GIB * GIB


def gib_to_bytes(size_gib: int) -> int:
    return size_gib * GIB


def bytes_to_gib(size_bytes: int) -> int:
    """Whole GiB contained in ``size_bytes`` (remainder discarded)."""
    return size_bytes // GIB


def _zone_of(topology: Topology) -> str | None:
    segments = topology.segments
    if WELL_KNOWN_TOPOLOGY_KEY in segments:
        return segments[WELL_KNOWN_TOPOLOGY_KEY]
    if TOPOLOGY_KEY in segments:
        return segments[TOPOLOGY_KEY]
    return None


def _candidates(requirement: TopologyRequirement) -> Iterable[Topology]:
    yield from requirement.preferred
    yield from requirement.requisite


def pick_availability_zone(requirement: TopologyRequirement | None) -> str:
    """Pick one zone from the requirement, preferred first; "" if there is none."""
    if requirement is None:
        return ""
    for topology in _candidates(requirement):
        zone = _zone_of(topology)
        if zone is not None:
            return zone
    return ""


def get_outpost_arn(requirement: TopologyRequirement | None) -> str:
    """Build the outpost ARN of the first topology naming an outpost; "" if none."""
    if requirement is None:
        return ""
    for topology in _candidates(requirement):
        if AWS_OUTPOST_ID_KEY in topology.segments:
            return build_outpost_arn(topology.segments)
    return ""


def build_outpost_arn(segments: Mapping[str, str]) -> str:
    """Return the outpost ARN described by topology segments, or "" if any part is missing."""
    parts = [
        segments.get(key, "")
        for key in (AWS_PARTITION_KEY, AWS_REGION_KEY, AWS_OUTPOST_ID_KEY, AWS_ACCOUNT_ID_KEY)
    ]
    if not all(parts):
        return ""
    partition, region, outpost_id, account_id = parts
    return f"arn:{partition}:outposts:{region}:{account_id}:outpost/{outpost_id}"


def parse_outpost_arn(arn: str) -> _Arn:
    """Split an ARN into its parts; raise ValueError if it is malformed."""
    if not arn.startswith("arn:"):
        raise ValueError("arn: invalid prefix")
    sections = arn.split(":", 5)
    if len(sections) != 6:
        raise ValueError("arn: not enough sections")
    _, partition, service, region, account_id, resource = sections
    return _Arn(partition, service, region, account_id, resource)


def is_valid_volume_capabilities(capabilities: Iterable[VolumeCapability]) -> bool:
    """Tell whether every capability asks for a supported access mode."""
    return all(
        (cap.access_mode or AccessMode.UNKNOWN) in SUPPORTED_ACCESS_MODES for cap in capabilities
    )


def is_valid_volume_context(context: Mapping[str, str]) -> bool:
    """Check the volume attributes that have constraints (currently the partition)."""
    partition = context.get(VOLUME_ATTRIBUTE_PARTITION)
    if partition is None:
        return True
    if not _DECIMAL.fullmatch(partition) or not _INT64_MIN <= int(partition) <= _INT64_MAX:
        logger.error("failed to parse partition %s as int", partition)
        return False
    if int(partition) < 0:
        logger.error("invalid partition config, partition = %s", partition)
        return False
    return True


def volume_size_bytes(capacity_range: CapacityRange | None) -> int:
    """Size to create for a capacity range, rounded up to whole GiB.

    Raises CsiError(INVALID_ARGUMENT) if the rounded size exceeds the limit.
    """
    if capacity_range is None:
        return DEFAULT_VOLUME_SIZE
    size = round_up_bytes(capacity_range.required_bytes)
    limit = capacity_range.limit_bytes
    if 0 < limit < size:
        raise CsiError(Code.INVALID_ARGUMENT, SIZE_EXCEEDS_LIMIT_MSG)
    return size


def new_create_volume_response(disk: Disk) -> CreateVolumeResponse:
    """Describe a created disk as a volume with its accessible topology."""
    source = SnapshotSource(snapshot_id=disk.snapshot_id) if disk.snapshot_id else None
    segments = {TOPOLOGY_KEY: disk.availability_zone}
    try:
        arn = parse_outpost_arn(disk.outpost_arn)
    except ValueError:
        pass
    else:
        segments[AWS_REGION_KEY] = arn.region
        segments[AWS_PARTITION_KEY] = arn.partition
        segments[AWS_ACCOUNT_ID_KEY] = arn.account_id
        segments[AWS_OUTPOST_ID_KEY] = arn.resource.replace("outpost/", "")
    return CreateVolumeResponse(
        volume=Volume(
            volume_id=disk.volume_id,
            capacity_bytes=gib_to_bytes(disk.capacity_gib),
            volume_context={},
            accessible_topology=[Topology(segments=segments)],
            content_source=source,
        )
    )


def new_snapshot_entry(snapshot: Snapshot) -> CsiSnapshot:
    return CsiSnapshot(
        snapshot_id=snapshot.snapshot_id,
        source_volume_id=snapshot.source_volume_id,
        size_bytes=snapshot.size,
        creation_time=snapshot.creation_time,
        ready_to_use=snapshot.ready_to_use,
    )


def new_list_snapshots_response(page: SnapshotPage) -> ListSnapshotsResponse:
    return ListSnapshotsResponse(
        entries=[new_snapshot_entry(snapshot) for snapshot in page.snapshots],
        next_token=page.next_token,
    )