# ebscsi

Building blocks of a Container Storage Interface (CSI) driver for block
storage volumes: the CSI request and response messages with their status
codes, an abstract interface to the cloud backend, pure helpers for sizes,
topology and responses, a tracker for operations in progress, and node-side
helpers that create mount targets and decide whether a filesystem needs
growing.

## Installation

```
pip install ebscsi
```

For running the test suite:

```
pip install "ebscsi[test]"
pytest
```

## Modules

### `ebscsi.csi`

Dataclasses for the CSI messages (`CreateVolumeRequest`, `Volume`,
`CreateVolumeResponse`, `ControllerPublishVolumeRequest`,
`ControllerExpandVolumeRequest`, `CreateSnapshotRequest`, `CsiSnapshot`,
`ListSnapshotsRequest`, `ListSnapshotsResponse`, `PluginInfo` and the rest),
the enums `AccessMode`, `ControllerCapability` and `PluginCapability`, and
the status code enum `Code`. Failures are expressed as `CsiError`, which
carries a `code` and a `message`:

```python
from ebscsi.csi import Code, CsiError

err = CsiError(Code.NOT_FOUND, "Volume not found")
print(err)  # rpc error: code = NOT_FOUND desc = Volume not found
```

### `ebscsi.cloud`

The abstract base classes `Cloud` (create, delete, attach, detach and
resize disks; create, delete, look up and list snapshots; check that an
instance exists) and `MetadataService` (`get_region`). You supply the
implementations. The module also defines the data passed across that
interface (`Disk`, `Snapshot`, `DiskOptions`, `SnapshotOptions`,
`SnapshotPage`), the errors a backend raises (`NotFoundError`,
`IdempotentParameterMismatchError`, `VolumeInUseError`,
`InvalidMaxResultsError`, `MultiSnapshotsError`, all subclasses of
`CloudError`), and constants such as `GIB`, `DEFAULT_VOLUME_SIZE`, the tag
keys and the volume type names.

### `ebscsi.volumes`

Pure functions:

```python
from ebscsi.csi import CapacityRange, Topology, TopologyRequirement
from ebscsi.volumes import (
    AWS_ACCOUNT_ID_KEY, AWS_OUTPOST_ID_KEY, AWS_PARTITION_KEY, AWS_REGION_KEY,
    TOPOLOGY_KEY, build_outpost_arn, pick_availability_zone, round_up_bytes,
    volume_size_bytes,
)

round_up_bytes(1073741825)          # 2147483648: rounded up to whole GiB
volume_size_bytes(None)             # the default volume size
volume_size_bytes(CapacityRange(required_bytes=5 * 2**30 + 1, limit_bytes=5 * 2**30))
# raises CsiError(Code.INVALID_ARGUMENT)

req = TopologyRequirement(requisite=[Topology({TOPOLOGY_KEY: "us-west-2b"})])
pick_availability_zone(req)         # "us-west-2b"

build_outpost_arn({
    AWS_PARTITION_KEY: "aws",
    AWS_REGION_KEY: "us-west-2",
    AWS_ACCOUNT_ID_KEY: "111111111111",
    AWS_OUTPOST_ID_KEY: "op-0aaa000a0aaaa00a0",
})  # "arn:aws:outposts:us-west-2:111111111111:outpost/op-0aaa000a0aaaa00a0"
```

Also here: `gib_to_bytes`, `bytes_to_gib`, `get_outpost_arn`,
`parse_outpost_arn`, `is_valid_volume_capabilities` (only
`AccessMode.SINGLE_NODE_WRITER` is supported), `is_valid_volume_context`,
and the response builders `new_create_volume_response`,
`new_snapshot_entry` and `new_list_snapshots_response`.

### `ebscsi.inflight`

`InFlight` is a thread-safe set of keys for requests being served.
`insert` returns `False` if the key is already held; `hold` is a context
manager that yields whether the key was acquired and releases it on exit:

```python
from ebscsi.inflight import InFlight

flights = InFlight()
with flights.hold("vol-1") as acquired:
    assert acquired
    assert flights.insert("vol-1") is False
assert "vol-1" not in flights
```

### `ebscsi.mount`

`NodeMounter` creates mount targets (`make_file`, `make_dir`,
`path_exists`) and reads device and filesystem sizes (`device_size`,
`ext_size`, `xfs_size`, `disk_format`). `need_resize` tells whether the
filesystem on a device is more than one block smaller than the device; it
supports ext3, ext4 and xfs and raises `ValueError` for other formats. The
tools (`blockdev`, `blkid`, `dumpe2fs`, `xfs_io`) are run through a
`CommandRunner` you provide, which returns a command's output or raises
`CommandError`:

```python
from ebscsi.mount import CommandRunner, NodeMounter

class CannedRunner(CommandRunner):
    def __init__(self, outputs):
        self.outputs = outputs

    def run(self, command, *args):
        return self.outputs[command]

mounter = NodeMounter(CannedRunner({"dumpe2fs": "Block size: 4096\nBlock count: 5242880\n"}))
mounter.ext_size("/dev/test1")  # (4096, 21474836480)
```

`parse_fs_info_output` parses such `key: value` or `key = value` output on
its own.

## What this package does not do

- It has no controller or node service that handles CSI calls end to end,
  no identity service, and no gRPC server or listening endpoint.
- It has no command-line program.
- It ships no cloud backend or metadata client: `Cloud` and
  `MetadataService` are abstract and must be implemented by you.
- It does not format or mount devices itself, and runs no commands on its
  own; `NodeMounter` only calls the `CommandRunner` it is given.