import pytest

from ebscsi.cloud import (
    AWS_EBS_DRIVER_TAG_KEY,
    DEFAULT_VOLUME_SIZE,
    GIB,
    SNAPSHOT_NAME_TAG_KEY,
    VOLUME_NAME_TAG_KEY,
    Cloud,
    CloudError,
    Disk,
    DiskOptions,
    IdempotentParameterMismatchError,
    InvalidMaxResultsError,
    MetadataService,
    MultiSnapshotsError,
    NotFoundError,
    Snapshot,
    SnapshotOptions,
    SnapshotPage,
    VolumeInUseError,
)


def _default_errors():
    return [
        NotFoundError(),
        IdempotentParameterMismatchError(),
        VolumeInUseError(),
        InvalidMaxResultsError(),
        MultiSnapshotsError(),
    ]


def test_errors_are_caught_as_cloud_errors():
    for err in _default_errors():
        assert str(err) == type(err).default_message
        with pytest.raises(CloudError) as info:
            raise err
        assert info.value is err


def test_error_message_can_be_overridden():
    custom = [
        NotFoundError("custom"),
        IdempotentParameterMismatchError("custom"),
        VolumeInUseError("custom"),
        InvalidMaxResultsError("custom"),
        MultiSnapshotsError("custom"),
    ]
    assert [str(err) for err in custom] == ["custom"] * 5


def test_error_messages_are_distinct():
    messages = {str(err) for err in _default_errors()}
    assert len(messages) == 5


def test_not_found_message():
    assert str(NotFoundError()) == "Resource was not found"


def test_cloud_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Cloud()


def test_metadata_service_cannot_be_instantiated():
    with pytest.raises(TypeError):
        MetadataService()


def test_disk_options_defaults():
    opts = DiskOptions(capacity_bytes=GIB)
    assert opts.volume_type == ""
    assert opts.encrypted is False
    assert opts.tags == {}
    assert opts.capacity_bytes == GIB


def test_disk_options_compare_by_value():
    tags = {VOLUME_NAME_TAG_KEY: "vol", AWS_EBS_DRIVER_TAG_KEY: "true"}
    assert DiskOptions(capacity_bytes=GIB, tags=dict(tags)) == DiskOptions(capacity_bytes=GIB, tags=dict(tags))
    assert DiskOptions(capacity_bytes=GIB, tags=tags) != DiskOptions(capacity_bytes=GIB)


def test_default_collections_are_independent():
    first = Disk()
    second = Disk()
    first.attachments.append("i-1")
    options = SnapshotOptions()
    options.tags[SNAPSHOT_NAME_TAG_KEY] = "snap"
    assert second.attachments == []
    assert SnapshotOptions().tags == {}


def test_snapshot_page_defaults():
    page = SnapshotPage()
    assert page.snapshots == []
    assert page.next_token == ""


def test_snapshot_page_holds_snapshots():
    snaps = [Snapshot(snapshot_id="snapshot-1"), Snapshot(snapshot_id="snapshot-2")]
    page = SnapshotPage(snapshots=snaps, next_token="next")
    assert [s.snapshot_id for s in page.snapshots] == ["snapshot-1", "snapshot-2"]
    assert page.next_token == "next"


def test_default_volume_size_is_whole_gib():
    opts = DiskOptions(capacity_bytes=DEFAULT_VOLUME_SIZE)
    assert opts.capacity_bytes % GIB == 0
    assert opts.capacity_bytes > GIB


def test_tag_keys_are_distinct():
    opts = SnapshotOptions(
        tags={VOLUME_NAME_TAG_KEY: "a", SNAPSHOT_NAME_TAG_KEY: "b", AWS_EBS_DRIVER_TAG_KEY: "c"}
    )
    assert len(opts.tags) == 3