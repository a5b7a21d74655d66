"""Node-side file and device helpers: creating mount targets and deciding on resizes."""

from __future__ import annotations

import abc
import logging
import os
import re

logger = logging.getLogger(__name__)

_UINT = re.compile(r"[0-9]+")
_UINT64_MAX = 2**64 - 1

# blkid exits with this code when it finds nothing to report on the device.
_BLKID_NOTHING_FOUND = 2

SUPPORTED_RESIZE_FORMATS = ("ext3", "ext4", "xfs")


class CommandError(Exception):
    """A command run on the node failed."""

    def __init__(self, message: str, exit_code: int | None = None, output: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.output = output


class CommandRunner(abc.ABC):
    """Runs commands on the node on behalf of the mounter."""

    @abc.abstractmethod
    def run(self, command: str, *args: str) -> str:
        """Run ``command`` and return its combined output; raise CommandError on failure."""


def _parse_uint(value: str) -> int:
    if not _UINT.fullmatch(value) or int(value) > _UINT64_MAX:
        raise ValueError(f'parsing "{value}": invalid syntax')
    return int(value)


def parse_fs_info_output(
    output: str, separator: str, block_size_key: str, block_count_key: str
) -> tuple[int, int]:
    """Extract block size and block count from ``key<separator>value`` lines.

    Keys are compared case-insensitively; a key that is absent yields 0.
    Raises ValueError if a matched value is not an unsigned integer.
    """
    block_size = block_count = 0
    for line in output.split("\n"):
        tokens = line.split(separator)
        if len(tokens) != 2:
            continue
        key, value = (token.strip().lower() for token in tokens)
        if key == block_size_key:
            try:
                block_size = _parse_uint(value)
            except ValueError as err:
                raise ValueError(f"failed to parse block size {value}: {err}") from None
        if key == block_count_key:
            try:
                block_count = _parse_uint(value)
            except ValueError as err:
                raise ValueError(f"failed to parse block count {value}: {err}") from None
    return block_size, block_count


class NodeMounter:
    """File system helpers for the node service, running tools through a CommandRunner."""

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def make_file(self, path: str) -> None:
        """Create an empty file at ``path`` if it does not exist yet."""
        fd = os.open(path, os.O_RDONLY | os.O_CREAT, 0o644)
        os.close(fd)

    def make_dir(self, path: str) -> None:
        """Create ``path`` and its parents; an existing directory is fine."""
        os.makedirs(path, mode=0o755, exist_ok=True)

    def path_exists(self, path: str) -> bool:
        """Tell whether ``path`` exists; errors other than absence propagate."""
        try:
            os.stat(path)
        except FileNotFoundError:
            return False
        return True

    def device_size(self, device_path: str) -> int:
        """Size of a block device in bytes."""
        try:
            output = self.runner.run("blockdev", "--getsize64", device_path)
        except CommandError as err:
            raise CommandError(
                f"failed to read size of device {device_path}: {err}: {err.output.strip()}",
                err.exit_code,
                err.output,
            ) from err
        text = output.strip()
        try:
            return _parse_uint(text)
        except ValueError as err:
            raise ValueError(
                f"failed to parse size of device {device_path} {text}: {err}"
            ) from None

    def _fs_size(self, device_path: str, output: str, separator: str, keys: tuple[str, str]) -> tuple[int, int]:
        try:
            block_size, block_count = parse_fs_info_output(output, separator, *keys)
        except ValueError:
            block_size = block_count = 0
        if block_size == 0:
            raise ValueError(f"could not find block size of device {device_path}")
        if block_count == 0:
            raise ValueError(f"could not find block count of device {device_path}")
        return block_size, block_size * block_count

    def _read_fs_info(self, device_path: str, command: str, *args: str) -> str:
        try:
            return self.runner.run(command, *args)
        except CommandError as err:
            raise CommandError(
                f"failed to read size of filesystem on {device_path}: {err}: {err.output}",
                err.exit_code,
                err.output,
            ) from err

    def ext_size(self, device_path: str) -> tuple[int, int]:
        """Block size and total size in bytes of an ext file system."""
        output = self._read_fs_info(device_path, "dumpe2fs", "-h", device_path)
        return self._fs_size(device_path, output, ":", ("block size", "block count"))

    def xfs_size(self, device_path: str) -> tuple[int, int]:
        """Block size and total size in bytes of a mounted xfs file system."""
        output = self._read_fs_info(device_path, "xfs_io", "-c", "statfs", device_path)
        return self._fs_size(device_path, output, "=", ("geom.bsize", "geom.datablocks"))

    def disk_format(self, device_path: str) -> str:
        """File system type found on the device, or "" if it is unformatted."""
        try:
            output = self.runner.run(
                "blkid", "-p", "-s", "TYPE", "-s", "PTTYPE", "-o", "export", device_path
            )
        except CommandError as err:
            if err.exit_code == _BLKID_NOTHING_FOUND:
                return ""
            raise
        fs_type = ""
        for line in output.splitlines():
            key, sep, value = line.strip().partition("=")
            if sep and key == "TYPE":
                fs_type = value
        return fs_type

    def need_resize(self, device_path: str, device_mount_path: str) -> bool:
        """Tell whether the file system on the device is smaller than the device.

        Raises ValueError for file systems other than ext3, ext4 and xfs.
        """
        device_size = self.device_size(device_path)
        try:
            fs_format = self.disk_format(device_path)
        except CommandError as err:
            raise CommandError(
                f"ResizeFS.Resize - error checking format for device {device_path}: {err}",
                err.exit_code,
                err.output,
            ) from err

        # An unformatted disk needs no resize: mkfs uses the whole disk anyway.
        if not fs_format:
            return False

        logger.info("ResizeFs.needResize - checking mounted volume %s", device_path)
        if fs_format in ("ext3", "ext4"):
            block_size, fs_size = self.ext_size(device_path)
        elif fs_format == "xfs":
            block_size, fs_size = self.xfs_size(device_mount_path)
        else:
            logger.error(
                "Not able to parse given filesystem info. fsType: %s, will not resize", fs_format
            )
            raise ValueError(
                f"Could not parse fs info on given filesystem format: {fs_format}. "
                "Supported fs types are: xfs, ext3, ext4"
            )
        logger.debug(
            "Volume %s: device size=%d, filesystem size=%d, block size=%d",
            device_path,
            device_size,
            fs_size,
            block_size,
        )
        # Tolerate one block of difference for rounding.
        return device_size > fs_size + block_size