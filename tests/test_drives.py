from collections import namedtuple
from unittest import TestCase, main
from unittest.mock import patch

from spacescout.drives import disk_for_path, list_disks
from spacescout.models import DiskInfo

Part = namedtuple("Part", "device mountpoint fstype opts")
Usage = namedtuple("Usage", "total used free percent")

PARTS = [
    Part("/dev/sdb1", "/mnt/data", "ext4", "rw"),
    Part("/dev/sda1", "/", "ext4", "rw"),
    Part("/dev/sda1", "/", "ext4", "rw"),     # bind mount shows up twice
    Part("/dev/sdc1", "/mnt/gone", "ext4", "rw"),
]


def fake_usage(path):
    if path == "/mnt/gone":
        raise PermissionError(13, "Permission denied")
    return Usage(1000, 400, 600, 40.0)


class DrivesTest(TestCase):
    @patch("spacescout.drives.psutil.disk_usage", side_effect=fake_usage)
    @patch("spacescout.drives.psutil.disk_partitions", return_value=PARTS)
    def test_list_disks(self, _parts, _usage):
        disks = list_disks()
        self.assertEqual([d.mount_point for d in disks], ["/", "/mnt/data"])
        self.assertEqual(disks[1], DiskInfo("data", "/dev/sdb1", 1000, 600, "/mnt/data"))
        self.assertEqual(disks[1].used, 400)
        self.assertEqual(disks[0].name, "/dev/sda1")

    def test_disk_for_path(self):
        disks = [DiskInfo("/", "/dev/sda1", 1, 1, "/"),
                 DiskInfo("data", "/dev/sdb1", 1, 1, "/mnt/data")]
        self.assertEqual(disk_for_path("/mnt/data/x/y", disks).mount_point, "/mnt/data")
        self.assertEqual(disk_for_path("/mnt/database", disks).mount_point, "/")
        self.assertIsNone(disk_for_path("/x", []))


if __name__ == '__main__':
    main()
