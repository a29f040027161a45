"""XFS disk image: layout, block storage, inodes, label resolution, loading and the command interface."""