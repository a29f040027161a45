# exposkit

Tools for the disk image and the machine of the eXpOS teaching operating
system:

- **`exposkit.xfs`** manages an XFS disk image (`disk.xfs`): formatting it,
  loading OS startup code, interrupt routines, modules and user programs into
  their fixed block regions, loading and removing data and executable files,
  and inspecting the inode table, root file and disk free list.
- **`exposkit.xsm`** holds building blocks of the XSM machine: 16-byte words,
  the register file, paged memory with address translation, the disk image as
  the machine sees it, machine exceptions, and the simulator's command-line
  options.

The package uses only the standard library and needs Python 3.10 or later.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## The XFS interface

Installing the package provides the `xfs-interface` command. Started with no
arguments it opens an interactive prompt (`# `), with tab completion of
commands, options and file names where the `readline` module is available;
given arguments it joins them into a single command, runs it and exits.

```
xfs-interface fdisk
xfs-interface load --os os_startup.xsm
xfs-interface load --int=timer timer.xsm
xfs-interface load --int=7 int7.xsm
xfs-interface load --module 0 mod0.xsm
xfs-interface load --exec shell.xsm
xfs-interface load --data notes.dat
xfs-interface ls
```

By default the image is `disk.xfs` in the current directory. Another image is
chosen with `--disk-file`, which must come first:

```
xfs-interface --disk-file /path/to/disk.xfs ls
```

Commands:

| Command | Effect |
| --- | --- |
| `fdisk` | Format the disk with an empty XFS file system |
| `run <pathname>` | Run a file of interface commands, one per line |
| `load --exec <pathname>` | Load an executable (`.xsm`, base name at most 12 characters) |
| `load --data <pathname>` | Load a data file (`.dat`, base name at most 12 characters) |
| `load --init`, `--os`, `--idle`, `--shell`, `--library`, `--exhandler` `<pathname>` | Load code into its reserved region |
| `load --int=timer\|disk\|console\|4..18 <pathname>` | Load an interrupt routine |
| `load --module <number> <pathname>` | Load a kernel module |
| `export <xfs_filename> <pathname>` | Copy a file's blocks out of the disk, one word per line |
| `rm <xfs_filename>` | Remove a file and free its blocks (the root file cannot be removed) |
| `ls` | List all files with their sizes |
| `df` | Show the disk free list and the number of free blocks |
| `cat <xfs_filename>` | Show the non-empty words of a file |
| `copy <start_block> <end_block> <unix_filename>` | Copy a range of blocks to a file |
| `dump --inodeusertable` | Write the inode and user tables to `inodeusertable.txt` |
| `dump --rootfile` | Write the root file to `rootfile.txt` |
| `help` | List the commands |
| `exit` | Leave the interface |

Errors are reported as messages on the output; the session carries on.

Code loaded with `--os`, `--exhandler`, `--int` and `--module` may use labels
(`loop:` on a line of its own). Label lines are dropped, and the targets of
`JMP`, `CALL`, `JZ` and `JNZ` that name a label are rewritten to absolute
addresses in the memory page the code runs from. An undefined label is an
error.

## Using the library

A disk is a `VirtualDisk` bound to an image path; the functions in
`exposkit.xfs.utility` act on it.

```python
from exposkit.xfs.vdisk import VirtualDisk
from exposkit.xfs.utility import format_disk, list_files, load_data, delete_file

disk = VirtualDisk("disk.xfs")
format_disk(disk, True)
entry = load_data(disk, "notes.dat")      # XosFile(name='notes.dat', size=...)
for item in list_files(disk):
    print(item.name, item.size)
delete_file(disk, "notes.dat")
```

Fixed system regions are named by `CodeRegion` and used with `load_region`
and `delete_region`; `load_interrupt`, `load_module` and their `delete_`
counterparts take a number. Label resolution is also available on its own as
`exposkit.xfs.labels.resolve_labels(lines, base_address)`.

Failures raise exceptions: `DiskOpenError` and `DiskCreateError` (both
`DiskError`) when the image cannot be opened or created, `XfsError` when an
operation on the file system cannot be carried out, and `LabelError` for an
undefined label.

On the machine side:

```python
from exposkit.xsm.word import Word
from exposkit.xsm.registers import RegisterFile
from exposkit.xsm.memory import Memory
from exposkit.xsm.disk import Disk
from exposkit.xsm.simulator import parse_args

word = Word("42")
word.integer()                 # 42

registers = RegisterFile()
registers.store_integer("R0", 7)
registers.user_mode("PTBR")    # False

memory = Memory()
memory.page_of(1030)           # 2

with Disk("disk.xfs") as disk: # written back to the file on close
    disk.read_block(memory.page(10), 69)

options = parse_args(["--debug", "--timer", "10"])
options.timer                  # 11
```

`Memory.translate_address` raises `PageFault`, `AccessViolation` or
`IllegalPage` (all `TranslationError`, a `MachineException`) as the page
table dictates. `parse_args` raises `OptionError` for unknown options and
out-of-range values.

## What the package does not do

The package does not execute XSM programs. It has no instruction decoder or
executor, no interrupt, timer or console handling, and no debugger, and it
installs no command that starts a machine: `exposkit.xsm` provides the
machine's words, registers, memory, disk and options only.