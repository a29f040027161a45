"""Command line interface to XFS disk files."""

from __future__ import annotations

import os
import sys
from typing import Callable, Iterable, TextIO

from exposkit.xfs.layout import BLOCK_SIZE, NO_OF_DISK_BLOCKS, NO_OF_INTERRUPTS, NO_OF_MODULES
from exposkit.xfs.utility import (
    CodeRegion,
    XfsError,
    copy_blocks_to_file,
    delete_file,
    dump_inode_table,
    dump_root_file,
    export_file,
    file_contents,
    format_disk,
    free_count,
    free_list,
    list_files,
    load_data,
    load_executable,
    load_interrupt,
    load_module,
    load_region,
)
from exposkit.xfs.vdisk import DiskError, VirtualDisk, word_value

DEFAULT_DISK_NAME = "disk.xfs"

_BANNER = 'Unix-XFS Interace Version 2.0. \nType "help" for getting a list of commands.'

_HELP = """\
 fdisk 
\t Format the disk with XFS filesystem
 run <pathname> 
\t Executes the set of xfs-interface commands sequentially 
 load --exec <pathname> 
\t Loads an executable file to XFS disk 
 load --data <pathname> 
\t Loads a data file to XFS disk 
 load --init <pathname> 
\t Loads INIT code to XFS disk 
 load --os <pathname> 
\t Loads OS startup code to XFS disk 
 load --idle <pathname> 
\t Loads Idle code to XFS disk 
 load --shell <pathname> 
\t Loads Shell code to XFS disk 
 load --library <pathname> 
\t Loads Library code to XFS disk 
 load --int=timer <pathname>
\t Loads Timer Interrupt routine to XFS disk 
 load --int=disk <pathname>
\t Loads Disk Controller Interrupt routine to XFS disk 
 load --int=console <pathname>
\t Loads Console Interrupt routine to XFS disk 
 load --int=[4-18] <pathname>
\t Loads the specified Interrupt routine to XFS disk 
 load --exhandler <pathname> 
\t Loads exception handler routine to XFS disk 
 load --module [0-7] <pathname>
\t Loads the specified Module to XFS disk 
 export <xfs_filename> <pathname>
\t Exports a data file from XFS disk to UNIX file system
 rm <xfs_filename>
\t Removes a file from XFS disk 
 ls 
\t List all files
 df 
\t Display free list and free space
 cat <xfs_filename> 
\t to display contents of a file
 copy <start_blocks> <end_block> <unix_filename> 
\t Copies contents of specified range of blocks to a UNIX file.
 dump --inodeusertable
\t Copies the contents of inode table and the user table to an external UNIX file named inodeusertable.txt
 dump --rootfile 
\t Copies the contents of root file to an external UNIX file named rootfile.txt
 exit 
\t Exit the interface"""

_COMMANDS = ("fdisk", "run", "load", "export", "rm", "ls", "df", "cat", "copy", "dump", "exit", "help")
_LOAD_OPTIONS = (
    "--int=", "--exec", "--data", "--init", "--os", "--idle",
    "--shell", "--library", "--exhandler", "--module",
)
_INTERRUPTS = tuple(str(n) for n in range(4, 19)) + ("timer", "disk", "console")
_MODULES = tuple(str(n) for n in range(8))
_DUMP_OPTIONS = ("--inodeusertable", "--rootfile")

_REGIONS = {
    "--init": CodeRegion.INIT,
    "--shell": CodeRegion.SHELL,
    "--library": CodeRegion.LIBRARY,
    "--idle": CodeRegion.IDLE,
    "--os": CodeRegion.OS_STARTUP,
    "--exhandler": CodeRegion.EX_HANDLER,
}
_NAMED_INTERRUPTS = {
    "timer": CodeRegion.TIMER,
    "disk": CodeRegion.DISK_CONTROLLER,
    "console": CodeRegion.CONSOLE,
}
_PATH_LIMIT = 100
_COPY_PATH_LIMIT = 50
_NAME_LIMIT = 12
_WORD_BREAKS = " \t\n\"\\'`@$><=;|&{("


def _matching(text: str, candidates: Iterable[str]) -> list[str]:
    return [candidate for candidate in candidates if candidate.startswith(text)]


def completions(line_prefix: str, text: str, file_names: Iterable[str]) -> list[str]:
    """Candidates for completing ``text``, given the line before it."""
    words = [word for word in line_prefix.split(" ") if word]
    if not words:
        return _matching(text, _COMMANDS)
    command = words[0]
    if command == "load":
        if line_prefix.endswith("--int="):
            return _matching(text, _INTERRUPTS)
        if len(words) > 1 and words[1] == "--module":
            return _matching(text, _MODULES)
        return _matching(text, _LOAD_OPTIONS)
    if command in ("export", "cat", "rm"):
        return _matching(text, file_names)
    if command == "dump":
        return _matching(text, _DUMP_OPTIONS)
    return []


def _split(line: str) -> list[str]:
    return [word for word in line.split(" ") if word]


def _base_name(path: str) -> str:
    stripped = path.rstrip("/")
    return stripped.rsplit("/", 1)[-1] if stripped else path


def _extension(path: str) -> str | None:
    dot = path.rfind(".")
    return None if dot == -1 else path[dot:]


class Interface:
    """Runs XFS interface commands against a disk and reports to a text stream."""

    def __init__(self, disk: VirtualDisk, out: TextIO | None = None) -> None:
        self.disk = disk
        self.out = out if out is not None else sys.stdout
        self._handlers: dict[str, Callable[[list[str]], None]] = {
            "help": self._help,
            "fdisk": self._fdisk,
            "run": self._run,
            "load": self._load,
            "rm": self._rm,
            "export": self._export,
            "ls": self._ls,
            "df": self._df,
            "cat": self._cat,
            "copy": self._copy,
            "dump": self._dump,
            "exit": self._exit,
        }

    def _say(self, text: str = "", end: str = "\n") -> None:
        print(text, file=self.out, end=end)

    def run_command(self, line: str) -> None:
        """Run one command line; errors are reported, not raised. ``exit`` raises SystemExit."""
        words = _split(line)
        if not words:
            return
        name, args = words[0], words[1:]
        handler = self._handlers.get(name)
        if handler is None:
            self._say(f'Unknown command "{name}". See "help" for more information.')
            return
        try:
            handler(args)
        except (XfsError, DiskError) as exc:
            self._say(str(exc))

    def run_script(self, path: str) -> None:
        """Run every line of a file as a command."""
        try:
            handle = open(path, encoding="latin-1", newline="\n")
        except OSError:
            self._say(f"Unable to open file : {path}.")
            return
        with handle:
            for line in handle:
                self.run_command(line[:-1] if line.endswith("\n") else line)

    def _file_names(self) -> list[str]:
        try:
            return [entry.name for entry in list_files(self.disk)]
        except DiskError:
            return []

    def repl(self) -> None:
        """Read and run commands interactively until ``exit`` or end of input."""
        self._say(_BANNER)
        try:
            import readline
        except ImportError:
            readline = None
        if readline is not None:
            matches: list[str] = []

            def complete(text: str, state: int) -> str | None:
                if state == 0:
                    prefix = readline.get_line_buffer()[: readline.get_begidx()]
                    matches[:] = completions(prefix, text, self._file_names())
                return matches[state] if state < len(matches) else None

            readline.set_completer_delims(_WORD_BREAKS)
            readline.set_completer(complete)
            readline.parse_and_bind("tab: complete")
        while True:
            try:
                line = input("# ")
            except EOFError:
                break
            command = line.strip()
            if not command:
                continue
            if command == "exit":
                break
            self.run_command(command)

    def _help(self, args: list[str]) -> None:
        self._say(_HELP)

    def _fdisk(self, args: list[str]) -> None:
        self._say('Formatting Complete. "disk.xfs" created.')
        format_disk(self.disk, True)

    def _run(self, args: list[str]) -> None:
        if not args:
            self._say("Unable to open file : (null).")
            return
        self.run_script(args[0])

    def _load(self, args: list[str]) -> None:
        option = args[0] if args else ""
        if len(args) < 2:
            self._say('Missing <pathname> for load. See "help" for more information.')
            return
        path = args[1][:_PATH_LIMIT]
        extra = args[2] if len(args) > 2 else None
        parts = [part for part in option.split("=") if part]
        kind = parts[0] if parts else ""
        int_type = parts[1] if len(parts) > 1 else None

        if kind in ("--exec", "--data"):
            if len(_base_name(path)) > _NAME_LIMIT:
                self._say("Filename is more than 12 characters long.")
                return
            wanted = ".xsm" if kind == "--exec" else ".dat"
            if _extension(path) != wanted:
                self._say(f'Filename does not have "{wanted}" extension.')
                return
            if kind == "--exec":
                load_executable(self.disk, path)
            else:
                load_data(self.disk, path)
        elif kind in _REGIONS:
            load_region(self.disk, _REGIONS[kind], path)
        elif kind == "--int":
            if int_type in _NAMED_INTERRUPTS:
                load_region(self.disk, _NAMED_INTERRUPTS[int_type], path)
                return
            number = word_value(int_type or "")
            if 4 <= number <= NO_OF_INTERRUPTS:
                load_interrupt(self.disk, path, number)
            else:
                self._say('Invalid argument for "--int=".')
        elif kind == "--module":
            number = word_value(args[1])
            if not 0 <= number <= NO_OF_MODULES:
                self._say('Invalid argument for "--module=".')
                return
            if extra is None:
                self._say('Missing <pathname> for load. See "help" for more information.')
                return
            load_module(self.disk, extra, number)
        else:
            self._say(f'Invalid argument "{kind}" for load. See "help" for more information.')

    def _rm(self, args: list[str]) -> None:
        if not args:
            self._say('Missing <xfs_filename> for rm. See "help" for more information.')
            return
        delete_file(self.disk, args[0])

    def _export(self, args: list[str]) -> None:
        if len(args) < 2:
            self._say('Missing <pathname> for export. See "help" for more information.')
            return
        export_file(self.disk, args[0], args[1])

    def _ls(self, args: list[str]) -> None:
        files = list_files(self.disk)
        if not files:
            self._say("The disk contains no files.")
            return
        for entry in files:
            self._say(f"Filename: {entry.name} \t Filesize {entry.size}")

    def _df(self, args: list[str]) -> None:
        words = free_list(self.disk)
        for number, word in enumerate(words):
            self._say(f"{number % BLOCK_SIZE} \t - \t {word}  ")
        self._say(f"\nNo of Free Blocks = {free_count(words)}", end="")
        self._say(f"\nTotal no of Blocks = {NO_OF_DISK_BLOCKS}")

    def _cat(self, args: list[str]) -> None:
        if not args:
            self._say('Missing <xfs_filename> for cat. See "help" for more information.')
            return
        for word in file_contents(self.disk, args[0]):
            self._say(f"{word}\t")

    def _copy(self, args: list[str]) -> None:
        if len(args) < 3:
            self._say('Insufficient arguments for "copy". See "help" for more information.')
            return
        start, end = word_value(args[0]), word_value(args[1])
        copy_blocks_to_file(self.disk, start, end, args[2][:_COPY_PATH_LIMIT])

    def _dump(self, args: list[str]) -> None:
        option = args[0] if args else ""
        if option == "--inodeusertable":
            dump_inode_table(self.disk, "inodeusertable.txt")
        elif option == "--rootfile":
            dump_root_file(self.disk, "rootfile.txt")
        else:
            self._say(f'Invalid argument "{option}" for dump. See "help" for more information.')

    def _exit(self, args: list[str]) -> None:
        raise SystemExit(0)


def main(argv: list[str] | None = None) -> int:
    """Run one command given on the command line, or an interactive session."""
    args = list(sys.argv[1:] if argv is None else argv)
    disk_file = DEFAULT_DISK_NAME
    if args and args[0] == "--disk-file":
        args = args[1:]
        if not args:
            print("--disk-file option requires a file name.")
            print()
            print("Syntax: --disk-file /path/to/disk.xfs")
            print("Specifies the path to disk.xfs to use.")
            return 255
        disk_file, args = args[0], args[1:]

    disk = VirtualDisk(disk_file)
    if os.path.isfile(disk_file) and os.access(disk_file, os.R_OK):
        disk.load()

    interface = Interface(disk)
    if args:
        interface.run_command(" ".join(args))
    else:
        interface.repl()
    return 0


if __name__ == "__main__":
    sys.exit(main())