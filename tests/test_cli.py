import io
import re

import pytest

from exposkit.xfs.cli import Interface, completions, main
from exposkit.xfs.vdisk import VirtualDisk


@pytest.fixture
def shell(tmp_path):
    out = io.StringIO()
    disk = VirtualDisk(tmp_path / "disk.xfs")
    return Interface(disk, out), out


@pytest.fixture
def formatted(shell):
    interface, out = shell
    interface.run_command("fdisk")
    out.seek(0)
    out.truncate()
    return interface, out


def _data_file(tmp_path, name="nums.dat", lines=("1", "2", "3")):
    path = tmp_path / name
    path.write_text("".join(f"{line}\n" for line in lines))
    return path


def _free_blocks(text):
    return int(re.search(r"No of Free Blocks = (\d+)", text).group(1))


def test_fdisk_reports_and_lists_root(shell):
    interface, out = shell
    interface.run_command("fdisk")
    interface.run_command("ls")
    text = out.getvalue()
    assert 'Formatting Complete. "disk.xfs" created.' in text
    assert "Filename: root \t Filesize 512" in text


def test_unknown_command(formatted):
    interface, out = formatted
    interface.run_command("frobnicate now")
    assert out.getvalue() == 'Unknown command "frobnicate". See "help" for more information.\n'


def test_ls_without_disk_reports_open_error(shell):
    interface, out = shell
    interface.run_command("ls")
    assert out.getvalue() == "Unable to open disk file\n"


def test_load_data_then_cat(formatted, tmp_path):
    interface, out = formatted
    path = _data_file(tmp_path)
    interface.run_command(f"load --data {path}")
    interface.run_command("ls")
    assert "Filename: nums.dat" in out.getvalue()
    out.seek(0)
    out.truncate()
    interface.run_command("cat nums.dat")
    assert out.getvalue() == "1\t\n2\t\n3\t\n"


def test_load_data_uses_a_free_block(formatted, tmp_path):
    interface, out = formatted
    interface.run_command("df")
    before = out.getvalue()
    assert "Total no of Blocks = 512" in before
    out.seek(0)
    out.truncate()
    interface.run_command(f"load --data {_data_file(tmp_path)}")
    interface.run_command("df")
    assert _free_blocks(out.getvalue()) == _free_blocks(before) - 1


def test_rm_removes_file(formatted, tmp_path):
    interface, out = formatted
    interface.run_command(f"load --data {_data_file(tmp_path)}")
    interface.run_command("rm nums.dat")
    interface.run_command("ls")
    assert "nums.dat" not in out.getvalue()
    assert "Filename: root" in out.getvalue()


def test_rm_root_refused(formatted):
    interface, out = formatted
    interface.run_command("rm root")
    assert out.getvalue() == "Root file cannot be deleted\n"


def test_cat_missing_file(formatted):
    interface, out = formatted
    interface.run_command("cat ghost.dat")
    assert "File 'ghost.dat' not found!" in out.getvalue()


def test_export_round_trip(formatted, tmp_path):
    interface, out = formatted
    interface.run_command(f"load --data {_data_file(tmp_path)}")
    target = tmp_path / "exported.txt"
    interface.run_command(f"export nums.dat {target}")
    lines = target.read_text().split("\n")
    assert lines[:3] == ["1", "2", "3"]
    assert len(lines) - 1 == 512


def test_export_missing_pathname(formatted):
    interface, out = formatted
    interface.run_command("export nums.dat")
    assert out.getvalue() == 'Missing <pathname> for export. See "help" for more information.\n'


def test_load_without_path(formatted):
    interface, out = formatted
    interface.run_command("load --exec")
    assert out.getvalue() == 'Missing <pathname> for load. See "help" for more information.\n'


def test_load_exec_needs_extension(formatted, tmp_path):
    interface, out = formatted
    path = tmp_path / "prog.txt"
    path.write_text("HALT\n")
    interface.run_command(f"load --exec {path}")
    assert out.getvalue() == 'Filename does not have ".xsm" extension.\n'


def test_load_exec_name_too_long(formatted, tmp_path):
    interface, out = formatted
    interface.run_command(f"load --exec {tmp_path}/averyverylongname.xsm")
    assert out.getvalue() == "Filename is more than 12 characters long.\n"


def test_load_invalid_interrupt(formatted, tmp_path):
    interface, out = formatted
    interface.run_command(f"load --int=99 {tmp_path}/int.xsm")
    assert out.getvalue() == 'Invalid argument for "--int=".\n'


def test_load_invalid_option(formatted, tmp_path):
    interface, out = formatted
    interface.run_command(f"load --bogus {tmp_path}/x.xsm")
    assert out.getvalue() == 'Invalid argument "--bogus" for load. See "help" for more information.\n'


def test_load_exec_then_listed(formatted, tmp_path):
    interface, out = formatted
    path = tmp_path / "prog.xsm"
    path.write_text("MOV R0, 1\nHALT\n")
    interface.run_command(f"load --exec {path}")
    interface.run_command("ls")
    assert "Filename: prog.xsm \t Filesize 4" in out.getvalue()


def test_copy_insufficient_arguments(formatted):
    interface, out = formatted
    interface.run_command("copy 1 2")
    assert out.getvalue() == 'Insufficient arguments for "copy". See "help" for more information.\n'


def test_dump_rootfile(formatted, tmp_path, monkeypatch):
    interface, out = formatted
    monkeypatch.chdir(tmp_path)
    interface.run_command("dump --rootfile")
    assert out.getvalue() == ""
    lines = (tmp_path / "rootfile.txt").read_text().split("\n")
    assert lines[0] == "root"
    assert len(lines) - 1 == 512


def test_exit_raises_system_exit(formatted):
    interface, _ = formatted
    with pytest.raises(SystemExit) as info:
        interface.run_command("exit")
    assert info.value.code == 0


def test_run_script(shell, tmp_path):
    interface, out = shell
    script = tmp_path / "cmds.txt"
    script.write_text("fdisk\nls\n")
    interface.run_command(f"run {script}")
    assert "Filename: root" in out.getvalue()


def test_run_missing_script(shell, tmp_path):
    interface, out = shell
    interface.run_script(str(tmp_path / "nope.txt"))
    assert out.getvalue() == f"Unable to open file : {tmp_path / 'nope.txt'}.\n"


@pytest.mark.parametrize(
    "prefix, text, expected",
    [
        ("", "l", ["load", "ls"]),
        ("", "d", ["df", "dump"]),
        ("load ", "--e", ["--exec", "--exhandler"]),
        ("load --int=", "t", ["timer"]),
        ("load --module ", "", ["0", "1", "2", "3", "4", "5", "6", "7"]),
        ("dump ", "--r", ["--rootfile"]),
        ("cat ", "ro", ["root"]),
        ("ls ", "x", []),
    ],
)
def test_completions(prefix, text, expected):
    assert completions(prefix, text, ["root", "nums.dat"]) == expected


def test_main_requires_disk_file_name(capsys):
    assert main(["--disk-file"]) == 255
    assert "--disk-file option requires a file name." in capsys.readouterr().out


def test_main_formats_and_lists(tmp_path, capsys):
    disk_path = tmp_path / "my.xfs"
    assert main(["--disk-file", str(disk_path), "fdisk"]) == 0
    capsys.readouterr()
    assert main(["--disk-file", str(disk_path), "ls"]) == 0
    assert "Filename: root" in capsys.readouterr().out