"""Pytest configuration and fixtures.

Archives are assembled on the fly: an ``ar`` container holding
``debian-binary``, a control tarball and a data tarball, which is the layout
dpkg-deb produces. The tarballs can be gzip, xz or zstd compressed.
"""

import io
import tarfile
from pathlib import Path

import pytest
import zstandard

COMPRESSIONS = ("gz", "xz", "zst")

HELLO_CONTROL = """\
Package: hello
Version: 2.10-2ubuntu4
Architecture: amd64
Maintainer: Ubuntu Developers <ubuntu-devel-discuss@lists.ubuntu.com>
Original-Maintainer: Santiago Vila <sanvila@debian.org>
Installed-Size: 280
Depends: libc6 (>= 2.34)
Replaces: hello-traditional
Section: devel
Priority: optional
Multi-Arch: foreign
Homepage: https://www.gnu.org/software/hello/
Description: example package based on GNU hello
 The GNU hello program produces a familiar, friendly greeting.
 .
 Seriously, though: this is an example of how to do a Debian package.
"""

HELLO_FILES = {
    "./usr/bin/hello": b"\x7fELF",
    "./usr/share/doc/hello/copyright": b"GPL-3+",
    "./usr/share/man/man1/hello.1.gz": b"",
}


def _tarball(entries: dict[str, bytes], directories: tuple[str, ...] = (), compression: str = "gz") -> bytes:
    buf = io.BytesIO()
    # tarfile has no zstd writer before 3.14
    mode = "w" if compression == "zst" else f"w:{compression}"
    with tarfile.open(fileobj=buf, mode=mode) as tar:
        for name in directories:
            info = tarfile.TarInfo(name)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            tar.addfile(info)
        for name, content in entries.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(content))
    if compression == "zst":
        return zstandard.ZstdCompressor().compress(buf.getvalue())
    return buf.getvalue()


def _ar_member(name: str, data: bytes) -> bytes:
    header = f"{name:<16}{0:<12}{0:<6}{0:<6}{'100644':<8}{len(data):<10}`\n".encode("ascii")
    padding = b"\n" if len(data) % 2 else b""
    return header + data + padding


def write_deb(
    path: Path,
    control: str | None = HELLO_CONTROL,
    files: dict[str, bytes] | None = None,
    include_data: bool = True,
    compression: str = "gz",
) -> Path:
    """Write a .deb archive to ``path``.

    ``control=None`` writes a control tarball that lacks the control file.
    """
    files = HELLO_FILES if files is None else files
    control_entries = {} if control is None else {"./control": control.encode("utf-8")}

    members = [
        _ar_member("debian-binary", b"2.0\n"),
        _ar_member(
            f"control.tar.{compression}",
            _tarball(control_entries, directories=("./",), compression=compression),
        ),
    ]
    if include_data:
        directories = ("./", "./usr/", "./usr/bin/")
        data = _tarball(files, directories=directories, compression=compression)
        members.append(_ar_member(f"data.tar.{compression}", data))

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"!<arch>\n" + b"".join(members))
    return path


def control_for(name: str, version: str = "1.0-1", depends: str | None = None) -> str:
    lines = [f"Package: {name}", f"Version: {version}", "Architecture: all"]
    if depends is not None:
        lines.append(f"Depends: {depends}")
    lines.append(f"Description: the {name} package")
    return "\n".join(lines) + "\n"


@pytest.fixture
def hello_deb(tmp_path) -> Path:
    return write_deb(tmp_path / "pool" / "main" / "h" / "hello" / "hello_2.10-2ubuntu4_amd64.deb")


@pytest.fixture
def mirror(tmp_path):
    """Build a small mirror tree; returns (root, good_paths, corrupt_paths)."""

    def _build(good: int, corrupt: int) -> tuple[Path, list[Path], list[Path]]:
        root = tmp_path / "mirror"
        good_paths = [
            write_deb(
                root / "pool" / "main" / f"pkg{i % 3}" / f"pkg{i}_1.0-1_all.deb",
                control=control_for(f"pkg{i}", depends="libc6 (>= 2.29), pkg-base | pkg-alt (<< 3)"),
                compression=COMPRESSIONS[i % len(COMPRESSIONS)],
            )
            for i in range(good)
        ]
        corrupt_paths = []
        for i in range(corrupt):
            path = root / "pool" / "broken" / f"broken{i}_1.0_all.deb"
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"this is not an ar archive")
            corrupt_paths.append(path)
        return root, good_paths, corrupt_paths

    return _build
