"""Reading ELF binaries and dumping their sections."""

import struct
import sys
from dataclasses import dataclass

from usrtools.hexdump import print_hex
from usrtools.style import EXIT_FAILURE, EXIT_SUCCESS, EXIT_USAGE, color, error, reset

_SHT_NULL = 0
_SHT_NOBITS = 8
_SHN_XINDEX = 0xFFFF


class ElfError(ValueError):
    """Raised when data is not a well-formed ELF file."""


@dataclass(frozen=True)
class ElfSection:
    """A section of an ELF file."""

    name: str
    address: int
    size: int
    align: int
    data: bytes


@dataclass(frozen=True)
class ElfFile:
    """An ELF file's entry point and sections."""

    entry: int
    sections: tuple[ElfSection, ...]


def _unpack(data: bytes, fmt: str, offset: int) -> tuple:
    size = struct.calcsize(fmt)
    if offset < 0 or offset + size > len(data):
        raise ElfError("Truncated ELF data")
    return struct.unpack_from(fmt, data, offset)


def _section_data(data: bytes, raw: tuple) -> bytes:
    sh_type, offset, size = raw[1], raw[4], raw[5]
    if sh_type in (_SHT_NULL, _SHT_NOBITS):
        return b""
    if offset + size > len(data):
        raise ElfError("Section data out of bounds")
    return data[offset:offset + size]


def _name(strtab: bytes, index: int) -> str:
    if index >= len(strtab):
        return ""
    end = strtab.find(b"\0", index)
    if end < 0:
        end = len(strtab)
    return strtab[index:end].decode("utf-8", errors="replace")


def parse_elf(data: bytes) -> ElfFile:
    """Parse a 32- or 64-bit ELF file of either byte order."""
    data = bytes(data)
    if len(data) < 16 or data[:4] != b"\x7fELF":
        raise ElfError("Not an ELF file")
    ei_class, ei_data = data[4], data[5]
    if ei_class == 1:
        header_fmt, section_fmt = "HHIIIIIHHHHHH", "IIIIIIIIII"
    elif ei_class == 2:
        header_fmt, section_fmt = "HHIQQQIHHHHHH", "IIQQQQIIQQ"
    else:
        raise ElfError(f"Unknown ELF class {ei_class}")
    if ei_data == 1:
        order = "<"
    elif ei_data == 2:
        order = ">"
    else:
        raise ElfError(f"Unknown ELF data encoding {ei_data}")

    header = _unpack(data, order + header_fmt, 16)
    entry, shoff = header[3], header[5]
    shentsize, shnum, shstrndx = header[10], header[11], header[12]
    section_fmt = order + section_fmt

    raws = []
    if shoff:
        if shentsize < struct.calcsize(section_fmt):
            raise ElfError("Invalid section header size")
        if shnum == 0:
            shnum = _unpack(data, section_fmt, shoff)[5]
        raws = [_unpack(data, section_fmt, shoff + i * shentsize) for i in range(shnum)]
    if shstrndx == _SHN_XINDEX and raws:
        shstrndx = raws[0][6]

    strtab = _section_data(data, raws[shstrndx]) if 0 < shstrndx < len(raws) else b""
    sections = tuple(
        ElfSection(
            name=_name(strtab, raw[0]),
            address=raw[3],
            size=raw[5],
            align=raw[8],
            data=_section_data(data, raw),
        )
        for raw in raws
    )
    return ElfFile(entry=entry, sections=sections)


def _usage() -> str:
    return f"{color('yellow')}Usage:{reset()} elf {color('aqua')}<binary>{reset()}"


def main(argv=None) -> int:
    """Print the entry point and named sections of an ELF binary."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print(_usage())
        return EXIT_USAGE
    if args[0] in ("-h", "--help"):
        print(_usage())
        return EXIT_SUCCESS
    path = args[0]
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError:
        error(f"Could not read file '{path}'")
        return EXIT_FAILURE
    try:
        elf = parse_elf(data)
    except ElfError:
        error("Could not parse ELF")
        return EXIT_FAILURE

    yellow = color("yellow")
    print(f"ELF entry address: 0x{elf.entry:X}")
    for section in elf.sections:
        if not section.name:
            continue
        print()
        print(
            f"{yellow}{section.name}{reset()} (addr: 0x{section.address:X}, "
            f"size: {section.size}, align: {section.align})"
        )
        print_hex(section.data, section.address)
    return EXIT_SUCCESS