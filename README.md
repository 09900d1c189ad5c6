# usrtools

A set of small, self-contained command-line tools written in plain Python
with no third-party dependencies.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Commands

| Command             | What it does                                                  |
|---------------------|---------------------------------------------------------------|
| `usrtools-help`     | Summary of commands, or help on `edit` and `date`             |
| `usrtools-hex`      | Hex dump of a file, 16 bytes per row with an ASCII column     |
| `usrtools-encode`   | Base64 encoding of a file (one trailing newline is dropped)   |
| `usrtools-env`      | List, read or set environment variables                       |
| `usrtools-keyboard` | Select a keyboard layout (`set qwerty`, `azerty` or `dvorak`) |
| `usrtools-elf`      | Entry address and hex dump of the named sections of an ELF file |
| `usrtools-hash`     | SHA-256 digest of files, short or long, optionally recursive  |
| `usrtools-find`     | Find files by glob pattern, or lines by regular expression    |
| `usrtools-host`     | Resolve a host name to an IPv4 address over DNS               |
| `usrtools-http`     | Fetch a URL with a plain HTTP/1.1 GET request                 |
| `usrtools-httpd`    | Serve a directory over HTTP, with PUT and DELETE unless read-only |
| `usrtools-edit`     | A small full-screen text editor                               |

Most commands print their usage with `-h` or `--help`.

### Examples

```
usrtools-hex image.bin
usrtools-hash --long --recursive docs/
usrtools-find --file "*.txt" --line "Alice" notes/
usrtools-host example.com
usrtools-http --verbose http://example.com/index.html
usrtools-httpd --dir public --port 8080 --read-only
usrtools-edit notes.txt
```

`usrtools-hash` prints a coloured 4-byte digest on a terminal and the full
uncoloured digest otherwise; `-s`, `-l` and `-c` override this.

The editor can also apply a single line command to a file and print the
result without opening the screen:

```
usrtools-edit --command "%s/foo/bar/g" notes.txt
```

Line commands: `d` deletes the current line, `%d` all lines,
`g/<regex>/d` the matching lines; `s/<regex>/<text>/` (or `/g`) substitutes
on the current line and `%s/...` on every line; `w [<path>]` writes the file.

Keys in the editor: `^Q` quit, `^W` write, `^X` write and quit, `^T`/`^B`
top/bottom of file, `^A`/`^E` start/end of line, `^D` cut line, `^Y` copy
line, `^P` paste line, `^F` find, `^N` find next, `^L` line command.

## Use from Python

The tools are also importable. For instance, `usrtools.hexdump.format_hex`
returns the dump rows of a byte string, `usrtools.elf.parse_elf` reads an
ELF file into an `ElfFile`, `usrtools.host.build_query` builds a DNS query
`Message`, `usrtools.httpd.join_path` maps a request path under a served
directory, and `usrtools.buffer.Buffer` holds the editor's text and cursor
logic independent of the terminal.

## Limitations

- There is no game or animation command; the tools are limited to those
  listed above.
- `usrtools-env` and `usrtools-keyboard` change state only inside the
  running process: a variable set with `usrtools-env` and a layout chosen
  with `usrtools-keyboard` do not outlast the command.
- `usrtools-host` sends A queries only and takes the address from the last
  four bytes of the answer; `usrtools-http` speaks plain HTTP, not HTTPS.