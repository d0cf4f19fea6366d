# novacom

Building blocks for the novacom host/device link: the binary message
buffer both sides speak, the checksums they rely on, the device-side
password and token authentication, the host-side token store, the
command services that turn requests into wire messages and back, the
table of known USB device ids, and a store of dropped connections that
may be resumed.

The package has no third-party dependencies.

## Installing

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## What is inside

- `novacom.buffer` — `Buffer`, a fixed-capacity byte buffer with one
  read/write position. It packs single bytes, raw bytes, big-endian
  32-bit integers, and length-prefixed strings and blobs
  (`put_string`/`get_string`, `put_blob`/`get_blob`). `getvalue()`
  returns the bytes up to the current position; `resize`, `seek` and
  `fits` manage capacity and position. Writing past the end raises
  `BufferFullError`; reading past the end raises `BufferUnderrunError`,
  and a failed string or blob read leaves the position where it was.
- `novacom.cksum` — `adler32(data, value=1)` and `sha1_hex(data)`, the
  latter giving the 40-character lower-case digest used in every
  authentication exchange.
- `novacom.auth` — `AuthState`, the device side of authentication. It
  looks at a password file (by default `/var/novacom/passwd`) and a
  directory of token files (by default `/var/novacom/tokens`). When
  `initialize()` finds the password file it starts a random 32-character
  session; a non-empty password file turns protection on. Clients then
  prove themselves with `sha1_hex(password_hash + session)` via
  `process_password`, or `sha1_hex(token + session)` via
  `process_token`; failed attempts are counted and limited. Token files
  are created, deleted and rescanned with `create_token_file`,
  `delete_token_file` and `scan_tokens`. `AuthMessage` names the message
  codes on the wire; `AuthError` reports failed session or token
  operations.
- `novacom.tokenstorage` — `TokenStorage`, the host's store of tokens
  handed out by devices, one file per device, kept by default in
  `~/.nova`. `read_hash(name, session)` produces the digest a device
  expects for a given session.
- `novacom.device_commands` — `CommandService.handle(data)`, which
  answers logout, login (password or token method) and token add/remove
  requests on the device and returns the reply bytes. Unknown message
  types get an "unimplemented" reply.
- `novacom.host_commands` — `CommandUrl`, `find_handler`, the
  `build_login_request`, `build_logout_request`,
  `build_token_add_request` and `build_token_remove_request` helpers,
  and `HostCommands`, whose `request` builds the message for a device
  command and whose `handle_reply` applies a device's reply (storing or
  removing the local token as needed).
- `novacom.device_list` — `DEVICE_TABLE` of known USB vendor/product ids
  and `lookup(vendor, product)`.
- `novacom.recovery` — `RecoveryRecords`, a thread-safe store of
  `RecoveryToken`s for dropped connections. Records count down with
  `update(elapsed)`; expired ones, and those taken out with
  `remove(nduid)`, are handed to an optional `destroy` callback.
  `find(token)` takes out a matching record and returns its handle, or
  raises `KeyError`.

## A short example

```python
from novacom.buffer import Buffer
from novacom.cksum import sha1_hex

buf = Buffer(64)
buf.put_byte(50)
buf.put_string(b"password")
reader = Buffer.from_data(buf.getvalue())
assert reader.get_byte() == 50
assert reader.get_string() == b"password"

print(sha1_hex(b"abc"))  # a9993e364706816aba3e25717850c26c9cd0d89d
```

## What it does not do

This package holds the message formats, authentication logic and
bookkeeping only. It does not open USB devices or endpoints, does not
move packets over any transport, has no multiplexing of channels, runs
no daemon or socket server, and installs no command-line program. The
caller is responsible for carrying the bytes that `CommandService` and
`HostCommands` produce between host and device.