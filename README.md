# unetkit

Pure-Python primitives for peer-to-peer overlay networks. It needs nothing
outside the standard library.

## Modules

- `unetkit.random`: `randombytes(length)` returns bytes from the operating
  system's random source. It asks for them 256 bytes at a time.
- `unetkit.sha512`: the incremental `Sha512` hasher (`update`, `digest`,
  `copy`), plus `sha512(data)` and `hmac_sha512(key, data)`.
- `unetkit.siphash`: SipHash-2-4. It provides `SipHashKey` (`from_bytes`,
  `is_zero`), `siphash`, `siphash_to_le64` and `siphash_to_be64`.
- `unetkit.stun`: builds STUN binding requests and reads the responses, so a
  peer can learn its external port. It provides `StunRequest` (`prepare`,
  `complete`), `stun_msg_is_valid`, and the `MessageType` and `TlvType`
  enums.
- `unetkit.sntrup761`: the Streamlined NTRU Prime 761 key encapsulation
  mechanism. It provides `keypair`, `batch_keypair`, `pubkey`, `encapsulate`
  and `decapsulate`.
- `unetkit.sntrup_encoding`, `unetkit.sntrup_arith`, `unetkit.sntrup_fastmult`:
  the polynomial encodings and ring arithmetic that `sntrup761` is built on.

## Installation

```
pip install .
```

## Examples

Hashing:

```python
from unetkit.sha512 import Sha512, sha512, hmac_sha512

digest = sha512(b"hello")
hasher = Sha512(b"hel")
hasher.update(b"lo")
assert hasher.digest() == digest

mac = hmac_sha512(bytes(32), b"message")
```

SipHash:

```python
from unetkit.siphash import SipHashKey, siphash

sip = SipHashKey.from_bytes(bytes(range(16)))
value = siphash(b"data", sip)
```

STUN: send the prepared request to a STUN server, then pass each reply to
`complete`:

```python
from unetkit.stun import StunRequest

request = StunRequest()
packet = request.prepare(0)
# ... send `packet` over UDP and receive `reply` ...
# if request.complete(reply):
#     print("external port", request.port)
```

Key encapsulation:

```python
from unetkit import sntrup761

keys = sntrup761.keypair()
ciphertext, shared = sntrup761.encapsulate(keys[0])
assert sntrup761.decapsulate(ciphertext, keys[1]) == shared
```

`decapsulate` does not raise for a ciphertext that fails to match. It returns
a pseudo-random key derived from the secret key. Wrong input lengths raise
`ValueError`.

Key generation for sntrup761 is slow in pure Python. `batch_keypair(count)`
spreads the cost of the ring inversions over several key pairs.

## What it does not do

This is a library of building blocks, not a network daemon. It opens no
sockets and installs no command. `StunRequest` only builds and parses
packets, so sending and receiving them is up to the caller. There is no peer
exchange, no tunnel set-up and no configuration handling.

## Running the tests

```
pip install .[test]
pytest
```