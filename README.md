# imapcore

Building blocks for IMAP clients and servers, with no dependencies beyond the
standard library.

| Module | What it holds |
| --- | --- |
| `imapcore.utf7` | Modified UTF-7 for mailbox names: `encode`, `decode`, `escape`, `InvalidUTF7Error`. |
| `imapcore.sasl` | Base64 framing of SASL challenges and responses: `encode_sasl`, `decode_sasl`. |
| `imapcore.imapnum` | The sequence-set grammar: `Range`, `Set`, `parse_num`, `parse_num_range`, `parse_set`, `BadNumSetError`. |
| `imapcore.numset` | Typed message sets: `SeqSet`, `UIDSet`, `SeqRange`, `UIDRange`, `seq_set_num`, `uid_set_num`, `search_res`, `is_search_res`. |
| `imapcore.search` | `SearchOptions`, `SearchCriteria` (with `and_`), `SearchData` (with `all_seq_nums`, `all_uids`) and related types. |
| `imapcore.types` | Options and data for LIST, NAMESPACE, SELECT, STATUS and STORE, plus `QuotaResourceType` and `ThreadAlgorithm`. |
| `imapcore.response` | `StatusResponseType`, `ResponseCode`, `StatusResponse` and the `IMAPError` exception. |
| `imapcore.wire` | `ConnSide`, `ContinuationRequest`, `ContinuationCancelled`, `NumKind`, `num_set_kind`, `parse_seq_set`, `parse_uid_set`. |
| `imapcore.encoder` | `Encoder`, `LiteralWriter`, `ListEncoder`, `EncoderError`, `is_valid_flag`. |
| `imapcore.decoder` | `Decoder`, `LiteralReader`, `DecoderExpectError`, `is_atom_char`. |

## Installation

```
pip install imapcore
```

## Examples

Mailbox names:

```python
from imapcore.utf7 import encode, decode

encode("~peter/mail/台北/日本語")   # '~peter/mail/&U,BTFw-/&ZeVnLIqe-'
decode("&Jjo-!")                     # '☺!'
```

Sequence sets:

```python
from imapcore.imapnum import parse_set

s = parse_set("1,2,3,5:10,*")
str(s)            # '1:3,5:10,*'
s.contains(7)     # True
s.dynamic()       # True
```

Typed sets:

```python
from imapcore.numset import seq_set_num

seqs = seq_set_num(1, 2, 3, 7)
str(seqs)         # '1:3,7'
```

Writing wire data. Errors are deferred until `crlf()`, which raises the first
one and otherwise writes and flushes the line:

```python
import io
from imapcore.encoder import Encoder
from imapcore.wire import ConnSide

out = io.BytesIO()
enc = Encoder(out, ConnSide.CLIENT)
enc.atom("A1").sp().atom("SELECT").sp().mailbox("INBOX")
enc.crlf()
out.getvalue()    # b'A1 SELECT INBOX\r\n'
```

Reading wire data. Plain methods return `None` or `False` when another element
follows; `expect_*` methods raise `DecoderExpectError`:

```python
import io
from imapcore.decoder import Decoder
from imapcore.wire import ConnSide

dec = Decoder(io.BytesIO(b"* 3 EXISTS\r\n"), ConnSide.CLIENT)
dec.special("*")      # True
dec.expect_sp()
dec.expect_number()   # 3
dec.expect_sp()
dec.expect_atom()     # 'EXISTS'
dec.expect_crlf()
```

SASL framing:

```python
from imapcore.sasl import encode_sasl, decode_sasl

encode_sasl(b"")      # '='
decode_sasl("=")      # b''
```

## What this package does not do

It reads and writes the elements of the IMAP grammar and models the data of
several commands, but it has no client, no server and no connection handling:
it opens no sockets, does not build or send whole commands, and does not parse
whole server responses into the data classes. It has no command-line tool.

## Running the tests

```
pip install -e .[test]
pytest
```