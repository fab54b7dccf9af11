# dendrite

This package provides building blocks for telling human-written text apart from machine-generated text. The method is deterministic. It profiles the token stream of a text with a virtual Cayley tree and needs no neural network and no GPU.

## Modules

### `dendrite.enzyme`

This module splits input into typed elements.

- `TextEnzyme().digest(source)` yields one element per token:
  - a word, tagged by length: `w1` (1 character), `w2` (2–3), `w3` (4–5), `w4` (6–8) or `w5` (9 or more);
  - a single punctuation character, tagged `punct`;
  - a run of whitespace, tagged `space`.
- `LinesEnzyme(tag="line").digest(source)` yields one element per line.
- The source may be a `str`, `bytes` or a text or binary file object.
- Every string element is a `HexElement`. It carries the value and its 6-bit "hexagram" encoding (`hex_tokens()`, `orig_len()`). `encode_hex(data)` produces that encoding: 3 bytes give 4 tokens, and the last group is zero-padded.
- Helpers:
  - `elem` and `hex_elem` build elements.
  - `classify_token` and `word_length_tag` compute the tags.
  - `scan_tokens` splits text into tokens.
  - `origin_element` builds an element tagged `origin`.
  - `RefElement` and `is_ref` mark reference material.

### `dendrite.jsenzyme`

`JSSource` scans JavaScript, TypeScript and Svelte source line by line. It yields these elements:

- `import`
- `ident`
- `type`
- `struct`
- `interface`
- `func`
- `method`
- `field`
- `comment`
- `literal`

It uses pattern matching; it does not parse the language.

### `dendrite.cayley`

This module provides `Tree`, a z=8, depth-8 tree that is never built as a graph.

- **Levels.** Each level keeps per-channel counts and their Walsh-Hadamard transform. The channels are `w1 w2 w3 w4 w5 punct space origin`, indices `CHAN_W1` … `CHAN_ORIGIN`, with names in `CHANNEL_NAMES`.
- **Depositing.** `deposit(channel)` adds a token. The leaf (depth 7) sees every token, and the root (depth 0) sees every 128th.
- **Inspecting.** Use `probe_at`, `stats_at`, `token_count_at`, `root_walsh`, `level_walsh` and `health`.
- **Convergence.** `record_history()` snapshots the root's Walsh vector. `is_converged(threshold)` reports whether the root's normalised Walsh shape has held steady over at least eight snapshots. The threshold is in parts per thousand.
- **Comparing.** `compare_at(trained, probe, depth)` returns a `CompareResult` with these fields:
  - `bonded` and `missed`: a channel bonds when its share is within a factor of two of the trained share.
  - `long_misses`: misses on `w4` and `w5`.
  - `walk_dist`: the mean absolute difference of the normalised Walsh detail components.
- **Snapshots.** `freeze(tree)` returns a JSON-serialisable `Snapshot`, and `thaw(snapshot)` rebuilds a tree from one. A `Snapshot` offers `to_dict`, `from_dict`, `to_json` and `write_to(stream)`. `read_snapshot(stream)` loads one.

### `dendrite.converge`

`Tracker(window_size, threshold)` measures the vertex creation rate (new vertices per token) over fixed windows of tokens. It has these methods:

- `record_token` and `record_tokens` count tokens.
- `record_new_vertex` counts a new vertex.
- `is_converged()` is true once the last three windows are all at or below the threshold, a `fractions.Fraction`.
- `report()` returns a `Report` that includes the last ten windows.
- `marshal()` returns the state as JSON bytes.

### `dendrite.extract`

`Registry().extract(path)` returns a binary stream of plain text. The caller closes it.

- `.txt`, `.md`, `.text` and files without an extension are read directly.
- `.pdf` files go through `pdftotext`.
- HTML, DOCX, EPUB, RTF, ODT, RST, LaTeX and Org files go through `pandoc`.

A missing tool, or a file that no extractor accepts, raises `ExtractError`. `is_text_file(path)` checks the first 512 bytes for null bytes.

### `dendrite.ratelimit`

`RateLimiter(per_minute)` is a token bucket.

- It starts with one token.
- It gains one token every `60 / per_minute` seconds, up to `per_minute` tokens.
- `allow()` consumes a token if one is left.
- `stop()` ends refilling. The limiter also works as a context manager.

### `dendrite.relays`

`RelayPool(seeds=SEED_RELAYS, max_relays=1000)` holds relay URLs.

- `ingest(event)` reads kind-10002 relay-list events, given as dicts or objects with `kind` and `tags`. It adds `["r", url]` entries that are not marked `read`.
- `normalize_url` accepts only `ws://` and `wss://`, strips trailing slashes and rejects localhost.

### `dendrite.axiom`

This module holds the `Protocol` classes that elements and constraints follow: `Element`, `Constraint` and their layered, hexagram and contextual variants. It also defines the `Layer` dataclass.

## Install

```
pip install .
pip install ".[test]"   # with pytest
```

## Example

```python
import io

from dendrite.cayley import CHANNEL_NAMES, Tree, compare_at, freeze, read_snapshot, thaw
from dendrite.enzyme import TextEnzyme


def profile(text: str) -> Tree:
    tree = Tree()
    for element in TextEnzyme().digest(text):
        tree.deposit(CHANNEL_NAMES.index(element.type()))
    return tree


with open("human_corpus.txt", encoding="utf-8") as handle:
    trained = profile(handle.read())
probe = profile("A short passage whose origin we would like to judge.")

print(compare_at(trained, probe, 7))  # depth 7 is the leaf level

buffer = io.StringIO()
freeze(trained).write_to(buffer)
buffer.seek(0)
restored = thaw(read_snapshot(buffer))
```

## What the package does not do

- It has no command-line programs.
- It has no detector that turns the per-level comparisons into a human/machine verdict or a score.
- It does not store snapshots in a database. Snapshots are written to and read from streams you supply.
- It has no network client for relays. `RelayPool` only collects URLs.
- It has no enzyme for Go source.

## Tests

```
pytest
```