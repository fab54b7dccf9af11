from collections import Counter, defaultdict

import pytest

from dendrite.jsenzyme import JSSource

CLASS_SRC = """
import { Event, kinds } from 'nostr-tools'
import { Pubkey } from '../shared'

export type NoteType = 'root' | 'reply' | 'quote'

export class Note {
  private readonly _event: Event
  private readonly _mentions: NoteMention[]

  get id(): EventId {
    return EventId.fromHex(this._event.id)
  }

  get author(): Pubkey {
    return Pubkey.fromHex(this._event.pubkey)
  }

  mentionsUser(pubkey: Pubkey): boolean {
    return this._mentions.some((m) => m.pubkey.equals(pubkey))
  }

  static fromEvent(event: Event): Note {
    return new Note(event, [], [], [])
  }
}

export function createNote(event: Event): Note {
  return Note.fromEvent(event)
}
"""

SVELTE_SRC = """<script lang="ts">
import { onMount } from 'svelte'
import NoteCard from './NoteCard.svelte'

let notes = []

function handleClick() {
  console.log("clicked")
}
</script>

<div class="feed">
  {#each notes as note}
    <NoteCard {note} on:click={handleClick} />
  {/each}
</div>
"""


def _collect(src):
    counts = Counter()
    names = defaultdict(list)
    for element in JSSource().digest(src):
        counts[element.type()] += 1
        if element.value():
            names[element.type()].append(element.value())
    return counts, names


def test_digest_class():
    assert JSSource().can_digest(CLASS_SRC.encode())
    counts, names = _collect(CLASS_SRC)
    assert counts["import"] >= 2
    assert counts["type"] >= 2
    assert counts["struct"] >= 1
    assert counts["method"] >= 3
    assert counts["field"] >= 2
    assert counts["func"] >= 1


def test_digest_class_names():
    _, names = _collect(CLASS_SRC)
    assert names["import"] == ["nostr-tools", "../shared"]
    assert names["type"] == ["NoteType", "Note"]
    assert names["method"] == ["id", "author", "mentionsUser", "fromEvent"]
    assert names["field"] == ["_event", "_mentions"]
    assert names["func"] == ["createNote"]
    assert names["ident"] == ["Event", "kinds", "Pubkey"]


def test_digest_svelte():
    assert JSSource().can_digest(SVELTE_SRC.encode())
    counts, names = _collect(SVELTE_SRC)
    assert counts["import"] >= 2
    assert counts["func"] >= 1
    assert "handleClick" in names["func"]
    assert "NoteCard" in names["ident"]
    assert '"clicked"' in names["literal"]


def test_import_alias():
    _, names = _collect("import { a as b, c } from 'mod'\n")
    assert names["import"] == ["mod"]
    assert names["ident"] == ["b", "c"]


def test_comment_lines():
    _, names = _collect("// a helpful remark\n// ok\n")
    assert names["comment"] == ["a helpful remark"]


def test_arrow_function():
    _, names = _collect("const handler = async (e) => e\nconst f = x => x\n")
    assert names["func"] == ["handler", "f"]


def test_interface_emits_marker():
    counts, names = _collect("export interface Shape {\n}\n")
    assert names["type"] == ["Shape"]
    assert counts["interface"] == 1


@pytest.mark.parametrize(
    "sample, expected",
    [
        (b"hello world this is plain", False),
        (b"export const x = 1", True),
        ("<script>", True),
    ],
)
def test_can_digest(sample, expected):
    assert JSSource().can_digest(sample) is expected


def test_empty_source():
    assert list(JSSource().digest("")) == []