"""A virtual z=8 Cayley tree of depth 8 for lattice-based text detection.

The tree is never built as a graph. Each of the eight depth levels keeps
an aggregated 8-channel count vector and its Walsh-Hadamard transform.
Tokens enter at the leaf (depth 7, detection pass 1) and reach coarser
levels through temporal subsampling; the root (depth 0, pass 8) holds
the Walsh components used for the final verdict.

The channels are, in order: w1, w2, w3, w4, w5, punct, space, origin.
"""

from __future__ import annotations

import io
import json
import re
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import IO, Any, Iterable, Sequence, Union

MAX_DEPTH = 8
"""Depth of the tree; leaf (depth 7) is pass 1, root (depth 0) is pass 8."""

HISTORY_SIZE = 16
"""Number of root Walsh snapshots kept for convergence detection."""

NUM_CHANNELS = 8

CHAN_W1 = 0
CHAN_W2 = 1
CHAN_W3 = 2
CHAN_W4 = 3
CHAN_W5 = 4
CHAN_PUNCT = 5
CHAN_SPACE = 6
CHAN_ORIGIN = 7

CHANNEL_NAMES = ("w1", "w2", "w3", "w4", "w5", "punct", "space", "origin")

_LONG_CHANNELS = frozenset({CHAN_W4, CHAN_W5})
_MIN_HISTORY = 8

Vec8 = tuple[int, ...]


def _zeros() -> list[int]:
    return [0] * NUM_CHANNELS


def _walsh(values: Sequence[int]) -> list[int]:
    """Unnormalised Walsh-Hadamard transform in natural (Sylvester) order."""
    if len(values) == 1:
        return list(values)
    half = len(values) // 2
    low = _walsh(values[:half])
    high = _walsh(values[half:])
    return [a + b for a, b in zip(low, high)] + [a - b for a, b in zip(low, high)]


def _valid_channel(channel: int) -> bool:
    return 0 <= channel < NUM_CHANNELS


def _valid_depth(depth: int) -> bool:
    return 0 <= depth < MAX_DEPTH


@dataclass
class Level:
    """Accumulated state at one depth level of the virtual tree."""

    depth: int
    spatial: list[int] = field(default_factory=_zeros)
    walsh: list[int] = field(default_factory=_zeros)
    bond_count: list[int] = field(default_factory=_zeros)
    miss_count: list[int] = field(default_factory=_zeros)
    total_walk_dist: list[int] = field(default_factory=_zeros)
    history: deque = field(default_factory=lambda: deque(maxlen=HISTORY_SIZE))


@dataclass(frozen=True)
class LevelStats:
    """A copy of the statistics held at one depth level."""

    depth: int
    spatial: Vec8 = (0,) * NUM_CHANNELS
    walsh: Vec8 = (0,) * NUM_CHANNELS
    bond_count: Vec8 = (0,) * NUM_CHANNELS
    miss_count: Vec8 = (0,) * NUM_CHANNELS
    total_walk_dist: Vec8 = (0,) * NUM_CHANNELS


@dataclass(frozen=True)
class Health:
    """A summary of a tree's current state."""

    token_count: int
    root_walsh: Vec8
    leaf_stats: LevelStats
    converged: bool


@dataclass(frozen=True)
class CompareResult:
    """Outcome of comparing two trees at one depth."""

    bonded: int
    missed: int
    long_misses: int
    walk_dist: float


class Tree:
    """The z=8 virtual Cayley tree."""

    def __init__(self) -> None:
        self.levels: list[Level] = [Level(depth=d) for d in range(MAX_DEPTH)]
        self.origin_profile: list[int] = _zeros()
        self.token_count = 0
        self.converged = False
        self._lock = threading.RLock()

    def leaf(self) -> Level:
        """Return the leaf level (depth MAX_DEPTH-1, pass 1)."""
        return self.levels[MAX_DEPTH - 1]

    def root(self) -> Level:
        """Return the root level (depth 0, pass 8)."""
        return self.levels[0]

    def deposit(self, channel: int) -> None:
        """Record a token in a channel and propagate it up the tree.

        Level d receives the token only when the running token count is
        divisible by 2**(MAX_DEPTH-1-d): the leaf sees every token, the
        root every 128th. Invalid channels are ignored.
        """
        if not _valid_channel(channel):
            return
        with self._lock:
            self.token_count += 1
            for depth in reversed(range(MAX_DEPTH)):
                stride = 1 << (MAX_DEPTH - 1 - depth)
                if self.token_count % stride:
                    break
                level = self.levels[depth]
                level.spatial[channel] += 1
                level.bond_count[channel] += 1
                level.walsh = _walsh(level.spatial)

    def record_history(self) -> None:
        """Snapshot the root Walsh vector for convergence tracking."""
        with self._lock:
            root = self.root()
            root.history.append(tuple(root.walsh))

    def probe_at(self, depth: int, channel: int) -> tuple[bool, int]:
        """Test a channel against the trained pattern at a depth.

        Returns whether the channel bonded and its walk distance from the
        uniform expectation. The tree is not modified.
        """
        if not (_valid_depth(depth) and _valid_channel(channel)):
            return False, NUM_CHANNELS
        with self._lock:
            spatial = list(self.levels[depth].spatial)
        total = sum(spatial)
        if total == 0:
            return False, NUM_CHANNELS
        count = spatial[channel]
        if count == 0:
            return False, NUM_CHANNELS
        expected = total // NUM_CHANNELS or 1
        distance = abs(count - expected)
        threshold = total // (2 * NUM_CHANNELS) or 1
        return count >= threshold, distance

    def token_count_at(self, depth: int) -> int:
        """Return the total token count at a depth level."""
        if not _valid_depth(depth):
            return 0
        with self._lock:
            return sum(self.levels[depth].spatial)

    def root_walsh(self) -> Vec8:
        """Return the Walsh components at the root."""
        with self._lock:
            return tuple(self.root().walsh)

    def level_walsh(self, depth: int) -> Vec8:
        """Return the Walsh components at a depth, zeros if out of range."""
        if not _valid_depth(depth):
            return (0,) * NUM_CHANNELS
        with self._lock:
            return tuple(self.levels[depth].walsh)

    def stats_at(self, depth: int) -> LevelStats:
        """Return a copy of the statistics at a depth level."""
        if not _valid_depth(depth):
            return LevelStats(depth=depth)
        with self._lock:
            level = self.levels[depth]
            return LevelStats(
                depth=level.depth,
                spatial=tuple(level.spatial),
                walsh=tuple(level.walsh),
                bond_count=tuple(level.bond_count),
                miss_count=tuple(level.miss_count),
                total_walk_dist=tuple(level.total_walk_dist),
            )

    def is_converged(self, threshold: int) -> bool:
        """Report whether the root Walsh shape is stable over the history.

        The threshold is in parts per thousand of the largest change in
        any normalised detail component between consecutive snapshots.
        At least eight snapshots are required.
        """
        with self._lock:
            history = list(self.root().history)
        if len(history) < _MIN_HISTORY:
            return False
        for prev, curr in zip(history, history[1:]):
            dc_curr, dc_prev = curr[0], prev[0]
            if dc_curr <= 0 or dc_prev <= 0:
                return False
            max_delta = max(
                abs(c * dc_prev - p * dc_curr) for c, p in zip(curr[1:], prev[1:])
            )
            normalizer = dc_curr * dc_prev // 1000
            if normalizer <= 0:
                return False
            if max_delta // normalizer > threshold:
                return False
        return True

    def health(self) -> Health:
        """Return a summary of the tree's state."""
        return Health(
            token_count=self.token_count,
            root_walsh=self.root_walsh(),
            leaf_stats=self.stats_at(MAX_DEPTH - 1),
            converged=self.converged,
        )


def compare_at(trained: Tree, probe: Tree, depth: int) -> CompareResult:
    """Compare the channel distributions of two trees at a depth.

    A channel bonds when the probe's share of it is within a factor of two
    of the trained share; misses on w4 and w5 also count as long misses.
    The walk distance is the mean absolute difference of the normalised
    Walsh detail components.
    """
    failure = CompareResult(0, NUM_CHANNELS, 0, float(NUM_CHANNELS))
    if not _valid_depth(depth):
        return failure

    t_stats = trained.stats_at(depth)
    p_stats = probe.stats_at(depth)
    t_total = sum(t_stats.spatial)
    p_total = sum(p_stats.spatial)
    if t_total == 0 or p_total == 0:
        return failure

    bonded = missed = long_misses = 0
    for channel, (t_count, p_count) in enumerate(zip(t_stats.spatial, p_stats.spatial)):
        probe_scaled = p_count * t_total
        train_scaled = t_count * p_total
        if (
            t_count != 0
            and probe_scaled != 0
            and probe_scaled * 2 >= train_scaled
            and probe_scaled <= train_scaled * 2
        ):
            bonded += 1
        else:
            missed += 1
            if channel in _LONG_CHANNELS:
                long_misses += 1

    t_dc = t_stats.walsh[0]
    p_dc = p_stats.walsh[0]
    if t_dc == 0 or p_dc == 0:
        return CompareResult(bonded, missed, long_misses, float(NUM_CHANNELS))

    walsh_dist = sum(
        abs(t / t_dc - p / p_dc) for t, p in zip(t_stats.walsh[1:], p_stats.walsh[1:])
    )
    return CompareResult(bonded, missed, long_misses, walsh_dist / (NUM_CHANNELS - 1))


def _vec(values: Iterable[Any] | None) -> Vec8:
    items = [int(v) for v in (values or ())][:NUM_CHANNELS]
    return tuple(items + [0] * (NUM_CHANNELS - len(items)))


_FRACTION = re.compile(r"\.(\d+)")


def _parse_time(text: str | None) -> datetime:
    if not text:
        return datetime(1, 1, 1, tzinfo=timezone.utc)
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    return datetime.fromisoformat(text)


@dataclass(frozen=True)
class LevelRecord:
    """The serialisable form of a level."""

    spatial: Vec8 = (0,) * NUM_CHANNELS
    walsh: Vec8 = (0,) * NUM_CHANNELS
    bond_count: Vec8 = (0,) * NUM_CHANNELS
    miss_count: Vec8 = (0,) * NUM_CHANNELS
    total_walk_dist: Vec8 = (0,) * NUM_CHANNELS

    def _to_dict(self) -> dict[str, list[int]]:
        return {
            "spatial": list(self.spatial),
            "walsh": list(self.walsh),
            "bond_count": list(self.bond_count),
            "miss_count": list(self.miss_count),
            "total_walk_dist": list(self.total_walk_dist),
        }

    @classmethod
    def _from_dict(cls, data: dict[str, Any] | None) -> LevelRecord:
        data = data or {}
        return cls(
            spatial=_vec(data.get("spatial")),
            walsh=_vec(data.get("walsh")),
            bond_count=_vec(data.get("bond_count")),
            miss_count=_vec(data.get("miss_count")),
            total_walk_dist=_vec(data.get("total_walk_dist")),
        )


@dataclass(frozen=True)
class Snapshot:
    """A frozen Cayley tree in serialisable form."""

    version: int
    frozen_at: datetime
    levels: tuple[LevelRecord, ...]
    origin_profile: Vec8
    token_count: int

    def to_dict(self) -> dict[str, Any]:
        """Return the snapshot as JSON-ready data."""
        return {
            "version": self.version,
            "frozen_at": self.frozen_at.isoformat(),
            "levels": [record._to_dict() for record in self.levels],
            "origin_profile": list(self.origin_profile),
            "token_count": self.token_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        """Build a snapshot from decoded JSON data; missing fields are zero."""
        raw_levels = list(data.get("levels") or ())[:MAX_DEPTH]
        raw_levels += [None] * (MAX_DEPTH - len(raw_levels))
        return cls(
            version=int(data.get("version", 0)),
            frozen_at=_parse_time(data.get("frozen_at")),
            levels=tuple(LevelRecord._from_dict(level) for level in raw_levels),
            origin_profile=_vec(data.get("origin_profile")),
            token_count=int(data.get("token_count", 0)),
        )

    def to_json(self) -> str:
        """Serialise the snapshot as compact JSON."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    def write_to(self, stream: Union[IO[str], IO[bytes]]) -> int:
        """Write indented JSON to a text or binary stream; return bytes written."""
        text = json.dumps(self.to_dict(), indent=2)
        data = text.encode("utf-8")
        if isinstance(stream, io.TextIOBase):
            stream.write(text)
        else:
            stream.write(data)
        return len(data)


def freeze(tree: Tree) -> Snapshot:
    """Create a snapshot from a live tree."""
    return Snapshot(
        version=2,
        frozen_at=datetime.now(timezone.utc),
        levels=tuple(
            LevelRecord(
                spatial=stats.spatial,
                walsh=stats.walsh,
                bond_count=stats.bond_count,
                miss_count=stats.miss_count,
                total_walk_dist=stats.total_walk_dist,
            )
            for stats in (tree.stats_at(d) for d in range(MAX_DEPTH))
        ),
        origin_profile=tuple(tree.origin_profile),
        token_count=tree.token_count,
    )


def thaw(snapshot: Snapshot) -> Tree:
    """Reconstruct a live tree from a snapshot."""
    tree = Tree()
    tree.origin_profile = list(snapshot.origin_profile)
    tree.token_count = snapshot.token_count
    for level, record in zip(tree.levels, snapshot.levels):
        level.spatial = list(record.spatial)
        level.walsh = list(record.walsh)
        level.bond_count = list(record.bond_count)
        level.miss_count = list(record.miss_count)
        level.total_walk_dist = list(record.total_walk_dist)
    return tree


def read_snapshot(stream: Union[IO[str], IO[bytes]]) -> Snapshot:
    """Read a JSON snapshot from a text or binary stream."""
    content = stream.read()
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError("snapshot JSON must be an object")
    return Snapshot.from_dict(data)