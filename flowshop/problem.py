"""Permutation flow-shop scheduling: instances, makespan and solvers."""

from __future__ import annotations

import heapq
import itertools
import math
import random as _random
import time
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Sequence


@dataclass
class InstanceData:
    """Raw instance: ``durations[job][machine]`` for ``n`` jobs on ``m`` machines."""

    n: int
    m: int
    durations: list[list[int]]


@dataclass(frozen=True)
class Instance:
    """Parameters of a randomly generated instance."""

    machines: int
    tasks: int
    max_val: int
    min_val: int


@dataclass(frozen=True)
class MetaInstance:
    """Parameters for the metaheuristics."""

    t0: float
    t_end: float
    max_iter: int


@dataclass(eq=False)
class Node:
    """Branch-and-bound search node, ordered by its lower bound."""

    scheduled: list[int]
    remaining: list[int]
    lb: int
    current_cmax: int

    def __lt__(self, other: "Node") -> bool:
        return self.lb < other.lb


def _next_int(tokens: Iterator[str]) -> int:
    try:
        return int(next(tokens))
    except StopIteration:
        raise ValueError("instance file is truncated") from None


def _read_instance(tokens: Iterator[str]) -> InstanceData:
    n = _next_int(tokens)
    m = _next_int(tokens)
    durations = [[0] * m for _ in range(n)]
    for row in durations:
        for _ in range(m):
            idx = _next_int(tokens)
            duration = _next_int(tokens)
            if not 0 <= idx < m:
                raise ValueError(f"machine index {idx} out of range for {m} machines")
            row[idx] = duration
    return InstanceData(n, m, durations)


def _read_tokens(path) -> Iterator[str]:
    with open(path, encoding="utf-8") as handle:
        return iter(handle.read().split())


def load_all_instances(path) -> list[InstanceData]:
    """Read every instance from a file in Taillard's ``idx time`` pair format."""
    tokens = _read_tokens(path)
    total = _next_int(tokens)
    return [_read_instance(tokens) for _ in range(total)]


class Problem:
    """A flow-shop instance together with the solvers that order its jobs."""

    def __init__(self, durations: Iterable[Sequence[int]]):
        rows = [list(row) for row in durations]
        widths = {len(row) for row in rows}
        if len(widths) > 1:
            raise ValueError("every job needs a duration for each machine")
        self.n = len(rows)
        self.m = widths.pop() if widths else 0
        self.durations = rows
        self._backup = [list(row) for row in rows]
        self.pi: list[int] = []
        self.rng = _random.Random()
        self.pz_time = 0.0
        self.neh_time = 0.0
        self.john_time = 0.0
        self.fneh_time = 0.0
        self.bnb_time = 0.0
        self.sa_time = 0.0
        self.ta_time = 0.0

    @classmethod
    def random(cls, n, m, max_val, min_val, rng=None) -> "Problem":
        """Build an ``n`` by ``m`` instance with durations drawn from ``[min_val, max_val]``."""
        if min_val > max_val:
            raise ValueError("min_val must not exceed max_val")
        rng = rng or _random.Random()
        return cls([[rng.randint(min_val, max_val) for _ in range(m)] for _ in range(n)])

    @classmethod
    def from_instance(cls, data: InstanceData) -> "Problem":
        return cls(row[: data.m] for row in data.durations[: data.n])

    @classmethod
    def from_file(cls, path, count=1) -> "Problem":
        """Read ``count`` instances (all of them if ``count`` <= 0) and keep the last."""
        tokens = _read_tokens(path)
        total = _next_int(tokens)
        if count > 0:
            total = count
        data: Optional[InstanceData] = None
        for _ in range(total):
            data = _read_instance(tokens)
        if data is None:
            raise ValueError("instance file holds no instances")
        return cls.from_instance(data)

    def reload(self) -> None:
        """Restore the durations the problem was created with."""
        self.durations = [list(row) for row in self._backup]
        self.n = len(self.durations)
        self.m = len(self.durations[0]) if self.durations else 0
        self.pi = []

    def fill_test1(self) -> None:
        """Replace the durations with a fixed 5-job, 20-machine instance."""
        self.durations = [
            [54, 83, 15, 71, 77, 36, 53, 38, 27, 87, 76, 91, 14, 29, 12, 77, 32, 87, 68, 94],
            [79, 3, 11, 99, 56, 70, 99, 60, 5, 56, 3, 61, 73, 75, 47, 14, 21, 86, 5, 77],
            [16, 89, 49, 15, 89, 45, 60, 23, 57, 64, 7, 1, 63, 41, 63, 47, 26, 75, 77, 40],
            [66, 58, 31, 68, 78, 91, 13, 59, 49, 85, 85, 9, 39, 41, 56, 40, 54, 77, 51, 31],
            [58, 56, 20, 85, 53, 35, 53, 41, 69, 13, 86, 72, 8, 49, 47, 87, 58, 18, 68, 28],
        ]
        self.n = 5
        self.m = 20
        self.pi = []

    def _forward_rows(self, perm: Sequence[int]) -> list[list[int]]:
        rows = []
        row = [0] * self.m
        for job in perm:
            new_row = []
            prev = 0
            for done, duration in zip(row, self.durations[job]):
                prev = max(done, prev) + duration
                new_row.append(prev)
            row = new_row
            rows.append(row)
        return rows

    def _backward_rows(self, perm: Sequence[int]) -> list[list[int]]:
        rows = []
        row = [0] * self.m
        for job in reversed(perm):
            new_row = [0] * self.m
            nxt = 0
            for j in reversed(range(self.m)):
                nxt = max(row[j], nxt) + self.durations[job][j]
                new_row[j] = nxt
            row = new_row
            rows.append(row)
        rows.reverse()
        return rows

    def cmax(self, perm: Sequence[int]) -> int:
        """Makespan of processing the jobs in ``perm`` order."""
        rows = self._forward_rows(perm)
        if not rows or not self.m:
            return 0
        return rows[-1][-1]

    def pz(self) -> list[int]:
        """Exhaustive search over all permutations."""
        start = time.perf_counter()
        best = math.inf
        for perm in itertools.permutations(range(self.n)):
            cost = self.cmax(perm)
            if cost < best:
                best = cost
                self.pi = list(perm)
        self.pz_time = time.perf_counter() - start
        return self.pi

    def _by_total_desc(self) -> list[int]:
        return sorted(range(self.n), key=lambda job: -sum(self.durations[job]))

    def _neh(self) -> list[int]:
        sequence: list[int] = []
        for job in self._by_total_desc():
            best = math.inf
            best_seq = sequence
            for pos in range(len(sequence) + 1):
                candidate = sequence[:pos] + [job] + sequence[pos:]
                cost = self.cmax(candidate)
                if cost < best:
                    best = cost
                    best_seq = candidate
            sequence = best_seq
        return sequence

    def neh(self) -> list[int]:
        """Nawaz-Enscore-Ham constructive heuristic."""
        start = time.perf_counter()
        self.pi = self._neh()
        self.neh_time = time.perf_counter() - start
        return self.pi

    def johnson(self) -> list[int]:
        """Johnson's rule; optimal for two machines."""
        if self.m != 2:
            raise ValueError("Johnson's rule needs exactly 2 machines")
        start = time.perf_counter()
        left = [j for j in range(self.n) if self.durations[j][0] < self.durations[j][1]]
        right = [j for j in range(self.n) if self.durations[j][0] >= self.durations[j][1]]
        left.sort(key=lambda j: self.durations[j][0])
        right.sort(key=lambda j: -self.durations[j][1])
        self.pi = left + right
        self.john_time = time.perf_counter() - start
        return self.pi

    def fneh(self) -> list[int]:
        """NEH accelerated with forward and backward completion matrices."""
        start = time.perf_counter()
        sequence: list[int] = []
        zeros = [0] * self.m
        for job in self._by_total_desc():
            forward = self._forward_rows(sequence)
            backward = self._backward_rows(sequence)
            best = math.inf
            best_seq = sequence
            for pos in range(len(sequence) + 1):
                prefix = forward[pos - 1] if pos > 0 else zeros
                suffix = backward[pos] if pos < len(sequence) else zeros
                cost = self.insertion_cmax(prefix, suffix, job, len(sequence) + 1)
                if cost < best:
                    best = cost
                    best_seq = sequence[:pos] + [job] + sequence[pos:]
            sequence = best_seq
        self.pi = sequence
        self.fneh_time = time.perf_counter() - start
        return self.pi

    def insertion_cmax(self, prefix_end_times, suffix_times, job, length) -> int:
        """Makespan after inserting ``job`` between a prefix and a suffix."""
        cmax = 0
        prev_end = 0
        for j in range(self.m):
            machine_free = prefix_end_times[j] if length > 0 else 0
            prev_end = max(machine_free, prev_end) + self.durations[job][j]
            cmax = max(cmax, prev_end + suffix_times[j])
        return cmax

    def bnb(self) -> list[int]:
        """Best-first branch and bound seeded with the NEH solution."""
        start = time.perf_counter()
        self.pi = self._neh()
        upper = self.cmax(self.pi)
        queue = [Node([], list(range(self.n)), 0, 0)]
        while queue:
            node = heapq.heappop(queue)
            if node.lb >= upper:
                continue
            if not node.remaining:
                cost = self.cmax(node.scheduled)
                if cost < upper:
                    upper = cost
                    self.pi = node.scheduled
                continue
            for i, job in enumerate(node.remaining):
                scheduled = node.scheduled + [job]
                remaining = node.remaining[:i] + node.remaining[i + 1:]
                bound = self.lower_bound(scheduled, remaining)
                if bound < upper:
                    heapq.heappush(queue, Node(scheduled, remaining, bound, self.cmax(scheduled)))
        self.bnb_time = time.perf_counter() - start
        return self.pi

    def lower_bound(self, scheduled, remaining) -> int:
        """Makespan of ``scheduled`` plus each machine's shortest remaining operation."""
        bound = self.cmax(scheduled)
        if remaining:
            bound += sum(
                min(self.durations[job][machine] for job in remaining)
                for machine in range(self.m)
            )
        return bound

    def simulated_annealing(self, t0, t_end, max_iter) -> list[int]:
        """Simulated annealing with geometric cooling, started from NEH."""
        start = time.perf_counter()
        self.pi = self._neh()
        current = self.cmax(self.pi)
        temperature = t0
        if max_iter > 0:
            cooling = (t_end / t0) ** (1.0 / max_iter)
            for _ in range(max_iter):
                neighbor = list(self.pi)
                self.change_perm(neighbor)
                cost = self.cmax(neighbor)
                delta = cost - current
                if delta < 0 or self.rng.random() < math.exp(-delta / temperature):
                    self.pi = neighbor
                    current = cost
                temperature *= cooling
        self.sa_time = time.perf_counter() - start
        return self.pi

    def change_perm(self, perm) -> None:
        """Swap two distinct entries of ``perm`` in place, at positions below ``m``."""
        if self.m < 2:
            raise ValueError("a swap needs at least 2 machines")
        if self.m > len(perm):
            raise ValueError("permutation is shorter than the number of machines")
        i, j = self.rng.sample(range(self.m), 2)
        perm[i], perm[j] = perm[j], perm[i]

    def threshold_accepting(self, t0, t_end, steps_per_threshold, max_outer_iter) -> list[int]:
        """Threshold accepting with a linearly decreasing threshold, started from NEH."""
        start = time.perf_counter()
        self.pi = self._neh()
        current = self.cmax(self.pi)
        threshold = t0
        if max_outer_iter > 0:
            decay = (t0 - t_end) / max_outer_iter
            for _ in range(max_outer_iter):
                for _ in range(steps_per_threshold):
                    neighbor = list(self.pi)
                    self.change_perm(neighbor)
                    cost = self.cmax(neighbor)
                    if cost - current <= threshold:
                        self.pi = neighbor
                        current = cost
                threshold -= decay
                if threshold < 0:
                    break
        self.ta_time = time.perf_counter() - start
        return self.pi