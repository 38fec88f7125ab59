import heapq
import itertools
import random

import pytest

from flowshop.problem import (
    InstanceData,
    Node,
    Problem,
    load_all_instances,
)


def make(n, m, seed):
    return Problem.random(n, m, 10, 1, rng=random.Random(seed))


def is_perm(seq, n):
    return sorted(seq) == list(range(n))


TAILLARD_TEXT = """2
2 3
0 5 1 7 2 2
2 4 0 1 1 9
3 2
1 3 0 8
0 6 1 1
0 2 1 4
"""


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "tail.dat"
    path.write_text(TAILLARD_TEXT)
    return path


def test_cmax_single_job_is_sum_of_durations():
    p = Problem([[3, 4, 5], [1, 1, 1]])
    assert p.cmax([0]) == sum([3, 4, 5])


def test_cmax_single_machine_is_total_work():
    rows = [[3], [7], [2], [9]]
    p = Problem(rows)
    assert p.cmax([2, 0, 3, 1]) == sum(r[0] for r in rows)


def test_ragged_durations_rejected():
    with pytest.raises(ValueError):
        Problem([[1, 2], [3]])


def test_random_shape_and_bounds():
    p = Problem.random(6, 4, 9, 3, rng=random.Random(5))
    assert p.n == 6 and p.m == 4
    assert all(3 <= d <= 9 for row in p.durations for d in row)


def test_random_rejects_inverted_range():
    with pytest.raises(ValueError):
        Problem.random(2, 2, 1, 10)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_pz_is_optimal(seed):
    p = make(5, 3, seed)
    best = p.cmax(p.pz())
    assert all(best <= p.cmax(perm) for perm in itertools.permutations(range(5)))


@pytest.mark.parametrize("seed", [4, 5, 6, 7])
def test_johnson_matches_exhaustive_on_two_machines(seed):
    p = make(6, 2, seed)
    johnson = p.johnson()
    assert is_perm(johnson, 6)
    assert p.cmax(johnson) == p.cmax(p.pz())


def test_johnson_requires_two_machines():
    with pytest.raises(ValueError):
        make(4, 3, 1).johnson()


@pytest.mark.parametrize("seed", [8, 9, 10])
def test_neh_is_permutation_no_better_than_optimum(seed):
    p = make(6, 4, seed)
    seq = p.neh()
    assert is_perm(seq, 6)
    assert p.pi == seq
    assert p.cmax(seq) >= p.cmax(p.pz())


@pytest.mark.parametrize("seed", [11, 12, 13, 14])
def test_fneh_agrees_with_neh(seed):
    p = make(9, 5, seed)
    assert p.fneh() == p.neh()


def test_fneh_on_fixed_instance_matches_neh():
    p = Problem([[1]])
    p.fill_test1()
    assert p.fneh() == p.neh()


def test_insertion_cmax_appending_matches_cmax():
    p = make(3, 4, 15)
    prefix = list(itertools.accumulate(p.durations[0]))
    assert p.insertion_cmax(prefix, [0] * 4, 2, 2) == p.cmax([0, 2])


@pytest.mark.parametrize("seed", [16, 17])
def test_bnb_not_worse_than_neh(seed):
    p = make(6, 3, seed)
    neh_cost = p.cmax(p.neh())
    seq = p.bnb()
    assert is_perm(seq, 6)
    assert p.cmax(seq) <= neh_cost


def test_lower_bound_without_remaining_is_cmax():
    p = make(4, 3, 18)
    assert p.lower_bound([2, 0], []) == p.cmax([2, 0])


def test_lower_bound_adds_machine_minima():
    p = Problem([[2, 3], [5, 1], [4, 6]])
    extra = min(5, 4) + min(1, 6)
    assert p.lower_bound([0], [1, 2]) == p.cmax([0]) + extra


def test_node_heap_pops_smallest_bound():
    nodes = [Node([], [], lb, 0) for lb in (7, 2, 9, 4)]
    heap = []
    for node in nodes:
        heapq.heappush(heap, node)
    assert [heapq.heappop(heap).lb for _ in nodes] == sorted([7, 2, 9, 4])


def test_change_perm_swaps_two_positions_below_m():
    p = make(8, 3, 19)
    p.rng = random.Random(3)
    perm = list(range(8))
    p.change_perm(perm)
    changed = [i for i, v in enumerate(perm) if v != i]
    assert sorted(perm) == list(range(8))
    assert len(changed) == 2
    assert all(i < 3 for i in changed)


def test_change_perm_needs_two_machines():
    p = make(5, 1, 20)
    with pytest.raises(ValueError):
        p.change_perm(list(range(5)))


def test_simulated_annealing_returns_permutation():
    p = make(8, 3, 21)
    p.rng = random.Random(0)
    seq = p.simulated_annealing(1000.0, 0.1, 200)
    assert is_perm(seq, 8)
    assert p.sa_time >= 0.0


def test_threshold_accepting_returns_permutation():
    p = make(8, 3, 22)
    p.rng = random.Random(0)
    seq = p.threshold_accepting(1000.0, 0.1, 10, 20)
    assert is_perm(seq, 8)
    assert p.cmax(seq) >= p.cmax(p.pz()) or p.n > 8


def test_fill_test1_and_reload():
    p = make(3, 2, 23)
    original = [list(r) for r in p.durations]
    p.fill_test1()
    assert (p.n, p.m) == (5, 20)
    assert p.durations[0][0] == 54
    p.reload()
    assert p.durations == original
    assert (p.n, p.m) == (3, 2)


def test_load_all_instances(data_file):
    instances = load_all_instances(data_file)
    assert len(instances) == 2
    assert instances[0] == InstanceData(2, 3, [[5, 7, 2], [1, 9, 4]])
    assert instances[1].durations == [[8, 3], [6, 1], [2, 4]]


def test_from_file_counts(data_file):
    first = Problem.from_file(data_file, 1)
    assert first.durations == [[5, 7, 2], [1, 9, 4]]
    last = Problem.from_file(data_file, -1)
    assert last.durations == [[8, 3], [6, 1], [2, 4]]


def test_from_instance_roundtrip(data_file):
    data = load_all_instances(data_file)[1]
    p = Problem.from_instance(data)
    assert (p.n, p.m) == (data.n, data.m)
    assert p.durations == data.durations


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_all_instances(tmp_path / "absent.dat")


def test_truncated_file_raises(tmp_path):
    path = tmp_path / "bad.dat"
    path.write_text("1\n2 2\n0 5 1\n")
    with pytest.raises(ValueError):
        load_all_instances(path)


def test_bad_machine_index_raises(tmp_path):
    path = tmp_path / "bad.dat"
    path.write_text("1\n1 2\n0 5 7 3\n")
    with pytest.raises(ValueError):
        load_all_instances(path)