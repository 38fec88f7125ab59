# flowshop

Solvers for the permutation flow-shop problem: `n` jobs pass through `m`
machines in the same machine order, and the goal is the job order with the
smallest makespan (C<sub>max</sub>).

## Installation

```
pip install .
```

There are no dependencies beyond the standard library. To run the tests:

```
pip install ".[test]"
pytest
```

## The `Problem` class

`flowshop.problem.Problem` holds a duration matrix, `durations[job][machine]`,
and the solvers. Each solver stores its order in `problem.pi`, returns it, and
records its wall time in a matching attribute.

| Method | What it does | Time attribute |
| --- | --- | --- |
| `pz()` | Exhaustive search over every permutation | `pz_time` |
| `neh()` | NEH insertion heuristic (jobs by decreasing total duration) | `neh_time` |
| `fneh()` | NEH using forward/backward completion rows for each insertion | `fneh_time` |
| `johnson()` | Johnson's rule; raises `ValueError` unless `m == 2` | `john_time` |
| `bnb()` | Best-first branch and bound, upper bound seeded by NEH | `bnb_time` |
| `simulated_annealing(t0, t_end, max_iter)` | Annealing with geometric cooling, started from NEH | `sa_time` |
| `threshold_accepting(t0, t_end, steps_per_threshold, max_outer_iter)` | Linearly decreasing threshold, started from NEH | `ta_time` |

Helpers:

- `cmax(perm)` – makespan of any (possibly partial) job order.
- `insertion_cmax(prefix_end_times, suffix_times, job, length)` – makespan of
  inserting `job` between a prefix and a suffix, used by `fneh()`.
- `lower_bound(scheduled, remaining)` – makespan of `scheduled` plus, per
  machine, the shortest remaining operation; used by `bnb()`.
- `change_perm(perm)` – swaps two distinct entries of `perm` in place. The two
  positions are drawn from `range(m)`, so it needs `m >= 2` and
  `len(perm) >= m`, and raises `ValueError` otherwise. The two metaheuristics
  rely on it and share those limits.
- `reload()` – restores the durations the problem was created with and clears `pi`.
- `fill_test1()` – replaces the durations with a fixed 5-job, 20-machine instance.
- `rng` – the `random.Random` used by the metaheuristics; reseed it for
  repeatable runs.

Constructors:

- `Problem(durations)` – from rows of equal length.
- `Problem.random(n, m, max_val, min_val, rng=None)` – durations drawn
  uniformly from `[min_val, max_val]`.
- `Problem.from_instance(data)` – from an `InstanceData`.
- `Problem.from_file(path, count=1)` – reads `count` instances (all when
  `count <= 0`) and keeps the last one.

```python
from flowshop.problem import Problem

p = Problem([[3, 2], [1, 4], [2, 2]])
p.johnson()
print(p.pi, p.cmax(p.pi))

p.reload()
p.neh()
print(p.pi, p.cmax(p.pi), p.neh_time)
```

### Instance files

`load_all_instances(path)` returns a list of `InstanceData(n, m, durations)`.
The file holds whitespace-separated integers: the number of instances, then
for each instance `n m` followed, for every job, by `m` pairs of
`machine time`. A truncated file or an out-of-range machine index raises
`ValueError`.

Also in `flowshop.problem`: `Instance` (parameters of a random instance),
`MetaInstance` (metaheuristic parameters) and `Node` (a branch-and-bound node
ordered by its lower bound).

## Benchmarks

```
flowshop-bench [--instances PATH] [--results PATH] [--reps N]
```

appends the header line `PZ, NEH, JOHN, FNEH, BnB, Ann, Thres` to the results
file (default `results.csv`), then, for every instance in the instance file
(default `../tail.dat`), runs simulated annealing (`1000.0, 0.1, 10000`) and
threshold accepting (`1000.0, 0.1, 100, 100`) `--reps` times (default 50).
Each repetition appends a row `n,m,sa_cmax,sa_time,ta_cmax,ta_time` and prints
a progress line. If a file cannot be opened it reports that on standard error
and exits with status 1.

`flowshop.bench` also offers, for use from Python:

- `write_header(results_path)`
- `run_tail_all(instances_path, results_path, reps)` – what the command runs.
- `run_tail(problem, results_path, rep)` – every solver on one problem;
  exhaustive search and branch and bound are written as `---,---` when
  `n > 12`, Johnson's rule when `m != 2`.
- `run_johnson(instance, results_path, rep)` – Johnson's rule on random instances.
- `run_machines_csv(instance, results_path, rep)` – records only the sizes of
  random instances.
- `run_meta(meta, results_path, rep)` – both metaheuristics on random 8-job,
  3-machine instances; the sums are divided by 3.
- `run_demo(out)` and `run_machines(machines, tasks, max_val, min_val, out)` –
  print results to a text stream.
- `format_sequence(seq)` – job indices separated by spaces.
- `INSTANCES` and `META_INSTANCES` – the preset parameter lists.

## What it does not do

No instance files come with the package; supply your own file in the format
above. Results are only appended to CSV files — there is no summarising,
plotting or comparison of the results.