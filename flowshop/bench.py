"""Benchmark drivers that run the solvers and append results to CSV files."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from flowshop.problem import Instance, MetaInstance, Problem, load_all_instances

HEADER = "PZ, NEH, JOHN, FNEH, BnB, Ann, Thres\n"
DEFAULT_RESULTS = "results.csv"
DEFAULT_INSTANCES = "../tail.dat"
SKIPPED = "---,---,"
EXHAUSTIVE_LIMIT = 12

INSTANCES = [
    Instance(2, 10, 10, 1),
    Instance(2, 15, 10, 1),
    Instance(2, 50, 10, 5),
    Instance(2, 100, 10, 5),
    Instance(2, 200, 10, 5),
    Instance(2, 300, 10, 5),
    Instance(2, 500, 10, 5),
]

META_INSTANCES = [
    MetaInstance(1000.0, 0.1, 100),
    MetaInstance(1000.0, 0.1, 1000),
    MetaInstance(1000.0, 0.1, 10000),
    MetaInstance(100.0, 0.1, 1000),
    MetaInstance(1000.0, 0.1, 1000),
    MetaInstance(10000.0, 0.1, 1000),
    MetaInstance(1000.0, 0.1, 1000),
    MetaInstance(1000.0, 1, 1000),
    MetaInstance(1000.0, 10, 1000),
]

_META_INSTANCE = Instance(3, 8, 10, 1)
_META_DIVISOR = 3


def _num(value: float) -> str:
    return f"{value:g}"


def _result(problem: Problem, elapsed: float) -> str:
    return f"{problem.cmax(problem.pi)},{_num(elapsed)}"


def format_sequence(seq) -> str:
    """Render a job sequence as space separated indices."""
    return " ".join(str(job) for job in seq)


def write_header(results_path=DEFAULT_RESULTS) -> None:
    """Append the column header line to the results file."""
    with open(results_path, "a", encoding="utf-8") as handle:
        handle.write(HEADER)


def run_johnson(instance: Instance, results_path=DEFAULT_RESULTS, rep=1) -> None:
    """Run Johnson's rule on ``rep`` random instances, all on one CSV line."""
    with open(results_path, "a", encoding="utf-8") as handle:
        for _ in range(rep):
            p = Problem.random(instance.tasks, instance.machines, instance.max_val, instance.min_val)
            handle.write(f"{p.n},{p.m},")
            if instance.machines == 2:
                p.reload()
                p.johnson()
                handle.write(_result(p, p.john_time) + ",")
            else:
                handle.write(SKIPPED)
        handle.write("\n")


def run_tail_all(instances_path=DEFAULT_INSTANCES, results_path=DEFAULT_RESULTS, reps=50) -> None:
    """Run both metaheuristics ``reps`` times on every instance in a file."""
    instances = load_all_instances(instances_path)
    with open(results_path, "a", encoding="utf-8") as handle:
        for number, data in enumerate(instances, start=1):
            p = Problem.from_instance(data)
            for _ in range(reps):
                print(f"Processing instance {number}/{len(instances)} (n={p.n}, m={p.m})")
                handle.write(f"{p.n},{p.m},")

                p.reload()
                p.simulated_annealing(1000.0, 0.1, 10000)
                handle.write(_result(p, p.sa_time) + ",")

                p.reload()
                p.threshold_accepting(1000.0, 0.1, 100, 100)
                handle.write(_result(p, p.ta_time) + "\n")


def run_tail(problem: Optional[Problem] = None, results_path=DEFAULT_RESULTS, rep=1) -> None:
    """Run every solver on one problem, skipping those that cannot apply."""
    p = problem if problem is not None else Problem.from_file(DEFAULT_INSTANCES, 1)
    with open(results_path, "a", encoding="utf-8") as handle:
        for _ in range(rep):
            if p.n > EXHAUSTIVE_LIMIT:
                handle.write(SKIPPED)
            else:
                p.reload()
                p.pz()
                handle.write(_result(p, p.pz_time) + ",")

            p.reload()
            p.neh()
            handle.write(_result(p, p.neh_time) + ",")

            if p.m == 2:
                p.reload()
                p.johnson()
                handle.write(_result(p, p.john_time) + ",")
            else:
                handle.write(SKIPPED)

            p.reload()
            p.fneh()
            handle.write(_result(p, p.fneh_time) + ",")

            if p.n > EXHAUSTIVE_LIMIT:
                handle.write(SKIPPED)
            else:
                p.reload()
                p.bnb()
                handle.write(_result(p, p.bnb_time) + ",")

            p.reload()
            p.simulated_annealing(1000.0, 0.1, 10000)
            handle.write(_result(p, p.sa_time) + ",")

            p.reload()
            p.threshold_accepting(1000.0, 0.1, 100, 1000)
            handle.write(_result(p, p.ta_time) + "\n")


def run_machines_csv(instance: Instance, results_path=DEFAULT_RESULTS, rep=1) -> None:
    """Record the dimensions of ``rep`` random instances on one CSV line."""
    with open(results_path, "a", encoding="utf-8") as handle:
        for _ in range(rep):
            p = Problem.random(instance.tasks, instance.machines, instance.max_val, instance.min_val)
            handle.write(f"{p.n},{p.m},")
        handle.write("\n")


def run_meta(meta: MetaInstance, results_path=DEFAULT_RESULTS, rep=3) -> None:
    """Average both metaheuristics over random 8-job, 3-machine instances."""
    anneal_cmax = 0
    anneal_time = 0.0
    thres_cmax = 0
    thres_time = 0.0
    with open(results_path, "a", encoding="utf-8") as handle:
        for _ in range(rep):
            p = Problem.random(
                _META_INSTANCE.tasks, _META_INSTANCE.machines,
                _META_INSTANCE.max_val, _META_INSTANCE.min_val,
            )
            p.reload()
            p.simulated_annealing(meta.t0, meta.t_end, meta.max_iter)
            anneal_cmax += p.cmax(p.pi)
            anneal_time += p.sa_time

            p.reload()
            p.threshold_accepting(meta.t0, meta.t_end, 100, meta.max_iter)
            thres_cmax += p.cmax(p.pi)
            thres_time += p.ta_time
        handle.write(f"{anneal_cmax // _META_DIVISOR},{_num(anneal_time / _META_DIVISOR)},")
        handle.write(f"{thres_cmax // _META_DIVISOR},{_num(thres_time / _META_DIVISOR)}\n")


def run_demo(out: TextIO = sys.stdout) -> None:
    """Print the results of the exact and constructive solvers on small instances."""
    separator = "==============="
    p = Problem.random(3, 2, 10, 1)

    print("PZ", file=out)
    p.pz()
    print(p.cmax(p.pi), file=out)
    print(format_sequence(p.pi), file=out)
    print(separator, file=out)

    print("NEH", file=out)
    p.fill_test1()
    p.neh()
    print(p.cmax(p.pi), file=out)
    print(format_sequence(p.pi), file=out)
    print(separator, file=out)

    print("JOHNSON", file=out)
    p.fill_test1()
    try:
        p.johnson()
    except ValueError:
        print("Johnson cannot work for m != 2", file=out)
    else:
        print(p.cmax(p.pi), file=out)
        print(format_sequence(p.pi), file=out)
    print(separator, file=out)

    print("FNEH", file=out)
    p.fill_test1()
    p.fneh()
    print(p.cmax(p.pi), file=out)
    print(format_sequence(p.pi), file=out)
    print(separator, file=out)


def run_machines(machines, tasks, max_val, min_val, out: TextIO = sys.stdout) -> None:
    """Describe a random instance and print the simulated annealing result."""
    rule = "=" * 40
    p = Problem.random(tasks, machines, max_val, min_val)
    print(rule, file=out)
    print(f"Machines = {machines}", file=out)
    print(f"Tasks = {tasks}", file=out)
    print(f"Max Val = {max_val}", file=out)
    print(f"Min Val = {min_val}", file=out)
    print("kryt || time", file=out)
    if machines == 2:
        print("PZ || NEH || JOHN || FNEH", file=out)
    else:
        print("PZ || NEH || FNEH", file=out)
    p.reload()
    p.simulated_annealing(1000.0, 0.1, 10000)
    print(f"{p.cmax(p.pi)};SA: {_num(p.sa_time)};", file=out)
    print(rule, file=out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Write the header, then benchmark every instance of the instance file."""
    parser = argparse.ArgumentParser(description="Benchmark flow-shop solvers.")
    parser.add_argument("--instances", default=DEFAULT_INSTANCES, type=Path)
    parser.add_argument("--results", default=DEFAULT_RESULTS, type=Path)
    parser.add_argument("--reps", default=50, type=int)
    args = parser.parse_args(argv)

    try:
        write_header(args.results)
    except OSError as exc:
        print(f"Could not open file: {args.results} ({exc})", file=sys.stderr)
        return 1
    try:
        run_tail_all(args.instances, args.results, args.reps)
    except OSError as exc:
        print(f"Could not open file: {args.instances} ({exc})", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())