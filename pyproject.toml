[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flowshop"
version = "0.1.0"
description = "Permutation flow-shop scheduling: exact, constructive and metaheuristic solvers with a CSV benchmark runner"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "scheduling",
    "flow shop",
    "makespan",
    "NEH",
    "Johnson",
    "branch and bound",
    "simulated annealing",
    "threshold accepting",
    "Taillard",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
flowshop-bench = "flowshop.bench:main"

[tool.hatch.build.targets.wheel]
packages = ["flowshop"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
