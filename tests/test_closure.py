"""Tests for the transitive closure engine."""

import pytest

from testscope_cli.closure import ClosureEngine
from testscope_cli.dependents import DependencyFinder


def _engine(search):
    return ClosureEngine(DependencyFinder(search))


@pytest.fixture
def chain_project(make_project):
    """C depends on B, B depends on A."""
    return make_project(
        {
            "src/clj/chain/a.clj": "(ns chain.a)",
            "src/clj/chain/b.clj": "(ns chain.b\n  (:require [chain.a :as a]))",
            "src/clj/chain/c.clj": "(ns chain.c\n  (:require [chain.b :as b]))",
        }
    )


def test_three_level_chain_takes_three_rounds(chain_project, regex_search, clj):
    search = regex_search(chain_project)
    result = _engine(search).run({"chain.a"}, clj)

    assert result.modules == {"chain.a", "chain.b", "chain.c"}
    assert result.rounds == 3
    assert len(search.plans) == 3


def test_each_round_searches_only_the_frontier(chain_project, regex_search, clj):
    search = regex_search(chain_project)
    _engine(search).run({"chain.a"}, clj)

    assert r"chain\.a" in search.plans[0].pattern
    assert r"chain\.b" in search.plans[1].pattern
    assert r"chain\.a" not in search.plans[1].pattern
    assert r"chain\.c" in search.plans[2].pattern


def test_empty_seed(chain_project, regex_search, clj):
    result = _engine(regex_search(chain_project)).run(set(), clj)
    assert result.modules == frozenset()
    assert result.rounds == 0


@pytest.mark.parametrize(
    "seed",
    [
        {"app.core"},
        {"app.core-ext"},
        {"app.handler"},
        {"app.core", "app.util"},
        {"does.not-exist"},
    ],
)
def test_closure_contains_seed_and_is_a_fixed_point(seed, sample_project_path, regex_search, clj):
    engine = _engine(regex_search(sample_project_path))
    closure = engine.transitive_dependents(seed, clj)

    assert closure >= seed
    assert engine.transitive_dependents(closure, clj) == closure


def test_sample_project_closure(sample_project_path, regex_search, clj):
    result = _engine(regex_search(sample_project_path)).run({"app.core"}, clj)

    assert result.modules == {
        "app.core",
        "app.api",
        "app.report",
        "app.handler",
        "app.api-test",
        "app.handler-test",
    }
    assert result.rounds == 4


def test_cycles_terminate(make_project, regex_search, clj):
    root = make_project(
        {
            "src/clj/loop/a.clj": "(ns loop.a)\n(defn f [] (loop.b/g))",
            "src/clj/loop/b.clj": "(ns loop.b\n  (:require [loop.a :as a]))",
        }
    )
    result = _engine(regex_search(root)).run({"loop.a"}, clj)
    assert result.modules == {"loop.a", "loop.b"}
    assert result.rounds == 2
