"""Tests for test namespace resolution."""

from testscope_cli.resolver import TestResolver, declaration_pattern


def test_existing_test_namespace(sample_project_path, regex_search, clj):
    resolver = TestResolver(regex_search(sample_project_path))
    assert resolver.resolve_tests({"app.api"}, clj) == ["app.api-test"]


def test_metadata_before_name(sample_project_path, regex_search, clj):
    resolver = TestResolver(regex_search(sample_project_path))
    assert resolver.resolve_tests({"app.handler"}, clj) == ["app.handler-test"]


def test_missing_tests_dropped(sample_project_path, regex_search, clj):
    resolver = TestResolver(regex_search(sample_project_path))
    assert resolver.resolve_tests({"app.core", "app.report"}, clj) == []


def test_longer_test_namespace_does_not_count(sample_project_path, regex_search, clj):
    resolver = TestResolver(regex_search(sample_project_path))
    # only app.util-extra-test and app.core-ext-test-helpers exist
    assert resolver.resolve_tests({"app.util", "app.core-ext"}, clj) == []


def test_foo_does_not_resolve_to_foo_bar_test(make_project, regex_search, clj):
    root = make_project({"test/clj/foo_bar_test.clj": "(ns foo-bar-test)"})
    assert TestResolver(regex_search(root)).resolve_tests({"foo", "foo-bar"}, clj) == ["foo-bar-test"]


def test_searches_test_tree_only(sample_project_path, regex_search, clj):
    search = regex_search(sample_project_path)
    TestResolver(search).resolve_tests({"app.api"}, clj)
    assert search.plans[0].roots == ("test",)


def test_candidates_report_every_module(sample_project_path, regex_search, clj):
    resolver = TestResolver(regex_search(sample_project_path))
    candidates = resolver.candidates({"app.core", "app.api"}, clj)

    assert [(c.module, c.test_module, c.exists) for c in candidates] == [
        ("app.api", "app.api-test", True),
        ("app.core", "app.core-test", False),
    ]


def test_cljs_tests_resolved_from_cljs_tree(sample_project_path, regex_search, cljs):
    resolver = TestResolver(regex_search(sample_project_path))
    assert resolver.resolve_tests({"app.ui", "app.api"}, cljs) == ["app.ui-test"]


def test_declaration_pattern_escapes_name():
    assert r"app\.api-test" in declaration_pattern("app.api-test")
