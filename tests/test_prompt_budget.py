"""Tests for token estimation and budgeted snippet selection."""

from __future__ import annotations

import pytest

from ghostline.context import tokens as tokens_module
from ghostline.context.budget import fill_prompt_with_snippets
from ghostline.context.ranking import RankedSnippet
from ghostline.context.tokens import estimate_token_count, resolve_estimator


def _snippet(content: str, filepath: str = "f.py", score: float = 0.5) -> RankedSnippet:
    return RankedSnippet(content=content, filepath=filepath, score=score)


@pytest.mark.parametrize(
    ("text", "expected"),
    [("", 0), ("a", 1), ("abcd", 1), ("abcde", 2), ("x" * 17, 5)],
)
def test_estimate_token_count_rounds_up(text: str, expected: int) -> None:
    assert estimate_token_count(text) == expected


def test_budget_example_admits_exactly_fitting_snippet() -> None:
    snippets = [_snippet("aaaa"), _snippet("b")]

    kept = fill_prompt_with_snippets(snippets, 1, estimate_token_count)

    # "aaaa" costs 1 token and exactly fits, so the cheaper "b" no longer does.
    assert [item.content for item in kept] == ["aaaa"]


def test_later_cheaper_snippet_is_admitted_after_a_skip() -> None:
    snippets = [_snippet("a" * 40), _snippet("b" * 4), _snippet("c" * 8)]

    kept = fill_prompt_with_snippets(snippets, 3)

    assert [item.content for item in kept] == ["b" * 4, "c" * 8]


def test_selection_never_exceeds_budget_and_preserves_order() -> None:
    snippets = [_snippet("x" * size, filepath=f"{idx}.py") for idx, size in enumerate([9, 3, 30, 1, 12, 5, 7])]

    for budget in range(0, 20):
        kept = fill_prompt_with_snippets(snippets, budget)
        assert sum(estimate_token_count(item.content) for item in kept) <= budget
        positions = [snippets.index(item) for item in kept]
        assert positions == sorted(positions)


def test_custom_estimator_is_used() -> None:
    calls: list[str] = []

    def _estimate(text: str) -> int:
        calls.append(text)
        return 10

    kept = fill_prompt_with_snippets([_snippet("one"), _snippet("two"), _snippet("three")], 25, _estimate)

    assert [item.content for item in kept] == ["one", "two"]
    assert calls == ["one", "two", "three"]


def test_zero_cost_snippets_fit_an_empty_budget() -> None:
    assert fill_prompt_with_snippets([_snippet("")], 0) == [_snippet("")]


def test_resolve_estimator_defaults_to_heuristic() -> None:
    assert resolve_estimator(None) is estimate_token_count
    assert resolve_estimator("") is estimate_token_count


def test_resolve_estimator_builds_tiktoken_counter(monkeypatch: pytest.MonkeyPatch) -> None:
    class _Encoding:
        def encode(self, text: str, disallowed_special=()):
            return text.split()

    requested: list[str] = []

    def _encoding_for_model(model_name: str) -> _Encoding:
        requested.append(model_name)
        return _Encoding()

    monkeypatch.setattr(tokens_module.tiktoken, "encoding_for_model", _encoding_for_model)

    estimator = resolve_estimator("gpt-4o-mini")

    assert requested == ["gpt-4o-mini"]
    assert estimator("three word text") == 3
    assert estimator("") == 0


def test_tiktoken_counter_falls_back_to_default_encoding(monkeypatch: pytest.MonkeyPatch) -> None:
    class _Encoding:
        def encode(self, text: str, disallowed_special=()):
            return list(text)

    def _unknown_model(model_name: str):
        raise KeyError(model_name)

    fallback_requests: list[str] = []

    def _get_encoding(name: str) -> _Encoding:
        fallback_requests.append(name)
        return _Encoding()

    monkeypatch.setattr(tokens_module.tiktoken, "encoding_for_model", _unknown_model)
    monkeypatch.setattr(tokens_module.tiktoken, "get_encoding", _get_encoding)

    counter = tokens_module.TiktokenCounter("custom-model")

    assert fallback_requests == ["cl100k_base"]
    assert counter.count("abc") == 3


def test_tiktoken_counter_requires_model_name() -> None:
    with pytest.raises(ValueError):
        tokens_module.TiktokenCounter("")
