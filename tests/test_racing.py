"""Tests for the racing agent runner."""

import asyncio
from collections import Counter

import pytest
from pydantic import BaseModel

from storyloom.errors import AgentExecutionError
from storyloom.models import AgentCategory, AgentConfig, AttemptStatus, Prompt
from storyloom.services.agents.base import LLMAgent, strip_code_fences

from conftest import FakeCompletionClient


class Question(BaseModel):
    text: str


class Verdict(BaseModel):
    answer: str


class VerdictAgent(LLMAgent[Question, Verdict]):
    name = "VerdictAgent"
    category = AgentCategory.EVALUATION
    output_model = Verdict

    def generate_prompt(self, input: Question) -> Prompt:
        return Prompt(system="Answer in JSON.", user=input.text)


def run_race(make_context, scripts):
    """Race the scripted models; returns (result or exception, log entries, completion client)."""
    completion = FakeCompletionClient(scripts)
    ctx = make_context(completion=completion)
    agent = VerdictAgent(AgentConfig(models=list(scripts), temperature=0))

    async def go():
        try:
            return await ctx.runner.execute(agent, Question(text="Who holds the lantern?"))
        except AgentExecutionError as e:
            return e
        finally:
            await ctx.runner.drain()

    outcome = asyncio.run(go())
    entries = asyncio.run(ctx.agent_logs.list_entries("VerdictAgent"))
    return outcome, entries, completion


def statuses(entries):
    return Counter(e.status for e in entries)


def test_fast_success_slow_failure(make_context):
    outcome, entries, _ = run_race(make_context, {
        "model-a": (0, '{"answer": "Lin"}'),
        "model-b": (0.05, RuntimeError("502 bad gateway")),
    })

    assert outcome == Verdict(answer="Lin")
    assert statuses(entries) == {AttemptStatus.SUCCESS: 1, AttemptStatus.TRANSPORT_FAILURE: 1}


def test_fast_failure_slow_success(make_context):
    outcome, entries, _ = run_race(make_context, {
        "model-a": (0, RuntimeError("502 bad gateway")),
        "model-b": (0.05, '{"answer": "Lin"}'),
    })

    assert outcome == Verdict(answer="Lin")
    assert statuses(entries) == {AttemptStatus.SUCCESS: 1, AttemptStatus.TRANSPORT_FAILURE: 1}


def test_parse_failure_falls_through_to_next_candidate(make_context):
    outcome, entries, _ = run_race(make_context, {
        "model-a": (0, "Sure! Here is the answer: Lin"),
        "model-b": (0.05, '{"answer": "Wen"}'),
    })

    assert outcome == Verdict(answer="Wen")
    assert statuses(entries) == {AttemptStatus.SUCCESS: 1, AttemptStatus.PARSE_FAILURE: 1}
    failed = next(e for e in entries if e.status == AttemptStatus.PARSE_FAILURE)
    assert failed.model == "model-a"
    assert failed.output["raw"] == "Sure! Here is the answer: Lin"


def test_wrong_shape_counts_as_parse_failure(make_context):
    outcome, entries, _ = run_race(make_context, {
        "model-a": (0, '{"verdict": "Lin"}'),
        "model-b": (0.05, '{"answer": "Lin"}'),
    })

    assert outcome == Verdict(answer="Lin")
    assert statuses(entries)[AttemptStatus.PARSE_FAILURE] == 1


def test_all_unparsable_raises_with_every_failure(make_context):
    outcome, entries, _ = run_race(make_context, {
        "model-a": (0, "not json"),
        "model-b": (0.01, "{broken"),
    })

    assert isinstance(outcome, AgentExecutionError)
    assert outcome.agent == "VerdictAgent"
    assert [f.model for f in outcome.failures] == ["model-a", "model-b"]
    assert "[model-a]" in str(outcome)
    assert "[model-b]" in str(outcome)
    assert statuses(entries) == {AttemptStatus.PARSE_FAILURE: 2}


def test_all_transport_failures_enumerated(make_context):
    outcome, entries, _ = run_race(make_context, {
        "model-a": (0, RuntimeError("rate limit")),
        "model-b": (0.01, RuntimeError("connection reset")),
    })

    assert isinstance(outcome, AgentExecutionError)
    assert "rate limit" in str(outcome)
    assert "connection reset" in str(outcome)
    assert statuses(entries) == {AttemptStatus.TRANSPORT_FAILURE: 2}


def test_late_success_is_logged_as_superseded(make_context):
    outcome, entries, _ = run_race(make_context, {
        "model-a": (0, '{"answer": "first"}'),
        "model-b": (0.05, '{"answer": "second"}'),
    })

    assert outcome == Verdict(answer="first")
    assert statuses(entries) == {AttemptStatus.SUCCESS: 1, AttemptStatus.SUPERSEDED: 1}
    winner = next(e for e in entries if e.status == AttemptStatus.SUCCESS)
    assert winner.model == "model-a"
    assert winner.output == {"answer": "first"}


def test_code_fenced_response_is_accepted(make_context):
    outcome, _, _ = run_race(make_context, {
        "model-a": '```json\n{"answer": "Lin"}\n```',
    })

    assert outcome == Verdict(answer="Lin")


def test_every_candidate_receives_the_same_request(make_context):
    _, entries, completion = run_race(make_context, {
        "model-a": (0, '{"answer": "Lin"}'),
        "model-b": (0, '{"answer": "Lin"}'),
    })

    assert sorted(c.model for c in completion.calls) == ["model-a", "model-b"]
    for payload in completion.calls:
        assert [m.role for m in payload.messages] == ["system", "user"]
        assert payload.messages[1].content == "Who holds the lantern?"
        assert payload.response_format.json_schema.name == "Verdict"
        assert payload.temperature == 0
    assert all(e.input == {"text": "Who holds the lantern?"} for e in entries)


def test_log_insert_failure_does_not_change_outcome(make_context, monkeypatch):
    completion = FakeCompletionClient({"model-a": '{"answer": "Lin"}'})
    ctx = make_context(completion=completion)

    async def broken_insert(entries):
        raise RuntimeError("database is locked")

    monkeypatch.setattr(ctx.agent_logs, "insert_many", broken_insert)
    agent = VerdictAgent(AgentConfig(models=["model-a"]))

    result = asyncio.run(ctx.runner.execute(agent, Question(text="?")))

    assert result == Verdict(answer="Lin")


@pytest.mark.parametrize("raw, expected", [
    ('```json\n{"a": 1}\n```', '{"a": 1}'),
    ('```\n{"a": 1}```', '{"a": 1}'),
    ('  {"a": 1}  ', '{"a": 1}'),
])
def test_strip_code_fences(raw, expected):
    assert strip_code_fences(raw) == expected
