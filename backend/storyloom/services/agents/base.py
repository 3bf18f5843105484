"""
Structured-output agents and the racing runner.

An agent describes one logical LLM task: its candidate models, prompt and
output shape. The runner sends the task to every candidate model at once and
returns the first response that parses. Attempts that settle after the winner
are not cancelled; a background drain logs them.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from storyloom.errors import AgentExecutionError, AttemptFailure, StructuredOutputError
from storyloom.logging import get_logger
from storyloom.models import (
    AgentCategory, AgentConfig, AgentLogEntry, AttemptStatus, ChatMessage,
    ChatPayload, JsonSchemaSpec, Prompt, ResponseFormat,
)
from storyloom.services.agent_logs import AgentLogStore
from storyloom.services.llm import CompletionClient

logger = get_logger('services.agents')

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def strip_code_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


class LLMAgent(ABC, Generic[InputT, OutputT]):
    """Base class for agents answered by a structured-output completion."""

    name: str
    category: AgentCategory
    output_model: type[OutputT]

    def __init__(self, config: AgentConfig):
        self.config = config

    @abstractmethod
    def generate_prompt(self, input: InputT) -> Prompt:
        ...

    def response_format(self) -> ResponseFormat:
        return ResponseFormat(
            json_schema=JsonSchemaSpec(
                name=self.output_model.__name__,
                strict=True,
                schema_=self.output_model.model_json_schema(),
            )
        )

    def build_payload(self, model: str, prompt: Prompt, response_format: ResponseFormat) -> ChatPayload:
        return ChatPayload(
            model=model,
            messages=[
                ChatMessage(role="system", content=prompt.system),
                ChatMessage(role="user", content=prompt.user),
            ],
            response_format=response_format,
            temperature=self.config.temperature,
            top_p=self.config.top_p,
            max_tokens=self.config.max_tokens,
            stream=self.config.stream,
        )

    def parse(self, raw: str) -> OutputT:
        """
        Parse a raw completion into the output model.

        :raises StructuredOutputError: If the text is not JSON or does not fit the output model
        """
        text = strip_code_fences(raw)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StructuredOutputError(f"Invalid JSON: {e}")
        try:
            return self.output_model.model_validate(data)
        except ValidationError as e:
            raise StructuredOutputError(
                f"Response does not match {self.output_model.__name__}: {e.error_count()} validation errors"
            )


@dataclass
class _Settled:
    """One attempt that has finished, successfully or not."""
    index: int
    model: str
    respond_time: datetime
    raw: str = ""
    error: str | None = None


class AgentRunner:
    """Races an agent's candidate models and records every attempt."""

    def __init__(self, completion: CompletionClient, logs: AgentLogStore):
        self.completion = completion
        self.logs = logs
        self._drains: set[asyncio.Task] = set()

    async def _attempt(self, queue: asyncio.Queue, index: int, payload: ChatPayload) -> None:
        logger.info(f"Request started: model={payload.model}")
        try:
            raw = await self.completion.chat(payload)
        except Exception as e:
            logger.warning(f"Request failed: model={payload.model}: {e}")
            await queue.put(_Settled(index=index, model=payload.model, respond_time=_now(), error=str(e) or type(e).__name__))
            return
        await queue.put(_Settled(index=index, model=payload.model, respond_time=_now(), raw=raw))

    def _entry(
        self,
        agent: LLMAgent,
        settled: _Settled,
        status: AttemptStatus,
        logged_input: Any,
        output: Any,
        request_time: datetime,
    ) -> AgentLogEntry:
        elapsed = int((settled.respond_time - request_time).total_seconds() * 1000)
        return AgentLogEntry(
            agent=agent.name,
            category=agent.category,
            model=settled.model,
            status=status,
            input=logged_input,
            output=output,
            request_time=request_time,
            respond_time=settled.respond_time,
            elapsed=max(elapsed, 0),
        )

    async def _insert_logs(self, entries: list[AgentLogEntry]) -> None:
        if not entries:
            return
        try:
            await self.logs.insert_many(entries)
        except Exception:
            logger.exception(f"Failed to insert {len(entries)} agent log rows")

    async def execute(self, agent: LLMAgent[InputT, OutputT], input: InputT) -> OutputT:
        """
        Run one agent task against all of its candidate models concurrently.

        :param agent: The agent describing the task
        :param input: Agent input model
        :return: The first response that parses into the agent's output model
        :raises AgentExecutionError: If every candidate fails to answer or to parse
        """
        prompt = agent.generate_prompt(input)
        response_format = agent.response_format()
        logged_input = input.model_dump(mode="json")
        request_time = _now()

        queue: asyncio.Queue[_Settled] = asyncio.Queue()
        tasks = [
            asyncio.create_task(
                self._attempt(queue, index, agent.build_payload(model, prompt, response_format))
            )
            for index, model in enumerate(agent.config.models)
        ]

        failures: list[AttemptFailure] = []
        failed_entries: list[AgentLogEntry] = []
        remaining = len(tasks)

        while remaining:
            settled = await queue.get()
            remaining -= 1

            if settled.error is not None:
                failures.append(AttemptFailure(model=settled.model, error=settled.error))
                failed_entries.append(self._entry(
                    agent, settled, AttemptStatus.TRANSPORT_FAILURE, logged_input,
                    {"error": settled.error, "raw": ""}, request_time,
                ))
                continue

            try:
                result = agent.parse(settled.raw)
            except StructuredOutputError as e:
                logger.warning(f"{agent.name}: unparsable response from {settled.model}: {e}")
                failures.append(AttemptFailure(model=settled.model, error=str(e), raw=settled.raw))
                failed_entries.append(self._entry(
                    agent, settled, AttemptStatus.PARSE_FAILURE, logged_input,
                    {"error": str(e), "raw": settled.raw}, request_time,
                ))
                continue

            logger.info(f"{agent.name}: {settled.model} won after {len(failures)} failed attempts")
            success_entry = self._entry(
                agent, settled, AttemptStatus.SUCCESS, logged_input,
                result.model_dump(mode="json"), request_time,
            )
            await self._insert_logs([*failed_entries, success_entry])
            if remaining:
                self._start_drain(agent, queue, tasks, remaining, logged_input, request_time)
            return result

        await self._insert_logs(failed_entries)
        logger.error(f"{agent.name}: all {len(failures)} candidate models failed")
        raise AgentExecutionError(agent.name, failures)

    def _start_drain(
        self,
        agent: LLMAgent,
        queue: asyncio.Queue,
        tasks: list[asyncio.Task],
        remaining: int,
        logged_input: Any,
        request_time: datetime,
    ) -> None:
        drain = asyncio.create_task(
            self._drain_stragglers(agent, queue, tasks, remaining, logged_input, request_time)
        )
        self._drains.add(drain)
        drain.add_done_callback(self._drains.discard)

    async def _drain_stragglers(
        self,
        agent: LLMAgent,
        queue: asyncio.Queue,
        tasks: list[asyncio.Task],
        remaining: int,
        logged_input: Any,
        request_time: datetime,
    ) -> None:
        for _ in range(remaining):
            settled = await queue.get()
            if settled.error is not None:
                entry = self._entry(
                    agent, settled, AttemptStatus.TRANSPORT_FAILURE, logged_input,
                    {"error": settled.error, "raw": ""}, request_time,
                )
            else:
                try:
                    late = agent.parse(settled.raw)
                except StructuredOutputError as e:
                    entry = self._entry(
                        agent, settled, AttemptStatus.PARSE_FAILURE, logged_input,
                        {"error": str(e), "raw": settled.raw}, request_time,
                    )
                else:
                    entry = self._entry(
                        agent, settled, AttemptStatus.SUPERSEDED, logged_input,
                        late.model_dump(mode="json"), request_time,
                    )
            logger.debug(f"{agent.name}: straggler {settled.model} settled as {entry.status.value}")
            await self._insert_logs([entry])
        await asyncio.gather(*tasks)

    async def drain(self) -> None:
        """Wait until every straggling attempt of earlier races has been logged."""
        while self._drains:
            await asyncio.gather(*list(self._drains))
