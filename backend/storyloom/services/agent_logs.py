"""Agent attempt telemetry storage."""

import json

import aiosqlite

from storyloom.models import AgentLogEntry


def _dump(value) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def _row_to_entry(row: dict) -> AgentLogEntry:
    return AgentLogEntry(
        agent=row["agent"],
        category=row["category"],
        model=row["model"],
        status=row["status"],
        input=json.loads(row["input"]),
        output=json.loads(row["output"]),
        request_time=row["request_time"],
        respond_time=row["respond_time"],
        elapsed=row["elapsed"],
    )


class AgentLogStore:
    """Write-mostly table of racing attempts."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    async def _get_db(self) -> aiosqlite.Connection:
        db = await aiosqlite.connect(self.db_path)
        db.row_factory = aiosqlite.Row
        return db

    async def insert_many(self, entries: list[AgentLogEntry]) -> None:
        if not entries:
            return
        db = await self._get_db()
        try:
            await db.executemany(
                """INSERT INTO agent_logs
                   (agent, category, model, status, input, output, request_time, respond_time, elapsed)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                [
                    (
                        e.agent,
                        e.category.value,
                        e.model,
                        e.status.value,
                        _dump(e.input),
                        _dump(e.output),
                        e.request_time.isoformat(),
                        e.respond_time.isoformat(),
                        e.elapsed,
                    )
                    for e in entries
                ],
            )
            await db.commit()
        finally:
            await db.close()

    async def list_entries(self, agent: str | None = None) -> list[AgentLogEntry]:
        query = "SELECT * FROM agent_logs"
        params: list[str] = []
        if agent:
            query += " WHERE agent = ?"
            params.append(agent)
        query += " ORDER BY id"
        db = await self._get_db()
        try:
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
            return [_row_to_entry(dict(r)) for r in rows]
        finally:
            await db.close()
