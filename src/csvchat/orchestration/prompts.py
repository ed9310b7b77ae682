"""Prompt compiler: registry DDL + question -> system/user instructions."""
from __future__ import annotations

from dataclasses import dataclass

SYSTEM_PROMPT = """You are a problem solving model working on task_description XML block:
<task_description>You are given a database schema and a natural language question. Generate the SQL query that answers the question.

Input:
- Schema: One or two table definitions in SQL DDL format
- Question: Natural language question about the data

Output:
- A single SQL query that answers the question
- No explanations, comments, or additional text

Rules:
- Use only tables and columns from the provided schema
- Use uppercase SQL keywords (SELECT, FROM, WHERE, etc.)
- Use SQLite-compatible syntax</task_description>
You will be given a single task in the question XML block
Solve only the task in question block.
Generate only the solution, do not generate anything else"""

USER_PROMPT_TEMPLATE = """
Now for the real task, solve the task in question block.
Generate only the solution, do not generate anything else
<question>
Schema:
{schema}

Question: {question}
</question>
"""


@dataclass(frozen=True)
class PromptPayload:
    system: str
    user: str

    def to_messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


def compile_prompt(schema_block: str, question: str) -> PromptPayload:
    """Embed the schema block and the literal question; no other inputs."""
    return PromptPayload(
        system=SYSTEM_PROMPT,
        user=USER_PROMPT_TEMPLATE.format(schema=schema_block, question=question),
    )
