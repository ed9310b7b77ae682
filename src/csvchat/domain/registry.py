"""In-memory table name -> CREATE statement registry feeding the prompt."""
from __future__ import annotations


class SchemaRegistry:
    """Accumulates one DDL string per ingested table for the session lifetime.

    Entries are never removed. Re-registering a name replaces its DDL but keeps
    its original position, so ``render()`` is stable between ingestions.
    """

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}

    def register(self, table_name: str, create_statement: str) -> None:
        self._entries[table_name] = create_statement

    def get(self, table_name: str) -> str | None:
        return self._entries.get(table_name)

    def tables(self) -> list[str]:
        return list(self._entries)

    def items(self) -> list[tuple[str, str]]:
        return list(self._entries.items())

    def render(self) -> str:
        """All DDL strings joined by a blank line, in insertion order."""
        return "\n\n".join(self._entries.values())

    def __contains__(self, table_name: object) -> bool:
        return table_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
