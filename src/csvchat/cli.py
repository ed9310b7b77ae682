import json
import sys
import typer
from pathlib import Path
from csvchat.config import settings
from csvchat.logging import logger, get_session_id, setup_logging

app = typer.Typer(no_args_is_help=True)


@app.callback()
def main(
    log_level: str = typer.Option(settings.LOG_LEVEL, help="Logging level"),
):
    """
    csvchat: ask questions about CSV files in plain language.
    """
    setup_logging(log_level)


@app.command(name="doctor")
def doctor():
    """
    Check configuration, the embedded store and the model server.
    """
    from csvchat.domain.exceptions import LLMTransportError, StoreInitError
    from csvchat.infra.db.store import RelationalStore
    from csvchat.orchestration.llm_protocol import base_url_for, make_llm_client

    logger.info("Running doctor check...")

    failures: list[str] = []
    passed = 0

    print("\n🩺 csvchat doctor\n")

    # ── Check 1: Environment ────────────────────────────────────────────────
    print("[Environment]")
    print(f"  Python:      {sys.version.split()[0]}")
    print(f"  Session ID:  {get_session_id()}")
    passed += 1

    # ── Check 2: Configuration ──────────────────────────────────────────────
    config = settings.chat_config()
    print("\n[Configuration]")
    print(f"  Model server:     {base_url_for(config.port)}")
    print(f"  LLM_MODEL:        {config.model}")
    print(f"  LLM_API_KEY:      {'✅ Set' if config.api_key else '⚠️  Empty'}")
    print(f"  SHOW_SQL:         {config.show_sql}")
    print(f"  SHOW_THINKING:    {config.show_thinking}")
    print(f"  REINGEST_POLICY:  {settings.REINGEST_POLICY}")

    # ── Check 3: Store ──────────────────────────────────────────────────────
    print("\n[Store]")
    store = RelationalStore(settings.DATABASE_URL)
    try:
        store.initialize()
        print(f"  {settings.DATABASE_URL:<28}✅ Ready")
        passed += 1
    except StoreInitError as e:
        print(f"  {settings.DATABASE_URL:<28}❌ {e.message}")
        failures.append("Embedded store failed to initialize; check DATABASE_URL")
    finally:
        store.dispose()

    # ── Check 4: Model server ───────────────────────────────────────────────
    print("\n[Model Server]")
    try:
        make_llm_client(config).chat_completions_create(
            model=config.model,
            messages=[{"role": "user", "content": "SELECT 1"}],
            max_tokens=1,
        )
        print("  chat/completions            ✅ Reachable")
        passed += 1
    except LLMTransportError as e:
        print(f"  chat/completions            ❌ {e.message}")
        failures.append(f"Model server not reachable at {base_url_for(config.port)}")

    # ── Summary ─────────────────────────────────────────────────────────────
    total = passed + len(failures)
    print(f"\n{'─' * 50}")
    if failures:
        print(f"Result: {passed}/{total} checks passed\n")
        for msg in failures:
            print(f"  ❌ {msg}")
        print()
        raise typer.Exit(code=1)
    else:
        print(f"Result: {passed}/{total} checks passed, all good ✅")
        print()


@app.command(name="schema")
def schema(files: list[Path] = typer.Argument(..., exists=True, dir_okay=False)):
    """Print the CREATE statement inferred for each CSV file."""
    from csvchat.ingest.csv_reader import decode_csv, parse_csv
    from csvchat.ingest.schema import build_table_definition, derive_table_name

    for path in files:
        rows = parse_csv(decode_csv(path.read_bytes()))
        if not rows:
            print(f"-- {path.name}: no rows, skipped")
            continue
        definition = build_table_definition(derive_table_name(path.name), rows)
        print(definition.create_statement)


def _print_turn(turn) -> None:
    if turn.content:
        print(turn.content)
    if turn.sql:
        print(f"\nSQL:\n  {turn.sql}")
    if turn.error:
        print(f"\n❌ {turn.error}")
    if turn.rows:
        print(f"\n{len(turn.rows)} row(s):")
        for row in turn.rows:
            print(f"  {json.dumps(row, default=str)}")
    elif turn.rows is not None and not turn.error:
        print("\nNo rows returned.")


@app.command(name="ask")
def ask(
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="CSV files to load"),
    question: str = typer.Option(..., "--question", "-q", help="Question about the data"),
    port: int | None = typer.Option(None, help="Model server port"),
    model: str | None = typer.Option(None, help="Model identifier"),
    show_sql: bool = typer.Option(settings.SHOW_SQL, "--show-sql/--no-show-sql"),
    show_thinking: bool = typer.Option(settings.SHOW_THINKING, "--show-thinking/--no-show-thinking"),
):
    """Load CSV files into a fresh session and ask one question."""
    from csvchat.domain.exceptions import CsvChatError
    from csvchat.services.chat_service import ChatService
    from csvchat.services.ingest_service import IngestService
    from csvchat.services.session import ChatSession

    session = ChatSession.start(settings)
    if not session.ready:
        print("❌ Embedded store is not available; see logs.")
        raise typer.Exit(code=1)

    try:
        ingest = IngestService(session)
        for path in files:
            try:
                result = ingest.ingest_csv(path.name, path.read_bytes())
            except CsvChatError as e:
                logger.error(f"Failed to load {path}: {e.message}")
                print(f"❌ {path.name}: {e.message}")
                raise typer.Exit(code=1)
            print(f"📄 {path.name} -> {result.table_name} ({result.row_count} rows, {result.status.value})")

        overrides = {"show_sql": show_sql, "show_thinking": show_thinking}
        if port is not None:
            overrides["port"] = port
        if model is not None:
            overrides["model"] = model
        config = settings.chat_config().model_copy(update=overrides)

        print()
        reply = ChatService(session).ask(question, config)
        _print_turn(reply)
        if reply.error and reply.sql is None and reply.rows is None:
            raise typer.Exit(code=2)
    finally:
        session.close()


if __name__ == "__main__":
    app()
