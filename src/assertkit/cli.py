from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="assertkit", help="Soft and hard assertions for test suites")
schema_app = typer.Typer(name="schema", help="Generate schema tooling for assertkit.yaml")
app.add_typer(schema_app, name="schema")


@app.command()
def init(
    dir: str = typer.Option(".", "--dir", help="Directory to write assertkit.yaml into"),
):
    """Write an example assertkit.yaml config."""
    from assertkit.config import DEFAULT_CONFIG_NAME

    project_dir = Path(dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    example = project_dir / DEFAULT_CONFIG_NAME
    if example.exists():
        typer.echo(f"{DEFAULT_CONFIG_NAME} already exists in {dir}, skipping.")
        return

    example.write_text("""\
# Report every test that recorded an assertion failure.
report: ${ASSERTKIT_OUT:-build}/assertions.xml
# debug_log: build/assertkit.log
verbose: false
max_message_length: 2000
""")

    typer.echo(f"Initialized {example}")


@app.command()
def summary(
    report: str = typer.Argument(help="Path to a junit report written by the pytest plugin"),
):
    """Print the assertion failures recorded in a report."""
    from assertkit.reporting.junit import read_junit

    report_path = Path(report)
    if not report_path.exists():
        typer.echo(f"Error: report not found: {report}", err=True)
        raise typer.Exit(1)

    try:
        outcomes = read_junit(report_path)
    except Exception as e:
        typer.echo(f"Error: cannot read {report}: {e}", err=True)
        raise typer.Exit(1)

    failing = [o for o in outcomes if not o.passed]
    if not failing:
        typer.echo("No assertion failures recorded.")
        return

    for outcome in failing:
        status = "HALT" if outcome.halted else "FAIL"
        typer.echo(f"{status}  {outcome.nodeid} ({len(outcome.failures)} failure(s))")
        for message in outcome.failures:
            first, *rest = message.splitlines() or [""]
            typer.echo(f"    - {first}")
            for line in rest:
                typer.echo(f"      {line}")

    n_failures = sum(len(o.failures) for o in failing)
    typer.echo(f"{len(failing)} test(s), {n_failures} assertion failure(s)")
    raise typer.Exit(1)


@schema_app.command("generate")
def schema_generate(
    out: str = typer.Option(
        "schemas/assertkit.schema.json", help="Output path for JSON Schema"
    ),
    doc: str = typer.Option("docs/assertkit-config.md", help="Output path for schema docs"),
):
    """Generate JSON Schema and docs for assertkit.yaml."""
    from assertkit.schema import write_json_schema, write_schema_doc

    write_json_schema(Path(out))
    write_schema_doc(Path(doc))
    typer.echo(f"Schema: {out}")
    typer.echo(f"Docs: {doc}")


@app.command()
def check(
    config: str = typer.Argument(help="Path to an assertkit.yaml to validate"),
):
    """Validate an assertkit.yaml config."""
    from assertkit.config import load_config
    from assertkit.errors import ConfigError

    try:
        settings = load_config(Path(config))
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    for key, value in settings.model_dump().items():
        typer.echo(f"{key}: {value}")
