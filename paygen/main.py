from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

import typer

from paygen.config import JobConfig, Settings, get_settings
from paygen.errors import JobFailedError, PaygenError
from paygen.generation.schemas import TABLE_NAMES, load_schema
from paygen.orchestrator import run_job
from paygen.partitioning.dates import partition_date
from paygen.reporter import print_job_report
from paygen.utils.logging import configure_logging

app = typer.Typer(help="Synthetic payment data generator CLI.")


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"job_index={settings.job_index} job_id={settings.aws_batch_job_id} "
        f"rows={settings.num_of_rows} threads={settings.num_threads} "
        f"chargeback%={settings.chargeback_percentage} initial_load={settings.initial_load}"
    )
    typer.echo(
        f"storage={settings.storage_backend} partition_store={settings.partition_store_backend} "
        f"reference_source={settings.reference_source_backend} "
        f"region={settings.aws_default_region} dynamodb_region={settings.effective_dynamodb_region}"
    )
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"env={settings.app_env} log_level={settings.log_level}"
    )


def _overrides(
    rows: Optional[int],
    threads: Optional[int],
    job_index: Optional[int],
    local_output: Optional[str],
    memory_store: bool,
    synthetic_pool: bool,
) -> Dict[str, Any]:
    update: Dict[str, Any] = {}
    if rows is not None:
        update["num_of_rows"] = rows
    if threads is not None:
        update["num_threads"] = threads
    if job_index is not None:
        update["aws_batch_job_array_index"] = job_index
        update["job_index_offset"] = 0
    if local_output is not None:
        update["storage_backend"] = "local"
        update["local_output_dir"] = local_output
    if memory_store:
        update["partition_store_backend"] = "memory"
    if synthetic_pool:
        update["reference_source_backend"] = "synthetic"
    return update


@app.command()
def run(
    rows: Optional[int] = typer.Option(None, "--rows", "-r", help="Rows per worker thread."),
    threads: Optional[int] = typer.Option(None, "--threads", "-t", help="Worker threads."),
    job_index: Optional[int] = typer.Option(
        None, "--job-index", "-j", help="Job index (replaces array index and offset)."
    ),
    local_output: Optional[str] = typer.Option(
        None, "--local-output", help="Write Parquet under this directory instead of S3."
    ),
    memory_store: bool = typer.Option(
        False, "--memory-store", help="Use the in-process partition store."
    ),
    synthetic_pool: bool = typer.Option(
        False, "--synthetic-pool", help="Generate hash_pan values instead of reading the reference table."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the job report as JSON."),
    profile_memory: bool = typer.Option(
        False, "--profile-memory", help="Track peak Python allocations with tracemalloc."
    ),
) -> None:
    """
    Run one generation job.
    """
    base = get_settings()
    configure_logging(level=base.log_level, json_logs=base.log_json)
    settings: Settings = base.model_copy(
        update=_overrides(rows, threads, job_index, local_output, memory_store, synthetic_pool)
    )

    try:
        config = JobConfig.from_settings(settings)
        typer.echo(
            f"Running job {config.job_id} (index={config.job_index}) for partition "
            f"{config.process_date}: {config.num_threads} x {config.rows_per_thread} rows.",
            err=True,
        )
        report = run_job(config, settings, enable_tracemalloc=profile_memory)
    except JobFailedError as exc:
        if exc.report:
            _emit(exc.report, as_json)
        typer.echo(f"Job failed: {exc}", err=True)
        raise typer.Exit(code=1)
    except PaygenError as exc:
        typer.echo(f"Job failed: {exc}", err=True)
        raise typer.Exit(code=1)

    _emit(report, as_json)


def _emit(report: Dict[str, Any], as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(report, indent=2, default=str))
    else:
        print_job_report(report)  # type: ignore[arg-type]


@app.command("partition-date")
def partition_date_command(
    job_index: Optional[int] = typer.Option(None, "--job-index", "-j", help="Job index to evaluate."),
    initial: Optional[bool] = typer.Option(
        None, "--initial/--nightly", help="Initial load or nightly mode (default from INITIAL_LOAD)."
    ),
) -> None:
    """
    Print the date partition a job would write to.
    """
    settings = get_settings()
    index = settings.job_index if job_index is None else job_index
    array_index = settings.aws_batch_job_array_index if job_index is None else job_index
    initial_load = settings.initial_load if initial is None else initial
    try:
        target = partition_date(index, array_index, initial_load)
    except PaygenError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    typer.echo(target.isoformat())


@app.command()
def schemas() -> None:
    """
    List the packaged tables with their column counts.
    """
    for name in TABLE_NAMES:
        schema = load_schema(name)
        typer.echo(f"{name:<20} {schema.total_columns:>4} columns")


def main() -> None:
    try:
        app()
    except PaygenError as exc:
        typer.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
