"""Export command: build a result archive without going through HTTP."""

from pathlib import Path
import shutil
import sys

import click

from result_service.cli.utils import coro, error, info, success
from result_service.features.datatransfer import (
    ExportError,
    ExportFormat,
    ExportRequest,
    get_export_orchestrator,
)


@click.command(name="export")
@click.argument("task_id", type=int)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in ExportFormat], case_sensitive=False),
    default=ExportFormat.SQL.value,
    help="Export format (default: sql)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path(),
    help="Directory the archive is written to (default: current directory)",
)
@coro
async def export_results(task_id: int, output_format: str, output: Path) -> None:
    """Export every result of TASK_ID as a tar.gz archive.

    Examples:

    \b
      result-service export 42
      result-service export 42 --format csv -o ./exports
    """
    from result_service.infra.database import close_database, get_async_session, init_database

    info(f"Exporting results of task {task_id} as {output_format}")

    try:
        await init_database()
        async with get_async_session() as session:
            orchestrator = get_export_orchestrator(session)
            artifact = await orchestrator.export(
                ExportRequest(task_id=task_id, format=output_format)
            )
    except ExportError as e:
        error(f"Export failed: {e.detail}")
        sys.exit(1)
    finally:
        await close_database()

    try:
        output.mkdir(parents=True, exist_ok=True)
        destination = output / artifact.download_name
        shutil.move(artifact.path, destination)
    except OSError as e:
        error(f"Could not write archive to {output}: {e}")
        sys.exit(1)
    finally:
        artifact.close()

    context = artifact.context
    success(
        f"Exported {context.records} result(s) in {context.page_number} page(s) "
        f"to {destination} ({artifact.size} bytes)"
    )
