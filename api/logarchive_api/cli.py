import sys
from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter, validators

from logarchive.logging import LogLevel, get_logger, setup_logging
from logarchive.logging.handlers import FileHandlerConfig
from logarchive_api.settings import settings

app = App(
    name="logarchive",
    help="Archive the log table into per-user daily text files",
    help_flags=["--help"],
    version_flags=[],
)

setup_logging(LogLevel[settings.LOG_LEVEL], overrides={"botocore": LogLevel.WARNING})


@app.command
async def run(
    *,
    output: Annotated[Path | None, Parameter(name=("-o", "--output"))] = None,
    log_dir: Annotated[Path | None, Parameter(name=("-l", "--log-dir"))] = None,
    batch_limit: Annotated[
        int | None, Parameter(name=("-b", "--batch-limit"), validator=validators.Number(gte=1))
    ] = None,
    concurrency: Annotated[
        int | None, Parameter(name=("-c", "--concurrency"), validator=validators.Number(gte=1))
    ] = None,
):
    """
    Run one archival pass and print the report.

    Args:
        output: Also write the JSON report to this file
        log_dir: Directory for a rotating log file next to console output
        batch_limit: Maximum number of logs fetched in this pass
        concurrency: Number of (user, day) groups archived in parallel
    """
    from logarchive_api.database import sessionmanager
    from logarchive_api.factory import create_archive_storage, create_archiver

    handlers = [FileHandlerConfig(directory=log_dir)] if log_dir else []
    logger = get_logger("logarchive", *handlers)

    async with sessionmanager:
        archive_storage = create_archive_storage(settings)
        await archive_storage.ensure_bucket_exists()
        archiver = create_archiver(
            settings,
            sessionmanager,
            archive_storage,
            logger=logger,
            batch_limit=batch_limit,
            max_concurrency=concurrency,
        )
        result = await archiver.run()

    print(result.model_dump_json(indent=2, exclude_none=True))
    if output:
        result.save_to_file(output)

    if not result.success:
        sys.exit(1)


@app.command
def serve(
    *,
    host: Annotated[str, Parameter(name=("-h", "--host"))] = "0.0.0.0",  # noqa: S104
    port: Annotated[int, Parameter(name=("-p", "--port"), validator=validators.Number(gt=1024, lt=65535))] = 8080,
):
    """
    Serve the archive trigger API

    Args:
        host: Host to serve on
        port: Port to serve on
    """
    import uvicorn

    uvicorn.run("logarchive_api.main:app", host=host, port=port)
