from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from logarchive import Archiver
from logarchive.logging import get_logger
from logarchive_api.database import sessionmanager
from logarchive_api.factory import create_archiver
from logarchive_api.settings import settings

router = APIRouter(tags=["archive"])

logger = get_logger("logarchive-api")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def get_archiver(request: Request) -> Archiver:
    return create_archiver(settings, sessionmanager, request.app.state.archive_storage, logger=logger)


ArchiverDependency = Annotated[Archiver, Depends(get_archiver)]


@router.options("/archive-logs")
async def archive_logs_preflight():
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post("/archive-logs")
async def archive_logs(archiver: ArchiverDependency):
    """
    Run one archival pass.

    Returns `{"success": true, "results": [...]}` with one entry per (user, day)
    group, `{"message": "No logs to archive"}` when the table is empty, or a
    500 with `{"error": ...}` when the run could not start.
    """
    try:
        result = await archiver.run()
    except Exception as e:
        logger.exception("archival", action="end", status="failed", reason=e)
        return JSONResponse({"error": str(e)}, status_code=500, headers=CORS_HEADERS)

    if not result.success:
        return JSONResponse({"error": result.error}, status_code=500, headers=CORS_HEADERS)

    if result.nothing_to_archive:
        return JSONResponse({"message": result.message}, headers=CORS_HEADERS)

    return JSONResponse(
        {"success": True, "results": [group.model_dump(mode="json") for group in result.results]},
        headers=CORS_HEADERS,
    )
