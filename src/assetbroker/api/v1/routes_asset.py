"""Asset API routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from assetbroker.api.deps import get_services
from assetbroker.core.exceptions import InvalidInputError
from assetbroker.models.asset import (
    AssetStatus,
    DownloadURLResponse,
    InitiateAssetResponse,
    MarkUploadedRequest,
)
from assetbroker.services.container import AssetServices

router = APIRouter(tags=["assets"])
logger = logging.getLogger(__name__)


@router.post("/asset", response_model=InitiateAssetResponse)
async def initiate_asset(services: AssetServices = Depends(get_services)) -> InitiateAssetResponse:
    """Reserve a new asset id and return a signed upload URL for it."""
    asset_id = await services.reservation.reserve()
    upload_url = await services.capabilities.issue_upload(asset_id)

    logger.info(f"Asset initiated: id={asset_id}")

    return InitiateAssetResponse(upload_url=upload_url, id=asset_id)


@router.api_route("/asset/{asset_id}", methods=["GET", "PUT"], response_model=None)
async def manage_asset(
    asset_id: str,
    request: Request,
    services: AssetServices = Depends(get_services),
) -> Response:
    """Return a download URL (GET) or confirm an upload (PUT)."""
    if request.method == "PUT":
        return await _mark_uploaded(asset_id, request, services)
    return await _get_download_url(asset_id, request.query_params.get("timeout"), services)


async def _get_download_url(
    asset_id: str, timeout: Optional[str], services: AssetServices
) -> Response:
    state = await services.lifecycle.current_state(asset_id)
    download_url = await services.capabilities.issue_download(asset_id, state, timeout)

    body = DownloadURLResponse(download_url=download_url)
    return JSONResponse(content=body.model_dump(by_alias=True))


async def _mark_uploaded(asset_id: str, request: Request, services: AssetServices) -> Response:
    raw = await request.body()
    try:
        payload = MarkUploadedRequest.model_validate_json(raw)
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        raise InvalidInputError(f"Invalid JSON payload: {first.get('msg', str(e))}") from e

    if payload.status != AssetStatus.UPLOADED.value:
        raise InvalidInputError(
            f"Invalid value for key Status. Expecting '{AssetStatus.UPLOADED.value}', "
            f"got: '{payload.status}'"
        )

    await services.lifecycle.mark_uploaded(asset_id)
    return Response(status_code=200)
