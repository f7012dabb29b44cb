from typing import Any, Dict
from fastapi import APIRouter, Depends
from src.middlewares.auth import get_current_user_id
from src.services.upload import UploadAuthorizer, get_upload_authorizer

router = APIRouter(prefix="/api")


@router.get("/upload")
def get_upload_parameters(
    user_id: str = Depends(get_current_user_id),
    authorizer: UploadAuthorizer = Depends(get_upload_authorizer),
) -> Dict[str, Any]:
    """Signed parameters authorizing one direct upload to the media service.

    Returns:
        dict: ``token``, ``expire`` and ``signature`` exactly as issued by the media service SDK.
    """
    return authorizer.get_authentication_parameters()
