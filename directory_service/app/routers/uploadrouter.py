from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from shared.core.exceptions import NotFound
from shared.helpers.asset_store import AssetStore, get_asset_store
from shared.utils.enums import UploadFolder

router = APIRouter(prefix="/uploads", tags=["Uploads"])

PUBLIC_FOLDERS = {UploadFolder.LOGOS.value, UploadFolder.PROFILES.value}


def _serve(store: AssetStore, filename: str, folder: str = ""):
    path = store.resolve_public(filename, folder)
    if path is None:
        raise NotFound("Image not found")
    return FileResponse(path)


@router.get("/{filename}")
def serve_image(filename: str, store: AssetStore = Depends(get_asset_store)):
    return _serve(store, filename)


@router.get("/{folder}/{filename}")
def serve_folder_image(folder: str, filename: str, store: AssetStore = Depends(get_asset_store)):
    if folder not in PUBLIC_FOLDERS:
        raise NotFound("Image not found")
    return _serve(store, filename, folder)
