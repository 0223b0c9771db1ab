"""
Product file import endpoint.
"""
from fastapi import APIRouter, Depends, File, UploadFile

from losstrack.api.deps import get_import_pipeline, get_upload_storage
from losstrack.config import Settings, get_settings
from losstrack.files import LocalFileStorage
from losstrack.importer import ImportPipeline
from losstrack.logging_config import get_logger
from losstrack.schemas import ImportResult

logger = get_logger("api.imports")

router = APIRouter(prefix="/imports", tags=["Imports"])


@router.post("", response_model=ImportResult)
def import_products(
    file: UploadFile = File(...),
    storage: LocalFileStorage = Depends(get_upload_storage),
    pipeline: ImportPipeline = Depends(get_import_pipeline),
    settings: Settings = Depends(get_settings),
):
    """
    Upload a fixed-width product file and import it.

    Per-line problems come back in **errors**; the response is 200 even when
    every line was rejected. A FAILED status means nothing was written.
    Uploads over the size limit are refused with 422 before being stored.
    """
    source = storage.save_upload(file, "products", max_size=settings.import_max_file_size)
    logger.info(f"[IMPORT] Upload saved: {source.uri} ({source.size} bytes)")
    return pipeline.import_products(source=source)
