from fastapi import APIRouter, Depends

from losstrack.api.deps import get_export_pipeline
from losstrack.exporter import ExportPipeline
from losstrack.schemas import ExportResult

router = APIRouter(prefix="/exports", tags=["Exports"])


@router.post("", response_model=ExportResult)
def export_pending(pipeline: ExportPipeline = Depends(get_export_pipeline)):
    """Write one file per reason with pending entries and flag them as exported."""
    return pipeline.export_pending()
