"""
FastAPI dependencies wiring the store, services and pipelines per request.
"""
from fastapi import Depends

from losstrack.config import Settings, get_settings
from losstrack.db import get_engine
from losstrack.entries import EntryService
from losstrack.exporter import ExportPipeline
from losstrack.files import LocalFileStorage
from losstrack.importer import ImportPipeline
from losstrack.products import ProductService
from losstrack.reasons import ReasonService
from losstrack.store import SqlStore


def get_store() -> SqlStore:
    return SqlStore(get_engine())


def get_product_service(
    store: SqlStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> ProductService:
    return ProductService(store, cache_ttl_seconds=settings.product_cache_ttl_seconds)


def get_reason_service(store: SqlStore = Depends(get_store)) -> ReasonService:
    return ReasonService(store)


def get_entry_service(
    store: SqlStore = Depends(get_store),
    products: ProductService = Depends(get_product_service),
    reasons: ReasonService = Depends(get_reason_service),
) -> EntryService:
    return EntryService(store, products, reasons)


def get_upload_storage(settings: Settings = Depends(get_settings)) -> LocalFileStorage:
    return LocalFileStorage(settings.upload_dir)


def get_export_storage(settings: Settings = Depends(get_settings)) -> LocalFileStorage:
    return LocalFileStorage(settings.export_dir)


def get_import_pipeline(
    store: SqlStore = Depends(get_store),
    files: LocalFileStorage = Depends(get_upload_storage),
    products: ProductService = Depends(get_product_service),
    settings: Settings = Depends(get_settings),
) -> ImportPipeline:
    return ImportPipeline(
        store,
        files,
        products,
        progress_interval=settings.import_progress_interval,
        max_file_size=settings.import_max_file_size,
    )


def get_export_pipeline(
    files: LocalFileStorage = Depends(get_export_storage),
    products: ProductService = Depends(get_product_service),
    reasons: ReasonService = Depends(get_reason_service),
    entries: EntryService = Depends(get_entry_service),
    settings: Settings = Depends(get_settings),
) -> ExportPipeline:
    return ExportPipeline(files, products, reasons, entries, max_quantity=settings.export_max_quantity)
