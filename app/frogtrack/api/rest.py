from datetime import date
import logging
from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from frogtrack.core.config import get_settings
from frogtrack.schemas.api import CertificationCreate, FilterCriteria
from frogtrack.services.exports import encode_csv, encode_ics
from frogtrack.services.insights import (
    category_options,
    count_by_status,
    data_quality,
    derive_records,
    filter_records,
    find_anomalies,
    group_by_field,
    next_renewal,
    recent_records,
    summarize,
)
from frogtrack.services.normalizer import to_view
from frogtrack.services.store import RecordStore, RecordStoreError, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_criteria(
    window: str = "all",
    category: str = "all",
    status: str = "all",
    search: str = "",
) -> FilterCriteria:
    try:
        return FilterCriteria(window=window, category=category, status=status, search=search)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc


def _load(store: RecordStore) -> list[dict]:
    try:
        rows = store.list()
    except RecordStoreError:
        logger.exception("listing certifications failed")
        raise HTTPException(status_code=500, detail="Failed to fetch certifications")
    return derive_records(rows, date.today())


def _attachment(content: str, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/health")
def api_health(store: RecordStore = Depends(get_store)):
    try:
        now = store.ping()
    except RecordStoreError as exc:
        logger.error("health check failed", extra={"error": str(exc)})
        return JSONResponse({"status": "error", "message": str(exc)}, status_code=500)
    return {"status": "ok", "dbTime": now}


@router.get("/certifications")
def api_certifications(
    criteria: FilterCriteria = Depends(get_criteria),
    store: RecordStore = Depends(get_store),
):
    records = filter_records(_load(store), criteria)
    return [to_view(r) for r in records]


@router.post("/certifications", status_code=201)
def api_create_certification(
    payload: CertificationCreate,
    store: RecordStore = Depends(get_store),
):
    try:
        row = store.create(payload)
    except RecordStoreError:
        logger.exception("creating certification failed")
        raise HTTPException(status_code=500, detail="Failed to create certification")
    logger.info("created certification", extra={"id": row["id"]})
    return to_view(derive_records([row], date.today())[0])


@router.get("/dashboard")
def api_dashboard(
    criteria: FilterCriteria = Depends(get_criteria),
    store: RecordStore = Depends(get_store),
):
    records = _load(store)
    visible = filter_records(records, criteria)
    upcoming = next_renewal(records)
    return {
        "total": len(records),
        "statusCounts": count_by_status(records),
        "summary": summarize(visible),
        "categories": category_options(records),
        "nextRenewal": to_view(upcoming) if upcoming else None,
        "certifications": [to_view(r) for r in visible],
    }


@router.get("/admin/overview")
def api_admin_overview(store: RecordStore = Depends(get_store)):
    records = _load(store)
    return {
        "stats": summarize(records),
        "quality": data_quality(records),
        "providers": group_by_field(records, "provider"),
        "categories": group_by_field(records, "category"),
        "recent": [to_view(r) for r in recent_records(records)],
        "anomalies": [
            {"type": item["type"], "certification": to_view(item["record"])}
            for item in find_anomalies(records)
        ],
    }


@router.get("/certifications/export.csv")
def api_export_csv(
    criteria: FilterCriteria = Depends(get_criteria),
    store: RecordStore = Depends(get_store),
):
    settings = get_settings()
    content = encode_csv(filter_records(_load(store), criteria), include_url=settings.csv_include_url)
    if content is None:
        return Response(status_code=204)
    return _attachment(content, "text/csv; charset=utf-8", settings.csv_export_filename)


@router.get("/certifications/export.ics")
def api_export_ics(
    criteria: FilterCriteria = Depends(get_criteria),
    store: RecordStore = Depends(get_store),
):
    settings = get_settings()
    content = encode_ics(filter_records(_load(store), criteria), uid_domain=settings.calendar_uid_domain)
    if content is None:
        return Response(status_code=204)
    return _attachment(content, "text/calendar; charset=utf-8", settings.ics_export_filename)
