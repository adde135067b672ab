from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from sitestock.database import get_db, get_read_db

from . import schemas, services
from .stores import SqlInventoryStore

router = APIRouter(
    prefix="/inventory",
    tags=["inventory"],
)


def _service_for(request: Request, db: Session) -> services.LedgerService:
    # A memory store configured at startup takes precedence over the database.
    store = getattr(request.app.state, "inventory_store", None)
    if store is None:
        store = SqlInventoryStore(db)
    return services.LedgerService(store)


def get_ledger_service(request: Request, db: Session = Depends(get_db)) -> services.LedgerService:
    return _service_for(request, db)


def get_read_ledger_service(request: Request, db: Session = Depends(get_read_db)) -> services.LedgerService:
    return _service_for(request, db)


def _csv_response(content: str, kind: str) -> PlainTextResponse:
    filename = f"stock-{kind}-{date.today().isoformat()}.csv"
    return PlainTextResponse(
        content,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/receipts",
    response_model=schemas.StockReceiptRead,
    status_code=status.HTTP_201_CREATED,
)
def create_receipt(
    payload: schemas.StockReceiptCreate,
    service: services.LedgerService = Depends(get_ledger_service),
):
    return service.add_receipt(payload)


@router.post(
    "/consumptions",
    response_model=schemas.StockConsumptionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_consumption(
    payload: schemas.StockConsumptionCreate,
    service: services.LedgerService = Depends(get_ledger_service),
):
    outcome = service.add_consumption(payload)
    if outcome.rejection == services.ConsumptionRejection.ITEM_NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=outcome.message)
    if outcome.rejection == services.ConsumptionRejection.INSUFFICIENT_STOCK:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=outcome.message)
    return outcome.consumption


@router.get("/items", response_model=List[schemas.StockItemRead])
def list_stock_items(service: services.LedgerService = Depends(get_read_ledger_service)):
    return service.get_stock_items()


@router.get("/items/low-stock", response_model=List[schemas.StockItemRead])
def list_low_stock_items(service: services.LedgerService = Depends(get_read_ledger_service)):
    return service.get_low_stock_items()


@router.get("/items/{item_code}", response_model=schemas.StockItemRead)
def get_stock_item(item_code: str, service: services.LedgerService = Depends(get_read_ledger_service)):
    item = service.get_stock_item(item_code)
    if not item:
        raise HTTPException(status_code=404, detail="Stock item not found.")
    return item


@router.get("/receipts", response_model=List[schemas.StockReceiptRead])
def list_receipts(service: services.LedgerService = Depends(get_read_ledger_service)):
    return service.get_receipts()


@router.get("/consumptions", response_model=List[schemas.StockConsumptionRead])
def list_consumptions(service: services.LedgerService = Depends(get_read_ledger_service)):
    return service.get_consumptions()


@router.get("/logs", response_model=List[schemas.TransactionLogRead])
def list_logs(service: services.LedgerService = Depends(get_read_ledger_service)):
    return service.get_logs()


@router.get("/dashboard", response_model=schemas.DashboardSummary)
def dashboard(service: services.LedgerService = Depends(get_read_ledger_service)):
    return service.get_dashboard()


@router.get("/reports/summary", response_model=schemas.ReportSummary)
def report_summary(service: services.LedgerService = Depends(get_read_ledger_service)):
    return service.get_report_summary()


@router.get("/reports/receipts.csv", response_class=PlainTextResponse)
def export_receipts(service: services.LedgerService = Depends(get_read_ledger_service)):
    return _csv_response(service.export_receipts_csv(), "receipts")


@router.get("/reports/consumptions.csv", response_class=PlainTextResponse)
def export_consumptions(service: services.LedgerService = Depends(get_read_ledger_service)):
    return _csv_response(service.export_consumptions_csv(), "consumptions")


@router.get("/reports/valuation.csv", response_class=PlainTextResponse)
def export_stock_valuation(service: services.LedgerService = Depends(get_read_ledger_service)):
    return _csv_response(service.export_stock_valuation_csv(), "valuation")
