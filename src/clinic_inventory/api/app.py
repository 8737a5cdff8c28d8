"""
REST API for the clinic inventory tracker.

Maps inventory, usage, purchase order and restock operations onto HTTP
routes. Application errors become ``{"error": message}`` responses.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..database import JsonStore
from ..exceptions import ClinicInventoryError
from ..models import CamelModel
from ..services import (
    BaseLLMService,
    InsightsService,
    InventoryService,
    OrderService,
    RestockService,
    UsageService,
)
from ..utils import get_logger

app = FastAPI(
    title="Clinic Inventory API",
    description="Stock levels, usage, purchase orders and restock suggestions",
    version="0.1.0",
)

# Global state (set by init_api)
inventory_service: Optional[InventoryService] = None
usage_service: Optional[UsageService] = None
order_service: Optional[OrderService] = None
restock_service: Optional[RestockService] = None
insights_service: Optional[InsightsService] = None
logger = get_logger("api")


class UsageRequest(CamelModel):
    item_id: Optional[str] = None
    quantity: int
    notes: Optional[str] = None


class PurchaseOrderRequest(BaseModel):
    supplier: Optional[str] = None
    items: List[Dict[str, Any]] = []


class PurchaseOrderUpdate(BaseModel):
    supplier: Optional[str] = None
    status: Optional[str] = None


class BarcodeRequest(BaseModel):
    barcode: Optional[str] = None


class ChatRequest(BaseModel):
    message: Optional[str] = None


def init_api(store: JsonStore, llm_service: Optional[BaseLLMService] = None) -> FastAPI:
    """
    Initialize API with dependencies.

    Args:
        store: Initialized JSON table store
        llm_service: Optional text-generation backend

    Returns:
        The configured FastAPI app
    """
    global inventory_service, usage_service, order_service, restock_service, insights_service

    inventory_service = InventoryService(store)
    usage_service = UsageService(store)
    order_service = OrderService(store)
    restock_service = RestockService(store)
    insights_service = InsightsService(
        inventory_service, usage_service, restock_service, llm_service
    )

    logger.info(
        f"API initialized, data dir: {store.data_dir}, "
        f"text generation: {llm_service.provider_name if llm_service else 'disabled'}"
    )
    return app


@app.exception_handler(ClinicInventoryError)
async def clinic_error_handler(request: Request, exc: ClinicInventoryError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(loc) for loc in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": details or "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Clinic Inventory API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "store": "connected" if inventory_service else "disconnected",
        "textGeneration": (
            "enabled" if insights_service and insights_service.llm_service else "disabled"
        ),
    }


@app.get("/api/inventory")
def list_inventory() -> List[Dict]:
    return [item.to_dict() for item in inventory_service.list_items()]


@app.post("/api/inventory", status_code=201)
def create_inventory_item(data: Dict[str, Any] = Body(...)) -> Dict:
    return inventory_service.create_item(data).to_dict()


@app.put("/api/inventory/{item_id}")
def update_inventory_item(item_id: str, changes: Dict[str, Any] = Body(...)) -> Dict:
    return inventory_service.update_item(item_id, changes).to_dict()


@app.delete("/api/inventory/{item_id}")
def delete_inventory_item(item_id: str) -> Dict:
    inventory_service.delete_item(item_id)
    return {"message": "Item deleted successfully"}


@app.post("/api/usage", status_code=201)
def record_usage(request: UsageRequest) -> Dict:
    """Record consumption and decrement stock."""
    event = usage_service.record_usage(request.item_id, request.quantity, request.notes)
    return event.to_dict()


@app.get("/api/usage-history")
def get_usage_history() -> List[Dict]:
    return [entry.to_dict() for entry in usage_service.get_usage_history()]


@app.get("/api/alerts")
def get_alerts() -> List[Dict]:
    return [alert.to_dict() for alert in inventory_service.get_alerts()]


@app.get("/api/restock-suggestions")
def get_restock_suggestions() -> List[Dict]:
    """Ranked restock suggestions."""
    return [s.to_dict() for s in restock_service.get_suggestions()]


@app.get("/api/automated-restock-preview")
def get_automated_restock_preview() -> Dict:
    return restock_service.preview_automated_restock().to_dict()


@app.post("/api/automated-restock")
def execute_automated_restock() -> Dict:
    """Reorder every item at or below its minimum threshold."""
    return restock_service.execute_automated_restock().to_dict()


@app.get("/api/purchase-orders")
def list_purchase_orders() -> List[Dict]:
    return [order.to_dict() for order in order_service.list_purchase_orders()]


@app.post("/api/purchase-orders", status_code=201)
def create_purchase_order(request: PurchaseOrderRequest) -> Dict:
    """Create a purchase order and credit its quantities to stock."""
    return order_service.create_purchase_order(request.supplier, request.items).to_dict()


@app.put("/api/purchase-orders/{order_id}")
def update_purchase_order(order_id: str, request: PurchaseOrderUpdate) -> Dict:
    changes = request.model_dump(exclude_unset=True)
    return order_service.update_purchase_order(order_id, changes).to_dict()


@app.post("/api/scan-barcode")
def scan_barcode(request: BarcodeRequest) -> Dict:
    return inventory_service.scan_barcode(request.barcode)


@app.get("/api/restock-chart")
def get_restock_chart() -> Dict:
    """Restock chart data with generated insights."""
    return insights_service.restock_chart()


@app.post("/api/chat")
def chat(request: ChatRequest) -> Dict:
    return insights_service.chat(request.message)
