# dealership/routers/orders.py
"""
Checkout (public) and order back-office.
Webhook notifications are scheduled as background tasks with a plain-dict
snapshot, so they run after the response and outside the request session.
"""

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session

from dealership.config import settings
from dealership.database import get_db
from dealership.middleware.auth import AdminPrincipal, client_ip, get_current_admin
from dealership.middleware.permissions import require_permission
from dealership.middleware.rate_limit import limiter
from dealership.schemas.order import OrderCreate, OrderOut, OrderStatusUpdate
from dealership.services import order_service
from dealership.services.webhook_service import (
    NEW_ORDER, ORDER_CANCELLED, ORDER_DELIVERED, notify_order_event,
)

router = APIRouter()

_STATUS_EVENTS = {
    "delivered": ORDER_DELIVERED,
    "cancelled": ORDER_CANCELLED,
}


@router.post("/orders", response_model=OrderOut, status_code=201, summary="Place an order")
@limiter.limit(settings.PUBLIC_RATE_LIMIT)
def create_order(request: Request, body: OrderCreate, background_tasks: BackgroundTasks,
                 db: Session = Depends(get_db)):
    order = order_service.create_order(db, body, client_ip(request))
    background_tasks.add_task(notify_order_event, NEW_ORDER, order_service.order_snapshot(order))
    return order


@router.get("/orders", response_model=list[OrderOut], summary="List orders")
def list_orders(status: Optional[str] = None, page: int = 1,
                limit: int = order_service.DEFAULT_PAGE_SIZE, db: Session = Depends(get_db),
                admin: AdminPrincipal = Depends(require_permission("orders", "view"))):
    return order_service.list_orders(db, status, page, limit)


@router.get("/orders/{order_id}", response_model=OrderOut, summary="Order details")
def get_order(order_id: int, db: Session = Depends(get_db),
              admin: AdminPrincipal = Depends(require_permission("orders", "view"))):
    return order_service.get_order(db, order_id)


@router.put("/orders/{order_id}/status", response_model=OrderOut, summary="Deliver or cancel an order")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def update_order_status(request: Request, order_id: int, body: OrderStatusUpdate,
                        background_tasks: BackgroundTasks, db: Session = Depends(get_db),
                        admin: AdminPrincipal = Depends(get_current_admin)):
    # orders.validate / orders.cancel depends on the requested status: checked in the service
    order = order_service.update_order_status(db, order_id, body, admin)
    background_tasks.add_task(
        notify_order_event, _STATUS_EVENTS[order.status], order_service.order_snapshot(order), admin.username,
    )
    return order


@router.delete("/orders/{order_id}", summary="Delete an order")
@limiter.limit(settings.MUTATION_RATE_LIMIT)
def delete_order(request: Request, order_id: int, db: Session = Depends(get_db),
                 admin: AdminPrincipal = Depends(require_permission("orders", "delete"))):
    return order_service.delete_order(db, order_id, admin)
