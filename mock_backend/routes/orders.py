"""Order API routes for the mock backend"""

import logging
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Depends

from shared.notifier.models import ChannelEvent

from ..config import settings
from ..models.order import (
    OrderStatus,
    OrderLineEnvelope,
    OrderLineResponse,
    OrderEnvelope,
    OrderHandle,
    OrderHandleResponse,
    OrderDetail,
    OrderDetailResponse,
    OrderLineDetail,
    OrderOwner,
    OrderSummary,
    OrderSummaryListResponse,
)
from ..database.orders import order_db
from ..database.products import product_db
from ..database.users import user_db
from ..realtime.hub import checkout_hub
from ..security.auth import require_api_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Orders"], dependencies=[Depends(require_api_token)])


async def complete_order(document_id: str) -> bool:
    """
    Mark an order completed and notify its owner.

    Stands in for the payment provider's confirmation.
    """
    order = order_db.get_order(document_id)
    if not order or order.order_status != OrderStatus.PENDING:
        return False

    order_db.update_status(document_id, OrderStatus.COMPLETED)
    redirect_url = f"{settings.storefront_base_url.rstrip('/')}/orders/{document_id}"
    await checkout_hub.publish(order.user, ChannelEvent.CHECKOUT, redirect_url)
    logger.info(f"Order {document_id} completed")
    return True


@router.post("/order-lines", response_model=OrderLineResponse)
async def create_order_line(body: OrderLineEnvelope):
    """Create an order line"""
    if not product_db.get_by_id(body.data.product):
        raise HTTPException(status_code=400, detail="Unknown product")

    line = order_db.create_line(
        product_id=body.data.product,
        quantity=body.data.quantity,
        price=body.data.price,
    )
    return OrderLineResponse(data=line)


@router.delete("/order-lines/{line_id}")
async def delete_order_line(line_id: int):
    """Delete an order line that no order references"""
    if not order_db.get_line(line_id):
        raise HTTPException(status_code=404, detail="Order line not found")
    if not order_db.delete_line(line_id):
        raise HTTPException(status_code=409, detail="Order line is attached to an order")
    return {"ok": True}


@router.post("/orders", response_model=OrderHandleResponse)
async def create_order(body: OrderEnvelope, background_tasks: BackgroundTasks):
    """Create an order header referencing existing lines"""
    if not user_db.get_by_document_id(body.data.user):
        raise HTTPException(status_code=400, detail="Unknown user")

    try:
        order = order_db.create_order(
            user_document_id=body.data.user,
            line_ids=body.data.lines,
            total_price=body.data.total_price,
        )
    except KeyError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Order {order.document_id} created: {order.total_price} for user {order.user}")

    if settings.auto_complete_orders:
        background_tasks.add_task(complete_order, order.document_id)

    return OrderHandleResponse(data=OrderHandle(id=order.id, document_id=order.document_id))


@router.get("/orders", response_model=OrderSummaryListResponse)
async def list_orders(user: Optional[str] = Query(None, description="Owner document id")):
    """List orders, optionally filtered by owner"""
    if user is None:
        orders = sorted(order_db.orders.values(), key=lambda o: o.id, reverse=True)
    else:
        orders = order_db.list_for_user(user)

    return OrderSummaryListResponse(
        data=[
            OrderSummary(
                id=o.id,
                document_id=o.document_id,
                total_price=o.total_price,
                order_status=o.order_status,
                created_at=o.created_at,
            )
            for o in orders
        ]
    )


@router.get("/orders/{document_id}", response_model=OrderDetailResponse)
async def get_order(document_id: str):
    """Get an order with lines and products expanded"""
    order = order_db.get_order(document_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    lines = []
    for line_id in order.lines:
        line = order_db.get_line(line_id)
        product = product_db.get_by_id(line.product) if line else None
        if line and product:
            lines.append(OrderLineDetail(product=product, quantity=line.quantity, price=line.price))

    return OrderDetailResponse(
        data=OrderDetail(
            id=order.id,
            document_id=order.document_id,
            lines=lines,
            total_price=order.total_price,
            order_status=order.order_status,
            created_at=order.created_at,
            user=OrderOwner(document_id=order.user),
        )
    )


@router.post("/orders/{document_id}/complete")
async def complete(document_id: str):
    """Confirm payment for a pending order"""
    order = order_db.get_order(document_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    if not await complete_order(document_id):
        raise HTTPException(status_code=409, detail=f"Order is {order.order_status.value}")
    return {"ok": True, "status": OrderStatus.COMPLETED.value}
