"""Booking endpoints."""

import math
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import (
    get_booking_flow_service,
    get_current_account,
    get_permission_checker,
    require_admin,
)
from src.api.schemas import (
    AdminBookingRequest,
    BookingPage,
    BookingRequest,
    BookingResponse,
    MessageResponse,
    PageMeta,
)
from src.models.booking import BookingStatus
from src.security.permissions import PermissionChecker
from src.services.booking_flow import BookingFlowService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    body: BookingRequest,
    account_id: UUID = Depends(get_current_account),
    service: BookingFlowService = Depends(get_booking_flow_service),
):
    """Re-check availability and create a pending booking atomically."""
    booking = await service.create_booking(
        account_id,
        body.field_id,
        body.start_time,
        body.duration_minutes,
        voucher_code=body.voucher_code,
    )
    return BookingResponse.from_booking(booking)


@router.get("/me", response_model=BookingPage)
async def list_my_bookings(
    status: Optional[BookingStatus] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    account_id: UUID = Depends(get_current_account),
    service: BookingFlowService = Depends(get_booking_flow_service),
):
    """Booking history of the caller, newest first."""
    bookings, total = await service.list_account_bookings(
        account_id, status=status, page=page, limit=limit
    )
    return BookingPage(
        data=[BookingResponse.from_booking(b) for b in bookings],
        meta=PageMeta(total=total, page=page, limit=limit, last_page=math.ceil(total / limit)),
    )


@router.post("/management/create", response_model=BookingResponse, status_code=201)
async def create_counter_booking(
    body: AdminBookingRequest,
    admin_id: UUID = Depends(require_admin),
    service: BookingFlowService = Depends(get_booking_flow_service),
):
    """Book a field for a customer paying at the counter."""
    booking = await service.create_admin_booking(
        admin_id,
        body.field_id,
        body.start_time,
        body.duration_minutes,
        customer_name=body.customer_name,
        customer_phone=body.customer_phone,
    )
    return BookingResponse.from_booking(booking)


@router.post("/{booking_id}/cancel", response_model=MessageResponse)
async def cancel_booking(
    booking_id: UUID,
    account_id: UUID = Depends(get_current_account),
    permissions: PermissionChecker = Depends(get_permission_checker),
    service: BookingFlowService = Depends(get_booking_flow_service),
):
    booking = await service.cancel_booking(
        booking_id, account_id, is_admin=permissions.is_admin(account_id)
    )
    return MessageResponse(message=f"Booking {booking.code} has been cancelled.")


@router.post("/{booking_id}/check-in", response_model=BookingResponse)
async def check_in(
    booking_id: UUID,
    admin_id: UUID = Depends(require_admin),
    service: BookingFlowService = Depends(get_booking_flow_service),
):
    booking = await service.check_in(booking_id, actor_id=admin_id)
    return BookingResponse.from_booking(booking)
