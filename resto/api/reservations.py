"""Reservation management endpoints reached through signed links"""

from fastapi import APIRouter, Depends

from resto.api.deps import get_reservation_service
from resto.booking.lifecycle import ReservationService
from resto.schemas.reservation import BookingResponse, ReservationModify, ReservationResponse

router = APIRouter()


@router.get("/{confirmation_code}/{mac}", response_model=ReservationResponse)
async def get_reservation(
    confirmation_code: str,
    mac: str,
    service: ReservationService = Depends(get_reservation_service),
):
    """Reservation details for the holder of a management link"""
    return await service.get_by_link(confirmation_code, mac)


@router.put("/{confirmation_code}/{mac}", response_model=BookingResponse)
async def modify_reservation(
    confirmation_code: str,
    mac: str,
    request: ReservationModify,
    service: ReservationService = Depends(get_reservation_service),
):
    """Move a reservation to another date, time or party size"""
    reservation = await service.get_by_link(confirmation_code, mac)
    result = await service.modify(reservation.confirmation_code, request)
    return BookingResponse.from_result(result)


@router.post("/{confirmation_code}/{mac}/cancel", response_model=BookingResponse)
async def cancel_reservation(
    confirmation_code: str,
    mac: str,
    service: ReservationService = Depends(get_reservation_service),
):
    """Cancel a reservation, capturing the deposit when cancelled late"""
    reservation = await service.get_by_link(confirmation_code, mac)
    result = await service.cancel(reservation.confirmation_code)
    return BookingResponse.from_result(result)
