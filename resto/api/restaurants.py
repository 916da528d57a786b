"""Public restaurant endpoints: details, availability, deposits and booking"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from resto.api.deps import get_reservation_service
from resto.booking.errors import NoSuitableTable
from resto.booking.lifecycle import ReservationService
from resto.schemas.reservation import (
    AvailabilityResponse,
    BookingResponse,
    ReservationCreate,
    TimeSlotResponse,
)
from resto.schemas.restaurant import (
    DepositAuthorizeRequest,
    DepositAuthorizeResponse,
    RestaurantResponse,
)

router = APIRouter()


@router.get("/{slug}", response_model=RestaurantResponse)
async def get_restaurant(
    slug: str,
    service: ReservationService = Depends(get_reservation_service),
):
    """Restaurant details shown on the booking page"""
    return await service.get_restaurant(slug)


@router.get("/{slug}/availability", response_model=AvailabilityResponse)
async def get_availability(
    slug: str,
    date: date,
    party_size: int = Query(..., ge=1),
    service: ReservationService = Depends(get_reservation_service),
):
    """Time slots for a date and party size"""
    restaurant = await service.get_restaurant(slug)
    search = await service.available_slots(restaurant.id, date, party_size)

    return AvailabilityResponse(
        date=date,
        party_size=party_size,
        timeslot_length_minutes=search.timeslot_length,
        slots=[
            TimeSlotResponse(
                start=slot.start,
                end=slot.end,
                start_12h=slot.start_12h,
                end_12h=slot.end_12h,
                available=slot.available,
            )
            for slot in search.slots
        ],
        error=search.error.detail if search.error else None,
        max_capacity=search.error.max_capacity if isinstance(search.error, NoSuitableTable) else None,
    )


@router.post(
    "/{slug}/deposits",
    response_model=DepositAuthorizeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def authorize_deposit(
    slug: str,
    request: DepositAuthorizeRequest,
    service: ReservationService = Depends(get_reservation_service),
):
    """Place a card hold for the restaurant's deposit"""
    restaurant = await service.get_restaurant(slug)
    hold = await service.authorize_deposit(restaurant.id, request.customer_email)
    return DepositAuthorizeResponse(
        payment_intent_id=hold.intent_id,
        client_secret=hold.client_secret,
        amount_cents=hold.amount_cents,
        currency=hold.currency,
    )


@router.post(
    "/{slug}/reservations",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_reservation(
    slug: str,
    request: ReservationCreate,
    service: ReservationService = Depends(get_reservation_service),
):
    """Book a table"""
    restaurant = await service.get_restaurant(slug)
    result = await service.create(restaurant.id, request)
    return BookingResponse.from_result(result)
