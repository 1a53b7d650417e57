# stores/booking_store.py
from __future__ import annotations

import copy
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from travel_booking.models.booking import BookingConfirmation, LodgingSelection, TripStage
from travel_booking.models.flight import Flight
from travel_booking.utils.config import BOOKING_FEE
from travel_booking.utils.errors import BookingStateError

logger = logging.getLogger(__name__)


class BookingSession:
    """
    In-memory selection for one booking: outbound and return flights, lodging
    line items and the trip flags. Everything stored is a copy, so later
    changes to a search result never leak into the booking.

    The stage is derived from what has been selected:
    searching -> outbound-selected -> [return-selected] ->
    [lodging-selected | lodging-skipped] -> checkout -> confirmed
    """

    def __init__(self, fee: float = BOOKING_FEE):
        self.fee = fee
        self.confirmation: Optional[BookingConfirmation] = None
        self._clear()

    def _clear(self) -> None:
        self.outbound_flight: Optional[Flight] = None
        self.return_flight: Optional[Flight] = None
        self.lodgings: List[LodgingSelection] = []
        self.round_trip = False
        self.skip_hotels = False
        self._checkout = False

    def _touch(self) -> None:
        # any edit leaves checkout and forgets the previous confirmation
        self._checkout = False
        self.confirmation = None

    # ---- selection ----

    def set_outbound_flight(self, flight: Optional[Flight]) -> None:
        self._touch()
        self.outbound_flight = copy.deepcopy(flight)
        if flight is None:
            self.return_flight = None

    def set_return_flight(self, flight: Optional[Flight]) -> None:
        if flight is not None:
            if self.outbound_flight is None:
                raise BookingStateError("Select an outbound flight before a return flight")
            if not self.round_trip:
                raise BookingStateError("Return flights are only available on round trips")
        self._touch()
        self.return_flight = copy.deepcopy(flight)

    def set_lodgings(self, lodgings: List[LodgingSelection]) -> None:
        self._touch()
        self.lodgings = [copy.deepcopy(item) for item in lodgings]

    def add_lodging(self, lodging: LodgingSelection) -> None:
        self._touch()
        self.lodgings.append(copy.deepcopy(lodging))

    def remove_lodging(self, lodging_id: int) -> None:
        self._touch()
        self.lodgings = [item for item in self.lodgings if item.id != lodging_id]

    def set_round_trip(self, value: bool) -> None:
        self._touch()
        self.round_trip = bool(value)
        if not self.round_trip:
            self.return_flight = None

    def set_skip_hotels(self, value: bool) -> None:
        self._touch()
        self.skip_hotels = bool(value)

    # ---- derived ----

    def has_selection(self) -> bool:
        return (
            self.outbound_flight is not None
            or self.return_flight is not None
            or bool(self.lodgings)
        )

    def subtotal(self) -> float:
        flights = sum(f.price for f in (self.outbound_flight, self.return_flight) if f is not None)
        return flights + sum(item.price for item in self.lodgings)

    def total(self) -> float:
        """Selected flights + lodging line items + the flat fee. Empty selection costs nothing."""
        if not self.has_selection():
            return 0
        return self.subtotal() + self.fee

    @property
    def stage(self) -> TripStage:
        if self._checkout:
            return TripStage.CHECKOUT
        if self.confirmation is not None and not self.has_selection():
            return TripStage.CONFIRMED
        if self.outbound_flight is None:
            return TripStage.SEARCHING
        if self.lodgings:
            return TripStage.LODGING_SELECTED
        if self.skip_hotels:
            return TripStage.LODGING_SKIPPED
        if self.return_flight is not None:
            return TripStage.RETURN_SELECTED
        return TripStage.OUTBOUND_SELECTED

    def flights_complete(self) -> bool:
        if self.outbound_flight is None:
            return False
        return not self.round_trip or self.return_flight is not None

    # ---- transitions ----

    def begin_checkout(self) -> None:
        if not self.flights_complete():
            raise BookingStateError(
                "Cannot check out before the flights are selected",
                {"stage": self.stage.value},
            )
        if not self.lodgings and not self.skip_hotels:
            raise BookingStateError(
                "Select lodging or skip hotels before checking out",
                {"stage": self.stage.value},
            )
        self._checkout = True
        logger.info("Checkout started, total %.2f", self.total())

    def confirm(self) -> BookingConfirmation:
        if self.stage is not TripStage.CHECKOUT:
            raise BookingStateError("Booking can only be confirmed from checkout", {"stage": self.stage.value})
        confirmation = BookingConfirmation(
            reference=f"TB-{uuid.uuid4().hex[:8].upper()}",
            outbound_flight=copy.deepcopy(self.outbound_flight),
            return_flight=copy.deepcopy(self.return_flight),
            lodgings=copy.deepcopy(self.lodgings),
            fee=self.fee,
            total=self.total(),
            confirmed_at=datetime.now(),
        )
        logger.info("Booking %s confirmed, total %.2f", confirmation.reference, confirmation.total)
        self.reset()
        self.confirmation = confirmation
        return confirmation

    def reset(self) -> None:
        self._clear()
        self.confirmation = None
