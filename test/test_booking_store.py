import pytest

from conftest import make_flight
from travel_booking.models.booking import LodgingSelection, TripStage
from travel_booking.stores.booking_store import BookingSession
from travel_booking.utils.errors import BookingStateError

FEE = 25.0


@pytest.fixture
def session():
    return BookingSession(fee=FEE)


def test_total_is_zero_after_reset(session):
    session.set_outbound_flight(make_flight())
    session.reset()
    assert session.total() == 0
    assert session.stage is TripStage.SEARCHING


def test_total_adds_flights_lodging_and_fee(session):
    session.set_outbound_flight(make_flight(price=300))
    session.add_lodging(LodgingSelection(id=7, title="Harbor Inn", price=100))
    assert session.total() == 300 + 100 + FEE


def test_total_includes_return_flight(session):
    session.set_round_trip(True)
    session.set_outbound_flight(make_flight(price=300))
    session.set_return_flight(make_flight(id=2, price=250))
    assert session.subtotal() == 550
    assert session.total() == 550 + FEE


def test_selection_is_a_snapshot(session):
    flight = make_flight(price=300)
    session.set_outbound_flight(flight)
    flight.price = 1
    assert session.outbound_flight.price == 300

    lodging = LodgingSelection(id=1, title="Inn", price=100, bullet_points=["WiFi"])
    session.add_lodging(lodging)
    lodging.bullet_points.append("Pool")
    assert session.lodgings[0].bullet_points == ["WiFi"]


def test_return_flight_needs_outbound(session):
    session.set_round_trip(True)
    with pytest.raises(BookingStateError):
        session.set_return_flight(make_flight(id=2))


def test_return_flight_needs_round_trip(session):
    session.set_outbound_flight(make_flight())
    with pytest.raises(BookingStateError):
        session.set_return_flight(make_flight(id=2))


def test_switching_to_one_way_drops_return(session):
    session.set_round_trip(True)
    session.set_outbound_flight(make_flight())
    session.set_return_flight(make_flight(id=2))
    session.set_round_trip(False)
    assert session.return_flight is None


def test_clearing_outbound_drops_return(session):
    session.set_round_trip(True)
    session.set_outbound_flight(make_flight())
    session.set_return_flight(make_flight(id=2))
    session.set_outbound_flight(None)
    assert session.return_flight is None


def test_stage_progression(session):
    assert session.stage is TripStage.SEARCHING
    session.set_round_trip(True)
    session.set_outbound_flight(make_flight())
    assert session.stage is TripStage.OUTBOUND_SELECTED
    session.set_return_flight(make_flight(id=2))
    assert session.stage is TripStage.RETURN_SELECTED
    session.add_lodging(LodgingSelection(id=3, title="Inn", price=80))
    assert session.stage is TripStage.LODGING_SELECTED
    session.begin_checkout()
    assert session.stage is TripStage.CHECKOUT


def test_checkout_requires_return_on_round_trip(session):
    session.set_round_trip(True)
    session.set_outbound_flight(make_flight())
    session.set_skip_hotels(True)
    with pytest.raises(BookingStateError):
        session.begin_checkout()


def test_checkout_requires_lodging_or_skip(session):
    session.set_outbound_flight(make_flight())
    with pytest.raises(BookingStateError):
        session.begin_checkout()
    session.set_skip_hotels(True)
    assert session.stage is TripStage.LODGING_SKIPPED
    session.begin_checkout()
    assert session.stage is TripStage.CHECKOUT


def test_edit_during_checkout_leaves_checkout(session):
    session.set_outbound_flight(make_flight())
    session.set_skip_hotels(True)
    session.begin_checkout()
    session.add_lodging(LodgingSelection(id=3, title="Inn", price=80))
    assert session.stage is TripStage.LODGING_SELECTED


def test_confirm_only_from_checkout(session):
    session.set_outbound_flight(make_flight())
    with pytest.raises(BookingStateError):
        session.confirm()


def test_confirm_snapshots_and_resets(session):
    session.set_outbound_flight(make_flight(price=300))
    session.add_lodging(LodgingSelection(id=3, title="Inn", price=100))
    session.begin_checkout()

    confirmation = session.confirm()

    assert confirmation.reference.startswith("TB-")
    assert len(confirmation.reference) == 11
    assert confirmation.total == 300 + 100 + FEE
    assert confirmation.outbound_flight.price == 300
    assert session.total() == 0
    assert session.outbound_flight is None
    assert session.stage is TripStage.CONFIRMED

    session.set_outbound_flight(make_flight())
    assert session.confirmation is None
    assert session.stage is TripStage.OUTBOUND_SELECTED


def test_set_and_remove_lodgings(session):
    session.set_outbound_flight(make_flight(price=300))
    session.set_lodgings([
        LodgingSelection(id=1, title="Inn", price=100),
        LodgingSelection(id=2, title="Lodge", price=150),
    ])
    session.remove_lodging(1)
    assert [item.id for item in session.lodgings] == [2]
    assert session.total() == 300 + 150 + FEE
