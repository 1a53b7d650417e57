# agents/final_output_agent.py
from __future__ import annotations
from typing import List, Optional

from travel_booking.models.booking import BookingConfirmation, LodgingSelection
from travel_booking.models.flight import Flight
from travel_booking.stores.booking_store import BookingSession
from travel_booking.utils.formatters import format_duration, format_price


class FinalOutputAgent:
    """Markdown summaries of a booking, for checkout and for the confirmation page."""

    def _flight_line(self, label: str, f: Flight) -> str:
        link = f" | [Link]({f.booking_link})" if f.booking_link else ""
        stops = "Nonstop" if f.stops == 0 else f"{f.stops} stop{'s' if f.stops > 1 else ''}"
        return (
            f"- **{label}:** {f.summary} | {f.airline} {f.flight_number} | "
            f"{format_duration(f.duration)}, {stops} | {f.cabin.title()} | {format_price(f.price)}{link}"
        )

    def _lines(
        self,
        title: str,
        outbound: Optional[Flight],
        inbound: Optional[Flight],
        lodgings: List[LodgingSelection],
        fee: float,
        total: float,
    ) -> List[str]:
        lines: List[str] = [title, ""]

        lines.append("### Flights")
        if outbound is None:
            lines.append("- _No flight selected._")
        else:
            lines.append(self._flight_line("Outbound", outbound))
            if inbound is not None:
                lines.append(self._flight_line("Return", inbound))
        lines.append("")

        lines.append("### Lodging")
        if not lodgings:
            lines.append("- _No lodging selected._")
        else:
            for item in lodgings:
                extras = f" ({', '.join(item.bullet_points)})" if item.bullet_points else ""
                lines.append(f"- **{item.title}**{extras} | {format_price(item.price)}")
        lines.append("")

        lines.append("### Total")
        if total:
            lines.append(f"- Booking fee: {format_price(fee)}")
        lines.append(f"- **Total:** {format_price(total)}")
        return lines

    def render(self, session: BookingSession) -> str:
        lines = self._lines(
            "🧾 Booking Summary",
            session.outbound_flight,
            session.return_flight,
            session.lodgings,
            session.fee,
            session.total(),
        )
        return "\n".join(lines)

    def render_confirmation(self, confirmation: BookingConfirmation) -> str:
        lines = self._lines(
            f"✅ Booking {confirmation.reference} confirmed",
            confirmation.outbound_flight,
            confirmation.return_flight,
            confirmation.lodgings,
            confirmation.fee,
            confirmation.total,
        )
        lines.append(f"- Confirmed at {confirmation.confirmed_at:%Y-%m-%d %H:%M}")
        return "\n".join(lines)
