"""Small business rules shared by repositories and services."""

from typing import Any

# Membership plan length when a plan does not set duracion
DEFAULT_MEMBERSHIP_DAYS = 30


def has_capacity(promotion: dict[str, Any]) -> bool:
    """True when there is no usage cap or usosActuales is still below it."""
    cap = promotion.get("limiteCupos")
    return cap is None or (promotion.get("usosActuales") or 0) < cap


def in_window(promotion: dict[str, Any], day: str) -> bool:
    """True when day (YYYY-MM-DD) lies inside [fechaInicio, fechaFin]."""
    return promotion.get("fechaInicio", "") <= day <= promotion.get("fechaFin", "")


def minutes_of_day(hour: str) -> int:
    """Minutes since midnight for an HH:MM string ("9:30" -> 570)."""
    hours, minutes = hour.split(":")
    return int(hours) * 60 + int(minutes)


def slots_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """Half-open overlap of two HH:MM intervals; touching ends do not overlap."""
    return minutes_of_day(a_start) < minutes_of_day(b_end) and minutes_of_day(
        b_start
    ) < minutes_of_day(a_end)


def invoice_totals(concepts: list[dict[str, Any]]) -> dict[str, Any]:
    """Line subtotals and invoice totals from cantidad, precioUnitario and percentages.

    Each concept gets subtotal = cantidad * precioUnitario; impuesto and
    descuento are percentages of that subtotal. Returns the concepts with
    their subtotal filled in plus subtotal, impuestosTotal, descuentoTotal
    and total, all rounded to cents.
    """
    lines = []
    subtotal = taxes = discounts = 0.0
    for concept in concepts:
        line_subtotal = round(concept["cantidad"] * concept["precioUnitario"], 2)
        subtotal += line_subtotal
        taxes += line_subtotal * (concept.get("impuesto") or 0) / 100
        discounts += line_subtotal * (concept.get("descuento") or 0) / 100
        lines.append({**concept, "subtotal": line_subtotal})
    return {
        "conceptos": lines,
        "subtotal": round(subtotal, 2),
        "impuestosTotal": round(taxes, 2),
        "descuentoTotal": round(discounts, 2),
        "total": round(subtotal + taxes - discounts, 2),
    }
