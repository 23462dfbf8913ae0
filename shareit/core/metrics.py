"""
Prometheus metrics for the booking core (exposed at /metrics).
"""

from prometheus_client import Counter

BOOKINGS_CREATED = Counter(
    "shareit_bookings_created_total",
    "Booking requests created in WAITING status",
)

BOOKING_DECISIONS = Counter(
    "shareit_booking_decisions_total",
    "Owner decisions on booking requests",
    ["status"],
)

DOMAIN_ERRORS = Counter(
    "shareit_domain_errors_total",
    "Domain errors returned to callers",
    ["code"],
)
