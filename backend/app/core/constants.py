# backend/app/core/constants.py
"""Application-wide constants for the court booking API."""

SERVICE_NAME = "court-booking"

# API Documentation
API_TITLE = "Court Booking API"
API_DESCRIPTION = "Pricing, availability, conflict detection and weekly recurrence for court bookings"
API_VERSION = "1.0.0"
