from app.core.exceptions import (
    BookingConflictException,
    ConflictCheckUnavailableException,
    NoPricingAvailableException,
    PartialRecurrenceException,
    ValidationException,
)


class TestHttpMapping:
    def test_validation_is_400(self):
        http = ValidationException("bad", code="TIME_NOT_ON_HOUR").to_http_exception()
        assert http.status_code == 400
        assert http.detail["code"] == "TIME_NOT_ON_HOUR"

    def test_conflict_is_409_with_default_message(self):
        exc = BookingConflictException()
        http = exc.to_http_exception()
        assert http.status_code == 409
        assert http.detail["code"] == "BOOKING_CONFLICT"
        assert "conflicts" in http.detail["message"]

    def test_no_pricing_is_422(self):
        http = NoPricingAvailableException().to_http_exception()
        assert http.status_code == 422
        assert http.detail["code"] == "NO_PRICING_AVAILABLE"

    def test_conflict_check_unavailable_is_503(self):
        http = ConflictCheckUnavailableException().to_http_exception()
        assert http.status_code == 503
        assert http.detail["code"] == "CONFLICT_CHECK_FAILED"


def test_partial_recurrence_summarises_failures():
    exc = PartialRecurrenceException(
        anchor_booking_id="A", failed_dates=["2024-01-08"], total_recurring=2
    )
    assert exc.status_code == 207
    assert exc.code == "PARTIAL_RECURRENCE"
    assert "1 of 2" in exc.message
