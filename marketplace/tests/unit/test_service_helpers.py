import pytest
from django.test import override_settings

from marketplace.services.transaction_service import validate_rating
from utils.pagination import paginate, parse_page_params
from utils.responses import error_response, first_error_message, validation_error_response
from utils.service_base import ErrorCodes, service_err, service_ok


@pytest.mark.unit
class TestPagination:
    def test_defaults(self):
        assert parse_page_params({}) == (1, 10)

    def test_bad_values_fall_back(self):
        assert parse_page_params({"page": "abc", "limit": "-5"}) == (1, 10)

    def test_limit_is_capped(self):
        assert parse_page_params({"page": "2", "limit": "1000"}) == (2, 100)

    def test_paginate_describes_slice(self):
        items, pagination = paginate(list(range(25)), page=3, limit=10)

        assert items == [20, 21, 22, 23, 24]
        assert pagination == {"total": 25, "page": 3, "limit": 10, "pages": 3}

    def test_page_past_the_end_is_empty(self):
        items, pagination = paginate(list(range(5)), page=4, limit=10)

        assert items == []
        assert pagination["total"] == 5

    def test_empty_collection_has_zero_pages(self):
        items, pagination = paginate([], page=1, limit=10)

        assert items == []
        assert pagination["pages"] == 0


@pytest.mark.unit
class TestRatingValidation:
    @pytest.mark.parametrize("value", [1, 3, 5])
    def test_bounds_are_inclusive(self, value):
        assert validate_rating(value)

    @pytest.mark.parametrize("value", [0, 6, -1, 4.5, "5", True, None])
    def test_out_of_range_or_wrong_type(self, value):
        assert not validate_rating(value)

    def test_bounds_come_from_settings(self):
        with override_settings(MARKETPLACE={"RATING_MIN": 1, "RATING_MAX": 10}):
            assert validate_rating(10)


@pytest.mark.unit
class TestErrorResponses:
    def test_error_codes_map_to_http_status(self):
        cases = {
            ErrorCodes.AUTHENTICATION_REQUIRED: 401,
            ErrorCodes.PERMISSION_DENIED: 403,
            ErrorCodes.NOT_FOUND: 404,
            ErrorCodes.VALIDATION_ERROR: 400,
            ErrorCodes.CONFLICT: 400,
            ErrorCodes.INTERNAL_ERROR: 500,
        }
        for code, expected in cases.items():
            response = error_response(service_err(code, "boom"))
            assert response.status_code == expected
            assert response.data == {"error": "boom"}

    def test_service_err_defaults_detail_to_code(self):
        result = service_err(ErrorCodes.NOT_FOUND)

        assert not result.ok
        assert result.error_detail == "not_found"

    def test_map_passes_errors_through(self):
        failure = service_err(ErrorCodes.CONFLICT, "nope")

        assert failure.map(lambda v: v * 2) is failure
        assert service_ok(2).map(lambda v: v * 2).value == 4

    def test_first_error_message_names_the_field(self):
        assert first_error_message({"price": ["A valid number is required."]}) == "price: A valid number is required."

    def test_first_error_message_non_field(self):
        assert first_error_message({"non_field_errors": ["Bad combination"]}) == "Bad combination"

    def test_validation_error_response(self):
        response = validation_error_response({"client_rating": ["A valid integer is required."]})

        assert response.status_code == 400
        assert response.data["error"].startswith("client_rating")
