"""Unit tests for pass request form validation."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timedelta, timezone

import pytest
from app.schemas.pass_form import CarPassDraft, PassRequestDraft, VisitorDraft
from app.services.form_validator import validate_pass_request

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_visitor(**overrides):
    data = dict(
        first_name="Asha", last_name="Rao", email="asha@example.com", phone="+91 98765 43210",
        identification_type="aadhaar", identification_number="1234-5678-9012",
        has_identification_document=True, pass_type_id="pt-day", purpose="Budget session",
        valid_from=NOW + timedelta(days=1), valid_to=NOW + timedelta(days=2),
    )
    data.update(overrides)
    return VisitorDraft(**data)


def make_draft(*visitors, **overrides):
    data = dict(main_category_id="c-1", sub_category_id="s-1",
                visitors=list(visitors) or [make_visitor()])
    data.update(overrides)
    return PassRequestDraft(**data)


def visitor_errors(visitor):
    return validate_pass_request(make_draft(visitor), now=NOW).visitors[0].fields


class TestRequestLevel:
    def test_valid_draft(self):
        result = validate_pass_request(make_draft(), now=NOW)
        assert result.is_valid
        assert result.first_invalid_visitor is None

    def test_missing_category(self):
        result = validate_pass_request(make_draft(sub_category_id=None), now=NOW)
        assert result.pass_category == "Pass category is required"
        assert not result.is_valid

    def test_no_visitors(self):
        draft = PassRequestDraft(main_category_id="c-1", sub_category_id="s-1", visitors=[])
        result = validate_pass_request(draft, now=NOW)
        assert result.form == "At least one visitor is required"

    def test_first_invalid_visitor(self):
        result = validate_pass_request(
            make_draft(make_visitor(), make_visitor(first_name=" "), make_visitor(purpose="")), now=NOW
        )
        assert result.first_invalid_visitor == 1


class TestVisitorFields:
    def test_required_names(self):
        errors = visitor_errors(make_visitor(first_name="", last_name="  "))
        assert errors["first_name"] == "First name is required"
        assert errors["last_name"] == "Last name is required"

    def test_email_is_optional(self):
        assert "email" not in visitor_errors(make_visitor(email=""))

    @pytest.mark.parametrize("email", ["asha", "asha@example", "as ha@example.com"])
    def test_invalid_email(self, email):
        assert visitor_errors(make_visitor(email=email))["email"] == "Please enter a valid email"

    @pytest.mark.parametrize("phone", ["", "+91", "  +91 "])
    def test_phone_required(self, phone):
        assert visitor_errors(make_visitor(phone=phone))["phone"] == "Phone number is required"

    def test_short_phone(self):
        assert visitor_errors(make_visitor(phone="+91 12345"))["phone"] == "Please enter a valid phone number"

    def test_identification(self):
        errors = visitor_errors(make_visitor(identification_type=None, identification_number="",
                                             has_identification_document=False))
        assert errors["identification_type"] == "ID type is required"
        assert errors["identification_number"] == "ID number is required"
        assert errors["identification_document"] == "Identification document is required"

    def test_pass_type_and_purpose(self):
        errors = visitor_errors(make_visitor(pass_type_id=None, purpose=""))
        assert errors["pass_type_id"] == "Pass type is required"
        assert errors["purpose"] == "Purpose is required"


class TestValidity:
    def test_valid_from_required(self):
        errors = visitor_errors(make_visitor(valid_from=None))
        assert errors["valid_from"] == "Valid from date/time is required"

    def test_valid_from_in_past(self):
        errors = visitor_errors(make_visitor(valid_from=NOW - timedelta(minutes=1)))
        assert errors["valid_from"] == "Valid from date/time must be in the future"

    def test_valid_to_before_valid_from(self):
        errors = visitor_errors(make_visitor(valid_from=NOW + timedelta(days=2), valid_to=NOW + timedelta(days=1)))
        assert errors["valid_to"] == "Valid to date/time must be after valid from date/time"

    def test_valid_to_in_past(self):
        errors = visitor_errors(make_visitor(valid_to=NOW - timedelta(hours=1)))
        assert errors["valid_to"] == "Valid to date/time must be in the future"

    def test_valid_to_optional(self):
        assert "valid_to" not in visitor_errors(make_visitor(valid_to=None))

    def test_naive_datetimes_are_utc(self):
        naive = (NOW + timedelta(hours=1)).replace(tzinfo=None)
        assert "valid_from" not in visitor_errors(make_visitor(valid_from=naive, valid_to=None))


class TestCarPasses:
    def test_blank_car_fields(self):
        visitor = make_visitor(car_passes=[CarPassDraft(car_make="Maruti", car_number="MH12AB1234")])
        result = validate_pass_request(make_draft(visitor), now=NOW).visitors[0]
        assert result.car_passes == [{
            "car_model": "Car model is required",
            "car_color": "Car color is required",
        }]
        assert result.has_errors

    def test_only_one_car_pass(self):
        car = CarPassDraft(car_make="Maruti", car_model="Swift", car_color="White", car_number="MH12AB1234")
        errors = visitor_errors(make_visitor(car_passes=[car, car]))
        assert errors["car_passes"] == "Only one car pass is allowed per visitor"
