"""
Customer store and validation.

Handlers in admin.py call these functions with a request-scoped session and a
payload dict built from the submitted form. The store functions flush but do
not commit; the caller commits once the operation succeeded.

Email uniqueness is owned by the database (constraint uq_customers_email).
There is no "look up, then insert" check here: the IntegrityError raised by the
constraint is translated into DuplicateEmail.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from app.crm.modules.customers.models import GENDERS, Customer
from app.crm.modules.customers.utils import clean_hobbies, clean_text, encode_hobbies, is_valid_email

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255
MAX_MOBILE_LENGTH = 13
MAX_HOBBY_LENGTH = 50

EMAIL_TAKEN_MESSAGE = "The email has already been taken."


class CustomerNotFound(LookupError):
    def __init__(self, customer_id: int):
        super().__init__(f"Customer {customer_id} not found")
        self.customer_id = customer_id


class CustomerValidationError(ValueError):
    """Submitted fields failed validation. `errors` maps field name -> message."""

    def __init__(self, errors: dict[str, str]):
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


class DuplicateEmail(CustomerValidationError):
    def __init__(self, email: str):
        super().__init__({"email": EMAIL_TAKEN_MESSAGE})
        self.email = email


def normalize_customer_payload(payload: dict) -> dict:
    """Trim text fields, blank -> None, and coerce hobbies to a list."""
    return {
        "firstname": clean_text(payload.get("firstname")),
        "lastname": clean_text(payload.get("lastname")),
        "email": clean_text(payload.get("email")),
        "mobile": clean_text(payload.get("mobile")),
        "address": clean_text(payload.get("address")),
        "gender": clean_text(payload.get("gender")),
        "hobbies": clean_hobbies(payload.get("hobbies")),
    }


def validate_customer_payload(payload: dict) -> dict[str, str]:
    """
    Validate a normalized customer payload (see normalize_customer_payload).
    Returns {field: message}; empty when valid. Uniqueness is not checked here.
    """
    errors: dict[str, str] = {}

    for field, label in (("firstname", "first name"), ("lastname", "last name")):
        value = payload.get(field)
        if not value:
            errors[field] = f"The {label} field is required."
        elif len(value) > MAX_NAME_LENGTH:
            errors[field] = f"The {label} must not be greater than {MAX_NAME_LENGTH} characters."

    email = payload.get("email")
    if not email:
        errors["email"] = "The email field is required."
    elif len(email) > MAX_EMAIL_LENGTH:
        errors["email"] = f"The email must not be greater than {MAX_EMAIL_LENGTH} characters."
    elif not is_valid_email(email):
        errors["email"] = "The email must be a valid email address."

    mobile = payload.get("mobile")
    if not mobile:
        errors["mobile"] = "The mobile field is required."
    elif len(mobile) > MAX_MOBILE_LENGTH:
        errors["mobile"] = f"The mobile must not be greater than {MAX_MOBILE_LENGTH} characters."

    gender = payload.get("gender")
    if not gender:
        errors["gender"] = "The gender field is required."
    elif gender not in GENDERS:
        errors["gender"] = f"The selected gender is invalid. Must be one of: {', '.join(GENDERS)}"

    hobbies = payload.get("hobbies") or []
    if not isinstance(hobbies, list):
        errors["hobbies"] = "The hobbies must be a list."
    else:
        for hobby in hobbies:
            if not isinstance(hobby, str):
                errors["hobbies"] = "Each hobby must be a string."
                break
            if len(hobby) > MAX_HOBBY_LENGTH:
                errors["hobbies"] = f"Each hobby must not be greater than {MAX_HOBBY_LENGTH} characters."
                break

    return errors


def _prepare(payload: dict) -> dict:
    data = normalize_customer_payload(payload)
    errors = validate_customer_payload(data)
    if errors:
        raise CustomerValidationError(errors)
    return data


def _is_email_conflict(e: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed: customers.email"
    # postgres: 'duplicate key value violates unique constraint "uq_customers_email"'
    msg = str(e.orig).lower()
    return "email" in msg and ("unique" in msg or "duplicate" in msg)


def _flush_or_duplicate(s: "Session", email: str) -> None:
    try:
        s.flush()
    except IntegrityError as e:
        s.rollback()
        if _is_email_conflict(e):
            logger.warning("Customer email already taken: %s", email)
            raise DuplicateEmail(email) from e
        raise


def list_customers(s: "Session") -> list[Customer]:
    """All customers, most recently touched first. No pagination."""
    stmt = select(Customer).order_by(Customer.updated_at.desc(), Customer.id.desc())
    return list(s.scalars(stmt).all())


def get_customer(s: "Session", customer_id: int) -> Customer:
    customer = s.get(Customer, customer_id)
    if customer is None:
        raise CustomerNotFound(customer_id)
    return customer


def create_customer(s: "Session", payload: dict) -> Customer:
    """Create a new customer. Raises CustomerValidationError / DuplicateEmail."""
    data = _prepare(payload)

    now = datetime.utcnow()
    customer = Customer(
        firstname=data["firstname"],
        lastname=data["lastname"],
        email=data["email"],
        mobile=data["mobile"],
        address=data["address"],
        gender=data["gender"],
        hobbies_json=encode_hobbies(data["hobbies"]),
        created_at=now,
        updated_at=now,
    )
    s.add(customer)
    _flush_or_duplicate(s, data["email"])

    logger.info("Customer created id=%s email=%s", customer.id, customer.email)
    return customer


def update_customer(s: "Session", customer_id: int, payload: dict) -> Customer:
    """
    Replace every mutable field of an existing customer.
    The customer's own current email does not count as a collision.
    """
    customer = get_customer(s, customer_id)
    data = _prepare(payload)

    customer.firstname = data["firstname"]
    customer.lastname = data["lastname"]
    customer.email = data["email"]
    customer.mobile = data["mobile"]
    customer.address = data["address"]
    customer.gender = data["gender"]
    customer.hobbies_json = encode_hobbies(data["hobbies"])
    customer.updated_at = datetime.utcnow()

    _flush_or_duplicate(s, data["email"])

    logger.info("Customer updated id=%s", customer.id)
    return customer


def delete_customer(s: "Session", customer_id: int) -> None:
    """Hard delete. A second delete of the same id raises CustomerNotFound."""
    result = s.execute(delete(Customer).where(Customer.id == customer_id))
    if result.rowcount == 0:
        raise CustomerNotFound(customer_id)
    logger.info("Customer deleted id=%s", customer_id)
