from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for

from app.crm.db import db_session
from app.crm.modules.customers.models import GENDERS, Customer
from app.crm.modules.customers.service import (
    CustomerNotFound,
    CustomerValidationError,
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)

bp = Blueprint("customers", __name__)

# Offered as checkboxes on the form. Hobbies already stored on a customer are listed too.
SUGGESTED_HOBBIES = ("Reading", "Gaming", "Sports", "Cooking", "Traveling")


def _form_payload() -> dict:
    hobbies = request.form.getlist("hobbies") or request.form.getlist("hobbies[]")
    return {
        "firstname": request.form.get("firstname"),
        "lastname": request.form.get("lastname"),
        "email": request.form.get("email"),
        "mobile": request.form.get("mobile"),
        "address": request.form.get("address"),
        "gender": request.form.get("gender"),
        "hobbies": hobbies,
    }


def _form_values(customer: Customer) -> dict:
    return {
        "firstname": customer.firstname,
        "lastname": customer.lastname,
        "email": customer.email,
        "mobile": customer.mobile,
        "address": customer.address or "",
        "gender": customer.gender,
        "hobbies": customer.hobbies,
    }


def _render_form(template: str, form: dict, errors: dict[str, str] | None = None, **ctx):
    return render_template(
        template,
        form=form,
        errors=errors or {},
        genders=GENDERS,
        suggested_hobbies=SUGGESTED_HOBBIES,
        **ctx,
    )


@bp.errorhandler(CustomerNotFound)
def _customer_not_found(e: CustomerNotFound):
    return render_template("errors/404.html", message=str(e)), 404


# ---------- List ----------
@bp.get("/customers")
def customers_list():
    s = db_session()
    customers = list_customers(s)
    return render_template("customers/list.html", customers=customers)


# ---------- New ----------
@bp.get("/customers/new")
def customers_new_get():
    return _render_form("customers/new.html", form={"hobbies": []})


@bp.post("/customers")
@bp.post("/customers/new")
def customers_new_post():
    s = db_session()
    payload = _form_payload()

    try:
        create_customer(s, payload)
    except CustomerValidationError as e:
        return _render_form("customers/new.html", form=payload, errors=e.errors), 422
    s.commit()

    flash("Customer created successfully!", "success")
    return redirect(url_for("customers.customers_list"))


# ---------- Detail ----------
@bp.get("/customers/<int:customer_id>")
def customer_detail(customer_id: int):
    s = db_session()
    customer = get_customer(s, customer_id)
    return render_template("customers/detail.html", customer=customer)


# ---------- Edit ----------
@bp.get("/customers/<int:customer_id>/edit")
def customer_edit_get(customer_id: int):
    s = db_session()
    customer = get_customer(s, customer_id)
    return _render_form("customers/edit.html", form=_form_values(customer), customer_id=customer.id)


@bp.put("/customers/<int:customer_id>")
@bp.post("/customers/<int:customer_id>/edit")
def customer_edit_post(customer_id: int):
    s = db_session()
    payload = _form_payload()

    try:
        update_customer(s, customer_id, payload)
    except CustomerValidationError as e:
        s.rollback()
        return _render_form("customers/edit.html", form=payload, errors=e.errors, customer_id=customer_id), 422
    s.commit()

    flash("Customer updated successfully!", "success")
    return redirect(url_for("customers.customers_list"))


# ---------- Delete ----------
@bp.delete("/customers/<int:customer_id>")
@bp.post("/customers/<int:customer_id>/delete")
def customer_delete(customer_id: int):
    s = db_session()
    delete_customer(s, customer_id)
    s.commit()

    flash("Customer deleted successfully!", "success")
    return redirect(url_for("customers.customers_list"))
