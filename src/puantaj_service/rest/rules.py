"""Validation rule tables, one per endpoint that accepts a body."""

from __future__ import annotations

from dataclasses import replace

from puantaj_service.auth.models import Role
from puantaj_service.pipeline.validation import FieldRule, RuleSet

TRANSACTION_TYPES = ("income", "expense")
PROJECT_TYPES = ("given", "received")
PROJECT_STATUSES = ("active", "passive", "completed")
PAYMENT_TYPES = ("salary", "advance", "bonus", "overtime", "other")
CONTRACTOR_STATUSES = ("active", "completed")
NOTIFICATION_TYPES = ("info", "success", "warning", "error")


def _name(required: bool = True) -> FieldRule:
    return FieldRule(required=required, type="string", min_length=2, max_length=50)


def _email(required: bool = True) -> FieldRule:
    return FieldRule(required=required, type="string", max_length=255, format="email")


def _text(max_length: int, required: bool = False) -> FieldRule:
    return FieldRule(
        required=required, type="string", min_length=1 if required else None, max_length=max_length
    )


def optional(rules: RuleSet) -> RuleSet:
    """The same table with every field optional, for partial updates.

    Fields required on create may still be left out, but not cleared.
    """
    return {
        name: replace(rule, required=False, nullable=rule.nullable and not rule.required)
        for name, rule in rules.items()
    }


# -- auth -------------------------------------------------------------------

REGISTER: RuleSet = {
    "firstName": _name(),
    "lastName": _name(),
    "email": _email(),
    "password": FieldRule(required=True, type="string", min_length=6, max_length=100),
    "companyName": _text(100),
}

LOGIN: RuleSet = {
    "email": _email(),
    "password": FieldRule(required=True, type="string", min_length=1, max_length=100),
}

PROFILE_UPDATE: RuleSet = {
    "firstName": _name(required=False),
    "lastName": _name(required=False),
    "email": _email(required=False),
}

# -- records ----------------------------------------------------------------

PERSONNEL: RuleSet = {
    "name": _text(100, required=True),
    "position": _text(100, required=True),
    "startDate": FieldRule(required=True, format="date"),
    "phone": _text(30),
    "email": _email(required=False),
    "isActive": FieldRule(type="boolean", nullable=False),
}

PROJECT: RuleSet = {
    "name": _text(200, required=True),
    "type": FieldRule(required=True, choices=PROJECT_TYPES),
    "amount": FieldRule(required=True, format="decimal"),
    "status": FieldRule(required=True, choices=PROJECT_STATUSES),
    "description": _text(1000),
    "clientName": _text(200),
    "startDate": FieldRule(required=True, format="date"),
    "endDate": FieldRule(format="date"),
}

TIMESHEET: RuleSet = {
    "personnelId": FieldRule(required=True, type="string", format="uuid"),
    "date": FieldRule(required=True, format="date"),
    "startTime": FieldRule(required=True, format="time"),
    "endTime": FieldRule(required=True, format="time"),
    "totalHours": FieldRule(format="hours"),
    "notes": _text(1000),
}

TRANSACTION: RuleSet = {
    "type": FieldRule(required=True, choices=TRANSACTION_TYPES),
    "amount": FieldRule(required=True, format="decimal"),
    "description": _text(255, required=True),
    "category": _text(100),
    "date": FieldRule(required=True, format="date"),
}

PERSONNEL_PAYMENT: RuleSet = {
    "personnelId": FieldRule(required=True, type="string", format="uuid"),
    "amount": FieldRule(required=True, format="decimal"),
    "paymentDate": FieldRule(required=True, format="date"),
    "paymentType": FieldRule(required=True, choices=PAYMENT_TYPES),
    "description": _text(255),
    "notes": _text(1000),
}

NOTE: RuleSet = {
    "content": _text(5000, required=True),
}

CONTRACTOR: RuleSet = {
    "name": _text(200, required=True),
    "company": _text(200),
    "phone": _text(30),
    "email": _email(required=False),
    "status": FieldRule(required=True, choices=CONTRACTOR_STATUSES),
    "totalAmount": FieldRule(required=True, format="decimal"),
}

# -- admin ------------------------------------------------------------------

USER_ACTIVE: RuleSet = {
    "isActive": FieldRule(required=True, type="boolean"),
}

USER_ROLE: RuleSet = {
    "role": FieldRule(required=True, choices=tuple(role.value for role in Role)),
}

NOTIFICATION: RuleSet = {
    "title": _text(200, required=True),
    "message": _text(2000, required=True),
    "type": FieldRule(choices=NOTIFICATION_TYPES),
    "userId": FieldRule(type="string", format="uuid"),
}
