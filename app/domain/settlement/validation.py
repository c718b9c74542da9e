"""
Field validation for client-submitted forms.

Every rule runs, and all messages are collected, before any write
happens. The messages are shown next to the offending field.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from app.domain.settlement.entities import CredentialPlatform, TradingPlatform
from app.domain.settlement.errors import ValidationError
from app.domain.settlement.lifecycle import MIN_STARTING_BALANCE
from app.domain.settlement.money import to_money

NAME_MIN_LEN = 2
NAME_MAX_LEN = 100
WHATSAPP_MIN_LEN = 7
WHATSAPP_MAX_LEN = 20
EMAIL_MAX_LEN = 255
CREDENTIAL_FIELD_MAX_LEN = 100


@dataclass(frozen=True)
class ApplicationForm:
    """A cleaned onboarding application."""

    full_name: str
    whatsapp: str
    email: str
    platform: str
    account_balance: Decimal


@dataclass(frozen=True)
class CredentialForm:
    """A cleaned broker credential submission."""

    broker_name: str
    server_name: str
    login_number: str
    password: str
    platform: str


def _parse_balance(raw: object) -> Optional[Decimal]:
    if raw is None or raw == "":
        return None
    try:
        return to_money(raw)  # type: ignore[arg-type]
    except ValueError:
        return None


def validate_application(
    full_name: str,
    whatsapp: str,
    email: str,
    platform: str,
    account_balance: object,
    agreed_terms: bool,
) -> ApplicationForm:
    """Validate and normalize an onboarding application.

    Raises:
        ValidationError: With one message per failing field.
    """
    errors: dict[str, str] = {}

    name = (full_name or "").strip()
    if len(name) < NAME_MIN_LEN:
        errors["full_name"] = "Name must be at least 2 characters"
    elif len(name) > NAME_MAX_LEN:
        errors["full_name"] = f"Name must be at most {NAME_MAX_LEN} characters"

    phone = (whatsapp or "").strip()
    if not (WHATSAPP_MIN_LEN <= len(phone) <= WHATSAPP_MAX_LEN):
        errors["whatsapp"] = "Enter a valid WhatsApp number"

    address = (email or "").strip()
    normalized_email = address
    if not address or len(address) > EMAIL_MAX_LEN:
        errors["email"] = "Enter a valid email"
    else:
        try:
            normalized_email = validate_email(
                address, check_deliverability=False
            ).normalized
        except EmailNotValidError:
            errors["email"] = "Enter a valid email"

    if platform not in {p.value for p in TradingPlatform}:
        errors["platform"] = "Select a platform"

    balance = _parse_balance(account_balance)
    if balance is None or balance < MIN_STARTING_BALANCE:
        errors["account_balance"] = "Minimum capital is $20"

    if agreed_terms is not True:
        errors["agreed_terms"] = "You must agree to the terms"

    if errors:
        raise ValidationError(errors)

    return ApplicationForm(
        full_name=name,
        whatsapp=phone,
        email=normalized_email.lower(),
        platform=platform,
        account_balance=balance,  # type: ignore[arg-type]
    )


def validate_credential(
    broker_name: str,
    server_name: str,
    login_number: str,
    password: str,
    platform: str,
) -> CredentialForm:
    """Validate a broker credential submission.

    Raises:
        ValidationError: With one message per failing field.
    """
    values = {
        "broker_name": (broker_name or "").strip(),
        "server_name": (server_name or "").strip(),
        "login_number": (login_number or "").strip(),
        "password": password or "",
    }
    errors: dict[str, str] = {}
    for name, value in values.items():
        if not value:
            errors[name] = "This field is required"
        elif len(value) > CREDENTIAL_FIELD_MAX_LEN:
            errors[name] = f"Must be at most {CREDENTIAL_FIELD_MAX_LEN} characters"
    if platform not in {p.value for p in CredentialPlatform}:
        errors["platform"] = "Select a platform"
    if errors:
        raise ValidationError(errors)
    return CredentialForm(platform=platform, **values)
