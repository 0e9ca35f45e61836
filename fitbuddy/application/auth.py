"""Session probing and sign-in flows against the backend."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..models import PhoneSignIn, User
from ..services.fitness_api import FitnessApiError
from ..services.interfaces import FitnessAPI

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY_CODE = "+91"
MIN_PHONE_DIGITS = 10


class InvalidPhoneNumberError(ValueError):
    """Raised when a phone number has fewer than ten digits."""


def normalize_phone_number(raw: str) -> str:
    """Strip formatting and prefix the default country code when none is given."""

    digits = re.sub(r"\D", "", raw)
    if len(digits) < MIN_PHONE_DIGITS:
        raise InvalidPhoneNumberError("Please enter a valid phone number")
    if raw.strip().startswith("+"):
        return f"+{digits}"
    return f"{DEFAULT_COUNTRY_CODE}{digits}"


@dataclass
class CurrentUserUseCase:
    """Return the signed-in user, or None for an anonymous session."""

    api: FitnessAPI

    async def __call__(self) -> Optional[User]:
        try:
            return await self.api.get_user()
        except FitnessApiError as exc:
            if exc.is_unauthenticated:
                logger.debug("Session probe returned %s", exc.status_code)
                return None
            raise


@dataclass
class PhoneSignInUseCase:
    api: FitnessAPI

    async def __call__(self, id_token: str, phone_number: str) -> Optional[User]:
        payload = PhoneSignIn(id_token=id_token, phone_number=normalize_phone_number(phone_number))
        return await self.api.sign_in_with_phone(payload)


@dataclass
class LogoutUseCase:
    api: FitnessAPI

    async def __call__(self) -> None:
        await self.api.logout()


__all__ = [
    "CurrentUserUseCase",
    "InvalidPhoneNumberError",
    "LogoutUseCase",
    "PhoneSignInUseCase",
    "normalize_phone_number",
]
