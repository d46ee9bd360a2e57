"""
Booking notifications through the hosted ``send-booking-notification`` edge function.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from ..domain.exceptions import NotificationFailure
from ..domain.models import Appointment

logger = logging.getLogger(__name__)


class SupabaseNotifier:
    """
    Posts booking details to the edge function that sends the customer's
    confirmation email and SMS.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        function_name: str = "send-booking-notification",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = f"{url.rstrip('/')}/functions/v1/{function_name}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

    async def notify_booking(
        self, appointment: Appointment, barber_name: str, service_name: str
    ) -> None:
        payload = build_notification_payload(appointment, barber_name, service_name)
        await asyncio.to_thread(self._post, payload)

    def _post(self, payload: Dict[str, Any]) -> None:
        try:
            response = self.session.post(
                self.endpoint,
                headers=self.headers,
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise NotificationFailure(f"Failed to send booking notification: {e}") from e

        logger.info(
            "Booking notification sent for %s %s",
            payload["appointmentDate"], payload["appointmentTime"],
        )


def build_notification_payload(
    appointment: Appointment, barber_name: str, service_name: str
) -> Dict[str, Any]:
    """Request body expected by the notification edge function."""
    return {
        "customerName": appointment.customer_name,
        "customerEmail": appointment.customer_email,
        "customerPhone": appointment.customer_phone,
        "appointmentDate": appointment.appointment_date.isoformat(),
        "appointmentTime": appointment.appointment_time,
        "barberName": barber_name,
        "serviceName": service_name,
    }
