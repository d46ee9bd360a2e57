"""
Hosted backend adapter: Supabase tables accessed through the PostgREST API.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Type

import requests
from pydantic import ValidationError as PydanticValidationError

from ..domain.exceptions import BookingError, SlotConflict, StoreUnavailable, ValidationError
from ..domain.models import Appointment, AppointmentStatus, AvailabilityWindow, Barber
from .rows import AppointmentRow, AvailabilityRow, BarberRow, _Row, appointment_payload

logger = logging.getLogger(__name__)

# Postgres error codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class _UniqueViolation(StoreUnavailable):
    """Raised internally when the store rejects a write on a unique index."""


class SupabaseStore:
    """
    Store adapter for the ``appointments``, ``barbers`` and
    ``barber_availability`` tables.

    Requests are blocking ``requests`` calls executed in a worker thread so
    the async service never blocks its event loop. Transport failures,
    timeouts and error responses surface as StoreUnavailable; nothing is
    retried here.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the store adapter.

        Args:
            url: Project URL, e.g. https://xyz.supabase.co
            api_key: Anon or service-role key
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    # Availability windows

    async def list_availability_windows(self, barber_id: str) -> List[AvailabilityWindow]:
        rows = await self._call(
            "GET",
            "barber_availability",
            params={"select": "*", "barber_id": f"eq.{barber_id}", "order": "from_date.asc"},
        )
        return self._parse_rows(rows, AvailabilityRow, skip_invalid=True)

    async def list_all_availability(self) -> List[AvailabilityWindow]:
        rows = await self._call("GET", "barber_availability", params={"select": "*"})
        return self._parse_rows(rows, AvailabilityRow, skip_invalid=True)

    async def upsert_availability_window(
        self,
        barber_id: str,
        from_date: date,
        to_date: date,
        start_time: str,
        end_time: str,
        is_available: bool,
    ) -> None:
        """
        Update the row keyed by barber and exact date range, or insert a new one.

        The lookup and the write are separate requests; concurrent admin edits
        are last-write-wins.
        """
        existing = await self._call(
            "GET",
            "barber_availability",
            params={
                "select": "id",
                "barber_id": f"eq.{barber_id}",
                "from_date": f"eq.{from_date.isoformat()}",
                "to_date": f"eq.{to_date.isoformat()}",
                "limit": "1",
            },
        )
        values = {
            "is_available": is_available,
            "start_time": start_time,
            "end_time": end_time,
        }

        if existing:
            await self._call(
                "PATCH",
                "barber_availability",
                params={"id": f"eq.{existing[0]['id']}"},
                json=values,
            )
            return

        await self._call(
            "POST",
            "barber_availability",
            json={
                "barber_id": barber_id,
                "from_date": from_date.isoformat(),
                "to_date": to_date.isoformat(),
                **values,
            },
        )

    async def delete_availability_window(self, window_id: str) -> None:
        await self._call("DELETE", "barber_availability", params={"id": f"eq.{window_id}"})

    # Appointments

    async def list_confirmed_appointment_times(self, barber_id: str, day: date) -> List[str]:
        rows = await self._call(
            "GET",
            "appointments",
            params={
                "select": "*",
                "barber_id": f"eq.{barber_id}",
                "appointment_date": f"eq.{day.isoformat()}",
                "status": f"eq.{AppointmentStatus.CONFIRMED.value}",
            },
        )
        appointments = self._parse_rows(rows, AppointmentRow)
        return [appointment.appointment_time for appointment in appointments]

    async def find_confirmed_appointment(
        self, barber_id: str, day: date, time: str
    ) -> Optional[Appointment]:
        rows = await self._call(
            "GET",
            "appointments",
            params={
                "select": "*",
                "barber_id": f"eq.{barber_id}",
                "appointment_date": f"eq.{day.isoformat()}",
                "appointment_time": f"eq.{time}",
                "status": f"eq.{AppointmentStatus.CONFIRMED.value}",
                "limit": "1",
            },
        )
        parsed = self._parse_rows(rows, AppointmentRow)
        return parsed[0] if parsed else None

    async def insert_appointment(self, appointment: Appointment) -> Appointment:
        """
        Insert an appointment and return the stored row.

        Raises:
            SlotConflict: If the store's unique index already holds the slot
        """
        try:
            rows = await self._call(
                "POST",
                "appointments",
                json=appointment_payload(appointment),
                prefer="return=representation",
            )
        except _UniqueViolation as exc:
            raise SlotConflict(
                appointment.barber_id,
                appointment.appointment_date.isoformat(),
                appointment.appointment_time,
            ) from exc

        parsed = self._parse_rows(rows, AppointmentRow)
        if not parsed:
            raise StoreUnavailable("Store did not return the inserted appointment")
        return parsed[0]

    async def list_appointments(self) -> List[Appointment]:
        rows = await self._call(
            "GET",
            "appointments",
            params={"select": "*", "order": "appointment_date.desc"},
        )
        return self._parse_rows(rows, AppointmentRow, skip_invalid=True)

    async def update_appointment_status(
        self, appointment_id: str, status: AppointmentStatus
    ) -> Appointment:
        try:
            rows = await self._call(
                "PATCH",
                "appointments",
                params={"id": f"eq.{appointment_id}"},
                json={"status": status.value},
                prefer="return=representation",
            )
        except _UniqueViolation as exc:
            # Re-confirming an appointment whose slot was booked again meanwhile
            raise SlotConflict() from exc
        parsed = self._parse_rows(rows, AppointmentRow)
        if not parsed:
            raise ValidationError(f"Appointment not found: {appointment_id}")
        return parsed[0]

    # Barbers

    async def list_active_barbers(self) -> List[Barber]:
        rows = await self._call(
            "GET",
            "barbers",
            params={"select": "*", "is_active": "eq.true", "order": "name.asc"},
        )
        return self._parse_rows(rows, BarberRow, skip_invalid=True)

    async def get_barber(self, barber_id: str) -> Optional[Barber]:
        rows = await self._call(
            "GET",
            "barbers",
            params={"select": "*", "id": f"eq.{barber_id}", "limit": "1"},
        )
        parsed = self._parse_rows(rows, BarberRow)
        return parsed[0] if parsed else None

    # Transport

    async def _call(
        self,
        method: str,
        table: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        prefer: Optional[str] = None,
    ) -> Any:
        return await asyncio.to_thread(
            self._request, method, table, params=params, json=json, prefer=prefer
        )

    def _request(
        self,
        method: str,
        table: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        prefer: Optional[str] = None,
    ) -> Any:
        """
        Perform one PostgREST request.

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            _UniqueViolation: On a Postgres unique_violation
            ValidationError: On a foreign key violation, e.g. an unknown barber
            StoreUnavailable: On transport errors and other error responses
        """
        url = f"{self.base_url}/{table}"
        headers = {"Prefer": prefer} if prefer else None

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("Store request %s %s failed: %s", method, table, e)
            raise StoreUnavailable(f"Could not reach the booking store: {e}") from e

        if response.status_code >= 400:
            error = self._error_body(response)
            code = error.get("code")
            if code == UNIQUE_VIOLATION:
                raise _UniqueViolation(error.get("message", "duplicate key"))
            if code == FOREIGN_KEY_VIOLATION:
                logger.warning("Store rejected %s %s: %s", method, table, error.get("message"))
                raise ValidationError("Referenced barber or record does not exist")

            logger.error(
                "Store request %s %s returned %s: %s",
                method, table, response.status_code, error.get("message", response.text),
            )
            raise StoreUnavailable(
                f"Booking store request failed with status {response.status_code}"
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise StoreUnavailable(f"Booking store returned invalid JSON: {e}") from e

    @staticmethod
    def _error_body(response: requests.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    @staticmethod
    def _parse_rows(
        rows: Any,
        row_type: Type[_Row],
        skip_invalid: bool = False,
    ) -> List[Any]:
        """
        Validate raw rows and convert them to domain objects.

        Listing endpoints skip malformed rows with a warning; lookups that
        the booking decision depends on fail with StoreUnavailable instead.
        """
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise StoreUnavailable(f"Expected a list of rows, got {type(rows).__name__}")

        parsed: List[Any] = []
        for raw in rows:
            try:
                parsed.append(row_type.model_validate(raw).to_domain())
            except (PydanticValidationError, BookingError) as e:
                if not skip_invalid:
                    raise StoreUnavailable(f"Malformed {row_type.__name__}: {e}") from e
                logger.warning("Skipping malformed %s: %s", row_type.__name__, e)
        return parsed
