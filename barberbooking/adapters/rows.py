"""
Typed row schemas for data crossing the store boundary.

Rows returned by the hosted backend are loosely typed JSON; they are
validated here before the domain sees them.
"""

from datetime import date, datetime
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator

from ..domain.models import Appointment, AppointmentStatus, AvailabilityWindow, Barber
from ..domain.slot_generator import normalize_clock


def _opaque_id(value: Any) -> Any:
    """Backends hand out integer or UUID ids; the core treats them as opaque strings."""
    if value is None:
        return value
    return str(value)


Identifier = Annotated[str, BeforeValidator(_opaque_id)]


class _Row(BaseModel):
    model_config = ConfigDict(extra="ignore")


class AvailabilityRow(_Row):
    """Row of the ``barber_availability`` table."""
    id: Optional[Identifier] = None
    barber_id: Identifier
    from_date: date
    to_date: date
    start_time: str
    end_time: str
    is_available: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_time(cls, value: str) -> str:
        return normalize_clock(value)

    def to_domain(self) -> AvailabilityWindow:
        return AvailabilityWindow(
            id=self.id,
            barber_id=self.barber_id,
            from_date=self.from_date,
            to_date=self.to_date,
            start_time=self.start_time,
            end_time=self.end_time,
            is_available=self.is_available,
        )


class AppointmentRow(_Row):
    """Row of the ``appointments`` table."""
    id: Optional[Identifier] = None
    customer_name: str
    customer_email: str
    customer_phone: str
    barber_id: Identifier
    service_type: Optional[str] = None
    appointment_date: date
    appointment_time: str
    status: AppointmentStatus = AppointmentStatus.CONFIRMED
    created_at: Optional[datetime] = None

    @field_validator("appointment_time")
    @classmethod
    def normalize_time(cls, value: str) -> str:
        return normalize_clock(value)

    def to_domain(self) -> Appointment:
        return Appointment(
            id=self.id,
            customer_name=self.customer_name,
            customer_email=self.customer_email,
            customer_phone=self.customer_phone,
            barber_id=self.barber_id,
            service_type=self.service_type,
            appointment_date=self.appointment_date,
            appointment_time=self.appointment_time,
            status=self.status,
            created_at=self.created_at,
        )


class BarberRow(_Row):
    """Row of the ``barbers`` table."""
    id: Identifier
    name: str
    is_active: bool = True
    photo_path: Optional[str] = None

    def to_domain(self) -> Barber:
        return Barber(
            id=self.id,
            name=self.name,
            is_active=self.is_active,
            photo_path=self.photo_path,
        )


def appointment_payload(appointment: Appointment) -> Dict[str, Any]:
    """Serialize an appointment for insertion; the store assigns id and created_at."""
    return {
        "customer_name": appointment.customer_name,
        "customer_email": appointment.customer_email,
        "customer_phone": appointment.customer_phone,
        "barber_id": appointment.barber_id,
        "service_type": appointment.service_type,
        "appointment_date": appointment.appointment_date.isoformat(),
        "appointment_time": appointment.appointment_time,
        "status": appointment.status.value,
    }
