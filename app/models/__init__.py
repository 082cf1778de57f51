from app.models.provider import CurrentProvider, Provider, ProviderPublic, ProviderUpdate
from app.models.slot import Slot, SlotCreate, SlotPublic
from app.models.appointment import (
    Appointment,
    AppointmentBooking,
    AppointmentFilter,
    AppointmentPublic,
    AppointmentStatus,
)
from app.models.contact_info import ContactInfo, ContactInfoPublic, ContactInfoUpdate
from app.models.booking import (
    BoardingBooking,
    BoardingBookingCreate,
    PetTransportation,
    PetTransportationCreate,
)

__all__ = [
    "CurrentProvider",
    "Provider",
    "ProviderPublic",
    "ProviderUpdate",
    "Slot",
    "SlotCreate",
    "SlotPublic",
    "Appointment",
    "AppointmentBooking",
    "AppointmentFilter",
    "AppointmentPublic",
    "AppointmentStatus",
    "ContactInfo",
    "ContactInfoPublic",
    "ContactInfoUpdate",
    "BoardingBooking",
    "BoardingBookingCreate",
    "PetTransportation",
    "PetTransportationCreate",
]
