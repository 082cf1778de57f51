from datetime import date

from pydantic import BaseModel

from app.models.appointment import AppointmentFilter, AppointmentPublic, AppointmentStatus
from app.models.slot import SlotPublic


class DaySlotsResponse(BaseModel):
    date: date
    slots: list[SlotPublic]


class AppointmentListResponse(BaseModel):
    filter: AppointmentFilter
    appointments: list[AppointmentPublic]


class StatusUpdateRequest(BaseModel):
    status: AppointmentStatus


class DashboardResponse(BaseModel):
    total_appointments: int
    today_appointments: int
    upcoming_appointments: int
    available_slots: int
