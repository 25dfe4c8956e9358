"""
MongoDB implementation of the IdentityService port (display name lookups).
"""

from typing import Optional

from clinicqueue.application.ports.services.identity_service import IdentityService

from ..models.directory_m import PatientDirectoryMongo, StaffMemberMongo


class MongoIdentityService(IdentityService):
    """Resolves patient and staff display names from the directory collections."""

    async def get_patient_display_name(self, patient_id: str) -> Optional[str]:
        patient = await PatientDirectoryMongo.find_one(
            PatientDirectoryMongo.patient_id == patient_id
        )
        if not patient:
            return None
        return f"{patient.first_name} {patient.last_name}".strip() or None

    async def get_staff_display_name(self, staff_id: str) -> Optional[str]:
        member = await StaffMemberMongo.find_one(StaffMemberMongo.staff_id == staff_id)
        if not member:
            return None
        full_name = f"{member.first_name or ''} {member.last_name or ''}".strip()
        return full_name or member.job_title or None
