"""MongoDB Beanie models for the patient and staff directories (read-only here)."""

from typing import Optional

from beanie import Document
from pydantic import Field


class PatientDirectoryMongo(Document):
    """Patient display information."""

    patient_id: str = Field(..., description="Patient ID")
    first_name: str = Field(default="", description="Patient first name")
    last_name: str = Field(default="", description="Patient last name")

    class Settings:
        name = "patients"
        indexes = ["patient_id"]


class StaffMemberMongo(Document):
    """Clinic team member display information."""

    staff_id: str = Field(..., description="Team member ID")
    first_name: Optional[str] = Field(None, description="First name")
    last_name: Optional[str] = Field(None, description="Last name")
    job_title: Optional[str] = Field(None, description="Job title, used when no name is set")

    class Settings:
        name = "team_members"
        indexes = ["staff_id"]
