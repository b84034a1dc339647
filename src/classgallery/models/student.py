"""
Student model for classgallery.

A student is a flat roster record created by the admin. The login secret is
stored as entered because the admin hands it out and reads it back from the
roster table.
"""

import re
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

DEFAULT_CLASS = "X"
DEFAULT_SECTION = "A"


@dataclass
class Student:
    """
    A roster entry.

    ``id`` is the storage record id; ``student_id`` is the identifier the
    student types on the login screen.
    """

    id: str
    student_id: str
    password: str
    name: str
    roll_no: str = ""
    class_name: str = DEFAULT_CLASS
    section: str = DEFAULT_SECTION
    email: str = ""
    phone: str = ""
    created_at: datetime | None = field(default=None, compare=False)

    @classmethod
    def create_new(
        cls,
        student_id: str,
        password: str,
        name: str,
        roll_no: str = "",
        class_name: str = DEFAULT_CLASS,
        section: str = DEFAULT_SECTION,
        email: str = "",
        phone: str = "",
    ) -> "Student":
        """
        Create a new Student with a generated record id and the current time.

        Args:
            student_id: Login identifier, e.g. ``STU001``
            password: Login secret
            name: Display name
            roll_no: Roll number within the class
            class_name: Class label
            section: Section label
            email: Contact email
            phone: Contact phone

        Returns:
            New Student instance
        """
        return cls(
            id=str(uuid.uuid4()),
            student_id=student_id.strip(),
            password=password,
            name=name.strip(),
            roll_no=roll_no.strip(),
            class_name=class_name.strip(),
            section=section.strip(),
            email=email.strip(),
            phone=phone.strip(),
            created_at=datetime.now(UTC),
        )

    def to_row(self) -> dict:
        """
        Convert to the column layout of the ``students`` table.

        The record id and creation time are left to the backend.
        """
        return {
            "student_id": self.student_id,
            "password": self.password,
            "name": self.name,
            "roll_no": self.roll_no,
            "class": self.class_name,
            "section": self.section,
            "email": self.email,
            "phone": self.phone,
        }

    def to_dict(self) -> dict:
        """Convert to the JSON form kept in the local store."""
        return {
            "id": self.id,
            **self.to_row(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_row(cls, row: dict) -> "Student":
        """
        Create a Student from a backend row or a local-store dict.

        Optional columns that are missing or null become empty strings.
        """
        created_at = row.get("created_at")
        if isinstance(created_at, str) and created_at:
            created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))

        return cls(
            id=str(row["id"]),
            student_id=row["student_id"],
            password=row.get("password") or "",
            name=row.get("name") or "",
            roll_no=row.get("roll_no") or "",
            class_name=row.get("class") or "",
            section=row.get("section") or "",
            email=row.get("email") or "",
            phone=row.get("phone") or "",
            created_at=created_at or None,
        )

    from_dict = from_row

    def validate(self) -> dict[str, str]:
        """
        Check the fields the login flow and roster depend on.

        Returns:
            Mapping of field name to problem; empty when the record is valid
        """
        errors = {}

        if not self.student_id.strip():
            errors["student_id"] = "Student ID is required"
        if not self.password:
            errors["password"] = "Password is required"
        if not self.name.strip():
            errors["name"] = "Name is required"
        if self.email and not EMAIL_PATTERN.match(self.email):
            errors["email"] = "Email address is not valid"

        return errors

    def matches(self, term: str) -> bool:
        """Case-insensitive search on name, student ID and roll number."""
        needle = term.strip().lower()
        if not needle:
            return True
        return any(needle in value.lower() for value in (self.name, self.student_id, self.roll_no))

    def display_label(self) -> str:
        """Label used in pickers, e.g. ``Asha Rao (STU001)``."""
        return f"{self.name} ({self.student_id})"

    def class_summary(self) -> str:
        """Header line for the student dashboard."""
        parts = [f"{self.class_name} {self.section}".strip()]
        if self.roll_no:
            parts.append(f"Roll No: {self.roll_no}")
        return " • ".join(part for part in parts if part)
