"""Parser for batch import files.

Files are UTF-8 CSV with one header row, then one task per line:
``title,description,ownerName,ownerEmail,assignedByName,assignedByEmail``.
"""

import logging

from pydantic import BaseModel, Field

from src.core.config import Constants
from src.core.errors import MalformedRowError
from src.domain.task import Person, TaskCreateRequest


logger = logging.getLogger(__name__)


class ImportRow(BaseModel):
    """One parsed task line of an import file."""

    line_number: int = Field(..., description="1-based line number in the file")
    title: str
    description: str
    owner_name: str
    owner_email: str
    assigned_by_name: str
    assigned_by_email: str

    def to_request(self) -> TaskCreateRequest:
        """Convert to the same draft a POST /tasks body produces."""
        return TaskCreateRequest(
            title=self.title,
            description=self.description,
            owner=Person(name=self.owner_name, email=self.owner_email),
            assigned_by=Person(name=self.assigned_by_name, email=self.assigned_by_email),
        )


def parse_import_file(content: str) -> list[ImportRow]:
    """Parse import file text into rows.

    The header row and blank lines are skipped. Carriage returns are stripped.
    Every other line must split into exactly six comma-separated fields.

    Args:
        content: Full file text

    Returns:
        Parsed rows in file order

    Raises:
        MalformedRowError: If any line has the wrong number of fields
    """
    rows = []
    lines = content.replace("\r", "").split("\n")

    for index, line in enumerate(lines[Constants.IMPORT_FILE_HEADER_ROWS :], start=Constants.IMPORT_FILE_HEADER_ROWS + 1):
        if not line.strip():
            continue

        fields = [field.strip() for field in line.split(",")]
        if len(fields) != Constants.IMPORT_FILE_FIELDS:
            logger.warning("Rejecting malformed import row at line %d (%d fields)", index, len(fields))
            raise MalformedRowError(line_number=index, field_count=len(fields), expected=Constants.IMPORT_FILE_FIELDS)

        title, description, owner_name, owner_email, assigned_by_name, assigned_by_email = fields
        rows.append(
            ImportRow(
                line_number=index,
                title=title,
                description=description,
                owner_name=owner_name,
                owner_email=owner_email,
                assigned_by_name=assigned_by_name,
                assigned_by_email=assigned_by_email,
            )
        )

    return rows
