"""Print-job domain enums.

Print jobs live on disk as JSON documents, so this package holds no ORM models.
"""

from app.models.enums import (  # noqa: F401
    ClientJobStatus,
    LabelSize,
    PaperType,
    PrinterType,
    PrintFormat,
    PrintJobStatus,
    PrintMethod,
    PrintPriority,
)
