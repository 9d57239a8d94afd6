"""All enum types for the print-job data model."""

import enum


# --- Label layout ---

class PrintFormat(str, enum.Enum):
    INDIVIDUAL_LABELS = "INDIVIDUAL_LABELS"
    SHEET_LAYOUT = "SHEET_LAYOUT"
    ADHESIVE_LABELS = "ADHESIVE_LABELS"


class LabelSize(str, enum.Enum):
    SMALL_20MM = "SMALL_20MM"
    MEDIUM_25MM = "MEDIUM_25MM"
    LARGE_30MM = "LARGE_30MM"


class PaperType(str, enum.Enum):
    STANDARD = "STANDARD"
    AVERY_5160 = "AVERY_5160"
    AVERY_5161 = "AVERY_5161"


# --- Print jobs ---

class PrintMethod(str, enum.Enum):
    MOBILE_BROWSER = "MOBILE_BROWSER"
    PDF_DOWNLOAD = "PDF_DOWNLOAD"
    EMAIL_TO_PRINTER = "EMAIL_TO_PRINTER"
    NATIVE_SHARE = "NATIVE_SHARE"


class PrintPriority(str, enum.Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class PrintJobStatus(str, enum.Enum):
    PENDING = "PENDING"
    GENERATING = "GENERATING"
    READY = "READY"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ClientJobStatus(str, enum.Enum):
    """What the submitting client tracks for a job it created."""

    PENDING = "PENDING"
    READY = "READY"
    FAILED = "FAILED"


# --- Printers ---

class PrinterType(str, enum.Enum):
    OFFICE_PRINTER = "OFFICE_PRINTER"
    MOBILE_BROWSER = "MOBILE_BROWSER"
    EMAIL_TO_PRINT = "EMAIL_TO_PRINT"
    CLOUD_PRINT = "CLOUD_PRINT"
