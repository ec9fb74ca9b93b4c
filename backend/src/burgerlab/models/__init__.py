from .brands import Brand
from .menu import MenuItem, Nutrition
from .ingest_logs import IngestLog, IngestStatus

__all__ = ["Brand", "MenuItem", "Nutrition", "IngestLog", "IngestStatus"]
