"""Document models implementing the sizing protocols."""

from .memory import MemoryCell, MemoryCellStyle, MemoryFont, MemoryRow, MemorySheet, MemoryWorkbook

__all__ = [
    "MemoryCell",
    "MemoryCellStyle",
    "MemoryFont",
    "MemoryRow",
    "MemorySheet",
    "MemoryWorkbook",
]
