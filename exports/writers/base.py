from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class DocumentMeta:
    """Presentation details for document writers.

    Purely cosmetic: none of it changes which rows are written or their order.
    ``sheets`` holds named extra tables (per-department breakdowns of a
    report) that spreadsheet writers add after the main one.
    """
    title: str = ''
    subtitle: str = ''
    logo_path: str = ''
    generated_at: Optional[datetime] = None
    generated_by: str = ''
    extra_info: Mapping[str, str] = field(default_factory=dict)
    landscape: bool = False
    group_by: Optional[str] = None
    sheets: Tuple[Tuple[str, Tuple[Dict[str, Any], ...]], ...] = ()


class Writer:
    format: str = ''
    media_type: str = 'application/octet-stream'
    extension: str = ''

    def write(self, rows: Iterable[Dict[str, Any]], columns: Sequence[str], *, header: bool = True,
              header_map: Optional[Mapping[str, str]] = None, meta: Optional[DocumentMeta] = None) -> bytes:
        raise NotImplementedError
