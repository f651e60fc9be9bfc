"""CSV export: header row, quoted data cells, UTF-8 BOM so spreadsheets pick the encoding."""

from datetime import date
from typing import Iterable, Sequence

BOM = "\ufeff"


def _quote(value) -> str:
    if value is None:
        value = ""
    return '"' + str(value).replace('"', '""') + '"'


def build_csv(headers: Sequence[str], rows: Iterable[Sequence]) -> str:
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_quote(cell) for cell in row))
    return BOM + "\n".join(lines)


def export_filename(prefix: str, today: date = None) -> str:
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}.csv"
