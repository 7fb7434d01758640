# fleetops/utils/excel.py

"""
평탄 행(FlatRow) 목록과 컬럼 정의로 xlsx 파일을 만드는 내보내기 어댑터입니다.

- 'sno' 필드는 1부터 시작하는 일련번호입니다.
- 날짜/시각 값은 설정된 날짜 형식 문자열로, 목록 값은 ", "로 이어서 기록합니다.
- 값이 없으면 빈 셀로 기록합니다.
"""

import io
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Type

from fastapi import HTTPException, status
from fastapi.responses import Response
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from pydantic import BaseModel

from fleetops.core.config import settings
from fleetops.core.flatten import FlatRow
from fleetops.core.schemas import ColumnDefinition

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SERIAL_FIELD = "sno"


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, (datetime, date)):
        return value.strftime(settings.EXPORT_DATE_FORMAT)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value if item is not None)
    return value


def column_width(column: ColumnDefinition, date_fields: Iterable[str] = ()) -> int:
    if column.max_width:
        return column.max_width
    if column.field == SERIAL_FIELD:
        return settings.EXPORT_SERIAL_COLUMN_WIDTH
    if column.field in date_fields:
        return settings.EXPORT_DATE_COLUMN_WIDTH
    return settings.EXPORT_DEFAULT_COLUMN_WIDTH


def build_workbook(
    rows: Sequence[FlatRow],
    columns: Sequence[ColumnDefinition],
    *,
    sheet_name: str = "Sheet1",
    date_fields: Iterable[str] = (),
) -> bytes:
    """헤더 1행 + 데이터 행으로 구성된 워크북을 만들어 바이트로 반환합니다."""
    date_fields = set(date_fields)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_name[:31]

    sheet.append([column.label for column in columns])
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    for index, row in enumerate(rows, start=1):
        sheet.append([
            index if column.field == SERIAL_FIELD else _cell_value(row.get(column.field))
            for column in columns
        ])

    for position, column in enumerate(columns, start=1):
        sheet.column_dimensions[get_column_letter(position)].width = column_width(column, date_fields)

    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


def export_filename(prefix: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"{prefix}_{now.strftime('%Y%m%d%H%M%S')}.xlsx"


def xlsx_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def resolve_export_columns(
    columns: Optional[Sequence[ColumnDefinition]],
    row_model: Type[BaseModel],
    defaults: Sequence[ColumnDefinition],
) -> List[ColumnDefinition]:
    """
    요청 컬럼 정의를 검증합니다. 비어 있으면 기본 구성을 사용하고,
    행 모델에 없는 필드를 가리키면 400을 반환합니다.
    """
    if not columns:
        return list(defaults)
    known = set(row_model.model_fields) | {SERIAL_FIELD}
    unknown = [column.field for column in columns if column.field not in known]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown export column field(s): {', '.join(unknown)}",
        )
    return list(columns)
