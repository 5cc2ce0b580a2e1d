"""
섹션 시간표 엑셀 내보내기
"""
import io
import re
import logging
import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)

HEADERS = ['Subject', 'Faculty', 'Sections', 'Room', 'Day', 'Start Time', 'End Time']
COLUMN_WIDTHS = [28, 22, 24, 12, 12, 12, 12]
HEADER_FILL = PatternFill(start_color='0052CC', end_color='0052CC', fill_type='solid')

# 엑셀 시트명 금지 문자
_SHEET_NAME_RE = re.compile(r'[\\/*?:\[\]]')


def _sheet_title(section_name):
    title = _SHEET_NAME_RE.sub('_', section_name or 'Timetable').strip()
    return title[:31] or 'Timetable'


def export_filename(section_name):
    safe = re.sub(r'[^0-9A-Za-z_-]+', '_', section_name or '').strip('_')
    return f"timetable_{safe or 'section'}.xlsx"


def build_section_workbook(section_name, entries):
    """섹션 시간표 항목(이미 정렬됨) → xlsx 바이트 스트림"""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = _sheet_title(section_name)

    ws.append(HEADERS)
    for cell in ws[1]:
        cell.font = Font(bold=True, color='FFFFFF')
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal='center')

    for entry in entries:
        ws.append([
            entry.subject_name,
            entry.faculty_name,
            ', '.join(entry.section_names),
            entry.room,
            entry.day,
            entry.start_time,
            entry.end_time,
        ])

    for i, width in enumerate(COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(i)].width = width
    ws.freeze_panes = 'A2'

    stream = io.BytesIO()
    wb.save(stream)
    wb.close()
    stream.seek(0)
    logger.info(f"시간표 엑셀 생성: {section_name} ({len(entries)}개 수업)")
    return stream
