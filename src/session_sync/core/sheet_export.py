"""
Sheet export formatting

Turns the session collection into the 2-D grid written to the shift sheet,
and into the plain-text variants shared from the recorder.
"""

import re
from datetime import date
from typing import List, Sequence, Union

from .exceptions import ValidationError
from .models import Session, DEFAULT_TIME
from .time_format import format_time, date_display

Cell = Union[str, int]
Row = List[Cell]

# Business constant for the current roster; every export goes to shift A
SHIFT_LABEL = "SHIFT A"
DEFAULT_ROW_WINDOW = 73
EXPORT_COLUMNS = 8

_ANCHOR_PATTERN = re.compile(r"^([A-Za-z]*)(\d+)$")


def format_session_rows(session: Session, session_index: int) -> List[Row]:
    """
    Build one row per video of a session

    Columns: session id, session number, video number, start, end,
    "start - end", impedance label, notes. The session id, number and
    impedance label only appear on the session's first row. Start and end
    are blank while the start time is still the default.
    """
    rows: List[Row] = []
    for i, video in enumerate(session.videos):
        first = i == 0
        start = format_time(video.start_time)
        end = format_time(video.end_time)
        recorded = video.start_time != DEFAULT_TIME
        rows.append([
            session.session_id if first else "",
            session_index + 1 if first else "",
            i + 1,
            start if recorded else "",
            end if recorded else "",
            f"{start} - {end}",
            session.impedance_label if first else "",
            video.notes,
        ])
    return rows


def build_sheet_values(sessions: Sequence[Session], today: date) -> List[Row]:
    """Header rows (date, shift) followed by every session's rows."""
    values: List[Row] = [[date_display(today)], [SHIFT_LABEL]]
    for index, session in enumerate(sessions):
        values.extend(format_session_rows(session, index))
    return values


def _column_index(letters: str) -> int:
    index = 0
    for char in letters.upper():
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index


def _column_letters(index: int) -> str:
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def build_export_range(sheet_name: str, sheet_range: str, window: int = DEFAULT_ROW_WINDOW) -> str:
    """
    Resolve the A1 range an export writes to

    Args:
        sheet_name: Spreadsheet tab name
        sheet_range: Row anchor ("314") or cell anchor ("A314")
        window: Rows past the anchor covered by the range

    Returns:
        str: "Tab!314:387" for a row anchor, "Tab!A314:H387" for a cell anchor

    Raises:
        ValidationError: If the anchor is not a row number or cell reference
    """
    match = _ANCHOR_PATTERN.match(str(sheet_range).strip())
    if not match:
        raise ValidationError("Sheet range must be a row number or cell reference",
                              field="sheet_range", value=sheet_range)

    letters, row = match.group(1), int(match.group(2))
    if not letters:
        return f"{sheet_name}!{row}:{row + window}"

    last_column = _column_letters(_column_index(letters) + EXPORT_COLUMNS - 1)
    return f"{sheet_name}!{letters.upper()}{row}:{last_column}{row + window}"


def build_whatsapp_summary(sessions: Sequence[Session], today: date) -> str:
    """
    Plain-text shift summary for sharing in a chat

    Uses WhatsApp markup (*bold*, _italic_). Sessions with neither an id nor
    a recorded video are left out.
    """
    lines = [f"*{date_display(today)} - {SHIFT_LABEL}*"]

    for index, session in enumerate(sessions):
        recorded = [(n, video) for n, video in enumerate(session.videos, start=1) if video.is_recorded]
        if not session.session_id and not recorded:
            continue

        lines.append("")
        header = f"*Session {index + 1}*"
        if session.session_id:
            header += f" ({session.session_id})"
        if session.high_impedance or session.low_impedance:
            header += f" {session.impedance_label}"
        lines.append(header)

        if not recorded:
            lines.append("_No videos recorded_")
        for number, video in recorded:
            line = f"{number}. {format_time(video.start_time)} - {format_time(video.end_time)}"
            if video.notes:
                line += f" ({video.notes})"
            lines.append(line)

    return "\n".join(lines)


def format_clipboard_times(session: Session) -> str:
    """Tab-separated start/end per video, ready to paste into a sheet."""
    return "\n".join(
        f"{format_time(video.start_time)}\t{format_time(video.end_time)}"
        for video in session.videos
    )
