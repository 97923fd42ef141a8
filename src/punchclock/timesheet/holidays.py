"""National holidays and substitute days off (2025-2026).

Read-only data used to annotate calendar cells; it never changes worked hours.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

HOLIDAYS: dict[str, str] = {
    # 2025 (partial)
    "2025-01-01": "元旦",
    "2025-01-27": "春節前一日",
    "2025-01-28": "除夕",
    "2025-01-29": "春節初一",
    "2025-01-30": "春節初二",
    "2025-01-31": "春節初三",
    "2025-02-01": "春節初四",
    "2025-02-02": "春節初五",
    "2025-02-28": "和平紀念日",
    "2025-04-03": "兒童節補假",
    "2025-04-04": "兒童節/節氣清明",
    "2025-05-01": "勞動節",
    "2025-05-30": "端午節前一日",
    "2025-05-31": "端午節",
    "2025-10-06": "中秋節",
    "2025-10-10": "國慶日",
    # 2026
    "2026-01-01": "元旦",
    "2026-02-16": "春節前一日(補假)",
    "2026-02-17": "除夕",
    "2026-02-18": "春節初一",
    "2026-02-19": "春節初二",
    "2026-02-20": "春節初三",
    "2026-02-21": "春節初四",
    "2026-02-22": "春節初五",
    "2026-02-27": "和平紀念日補假",
    "2026-02-28": "和平紀念日",
    "2026-04-03": "兒童節補假",
    "2026-04-04": "兒童節",
    "2026-04-05": "清明節",
    "2026-04-06": "清明節補假",
    "2026-05-01": "勞動節",
    "2026-06-19": "端午節",
    "2026-09-25": "中秋節",
    "2026-09-28": "孔子誕辰紀念日(教師節)",
    "2026-10-09": "國慶日補假",
    "2026-10-10": "國慶日",
    "2026-12-25": "行憲紀念日",
}


def holiday_name(day: date) -> Optional[str]:
    return HOLIDAYS.get(day.strftime("%Y-%m-%d"))
