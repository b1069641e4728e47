# Seed reports around Bcons Plaza / Dong Hoa, Binh Duong.
# Ages are chosen so every slider position has something to show:
# 5m and 45m (urgent), 3h (urgent edge), 8h (day), 20h and 2 days (history only).
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from .models import (
    FloodForecast,
    FloodReport,
    ForecastTrend,
    GeoLocation,
    HistoricalPeak,
    RiskLevel,
)

IMAGES = {
    "URBAN": "https://images.unsplash.com/photo-1598525046208-410c5710664f?auto=format&fit=crop&w=800&q=80",
    "DEEP": "https://images.unsplash.com/photo-1476900164809-ff19b8ae5968?auto=format&fit=crop&w=800&q=80",
    "RESCUE": "https://images.unsplash.com/photo-1543857770-2646c0d8f0f0?auto=format&fit=crop&w=800&q=80",
    "MUD": "https://images.unsplash.com/photo-1603788770732-8411d3326164?auto=format&fit=crop&w=800&q=80",
    "RURAL": "https://images.unsplash.com/photo-1572960627787-25e296803277?auto=format&fit=crop&w=800&q=80",
}

BINH_DUONG_DATA = [
    {
        "lat": 10.8850, "lng": 106.7810,
        "loc": "Cổng chính Bcons Plaza, Thống Nhất",
        "desc": "Nước tràn vào tầng hầm B1, 2 người già đang kẹt trong thang máy chưa ra được.",
        "img": "DEEP", "risk": "High", "depth": "1.2m",
        "obj": ["Basement", "Elevator", "Car"],
        "vulnerable": ["Elderly", "Security Guard"],
        "trend": "Rising", "change": "+0.1m", "time": "Urgent",
        "minutes_ago": 5,
        "peaks": [(2022, "0.8m", "Oct 2022"), (2019, "1.0m", "Nov 2019")],
    },
    {
        "lat": 10.8900, "lng": 106.7900,
        "loc": "Bến Xe Miền Đông Mới",
        "desc": "Ngập cục bộ bãi đón khách, xe buýt vẫn di chuyển được nhưng chậm.",
        "img": "URBAN", "risk": "Medium", "depth": "0.4m",
        "obj": ["Bus", "Passenger"],
        "vulnerable": [],
        "trend": "Stable", "change": "0m", "time": "1h",
        "minutes_ago": 45,
        "peaks": [(2020, "0.5m", "Sep 2020")],
    },
    {
        "lat": 10.8820, "lng": 106.7780,
        "loc": "Khu dân cư Tân Hòa, Đông Hòa",
        "desc": "Nước ngập sâu vào nhà dân, có trẻ sơ sinh cần di tản gấp.",
        "img": "RESCUE", "risk": "High", "depth": "1.5m",
        "obj": ["House", "Baby Crib"],
        "vulnerable": ["Baby", "Mother"],
        "trend": "Rising", "change": "+0.2m", "time": "Now",
        "minutes_ago": 180,
        "peaks": [(2018, "1.8m", "Oct 2018")],
    },
    {
        "lat": 10.8750, "lng": 106.7850,
        "loc": "Hồ Đá, Làng Đại Học",
        "desc": "Đường trơn trượt do bùn đất sau mưa, cảnh báo đi chậm.",
        "img": "MUD", "risk": "Low", "depth": "0.1m",
        "obj": ["Road", "Tree"],
        "vulnerable": [],
        "trend": "Receding", "change": "-0.1m", "time": "30m",
        "minutes_ago": 480,
        "peaks": [],
    },
    {
        "lat": 10.8880, "lng": 106.7720,
        "loc": "Gần Big C Go! Dĩ An",
        "desc": "Sự cố chập điện do nước ngập, cần cứu hỏa hỗ trợ.",
        "img": "URBAN", "risk": "High", "depth": "0.8m",
        "obj": ["Electric Pole", "Sparks"],
        "vulnerable": [],
        "trend": "Stable", "change": "0m", "time": "Unknown",
        "minutes_ago": 1200,
        "peaks": [(2023, "0.6m", "Nov 2023")],
    },
    {
        "lat": 10.8800, "lng": 106.7750,
        "loc": "QL1K đoạn cầu vượt Linh Xuân",
        "desc": "Ngập nhẹ sau cơn mưa lớn hôm kia.",
        "img": "RURAL", "risk": "Low", "depth": "0.2m",
        "obj": ["Road"],
        "vulnerable": [],
        "trend": "Receding", "change": "0m", "time": "Cleared",
        "minutes_ago": 2880,
        "peaks": [(2021, "0.5m", "Oct 2021")],
    },
]


def _advice(item) -> str:
    action = "Evacuate immediately / Sơ tán ngay." if item["risk"] == "High" else "Move to higher ground."
    return f"AI ANALYSIS: {item['desc']} \nRECOMMENDATION: {action}"


def build_demo_reports(now: Optional[datetime] = None) -> List[FloodReport]:
    now = now or datetime.now(timezone.utc)
    reports = []
    for index, item in enumerate(BINH_DUONG_DATA):
        reports.append(FloodReport(
            id=f"rep-{index}",
            location=GeoLocation(lat=item["lat"], lng=item["lng"]),
            image_url=IMAGES[item["img"]],
            depth=item["depth"],
            risk=RiskLevel(item["risk"]),
            objects_detected=tuple(item["obj"]),
            vulnerable_people=tuple(item["vulnerable"]),
            advice=_advice(item),
            timestamp=now - timedelta(minutes=item["minutes_ago"]),
            address=item["loc"],
            forecast=FloodForecast(
                trend=ForecastTrend(item["trend"]),
                predicted_change=item["change"],
                estimated_clearance_time=item["time"],
            ),
            historical_peaks=tuple(HistoricalPeak(year=y, level=lvl, date=d) for y, lvl, d in item["peaks"]),
        ))
    reports.sort(key=lambda r: r.timestamp, reverse=True)
    return reports
