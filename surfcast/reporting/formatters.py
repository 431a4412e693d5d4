"""Output formatters for charts, sessions and averages."""

import json
from datetime import tzinfo

from surfcast.models.beach import Beach, BeachData
from surfcast.models.forecast import AverageConditions, Chart, DayBucket
from surfcast.models.session import RecordView, Session


def _direction(degrees: float | None) -> str:
    return "-" if degrees is None else f"{degrees:.0f}°"


def _wave_height(value: float | None) -> str:
    return "-" if value is None else f"{value:.1f}m"


def format_chart_line(chart: Chart, tz: tzinfo | None = None) -> str:
    moment = chart.time.astimezone(tz) if tz is not None else chart.time
    return (
        f"{moment:%H:%M}  "
        f"wind {chart.wind_speed:.1f}m/s {_direction(chart.wind_direction)}  "
        f"wave {_wave_height(chart.wave_height)} {chart.wave_period:.1f}s "
        f"{_direction(chart.wave_direction)}  "
        f"air {chart.air_temperature:.1f}°C water {chart.water_temperature:.1f}°C  "
        f"{chart.weather.icon_name}"
    )


def format_day_buckets(buckets: list[DayBucket], tz: tzinfo | None = None) -> str:
    """Plain text forecast table grouped by day."""
    lines: list[str] = []
    for bucket in buckets:
        lines.append(f"=== {bucket.day:%Y-%m-%d (%a)} ===")
        lines.extend(f"  {format_chart_line(c, tz)}" for c in bucket.charts)
    return "\n".join(lines)


def format_beach_header(data: BeachData) -> str:
    meta = data.metadata
    updated = meta.last_updated.isoformat() if meta.last_updated else "unknown"
    return (
        f"{meta.place_name or meta.location_id} ({meta.region}) | "
        f"{len(data.charts)} charts | status {meta.status or '-'} | updated {updated}"
    )


def format_beach_list(beaches: list[Beach]) -> str:
    lines = []
    for beach in sorted(beaches, key=lambda b: (b.region.order, b.id)):
        lines.append(f"{beach.id:>6}  {beach.region.slug:<10} {beach.display_name}")
    return "\n".join(lines)


def format_conditions(avg: AverageConditions) -> str:
    return (
        f"Average over {avg.sample_count} beaches\n"
        f"Wind: {avg.wind_speed:.1f}m/s {_direction(avg.wind_direction)}\n"
        f"Wave: {avg.wave_height:.1f}m {avg.wave_period:.1f}s "
        f"{_direction(avg.wave_direction)}"
    )


def format_session_line(session: Session) -> str:
    pin = "*" if session.is_pinned else " "
    memo = f"  {session.memo}" if session.memo else ""
    return (
        f"{pin} #{session.handle}  {session.date.isoformat()}  "
        f"beach {session.location_id}  rating {session.rating}  "
        f"{len(session.charts)} charts{memo}"
    )


def format_record_view(view: RecordView, tz: tzinfo | None = None) -> str:
    header = (
        f"{view.date_label} {view.day_of_week} | "
        f"{'★' * view.rating} {view.rating_text}"
    )
    if view.is_pinned:
        header += " | pinned"
    lines = [header]
    if view.memo:
        lines.append(view.memo)
    lines.extend(f"  {format_chart_line(c, tz)}" for c in view.charts)
    return "\n".join(lines)


def chart_to_dict(chart: Chart) -> dict:
    return {
        "location_id": chart.location_id,
        "time": chart.time.isoformat(),
        "wind_speed": chart.wind_speed,
        "wind_direction": chart.wind_direction,
        "wave_height": chart.wave_height,
        "wave_period": chart.wave_period,
        "wave_direction": chart.wave_direction,
        "air_temperature": chart.air_temperature,
        "water_temperature": chart.water_temperature,
        "weather": int(chart.weather),
        "weather_icon": chart.weather.icon_name,
    }


def session_to_dict(session: Session) -> dict:
    return {
        "id": session.handle.row_id if session.handle else None,
        "location_id": session.location_id,
        "date": session.date.isoformat(),
        "start_time": session.start_time.isoformat(),
        "end_time": session.end_time.isoformat(),
        "rating": session.rating,
        "memo": session.memo,
        "is_pinned": session.is_pinned,
        "charts": [chart_to_dict(c) for c in session.to_charts()],
    }


def conditions_to_dict(avg: AverageConditions) -> dict:
    return {
        "wind_speed": round(avg.wind_speed, 2),
        "wave_height": round(avg.wave_height, 2),
        "wave_period": round(avg.wave_period, 2),
        "wind_direction": avg.wind_direction,
        "wave_direction": avg.wave_direction,
        "sample_count": avg.sample_count,
    }


def format_sessions_json(sessions: list[Session]) -> str:
    return json.dumps([session_to_dict(s) for s in sessions], indent=2, ensure_ascii=False)
