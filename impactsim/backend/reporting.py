"""Presentation export helpers for impact briefings."""
from __future__ import annotations

from datetime import datetime, timezone
from io import BytesIO
from typing import Any, List, Optional, Tuple

from pptx import Presentation
from pptx.util import Inches, Pt

from .models import AsteroidParameters, ImpactResult
from .scenario import ScenarioComparison


def build_impact_briefing(
    parameters: AsteroidParameters,
    impact: ImpactResult,
    *,
    comparison: Optional[ScenarioComparison] = None,
    scenario_name: Optional[str] = None,
    generated_at: Optional[datetime] = None,
    author: Optional[str] = None,
) -> bytes:
    """Create a short briefing deck for one simulated impact.

    When ``comparison`` is given a mitigation slide is appended.
    """

    generated_at = generated_at or datetime.now(timezone.utc)

    prs = Presentation()
    _populate_title_slide(prs, scenario_name, generated_at, author)
    _populate_inputs_slide(prs, parameters)
    _populate_impact_slide(prs, impact)
    if comparison is not None:
        _populate_mitigation_slide(prs, comparison)

    stream = BytesIO()
    prs.save(stream)
    stream.seek(0)
    return stream.read()


# ---------------------------------------------------------------------------
# Slide builders
# ---------------------------------------------------------------------------

def _populate_title_slide(prs: Presentation, scenario_name: Optional[str], generated_at: datetime, author: Optional[str]) -> None:
    slide = prs.slides.add_slide(prs.slide_layouts[0])
    slide.shapes.title.text = f"Impact Briefing: {scenario_name or 'Custom scenario'}"

    lines = [f"Generated {generated_at.strftime('%Y-%m-%d %H:%M UTC')}"]
    if author:
        lines.append(f"Prepared for {author}")
    slide.placeholders[1].text = "\n".join(lines)


def _populate_inputs_slide(prs: Presentation, parameters: AsteroidParameters) -> None:
    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = "Asteroid"
    body = slide.shapes.placeholders[1].text_frame
    body.clear()

    bullets = [
        f"Diameter: {_format_number(parameters.diameter, 'm')}",
        f"Velocity: {_format_number(parameters.velocity, 'km/s')}",
        f"Impact angle: {parameters.angle:.0f}°",
        f"Impact coordinates: {parameters.impact_latitude:.2f}°, {parameters.impact_longitude:.2f}°",
    ]
    _write_bullets(body, bullets)


def _populate_impact_slide(prs: Presentation, impact: ImpactResult) -> None:
    slide = prs.slides.add_slide(prs.slide_layouts[5])  # Title only
    slide.shapes.title.text = "Impact Metrics"
    _add_metric_table(slide, _impact_rows(impact))


def _populate_mitigation_slide(prs: Presentation, comparison: ScenarioComparison) -> None:
    slide = prs.slides.add_slide(prs.slide_layouts[1])
    mitigation = comparison.mitigation
    slide.shapes.title.text = f"Mitigation: {mitigation.strategy_used.value}"
    body = slide.shapes.placeholders[1].text_frame
    body.clear()

    bullets = [
        f"Delta-v achieved: {_format_number(mitigation.delta_velocity_meters_per_second, 'm/s', precision=4)}",
        f"Along-track deflection: {_format_number(mitigation.deflection_distance_km, 'km')}",
        f"Success probability: {mitigation.success_probability:.0%}",
        f"Resulting velocity: {_format_number(mitigation.resulting_parameters.velocity, 'km/s', precision=4)}",
        f"Energy reduction: {_format_number(comparison.energy_reduction_megatons, 'Mt TNT')}",
        f"Population spared: {_format_number(comparison.population_spared)}",
    ]
    _write_bullets(body, bullets)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------

def _impact_rows(impact: ImpactResult) -> List[Tuple[str, str]]:
    rows = [
        ("Mass", _format_number(impact.mass, "kg")),
        ("Kinetic Energy", _format_number(impact.energy_megatons_tnt, "Mt TNT")),
        ("Crater Diameter", _format_number(impact.crater_diameter_km, "km")),
        ("Crater Depth", _format_number(impact.crater_depth_km, "km")),
        ("Shockwave Radius", _format_number(impact.shockwave_radius_km, "km")),
        ("Thermal Radius", _format_number(impact.thermal_radius_km, "km")),
        ("Seismic Magnitude", _format_number(impact.seismic_magnitude)),
        ("Ocean Impact", _format_boolean(impact.is_ocean_impact)),
        ("Affected Population", _format_number(impact.affected_population)),
    ]
    if impact.is_ocean_impact:
        rows.append(("Tsunami Height", _format_number(impact.tsunami_height_meters, "m")))
    return rows


def _add_metric_table(slide: Any, rows: List[Tuple[str, str]]) -> None:
    table = slide.shapes.add_table(len(rows) + 1, 2, Inches(0.5), Inches(1.5), Inches(9.0), Inches(5.0)).table
    table.columns[0].width = Inches(4.0)
    table.columns[1].width = Inches(5.0)

    table.cell(0, 0).text = "Metric"
    table.cell(0, 1).text = "Value"

    for idx, (label, value) in enumerate(rows, start=1):
        table.cell(idx, 0).text = label
        table.cell(idx, 1).text = value

    for row in table.rows:
        for cell in row.cells:
            for paragraph in cell.text_frame.paragraphs:
                for run in paragraph.runs:
                    run.font.size = Pt(16)


def _write_bullets(body: Any, bullets: List[str]) -> None:
    for text in bullets:
        p = body.add_paragraph()
        p.text = text
        p.level = 0


def _format_number(value: Any, units: str | None = None, precision: int = 2, default: str = "—") -> str:
    try:
        if value is None:
            raise ValueError
        number = float(value)
        if abs(number) >= 1_000_000_000_000:
            formatted = f"{number:.{precision}e}"
        elif abs(number) >= 1_000_000_000:
            formatted = f"{number/1_000_000_000:.{precision}f}B"
        elif abs(number) >= 1_000_000:
            formatted = f"{number/1_000_000:.{precision}f}M"
        elif abs(number) >= 1_000:
            formatted = f"{number/1_000:.{precision}f}k"
        else:
            formatted = f"{number:.{precision}f}"
        return f"{formatted}{(' ' + units) if units else ''}"
    except (TypeError, ValueError):
        return default


def _format_boolean(value: Any) -> str:
    if value is None:
        return "Unknown"
    return "Yes" if bool(value) else "No"
