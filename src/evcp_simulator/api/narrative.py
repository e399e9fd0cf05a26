"""Narrative generator — plain-English interpretation of simulation results.

Also provides the compact five-row summary table used in reports.
"""

from __future__ import annotations

from evcp_simulator.config.calendar import HOURS_PER_DAY
from evcp_simulator.engine.orchestrator import summarize
from evcp_simulator.models.results import ResultSummary, SimulationResults

_MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def format_summary_table(summary: ResultSummary) -> dict[str, str]:
    """Headline values keyed by display label, all formatted to one decimal."""
    return {
        "Max Power (kW)": f"{summary.actual_max_power_kw:.1f}",
        "Theoretical (kW)": f"{summary.theoretical_max_power_kw:.1f}",
        "Concurrency (%)": f"{summary.concurrency_pct:.1f}",
        "Energy/Charger (kWh)": f"{summary.energy_per_charger_kwh:.1f}",
        "Total Energy (MWh)": f"{summary.total_energy_mwh:.1f}",
    }


def generate_narrative(results: SimulationResults) -> str:
    """Generate a plain-English report from a simulation result.

    Sections:
      1. Fleet and headline table
      2. Load profile (peak hour, busiest month)
      3. Monte-Carlo spread, when present
    """
    summary = summarize(results)
    sections: list[str] = []

    # ── 1. Headline ──
    sections.append("=" * 60)
    sections.append("CHARGING LOAD SUMMARY")
    sections.append("=" * 60)
    sections.append(f"Charge points: {results.num_chargers}")
    for label, value in format_summary_table(summary).items():
        sections.append(f"  {label:24s} {value}")

    # ── 2. Load profile ──
    sections.append("")
    sections.append("=" * 60)
    sections.append("LOAD PROFILE")
    sections.append("=" * 60)
    if results.ticks_simulated == 0:
        sections.append("No ticks simulated yet.")
    else:
        hourly = results.hourly_power_demand_kw
        peak_hour = max(range(HOURS_PER_DAY), key=lambda h: hourly[h])
        months = results.monthly_charging_events
        busiest = max(range(len(months)), key=lambda m: months[m])
        sections.append(
            f"Average power peaks at {peak_hour:02d}:00 with {hourly[peak_hour]:.1f} kW.\n"
            f"Arrivals: {results.total_arrivals} "
            f"({results.total_sessions} needed charging).\n"
            f"Busiest month: {_MONTH_NAMES[busiest]} ({months[busiest]} ticks with arrivals)."
        )
        if summary.concurrency_pct >= 99.9:
            sections.append("Every charge point was drawing power at the same time at least once.")

    # ── 3. Monte-Carlo ──
    mc = results.monte_carlo
    if mc is not None:
        sections.append("")
        sections.append("=" * 60)
        sections.append(f"MONTE-CARLO ({mc.num_runs} runs, seeds {mc.base_seed}..{mc.base_seed + mc.num_runs - 1})")
        sections.append("=" * 60)
        sections.append(
            f"Peak power P10/P50/P90: {mc.max_power_p10:.1f} / {mc.max_power_p50:.1f} / {mc.max_power_p90:.1f} kW\n"
            f"Concurrency P10/P50/P90: {mc.concurrency_p10:.1%} / {mc.concurrency_p50:.1%} / {mc.concurrency_p90:.1%}\n"
            f"Energy P10/P50/P90: {mc.energy_p10:,.0f} / {mc.energy_p50:,.0f} / {mc.energy_p90:,.0f} kWh\n"
            f"Representative run: seed {mc.representative_seed}"
        )

    return "\n".join(sections)
