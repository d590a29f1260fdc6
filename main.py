"""
CLI entry point.

Commands:
  simulate  — Play a full run with the rule-based autopilot and print the report
  serve     — Start the FastAPI web server

Usage examples:
  python main.py simulate --seed 42
  python main.py simulate --seed 7 --seasons 3 --strategy-mode conservative
  python main.py simulate --seed 42 --json
  python main.py serve
  python main.py serve --port 8080
"""

import argparse
import sys
from dotenv import load_dotenv

# Load .env file before any module that reads environment variables
load_dotenv()

# Force UTF-8 output on Windows so euro signs print
if sys.stdout.encoding != "utf-8":
    sys.stdout.reconfigure(encoding="utf-8")

from academy.autopilot import WEEKS_PER_SEASON, run_autopilot
from academy.config import GameSettings, load_settings
from academy.economy import monthly_payroll
from academy.engine import AcademyEngine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Youth Academy Simulator")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- simulate command ---
    sim = subparsers.add_parser("simulate", help="Play a full run with the autopilot")
    sim.add_argument("--seed", type=int, default=None, help="Random seed (default: ACADEMY_SEED or random)")
    sim.add_argument("--seasons", type=int, default=None, help="Seasons in the run (default: ACADEMY_TOTAL_SEASONS or 5)")
    sim.add_argument("--budget", type=int, default=None, help="Starting budget in euros")
    sim.add_argument("--strategy-mode", default="balanced", choices=["balanced", "conservative", "win_now"])
    sim.add_argument("--weeks-per-season", type=int, default=WEEKS_PER_SEASON,
                     help=f"Week budget per season before the run stalls (default: {WEEKS_PER_SEASON})")
    sim.add_argument("--json", action="store_true", help="Print the full report as JSON")

    # --- serve command ---
    serve = subparsers.add_parser("serve", help="Start the FastAPI web server")
    serve.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    serve.add_argument("--port", default=8000, type=int, help="Port to listen on (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload for development")

    return parser


def cmd_simulate(args: argparse.Namespace) -> None:
    settings = load_settings()
    update = {}
    if args.seed is not None:
        update["seed"] = args.seed
    if args.seasons is not None:
        update["total_seasons"] = args.seasons
    if args.budget is not None:
        update["initial_budget"] = args.budget
    # Re-validate so a bad --seasons fails loudly
    settings = GameSettings.model_validate({**settings.model_dump(), **update})

    engine = AcademyEngine(settings)
    report = run_autopilot(engine, args.strategy_mode, weeks_per_season=args.weeks_per_season)

    if args.json:
        print(report.model_dump_json(indent=2))
        return

    print("\n" + "=" * 50)
    print("SIMULATION COMPLETE" if report.final_report else "SIMULATION STALLED")
    print("=" * 50)
    print(f"Strategy:        {report.strategy_mode}")
    print(f"Seed:            {report.seed if report.seed is not None else 'random'}")
    print(f"Seasons played:  {len(report.seasons)} / {settings.total_seasons}")
    print(f"Weeks played:    {report.weeks_played:g}")
    print(f"Staff hired:     {report.staff_hired}")
    print(f"Missions sent:   {report.missions_dispatched}")
    print(f"Talents invited: {report.prospects_invited}")
    print(f"Players sold:    {report.players_sold}")
    print(f"Events answered: {report.events_answered}")
    print(f"Staff payroll:   EUR {monthly_payroll(engine.state.staff):,} / month ({len(engine.state.staff)} staff)")

    if report.seasons:
        print("\n--- Seasons ---")
        for s in report.seasons:
            champions = [f.team_name for f in s.team_finishes if f.position == 1]
            print(
                f"  Season {s.season}: {s.progress_percent}% ({s.completed_objectives}/{s.total_objectives} objectives) | "
                f"Income EUR {s.income.total:,} | Budget EUR {s.budget_after_income:,}"
                + (f" | Champions: {', '.join(champions)}" if champions else "")
            )

    if report.stalled_season is not None:
        print(f"\nStalled in season {report.stalled_season} at {report.stalled_progress}% progress")

    if report.final_report:
        f = report.final_report
        print("\n--- Final score ---")
        print(f"Points:          {f.total_points:,.0f}")
        print(f"Rating:          {'*' * f.rating} ({f.rating}/5)")
        print(f"Championships:   {f.championships_won}")
        print(f"Final budget:    EUR {f.final_budget:,}")
        print(f"Avg facilities:  {f.avg_facility_level:.1f}%")


def cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn
    print(f"Starting server at http://{args.host}:{args.port}")
    print(f"Open http://{args.host}:{args.port}/docs to explore the API.")
    uvicorn.run(
        "api.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "serve":
        cmd_serve(args)


if __name__ == "__main__":
    main()
