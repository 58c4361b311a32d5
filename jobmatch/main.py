"""Main entry point for the jobmatch CLI."""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import db
from .matcher import WEIGHTS, calculate_job_match
from .models import CandidateProfile, Job, JobMatchScore, SavedRecommendation
from .recommender import (
    DEFAULT_LIMIT,
    DEFAULT_MIN_SCORE,
    dismiss,
    get_job_recommendations,
    load_recommendations,
    mark_viewed,
    refresh_recommendations,
)

# Load environment variables
load_dotenv()

console = Console()


def _score_style(score: float) -> str:
    if score >= 80:
        return f"[bold green]{score:.2f}[/bold green]"
    if score >= 60:
        return f"[cyan]{score:.2f}[/cyan]"
    if score >= 40:
        return f"[yellow]{score:.2f}[/yellow]"
    return f"[dim]{score:.2f}[/dim]"


def display_matches(matches: list[JobMatchScore] | list[SavedRecommendation], min_score: float) -> None:
    """Display recommendations in a table."""
    if not matches:
        console.print(f"[yellow]No jobs found with score >= {min_score}.[/yellow]")
        console.print("[dim]Complete your profile to get personalized job recommendations.[/dim]")
        return

    table = Table(
        title=f"🎯 Recommended Jobs (Score >= {min_score})",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Score", justify="center", width=7)
    table.add_column("Job", style="white", max_width=35)
    table.add_column("Skills", justify="right", style="cyan")
    table.add_column("Exp.", justify="right", style="cyan")
    table.add_column("Loc.", justify="right", style="cyan")
    table.add_column("Salary", justify="right", style="cyan")
    table.add_column("Missing", style="dim", max_width=30)

    for m in matches:
        job = getattr(m, "job", None)
        label = f"{job.title} @ {job.company}" if job else m.job_id
        table.add_row(
            _score_style(m.match_score),
            label[:35],
            f"{m.skills_match_score:.0f}",
            f"{m.experience_match_score:.0f}",
            f"{m.location_match_score:.0f}",
            f"{m.salary_match_score:.0f}",
            ", ".join(m.match_details.missing_skills),
        )

    console.print(table)
    console.print()


def display_breakdown(job: Job, match: JobMatchScore) -> None:
    """Display how one job's score was built up."""
    d = match.match_details
    parts = [
        f"[bold]Overall:[/bold] {_score_style(match.match_score)}",
        "",
        f"[bold]Skills[/bold] ({WEIGHTS['skills']:.0%}): {match.skills_match_score:.2f}",
        f"  matched: {', '.join(d.matched_skills) or '-'}",
        f"  missing: {', '.join(d.missing_skills) or '-'}",
        f"[bold]Experience[/bold] ({WEIGHTS['experience']:.0%}): {match.experience_match_score:.2f}"
        f"  (gap {d.experience_gap} years)",
        f"[bold]Location[/bold] ({WEIGHTS['location']:.0%}): {match.location_match_score:.2f}"
        f"  ({'match' if d.location_match else 'no match'})",
        f"[bold]Salary[/bold] ({WEIGHTS['salary']:.0%}): {match.salary_match_score:.2f}"
        f"  ({'in range' if d.salary_in_range else 'out of range'})",
    ]
    title = f"📋 {job.title or job.id}" + (f" @ {job.company}" if job.company else "")
    console.print(Panel("\n".join(parts), title=title, border_style="blue"))
    console.print()


def _load_json(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


def _load_profile(path: Path) -> CandidateProfile:
    data = _load_json(path)
    # Raw Supabase rows carry skills as [{"skill_name": ...}]
    if any(isinstance(s, dict) for s in data.get("skills") or []):
        return CandidateProfile.from_row(data)
    return CandidateProfile(**data)


def cmd_score(args: argparse.Namespace) -> int:
    profile = _load_profile(args.profile)
    job = Job(**_load_json(args.job))
    display_breakdown(job, calculate_job_match(profile, job))
    return 0


def cmd_recommend(args: argparse.Namespace) -> int:
    if args.dry_run:
        matches = get_job_recommendations(
            db.get_client(), args.user_id, limit=args.limit, min_score=args.min_score
        )
    elif args.refresh:
        matches = refresh_recommendations(
            db.get_admin_client(), args.user_id, limit=args.limit, min_score=args.min_score
        )
    else:
        matches = load_recommendations(
            db.get_admin_client(),
            args.user_id,
            include_viewed=args.include_viewed,
            limit=args.limit,
            min_score=args.min_score,
        )
    display_matches(matches, args.min_score)
    return 0


def cmd_viewed(args: argparse.Namespace) -> int:
    if not mark_viewed(db.get_admin_client(), args.recommendation_id):
        console.print(f"[yellow]No recommendation with id {args.recommendation_id}.[/yellow]")
        return 1
    console.print("[green]✓[/green] Marked as viewed")
    return 0


def cmd_dismiss(args: argparse.Namespace) -> int:
    if not dismiss(db.get_admin_client(), args.recommendation_id):
        console.print(f"[yellow]No recommendation with id {args.recommendation_id}.[/yellow]")
        return 1
    console.print("[green]✓[/green] Recommendation dismissed")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobmatch",
        description="jobmatch: score and recommend job postings for candidates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  jobmatch score profile.json job.json
  jobmatch recommend 5f0c...e21
  jobmatch recommend 5f0c...e21 --refresh --limit 20 --min-score 60
  jobmatch recommend 5f0c...e21 --dry-run
  jobmatch dismiss 9a7b...c03
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    score = sub.add_parser("score", help="Score one job JSON file against one profile JSON file")
    score.add_argument("profile", type=Path, help="Candidate profile (JSON)")
    score.add_argument("job", type=Path, help="Job posting (JSON)")
    score.set_defaults(func=cmd_score)

    rec = sub.add_parser("recommend", help="Show job recommendations for a user")
    rec.add_argument("user_id", help="Auth user id of the candidate")
    rec.add_argument(
        "--limit", "-n",
        type=int,
        default=DEFAULT_LIMIT,
        help=f"Maximum number of jobs to show (default: {DEFAULT_LIMIT})",
    )
    rec.add_argument(
        "--min-score", "-s",
        type=float,
        default=DEFAULT_MIN_SCORE,
        help=f"Minimum match score (default: {DEFAULT_MIN_SCORE})",
    )
    rec.add_argument(
        "--refresh",
        action="store_true",
        help="Recompute and overwrite stored recommendations",
    )
    rec.add_argument(
        "--include-viewed",
        action="store_true",
        help="Also show recommendations already marked as viewed",
    )
    rec.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute with the read-only key and save nothing",
    )
    rec.set_defaults(func=cmd_recommend)

    viewed = sub.add_parser("viewed", help="Mark a stored recommendation as viewed")
    viewed.add_argument("recommendation_id")
    viewed.set_defaults(func=cmd_viewed)

    dis = sub.add_parser("dismiss", help="Dismiss a stored recommendation")
    dis.add_argument("recommendation_id")
    dis.set_defaults(func=cmd_dismiss)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the jobmatch CLI."""
    args = build_parser().parse_args(argv)

    try:
        return args.func(args)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    except (ValueError, KeyError) as e:
        console.print(f"[red]Configuration Error:[/red] {e}")
        return 1
    except db.DataUnavailableError as e:
        console.print(f"[red]Database Error:[/red] {e}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        return 130


def cli():
    """CLI entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
