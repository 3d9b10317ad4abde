import argparse
import asyncio
import json
from dataclasses import replace
from pathlib import Path

from . import __version__
from .database import DatabaseProfileService
from .env import ConfigError, Settings, load_env
from .events import CollectingSink
from .logger import get_logger
from .models import DocumentRef, Profile, UploadKind, UploadStatus
from .rewards import TIERS, DEFAULT_TIER, points_to_next, progress, tier_for
from .schema import validate_profile
from .session import ProfileSession
from .storage import (
    load_profile,
    load_rewards,
    load_store,
    put_profile,
    put_rewards,
    save_store,
)

DEFAULT_STORE = "data/session.json"


def _print_notifications(sink: CollectingSink) -> None:
    for n in sink.notifications:
        print(f"[{n.title}] {n.message}")


def _read_profile_json(input_path: Path) -> Profile:
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        return Profile.from_dict(json.load(f))


def cmd_validate(args: argparse.Namespace) -> None:
    if args.input:
        profile = _read_profile_json(Path(args.input))
    else:
        profile = load_profile(load_store(Path(args.store)))
    errors = validate_profile(profile)
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e.message}")
        raise SystemExit(2)
    print("Valid")


def cmd_edit(args: argparse.Namespace) -> None:
    store_path = Path(args.store)
    store = load_store(store_path)
    profile = load_profile(store)
    changes = {
        k: v for k, v in {
            "name": args.name,
            "email": args.email,
            "phone_number": args.phone,
            "school": args.school,
        }.items() if v is not None
    }
    profile = replace(profile, **changes)
    put_profile(store, profile)
    save_store(store_path, store)
    errors = validate_profile(profile)
    print(f"Updated {', '.join(sorted(changes)) or 'nothing'}")
    for e in errors:
        print(f" - {e.message}")


def cmd_show(args: argparse.Namespace) -> None:
    store = load_store(Path(args.store))
    profile = load_profile(store)
    rewards = load_rewards(store, args.settings.initial_points)
    print(f"Name: {profile.name}")
    print(f"Email: {profile.email}")
    print(f"Phone: {profile.phone_number}")
    print(f"School: {profile.school}")
    print(f"Resume: {profile.resume_ref.location if profile.resume_ref else '-'}")
    print(f"Certificate: {profile.certificate_ref.location if profile.certificate_ref else '-'}")
    tier = tier_for(rewards.points)
    print(f"Points: {rewards.points} ({tier.emoji} {tier.name})")
    remaining = points_to_next(rewards.points)
    if remaining is not None:
        print(f"  {remaining} points to next tier ({progress(rewards.points):.0%})")


def cmd_tiers(args: argparse.Namespace) -> None:
    for tier in TIERS + (DEFAULT_TIER,):
        print(f"{tier.emoji} {tier.name} ({tier.required_points}+ points)")
        for benefit in tier.benefits:
            print(f"  - {benefit}")


async def _run_upload(args: argparse.Namespace) -> None:
    store_path = Path(args.store)
    store = load_store(store_path)
    kind = UploadKind[args.kind.upper()]
    sink = CollectingSink()
    async with ProfileSession(profile=load_profile(store), settings=args.settings, sink=sink) as session:
        print(f"Uploading {kind.value}...")
        session.upload(kind, DocumentRef(str(args.file)))
        await session.drain()
        status = session.uploads.status(kind)
        if status is UploadStatus.COMPLETED:
            put_profile(store, session.profile)
            save_store(store_path, store)
    print(f"Status: {status.value}")
    _print_notifications(sink)


def cmd_upload(args: argparse.Namespace) -> None:
    asyncio.run(_run_upload(args))


async def _run_save(args: argparse.Namespace) -> bool:
    store = load_store(Path(args.store))
    service = None if args.simulate else DatabaseProfileService(Path(args.db))
    sink = CollectingSink()
    async with ProfileSession(
        profile=load_profile(store),
        settings=args.settings,
        profile_service=service,
        sink=sink,
    ) as session:
        result = await session.save()
    _print_notifications(sink)
    return result.succeeded


def cmd_save(args: argparse.Namespace) -> None:
    if not asyncio.run(_run_save(args)):
        raise SystemExit(1)


def cmd_earn(args: argparse.Namespace) -> None:
    store_path = Path(args.store)
    store = load_store(store_path)
    sink = CollectingSink()
    session = ProfileSession(
        settings=args.settings,
        reward_state=load_rewards(store, args.settings.initial_points),
        sink=sink,
    )
    for _ in range(args.times):
        result = session.earn_points()
        tier = session.rewards.current_tier
        print(f"+{result.earned} -> {result.state.points} points ({tier.name})")
    session.close()
    put_rewards(store, session.rewards.state)
    save_store(store_path, store)
    _print_notifications(sink)


def main():
    # Load .env if present (JOBBOARD_* settings)
    load_env()
    parser = argparse.ArgumentParser(prog="jobboard", description="Job board core — profile, uploads, rewards")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    val = subparsers.add_parser("validate", help="Validate a profile JSON (or the stored profile)")
    val.add_argument("--input", help="Path to profile JSON input")
    val.add_argument("--store", default=DEFAULT_STORE, help=f"Path to JSON store (default: {DEFAULT_STORE})")
    val.set_defaults(func=cmd_validate)

    edt = subparsers.add_parser("edit", help="Edit fields of the stored profile")
    edt.add_argument("--name")
    edt.add_argument("--email")
    edt.add_argument("--phone")
    edt.add_argument("--school")
    edt.add_argument("--store", default=DEFAULT_STORE, help=f"Path to JSON store (default: {DEFAULT_STORE})")
    edt.set_defaults(func=cmd_edit)

    shw = subparsers.add_parser("show", help="Show the stored profile and reward status")
    shw.add_argument("--store", default=DEFAULT_STORE, help=f"Path to JSON store (default: {DEFAULT_STORE})")
    shw.set_defaults(func=cmd_show)

    trs = subparsers.add_parser("tiers", help="List reward tiers and their benefits")
    trs.set_defaults(func=cmd_tiers)

    upl = subparsers.add_parser("upload", help="Upload a resume or certificate (simulated)")
    upl.add_argument("--kind", required=True, choices=["resume", "certificate"], help="Document kind")
    upl.add_argument("--file", required=True, help="Path of the picked document")
    upl.add_argument("--store", default=DEFAULT_STORE, help=f"Path to JSON store (default: {DEFAULT_STORE})")
    upl.set_defaults(func=cmd_upload)

    sav = subparsers.add_parser("save", help="Validate and save the stored profile")
    sav.add_argument("--db", default="data/profiles.db", help="SQLite database path (default: data/profiles.db)")
    sav.add_argument("--simulate", action="store_true", help="Use the simulated profile service instead of SQLite")
    sav.add_argument("--store", default=DEFAULT_STORE, help=f"Path to JSON store (default: {DEFAULT_STORE})")
    sav.set_defaults(func=cmd_save)

    ern = subparsers.add_parser("earn", help="Simulate applying for jobs to earn points")
    ern.add_argument("--times", type=int, default=1, help="Number of applications (default: 1)")
    ern.add_argument("--store", default=DEFAULT_STORE, help=f"Path to JSON store (default: {DEFAULT_STORE})")
    ern.set_defaults(func=cmd_earn)

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return

    try:
        args.settings = Settings.from_env()
    except ConfigError as e:
        raise SystemExit(f"Invalid configuration: {e}")
    get_logger(level=args.settings.log_level, enable_file=False)

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
