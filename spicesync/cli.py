"""CLI entry point for SpiceSync."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from .ai import EncodedImage, create_gateway
from .camera import Camera, CameraError
from .config import load_config
from .db import KeyValueStore
from .pantry import PantryStore, filter_pantry, pantry_summary
from .profile import ProfileStore
from .recipes import SORT_KEYS, QueryState, RecipeQueryEngine
from .scanner import ScanState, ScanWorkflow

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="spicesync",
        description="SpiceSync — scan your kitchen, keep a pantry, get recipe ideas",
    )
    parser.add_argument(
        "--config", "-c", type=str, default=None, help="Config file path (TOML)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # cameras
    sub.add_parser("cameras", help="List available cameras")

    # scan
    scan_parser = sub.add_parser("scan", help="Photograph ingredients and add them")
    scan_parser.add_argument("--image", type=str, help="Use an existing image file")
    scan_parser.add_argument(
        "--yes", "-y", action="store_true", help="Add results without asking"
    )
    scan_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # pantry
    pantry_parser = sub.add_parser("pantry", help="Show or edit the pantry")
    pantry_sub = pantry_parser.add_subparsers(dest="pantry_command")
    list_parser = pantry_sub.add_parser("list", help="List pantry items")
    list_parser.add_argument("--category", type=str, default="all")
    list_parser.add_argument("--search", type=str, default="")
    list_parser.add_argument("--json", action="store_true", help="Output as JSON")
    remove_parser = pantry_sub.add_parser("remove", help="Remove an item by id")
    remove_parser.add_argument("id", type=str)
    pantry_sub.add_parser("clear", help="Remove every item")

    # recipes
    recipes_parser = sub.add_parser("recipes", help="Suggest recipes from the pantry")
    recipes_parser.add_argument(
        "--diet", type=str, nargs="+", default=None,
        help="Dietary preferences sent to the AI (default: profile diet)",
    )
    recipes_parser.add_argument("--search", type=str, default="")
    recipes_parser.add_argument(
        "--perfect", action="store_true", help="Only near-perfect pantry matches"
    )
    recipes_parser.add_argument(
        "--filter", type=str, nargs="+", default=[], dest="filters",
        help="Dietary tags every shown recipe must carry",
    )
    recipes_parser.add_argument("--sort", choices=SORT_KEYS, default="score")
    recipes_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # profile
    profile_parser = sub.add_parser("profile", help="Show or edit the user profile")
    profile_sub = profile_parser.add_subparsers(dest="profile_command")
    profile_sub.add_parser("show", help="Show the profile")
    set_parser = profile_sub.add_parser("set", help="Update profile fields")
    set_parser.add_argument("--name", type=str)
    set_parser.add_argument("--title", type=str)
    set_parser.add_argument("--bio", type=str)
    set_parser.add_argument("--diet", type=str, nargs="*")
    set_parser.add_argument("--allergy", type=str, nargs="*", dest="allergies")
    set_parser.add_argument("--servings", type=int)

    # summary
    sub.add_parser("summary", help="Pantry overview")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    store = KeyValueStore(config.storage.db_path)
    try:
        match args.command:
            case "cameras":
                _cmd_cameras()
            case "scan":
                asyncio.run(_cmd_scan(config, store, args))
            case "pantry":
                _cmd_pantry(store, args)
            case "recipes":
                asyncio.run(_cmd_recipes(config, store, args))
            case "profile":
                _cmd_profile(store, args)
            case "summary":
                _cmd_summary(store)
    finally:
        store.close()


def _cmd_cameras() -> None:
    cameras = Camera.list_cameras()
    if not cameras:
        print("No cameras found.")
        return
    print(f"Available cameras: {len(cameras)}")
    for idx in cameras:
        print(f"  camera {idx}")


def _load_pantry(store: KeyValueStore) -> PantryStore:
    pantry = PantryStore(store)
    pantry.load()
    return pantry


async def _cmd_scan(config, store: KeyValueStore, args) -> None:
    pantry = _load_pantry(store)
    gateway = create_gateway(config)
    workflow = ScanWorkflow(
        gateway,
        pantry,
        camera_factory=lambda: Camera(
            index=config.camera.index, jpeg_quality=config.camera.jpeg_quality
        ),
    )

    with workflow:
        if args.image:
            await workflow.process_image(EncodedImage.from_file(args.image))
        else:
            try:
                workflow.start()
            except CameraError as e:
                print(f"Camera access failed: {e}", file=sys.stderr)
                sys.exit(1)
            await asyncio.to_thread(
                input, "Camera is live. Press Enter to take the photo..."
            )
            print("📷 Capturing...")
            try:
                await workflow.capture()
            except CameraError as e:
                print(f"Capture failed: {e}", file=sys.stderr)
                sys.exit(1)

        if workflow.state is not ScanState.REVIEW:
            print(
                f"Failed to scan ingredients: {workflow.last_error}. "
                "Please try again.",
                file=sys.stderr,
            )
            sys.exit(1)

        items = workflow.items
        if args.json:
            print(json.dumps([i.to_dict() for i in items], ensure_ascii=False, indent=2))
        elif not items:
            print("No ingredients were recognized.")
        else:
            print(f"\n🥬 Found {len(items)} ingredient(s):")
            for i in items:
                freshness = i.freshness or "unknown"
                print(f"  {i.name:<20} {i.quantity:<10} [{i.category}] {freshness}")

        if not workflow.can_commit:
            return
        if not args.yes:
            answer = await asyncio.to_thread(input, "Add these to your pantry? [Y/n] ")
            answer = answer.strip().lower()
            if answer not in ("", "y", "yes"):
                print("Nothing added.")
                return
        workflow.commit()
        print(f"Added {len(items)} item(s). Pantry now holds {len(pantry)}.")


def _cmd_pantry(store: KeyValueStore, args) -> None:
    pantry = _load_pantry(store)

    match args.pantry_command:
        case "remove":
            if pantry.remove(args.id):
                print(f"Removed {args.id}.")
            else:
                print(f"No item with id {args.id}.")
        case "clear":
            pantry.clear()
            print("Pantry cleared.")
        case _:
            category = getattr(args, "category", "all")
            search = getattr(args, "search", "")
            items = filter_pantry(pantry.items, category, search)
            if getattr(args, "json", False):
                print(json.dumps([i.to_dict() for i in items], ensure_ascii=False, indent=2))
                return
            if not items:
                print("Your pantry is empty. Run `spicesync scan` to add items.")
                return
            for i in items:
                freshness = i.freshness or "-"
                print(f"  {i.id[:8]}  {i.name:<20} {i.quantity:<10} "
                      f"{i.category:<8} {freshness}")


async def _cmd_recipes(config, store: KeyValueStore, args) -> None:
    pantry = _load_pantry(store)
    if not len(pantry):
        print("Your pantry is empty. Scan some ingredients first.")
        return

    diet = args.diet
    if diet is None:
        diet = ProfileStore(store).load().preferences.diet

    engine = RecipeQueryEngine(create_gateway(config))
    if not args.json:
        print("🍳 Asking for recipe ideas...")
    state = await engine.fetch(pantry.items, diet)
    if state is QueryState.FAILED:
        print(
            f"Could not get recipes: {engine.last_error}. Run the command again to retry.",
            file=sys.stderr,
        )
        sys.exit(1)

    recipes = engine.view(args.search, args.perfect, args.filters, args.sort)
    if args.json:
        print(json.dumps([r.to_dict() for r in recipes], ensure_ascii=False, indent=2))
        return
    if not recipes:
        print("No recipes match your filters.")
        return

    for r in recipes:
        score = f"{r.match_score}%" if r.match_score is not None else "?"
        print(f"{'─' * 50}")
        print(f"🍽  {r.title}  (match {score})")
        print(f"   {r.description}")
        print(f"   ⏱ {r.cooking_time} min · {r.difficulty} · "
              f"{r.nutrition.calories} kcal")
        if r.dietary_tags:
            print(f"   🏷  {', '.join(r.dietary_tags)}")
        print("   Ingredients:")
        for ing in r.ingredients:
            mark = " (substitute)" if ing.substituted else ""
            print(f"     - {ing.name}: {ing.amount}{mark}")
        print("   Steps:")
        for n, step in enumerate(r.instructions, 1):
            print(f"     {n}. {step}")


def _cmd_profile(store: KeyValueStore, args) -> None:
    profiles = ProfileStore(store)
    profile = profiles.load()

    if args.profile_command == "set":
        if args.name is not None:
            profile.name = args.name
        if args.title is not None:
            profile.title = args.title
        if args.bio is not None:
            profile.bio = args.bio
        if args.diet is not None:
            profile.preferences.diet = args.diet
        if args.allergies is not None:
            profile.preferences.allergies = args.allergies
        if args.servings is not None:
            profile.preferences.servings = args.servings
        profiles.save(profile)

    print(json.dumps(profile.to_dict(), ensure_ascii=False, indent=2))


def _cmd_summary(store: KeyValueStore) -> None:
    summary = pantry_summary(_load_pantry(store).items)
    print(f"Pantry items:   {summary.total}")
    print(f"Expiring soon:  {summary.expiring_soon}")
    for category, count in sorted(summary.by_category.items()):
        print(f"  {category:<10} {count}")
