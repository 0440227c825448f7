"""Main entry point for Agent Studio."""

import argparse
import asyncio
import json
import sys
from typing import Optional

import structlog

from .bundle import ConfigBundleGenerator, write_bundle
from .catalog import CapabilityCatalog, CatalogError
from .config import Settings, get_settings
from .fallback import AgentFallbackManager
from .resolution import ResolutionError
from .selection import AgentSelectionEngine, ProjectProfile, load_profile
from .utils.logging import LOG_LEVELS, LogContext, configure_logging

logger = structlog.get_logger(__name__)

RED = "\033[31m"
RESET = "\033[0m"


def load_catalog(settings: Settings) -> CapabilityCatalog:
    """Built-in catalog, or the file named by `catalog_path`."""
    if settings.catalog_path:
        return CapabilityCatalog.from_file(settings.catalog_path)
    return CapabilityCatalog.default()


async def run_resolve(
    profile_path: str,
    settings: Settings,
    output_dir: Optional[str] = None,
    fmt: Optional[str] = None,
) -> dict:
    """Resolve the agents for a profile file and write the bundle."""
    catalog = load_catalog(settings)
    profile = load_profile(profile_path)

    engine = AgentSelectionEngine(catalog, settings=settings)
    result = await engine.resolve_project_agents(profile)

    bundle = ConfigBundleGenerator(catalog).generate(result, profile)
    path = write_bundle(bundle, output_dir or settings.output_dir, fmt or settings.output_format)

    print("\n" + "=" * 50)
    print("AGENT RESOLUTION SUMMARY")
    print("=" * 50)
    print(f"Domain: {result.domain}")
    print(f"Agents: {', '.join(result.ordered_agents)}")
    for index, stage in enumerate(result.activation_stages, start=1):
        print(f"  Stage {index}: {', '.join(stage)}")
    print(f"Confidence: {result.confidence:.0%}")
    if result.needs_manual_review:
        print("Manual review: required" + (" (accepted)" if result.manually_reviewed else ""))
    for warning in result.warnings:
        print(f"Warning: {warning}")
    print(f"Bundle: {path}")
    print("=" * 50 + "\n")

    return result.to_dict()


async def run_fallback(agent_id: str, settings: Settings, complexity: str = "moderate") -> dict:
    """Walk the fallback chain for one agent and print the outcome."""
    manager = AgentFallbackManager(load_catalog(settings))
    profile = ProjectProfile.from_mapping({"business": {"complexity": complexity}})

    outcome = await manager.handle_unavailable(agent_id, profile)
    report = outcome.to_dict()
    print(json.dumps(report, indent=2))
    return report


def run_catalog(settings: Settings) -> list[dict]:
    """Print every catalog entry."""
    catalog = load_catalog(settings)
    entries = [descriptor.to_dict() for descriptor in catalog]

    for entry in entries:
        requires = ", ".join(entry["requires"]) or "-"
        provides = ", ".join(entry["provides"]) or "-"
        print(f"{entry['id']} (priority {entry['priority']})")
        print(f"  requires: {requires}")
        print(f"  provides: {provides}")
        if entry["conflicts"]:
            print(f"  conflicts: {', '.join(entry['conflicts'])}")
    return entries


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-studio",
        description="Resolve project agents, their dependencies and fallbacks",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level (default: from settings)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Resolve agents for a project profile")
    resolve.add_argument(
        "--profile", "-p",
        required=True,
        help="Path to a YAML or JSON project profile",
    )
    resolve.add_argument(
        "--output", "-o",
        help="Output directory for the bundle (default: from settings)",
    )
    resolve.add_argument(
        "--format", "-f",
        choices=["yaml", "json"],
        help="Bundle format (default: from settings)",
    )
    resolve.add_argument(
        "--no-cache",
        action="store_true",
        help="Disable the configuration cache",
    )

    fallback = subparsers.add_parser("fallback", help="Show the fallback outcome for an agent")
    fallback.add_argument("agent_id", help="Unavailable agent id")
    fallback.add_argument(
        "--complexity", "-c",
        default="moderate",
        choices=["simple", "moderate", "complex", "very-complex"],
        help="Project complexity (default: moderate)",
    )

    subparsers.add_parser("catalog", help="List the agents in the catalog")
    return parser


def cli(argv: Optional[list[str]] = None) -> None:
    """Command-line interface."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.command == "resolve" and args.no_cache:
        settings = settings.model_copy(update={"cache_enabled": False})

    configure_logging(
        level=args.log_level or settings.log_level,
        json_format=args.json_logs or settings.log_json,
    )

    try:
        with LogContext(command=args.command):
            if args.command == "resolve":
                asyncio.run(run_resolve(args.profile, settings, args.output, args.format))
            elif args.command == "fallback":
                asyncio.run(run_fallback(args.agent_id, settings, args.complexity))
            else:
                run_catalog(settings)
    except (ResolutionError, CatalogError) as e:
        logger.error("Command failed", command=args.command, error=str(e))
        print(f"{RED}Error: {e}{RESET}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    cli()
