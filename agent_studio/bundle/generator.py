"""Configuration bundle generation.

Builds the merged configuration written next to a scaffolded project:
agent entries, associated workflows, contextual hooks, the MCP server
stub and metadata. The bundle is plain data so it serializes directly to
YAML or JSON.
"""

import copy
import json
from collections.abc import Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Callable, Optional

import structlog
import yaml

from ..catalog import CapabilityCatalog
from ..catalog import defaults
from ..fallback import GenericAgent
from ..resolution.models import ResolutionResult
from ..selection.domain import detect_project_domain
from ..selection.profile import Complexity, ProjectProfile

logger = structlog.get_logger(__name__)

BUNDLE_FILENAME = "agents-config"
SUPPORTED_FORMATS = ("yaml", "json")

MCP_SERVER_NAME = "agent-studio-dynamic-server"


class ConfigBundleGenerator:
    """Generates configuration bundles from resolution results.

    Example:
        generator = ConfigBundleGenerator(catalog)
        bundle = generator.generate(result, profile)
        path = write_bundle(bundle, "./out", "yaml")
    """

    def __init__(
        self,
        catalog: CapabilityCatalog,
        domain_workflows: Optional[Mapping[str, tuple[dict, ...]]] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ):
        self.catalog = catalog
        self.domain_workflows = dict(defaults.DOMAIN_WORKFLOWS if domain_workflows is None else domain_workflows)
        self._clock = clock
        self.log = logger.bind(component="bundle_generator")

    def generate(self, result: ResolutionResult, profile: ProjectProfile) -> dict[str, Any]:
        """Build the bundle for a resolved agent list."""
        domain = result.domain or detect_project_domain(profile)
        bundle: dict[str, Any] = {
            "agents": self.agent_entries(result),
            "workflows": {
                workflow["name"]: {key: value for key, value in workflow.items() if key != "name"}
                for workflow in self.workflows_for(result.ordered_agents, domain)
            },
            "hooks": {
                hook["name"]: {key: value for key, value in hook.items() if key != "name"}
                for hook in self.hooks_for(domain, profile.business.complexity, result.ordered_agents)
            },
            "mcp_servers": {
                MCP_SERVER_NAME: {
                    "command": "node",
                    "args": [".agent-studio/dynamic-mcp-server.js"],
                    "env": {
                        "AGENT_STUDIO_PROJECT_PATH": ".",
                        "AGENT_STUDIO_CONFIG_PATH": f".agent-studio/{BUNDLE_FILENAME}.yaml",
                        "AGENT_STUDIO_AGENTS": json.dumps(result.ordered_agents),
                    },
                },
            },
            "metadata": {
                "generated": self._clock().isoformat(),
                "domain": domain,
                "complexity": profile.business.complexity.value,
                "confidence": round(result.confidence, 4),
                "needs_manual_review": result.needs_manual_review,
                "manually_reviewed": result.manually_reviewed,
                "warnings": list(result.warnings),
                "activation_stages": [list(stage) for stage in result.activation_stages],
            },
        }

        if result.fallbacks:
            bundle["metadata"]["fallbacks"] = {
                agent_id: outcome.to_dict() for agent_id, outcome in result.fallbacks.items()
            }

        self.log.debug(
            "Bundle generated",
            agents=len(bundle["agents"]),
            workflows=len(bundle["workflows"]),
            hooks=len(bundle["hooks"]),
        )
        return bundle

    def agent_entries(self, result: ResolutionResult) -> dict[str, dict[str, Any]]:
        # Generic substitutes are not in the catalog; their capabilities live on the outcome
        generic = {
            outcome.agent_id: outcome
            for outcome in result.fallbacks.values()
            if isinstance(outcome, GenericAgent)
        }

        entries = {}
        for agent_id in result.ordered_agents:
            descriptor = self.catalog.describe(agent_id)
            capabilities = list(descriptor.provides)
            description = descriptor.description
            if agent_id in generic:
                capabilities = list(generic[agent_id].capabilities)
                description = generic[agent_id].message

            entries[agent_id] = {
                "description": description,
                "capabilities": capabilities,
                "dependencies": list(descriptor.requires),
                "priority": descriptor.priority,
                "enabled": True,
            }
        return entries

    def workflows_for(self, agents: list[str], domain: str) -> list[dict[str, Any]]:
        """Domain setup workflow plus the quality-validation workflow."""
        workflows = [
            copy.deepcopy(workflow)
            for workflow in self.domain_workflows.get(domain, self.domain_workflows[defaults.DEFAULT_DOMAIN])
        ]
        workflows.append({
            "name": "quality-validation",
            "description": "Continuous quality validation",
            "agents": [agent for agent in agents if "qa" in agent or "expert" in agent],
            "steps": ["code_review", "testing", "performance_check"],
            "triggers": ["pre_commit", "deployment"],
        })
        return workflows

    def hooks_for(
        self,
        domain: str,
        complexity: Complexity,
        agents: Optional[list[str]] = None,
    ) -> list[dict[str, Any]]:
        """Contextual hooks; with `agents` given, each hook only names resolved agents."""
        hooks = [
            {
                "name": "pre-commit",
                "trigger": "git commit",
                "action": "quality_check",
                "agents": ["qa-expert"],
            },
        ]

        if domain == "marketplace":
            hooks.append({
                "name": "marketplace-validation",
                "trigger": "marketplace_deployment",
                "action": "vendor_validation",
                "agents": ["marketplace-architect", "cultural-expert"],
            })

        if complexity.value in defaults.COMPLEX_LEVELS:
            hooks.extend([
                {
                    "name": "performance-monitoring",
                    "trigger": "deployment",
                    "action": "performance_check",
                    "agents": ["performance-expert"],
                },
                {
                    "name": "security-scanning",
                    "trigger": "pre_deployment",
                    "action": "security_audit",
                    "agents": ["security-expert"],
                },
            ])

        if agents is not None:
            resolved = set(agents)
            for hook in hooks:
                hook["agents"] = [agent for agent in hook["agents"] if agent in resolved]
        return hooks


def write_bundle(bundle: Mapping[str, Any], output_dir: str | Path, fmt: str = "yaml") -> Path:
    """Write a bundle to `agents-config.yaml` or `agents-config.json`.

    Args:
        bundle: Bundle produced by ConfigBundleGenerator
        output_dir: Directory to write into (created if missing)
        fmt: "yaml" or "json"

    Returns:
        Path of the written file
    """
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported bundle format: {fmt} (expected one of {', '.join(SUPPORTED_FORMATS)})")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{BUNDLE_FILENAME}.{fmt}"

    if fmt == "json":
        content = json.dumps(bundle, indent=2) + "\n"
    else:
        content = yaml.safe_dump(dict(bundle), sort_keys=False, allow_unicode=True)

    path.write_text(content, encoding="utf-8")
    logger.info("Bundle written", path=str(path), format=fmt)
    return path
