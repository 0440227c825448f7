"""Tests for the capability catalog."""

import json

import pytest
import yaml

from agent_studio.catalog import (
    AgentDescriptor,
    AgentDomain,
    CapabilityCatalog,
    CatalogError,
)


# =============================================================================
# AgentDescriptor
# =============================================================================


class TestAgentDescriptor:
    """Tests for AgentDescriptor."""

    def test_sequences_deduplicated_in_order(self):
        """Test duplicate entries are dropped, keeping first occurrence order."""
        descriptor = AgentDescriptor(
            id="a",
            requires=("c", "b", "c"),
            provides=("x", "y", "x"),
        )

        assert descriptor.requires == ("c", "b")
        assert descriptor.provides == ("x", "y")

    def test_self_requirement_rejected(self):
        """Test an agent cannot require itself."""
        with pytest.raises(CatalogError, match="cannot require itself"):
            AgentDescriptor(id="a", requires=("a",))

    def test_self_conflict_rejected(self):
        """Test an agent cannot conflict with itself."""
        with pytest.raises(CatalogError, match="cannot conflict with itself"):
            AgentDescriptor(id="a", conflicts=("a",))

    def test_empty_id_rejected(self):
        """Test the id must be non-empty."""
        with pytest.raises(CatalogError):
            AgentDescriptor(id="")

    def test_leaf_descriptor_is_empty(self):
        """Test leaf descriptors have no requires, conflicts or provides."""
        leaf = AgentDescriptor.leaf("ad-hoc")

        assert leaf.requires == ()
        assert leaf.conflicts == ()
        assert leaf.provides == ()
        assert leaf.description == "Specialized agent: ad-hoc"

    def test_to_dict(self):
        """Test dictionary conversion."""
        descriptor = AgentDescriptor(
            id="analyst",
            provides=("research",),
            priority=3,
            domain=AgentDomain.ANALYSIS,
        )

        data = descriptor.to_dict()

        assert data["id"] == "analyst"
        assert data["provides"] == ["research"]
        assert data["priority"] == 3
        assert data["domain"] == "analysis"


# =============================================================================
# CapabilityCatalog
# =============================================================================


class TestCapabilityCatalog:
    """Tests for catalog construction and lookups."""

    def test_default_catalog(self, default_catalog):
        """Test the built-in catalog contains the core agents."""
        assert len(default_catalog) == 22
        assert "marketplace-architect" in default_catalog
        assert default_catalog.lookup("marketplace-architect").priority == 10

    def test_lookup_unknown_returns_none(self, default_catalog):
        """Test unregistered agents are distinguishable from registered ones."""
        assert default_catalog.lookup("does-not-exist") is None

    def test_describe_unknown_returns_leaf(self, default_catalog):
        """Test describe synthesizes an empty leaf for unknown agents."""
        descriptor = default_catalog.describe("does-not-exist")

        assert descriptor.id == "does-not-exist"
        assert descriptor.requires == ()

    def test_priority_of_unknown_uses_default(self, default_catalog):
        """Test unknown agents get the default priority."""
        assert default_catalog.priority_of("does-not-exist") == 5

    def test_duplicate_ids_rejected(self):
        """Test a catalog cannot declare the same id twice."""
        with pytest.raises(CatalogError, match="Duplicate agent id"):
            CapabilityCatalog([AgentDescriptor(id="a"), AgentDescriptor(id="a")])

    def test_iteration_keeps_declaration_order(self, make_catalog):
        """Test catalog iteration follows declaration order."""
        catalog = make_catalog({"b": {}, "a": {}, "c": {}})

        assert catalog.agent_ids == ["b", "a", "c"]
        assert [d.id for d in catalog] == ["b", "a", "c"]

    def test_from_mapping(self):
        """Test building a catalog from parsed data."""
        catalog = CapabilityCatalog.from_mapping({
            "agents": {
                "api": {"requires": ["db"], "provides": ["api_design"], "priority": 7},
                "db": {"provides": ["database_design"], "domain": "development"},
            }
        })

        assert catalog.lookup("api").requires == ("db",)
        assert catalog.lookup("db").domain == AgentDomain.DEVELOPMENT

    def test_from_mapping_invalid(self):
        """Test schema violations raise CatalogError."""
        with pytest.raises(CatalogError, match="Invalid catalog data"):
            CapabilityCatalog.from_mapping({"agents": {"api": {"priority": "high"}}})

    def test_from_yaml_file(self, tmp_path):
        """Test loading a YAML catalog file."""
        path = tmp_path / "catalog.yaml"
        path.write_text(yaml.safe_dump({
            "agents": {
                "a": {"requires": ["b"]},
                "b": {"provides": ["cap"]},
            }
        }))

        catalog = CapabilityCatalog.from_file(path)

        assert catalog.agent_ids == ["a", "b"]

    def test_from_json_file(self, tmp_path):
        """Test loading a JSON catalog file."""
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"agents": {"solo": {"priority": 2}}}))

        catalog = CapabilityCatalog.from_file(path)

        assert catalog.priority_of("solo") == 2

    def test_missing_file(self, tmp_path):
        """Test a missing catalog file raises CatalogError."""
        with pytest.raises(CatalogError, match="not found"):
            CapabilityCatalog.from_file(tmp_path / "missing.yaml")

    def test_non_mapping_file(self, tmp_path):
        """Test a file that is not a mapping raises CatalogError."""
        path = tmp_path / "catalog.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(CatalogError, match="must contain a mapping"):
            CapabilityCatalog.from_file(path)

    def test_self_reference_in_file(self, tmp_path):
        """Test the self-reference invariant applies to loaded catalogs."""
        path = tmp_path / "catalog.yaml"
        path.write_text(yaml.safe_dump({"agents": {"loop": {"requires": ["loop"]}}}))

        with pytest.raises(CatalogError):
            CapabilityCatalog.from_file(path)


# =============================================================================
# Capability queries
# =============================================================================


class TestCapabilityQueries:
    """Tests for capability queries and addition validation."""

    def test_available_capabilities(self, default_catalog):
        """Test capabilities are collected in first-seen order."""
        capabilities = default_catalog.available_capabilities(
            ["payment-specialist", "unknown-agent", "security-expert"]
        )

        assert capabilities == [
            "payment_integration",
            "financial_compliance",
            "security_expertise",
            "security_audit",
            "data_protection",
        ]

    def test_providers_of(self, default_catalog):
        """Test finding the agents that provide a capability."""
        assert default_catalog.providers_of("payment_integration") == ["payment-specialist"]
        assert default_catalog.providers_of("nothing") == []

    def test_suggest_agents_for_missing_capabilities(self, make_catalog):
        """Test suggestions are sorted by priority, then id."""
        catalog = make_catalog({
            "low": {"provides": ("search",), "priority": 3},
            "high": {"provides": ("search",), "priority": 8},
            "also-high": {"provides": ("billing",), "priority": 8},
            "current": {"provides": ("ui",)},
        })

        suggestions = catalog.suggest_agents_for_capabilities(
            ["ui", "search", "billing"],
            ["current"],
        )

        assert [(s.agent_id, s.capability) for s in suggestions] == [
            ("also-high", "billing"),
            ("high", "search"),
            ("low", "search"),
        ]

    def test_suggestions_skip_covered_capabilities(self, default_catalog):
        """Test nothing is suggested when all capabilities are covered."""
        suggestions = default_catalog.suggest_agents_for_capabilities(
            ["ui_design"],
            ["ui-designer"],
        )

        assert suggestions == []

    def test_validate_addition_valid(self, default_catalog):
        """Test an agent with satisfied requirements and no conflicts is valid."""
        validation = default_catalog.validate_agent_addition(
            "payment-specialist",
            ["security-expert"],
        )

        assert validation.valid
        assert validation.conflicts == []
        assert validation.missing_dependencies == []

    def test_validate_addition_missing_dependencies(self, default_catalog):
        """Test missing requirements invalidate the addition."""
        validation = default_catalog.validate_agent_addition("marketplace-architect", [])

        assert not validation.valid
        assert validation.missing_dependencies == ["cultural-expert", "payment-specialist"]

    def test_validate_addition_conflict_declared_by_new_agent(self, default_catalog):
        """Test conflicts declared by the new agent are found."""
        validation = default_catalog.validate_agent_addition(
            "fullstack-architect",
            ["simple-architect"],
        )

        assert not validation.valid
        assert validation.conflicts == ["simple-architect"]

    def test_validate_addition_conflict_declared_by_existing_agent(self, default_catalog):
        """Test conflicts declared by an existing agent are found."""
        validation = default_catalog.validate_agent_addition(
            "simple-architect",
            ["fullstack-architect"],
        )

        assert not validation.valid
        assert validation.conflicts == ["fullstack-architect"]

    def test_validate_addition_unknown_agent(self, default_catalog):
        """Test unknown agents produce a warning but stay valid."""
        validation = default_catalog.validate_agent_addition("ad-hoc", ["analyst"])

        assert validation.valid
        assert validation.warnings == ["No catalog entry for agent ad-hoc"]
