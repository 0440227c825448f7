"""Built-in static tables.

These tables are configuration data. Lookups are keyed by agent id, and
every table can be replaced by passing different data to the consuming
component's constructor.
"""

from .models import AgentDescriptor, AgentDomain

# =============================================================================
# Agent catalog
# =============================================================================

DEFAULT_AGENTS: tuple[AgentDescriptor, ...] = (
    AgentDescriptor(
        id="analyst",
        provides=("requirement_analysis", "documentation", "research"),
        priority=5,
        description="Business analyst for requirements and documentation",
        domain=AgentDomain.ANALYSIS,
    ),
    AgentDescriptor(
        id="cultural-expert",
        requires=("analyst",),
        provides=("cultural_analysis", "diaspora_insights"),
        priority=8,
        description="Cultural and diaspora analysis expert",
    ),
    AgentDescriptor(
        id="security-expert",
        provides=("security_expertise", "security_audit", "data_protection"),
        priority=7,
        description="Application security and data protection expert",
    ),
    AgentDescriptor(
        id="payment-specialist",
        requires=("security-expert",),
        provides=("payment_integration", "financial_compliance"),
        priority=9,
        description="Payment integration specialist",
    ),
    AgentDescriptor(
        id="marketplace-architect",
        requires=("cultural-expert", "payment-specialist"),
        conflicts=("simple-architect",),
        provides=("marketplace_architecture", "vendor_management"),
        priority=10,
        description="Marketplace architecture expert",
    ),
    AgentDescriptor(
        id="simple-architect",
        provides=("basic_architecture",),
        priority=5,
        description="Lightweight architect for small projects",
    ),
    AgentDescriptor(
        id="fullstack-architect",
        conflicts=("simple-architect",),
        provides=("fullstack_development", "system_design"),
        priority=8,
        description="Generalist fullstack architect",
    ),
    AgentDescriptor(
        id="ui-designer",
        provides=("ui_design", "user_experience", "prototyping"),
        priority=6,
        description="UI and user experience designer",
    ),
    AgentDescriptor(
        id="backend-dev",
        provides=("backend_development", "api_design", "database_design"),
        priority=6,
        description="Backend developer",
    ),
    AgentDescriptor(
        id="mobile-architect",
        requires=("ui-designer",),
        provides=("mobile_architecture", "mobile_development"),
        priority=8,
        description="Mobile application architect",
    ),
    AgentDescriptor(
        id="qa-mobile",
        provides=("qa_mobile", "mobile_testing"),
        priority=5,
        description="Mobile quality assurance",
    ),
    AgentDescriptor(
        id="saas-architect",
        requires=("security-expert",),
        provides=("saas_architecture", "multi_tenancy"),
        priority=8,
        description="Multi-tenant SaaS architect",
    ),
    AgentDescriptor(
        id="devops-engineer",
        provides=("devops", "infrastructure", "deployment"),
        priority=6,
        description="DevOps and infrastructure engineer",
    ),
    AgentDescriptor(
        id="enterprise-architect",
        requires=("integration-expert", "compliance-expert"),
        provides=("enterprise_architecture", "system_integration"),
        priority=8,
        description="Enterprise systems architect",
    ),
    AgentDescriptor(
        id="integration-expert",
        provides=("integration_expertise", "api_management"),
        priority=6,
        description="Systems integration expert",
    ),
    AgentDescriptor(
        id="compliance-expert",
        provides=("compliance", "audit_support"),
        priority=6,
        description="Regulatory compliance expert",
    ),
    AgentDescriptor(
        id="ecommerce-architect",
        requires=("payment-specialist",),
        provides=("ecommerce_architecture", "sales_optimization"),
        priority=8,
        description="E-commerce architecture expert",
    ),
    AgentDescriptor(
        id="logistics-expert",
        provides=("logistics", "supply_chain"),
        priority=5,
        description="Logistics and supply chain expert",
    ),
    AgentDescriptor(
        id="performance-expert",
        provides=("performance_optimization", "monitoring", "scalability_planning"),
        priority=6,
        description="Performance and scalability expert",
    ),
    AgentDescriptor(
        id="odoo-expert",
        provides=("odoo_development", "erp_integration"),
        priority=5,
        description="Odoo ERP developer",
    ),
    AgentDescriptor(
        id="nextjs-expert",
        provides=("nextjs_development", "react_optimization"),
        priority=5,
        description="Next.js and React specialist",
    ),
    AgentDescriptor(
        id="qa-expert",
        provides=("quality_assurance", "testing_strategy"),
        priority=6,
        description="Quality assurance and testing strategy expert",
    ),
)

# =============================================================================
# Agent selection
# =============================================================================

DEFAULT_DOMAIN = "web_app"

# Project domain -> initially requested agents
DOMAIN_AGENT_RULES: dict[str, tuple[str, ...]] = {
    "marketplace": ("marketplace-architect", "cultural-expert", "payment-specialist"),
    "web_app": ("fullstack-architect", "ui-designer", "backend-dev"),
    "mobile": ("mobile-architect", "ui-designer", "qa-mobile"),
    "saas": ("saas-architect", "security-expert", "devops-engineer"),
    "enterprise": ("enterprise-architect", "integration-expert", "compliance-expert"),
    "ecommerce": ("ecommerce-architect", "payment-specialist", "logistics-expert"),
}

# Project domain -> capabilities the final agent set must cover
DOMAIN_CAPABILITIES: dict[str, tuple[str, ...]] = {
    "marketplace": ("marketplace_architecture", "vendor_management", "payment_integration"),
    "web_app": ("fullstack_development", "ui_design", "backend_development"),
    "mobile": ("mobile_development", "ui_design", "qa_mobile"),
    "saas": ("saas_architecture", "security_expertise", "devops"),
    "enterprise": ("enterprise_architecture", "integration_expertise", "compliance"),
    "ecommerce": ("ecommerce_architecture", "payment_integration", "logistics"),
}

# Keywords searched in descriptions/project types, checked in order
DOMAIN_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("marketplace", ("marketplace",)),
    ("mobile", ("mobile",)),
    ("saas", ("saas",)),
    ("enterprise", ("enterprise",)),
    ("ecommerce", ("ecommerce", "e-commerce")),
)

COMPLEX_LEVELS = frozenset({"complex", "very-complex"})
COMPLEXITY_AGENTS: tuple[str, ...] = ("devops-engineer", "performance-expert")

# Tech stack entry -> additional agent
STACK_AGENTS: dict[str, str] = {
    "odoo": "odoo-expert",
    "nextjs": "nextjs-expert",
}

# Profile flag -> additional agent
FLAG_AGENTS: dict[str, str] = {
    "cultural_requirements": "cultural-expert",
    "payment_integration": "payment-specialist",
}

# =============================================================================
# Fallback tables
# =============================================================================

ALTERNATIVE_AGENTS: dict[str, str] = {
    "marketplace-architect": "fullstack-architect",
    "cultural-expert": "analyst",
    "payment-specialist": "security-expert",
    "mobile-architect": "fullstack-architect",
    "saas-architect": "fullstack-architect",
    "enterprise-architect": "fullstack-architect",
    "ecommerce-architect": "fullstack-architect",
    "devops-engineer": "backend-dev",
    "performance-expert": "backend-dev",
    "integration-expert": "backend-dev",
    "compliance-expert": "security-expert",
}

GENERIC_CAPABILITIES: dict[AgentDomain, tuple[str, ...]] = {
    AgentDomain.ARCHITECTURE: ("system_design", "technical_planning"),
    AgentDomain.DEVELOPMENT: ("coding", "implementation"),
    AgentDomain.SECURITY: ("basic_security", "data_protection"),
    AgentDomain.ANALYSIS: ("requirement_analysis", "documentation"),
    AgentDomain.TESTING: ("basic_testing", "validation"),
}

GENERIC_LIMITATIONS: tuple[str, ...] = (
    "Reduced functionality compared to the specialized agent",
    "Advanced tasks may require manual intervention",
    "Potentially degraded performance",
)

PARTIAL_FEATURES: dict[str, tuple[str, ...]] = {
    "marketplace-architect": (
        "basic_architecture_planning",
        "simple_vendor_integration",
        "standard_payment_flow",
    ),
    "cultural-expert": (
        "basic_localization",
        "standard_cultural_guidelines",
        "common_diaspora_patterns",
    ),
    "payment-specialist": (
        "standard_payment_gateway",
        "basic_compliance_check",
        "simple_transaction_flow",
    ),
}

PARTIAL_LIMITATIONS: tuple[str, ...] = (
    "Limited features available",
    "Manual supervision recommended",
    "Can migrate to the full agent later",
)

CRITICAL_AGENTS = frozenset({"marketplace-architect", "security-expert", "payment-specialist"})

# agent id -> (hours range, complexity)
EFFORT_ESTIMATES: dict[str, tuple[str, str]] = {
    "marketplace-architect": ("40-80", "high"),
    "cultural-expert": ("16-32", "medium"),
    "payment-specialist": ("24-48", "high"),
    "security-expert": ("32-64", "high"),
    "fullstack-architect": ("20-40", "medium"),
}
DEFAULT_EFFORT: tuple[str, str] = ("8-16", "low")

TIMELINE_IMPACT: dict[str, str] = {
    "marketplace-architect": "Significant delay (2-4 weeks)",
    "cultural-expert": "Moderate delay (1-2 weeks)",
    "payment-specialist": "Significant delay (2-3 weeks)",
    "security-expert": "Moderate delay (1-2 weeks)",
}
DEFAULT_TIMELINE_IMPACT = "Minimal schedule impact"

QUALITY_IMPACT: dict[str, str] = {
    "marketplace-architect": "Major impact on the architecture",
    "cultural-expert": "Risk of cultural or UX issues",
    "payment-specialist": "Risk of payment issues",
    "security-expert": "Risk of security vulnerabilities",
}
DEFAULT_QUALITY_IMPACT = "Limited quality impact"

COST_IMPACT = "Estimated extra cost: 15-30% of the agent budget"

# =============================================================================
# Bundle tables
# =============================================================================

DOMAIN_WORKFLOWS: dict[str, tuple[dict, ...]] = {
    "marketplace": (
        {
            "name": "marketplace-setup",
            "description": "Complete marketplace setup",
            "agents": ["marketplace-architect", "cultural-expert"],
            "steps": ["analysis", "architecture", "implementation"],
            "triggers": ["project_init"],
        },
    ),
    "web_app": (
        {
            "name": "fullstack-development",
            "description": "Standard fullstack development",
            "agents": ["fullstack-architect", "ui-designer"],
            "steps": ["planning", "frontend", "backend", "integration"],
            "triggers": ["development_start"],
        },
    ),
}
