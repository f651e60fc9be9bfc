"""
SiteDesk — Construction Management Dashboard Backend

Packages:
    api/            Dashboard blueprint, auth and route modules
    core/           Storage, change propagation, table queries, settings, logging paths
    seed_data/      Hardcoded seed rows for every entity type
    masters/        Projects, sub-projects, companies
    company_users/  Roles, team users, project permissions
    procurement/    Purchase requisition table
    billing/        Subscription pricing
    agents/         Chat-style AI agent panel (simulated responder)
"""

__version__ = "1.4.0"
