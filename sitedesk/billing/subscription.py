"""Subscription plans and plan selection."""

import json
import logging

from sitedesk.core.errors import ValidationError
from sitedesk.core.workspace import SELECTED_PLAN
from sitedesk.seed_data import PRICING_PLANS

log = logging.getLogger("sitedesk.billing")

BILLING_PERIODS = ("monthly", "yearly")
CONTACT_SALES_PLAN = "Enterprise"


def _money(amount) -> str:
    return f"${amount:,}"


def yearly_savings_pct(plans=PRICING_PLANS) -> int:
    """Best whole-percent saving of yearly billing over 12 monthly payments."""
    savings = [
        1 - p["yearlyPrice"] / (p["monthlyPrice"] * 12)
        for p in plans if p["monthlyPrice"] and p["yearlyPrice"]
    ]
    return round(max(savings) * 100) if savings else 0


def _check_period(period: str) -> str:
    if period not in BILLING_PERIODS:
        raise ValidationError(f"Billing period must be one of: {', '.join(BILLING_PERIODS)}")
    return period


def list_plans(period: str = "monthly") -> dict:
    period = _check_period(period)
    plans = []
    for plan in PRICING_PLANS:
        amount = plan["monthlyPrice"] if period == "monthly" else plan["yearlyPrice"]
        custom = amount is None
        plans.append({
            "name": plan["name"],
            "price": "Custom" if custom else _money(amount),
            "amount": amount,
            "per": None if custom else ("month" if period == "monthly" else "year"),
            "billedAnnually": period == "yearly" and not custom,
            "popular": plan["popular"],
            "features": list(plan["features"]),
            "action": "Contact Sales" if plan["name"] == CONTACT_SALES_PLAN else "Get Started",
        })
    result = {"period": period, "plans": plans}
    if period == "yearly":
        result["savingsBadge"] = f"Save {yearly_savings_pct()}%"
    return result


def select_plan(ws, name: str, period: str = "monthly") -> dict:
    period = _check_period(period)
    plan = next((p for p in PRICING_PLANS if p["name"] == name), None)
    if plan is None:
        raise ValidationError(f"Unknown plan: {name}")
    if plan["name"] == CONTACT_SALES_PLAN:
        log.info("Enterprise plan requested ws=%s", ws.id)
        return {"action": "contact_sales", "plan": plan["name"]}
    selection = {"plan": plan["name"], "period": period}
    ws.blobs.set_item(SELECTED_PLAN, json.dumps(selection))
    log.info("Plan selected: %s (%s) ws=%s", plan["name"], period, ws.id)
    ws.toasts.success(f"{plan['name']} plan selected")
    return {"action": "selected", **selection}


def selected_plan(ws):
    raw = ws.blobs.get_item(SELECTED_PLAN)
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        log.warning("Ignoring unparseable selectedPlan for ws=%s", ws.id)
        return None
