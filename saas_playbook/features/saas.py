"""SaaS module features: auth, billing, tenancy, teams, RBAC, notifications,
onboarding and analytics.

Each ``build_*_context`` function maps raw options (see
:mod:`saas_playbook.features.options`) and the project config to the
template context.  Defaults mirror what a fresh Next.js SaaS needs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..config import is_feature_enabled
from ..engine.helpers import pascal_case, pluralize
from .base import Feature
from .options import Options, as_bool, as_int, as_list, as_str


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


def build_auth_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    """Context for NextAuth.js authentication.

    Options: ``providers`` (google, github, discord, credentials),
    ``strategy`` (jwt or session), ``features`` (2fa, password-reset,
    email-verification, sso).
    """
    providers = as_list(options.get("providers"), "credentials")
    features = as_list(options.get("features"))

    return {
        "providers": providers,
        "strategy": as_str(options.get("strategy"), "jwt"),
        "features": features,
        "has_password_reset": "password-reset" in features,
        "has_email_verification": "email-verification" in features,
        "has_2fa": "2fa" in features,
        "has_sso": "sso" in features,
        "has_credentials": "credentials" in providers,
        "has_google": "google" in providers,
        "has_github": "github" in providers,
        "has_discord": "discord" in providers,
        "multi_tenant": is_feature_enabled(config, "multi-tenancy"),
    }


# ---------------------------------------------------------------------------
# Billing
# ---------------------------------------------------------------------------

DEFAULT_PLANS = "free,pro,enterprise"


def build_billing_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    """Context for subscription billing.

    ``trial`` is a number of days; ``--trial=false`` disables the trial.
    An empty ``plans`` list falls back to :data:`DEFAULT_PLANS`.  The
    schema block depends on options only, so re-running after other
    features are enabled merges the same text.
    """
    plans = as_list(options.get("plans")) or as_list(DEFAULT_PLANS)
    trial_option = options.get("trial")
    has_trial = trial_option is not False
    trial_days = as_int(trial_option, 14) or 14

    return {
        "provider": as_str(options.get("provider"), "stripe"),
        "plans": plans,
        "plan_names": [plan.lower() for plan in plans],
        "plan_details": [
            {
                "name": plan.lower(),
                "display_name": pascal_case(plan),
                "upper_name": plan.upper(),
            }
            for plan in plans
        ],
        "has_trial": has_trial,
        "trial_days": trial_days,
        "has_free_plan": any(plan.lower() == "free" for plan in plans),
    }


# ---------------------------------------------------------------------------
# Multi-tenancy
# ---------------------------------------------------------------------------


def build_multi_tenancy_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    """Context for multi-tenancy.

    Options: ``strategy`` (row-level, schema-per-tenant, database-per-tenant),
    ``identification`` (subdomain, path, header), ``terminology``
    (organization, workspace, team, company).
    """
    strategy = as_str(options.get("strategy"), "row-level")
    identification = as_str(options.get("identification"), "path")
    terminology = as_str(options.get("terminology"), "organization")

    return {
        "strategy": strategy,
        "identification": identification,
        "terminology": terminology,
        "terminology_plural": pluralize(terminology),
        "terminology_pascal": pascal_case(terminology),
        "is_row_level": strategy == "row-level",
        "is_subdomain": identification == "subdomain",
        "is_path_based": identification == "path",
        "is_header_based": identification == "header",
    }


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------


def build_teams_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    """Context for team management.  ``invitation_flow`` is email, link or both."""
    model = as_str(options.get("model"), "team")
    invitation_flow = as_str(options.get("invitation_flow"), "email")

    return {
        "model": model,
        "model_pascal": pascal_case(model),
        "model_plural": pluralize(model),
        "roles": as_list(options.get("roles"), "owner,admin,member"),
        "invitation_flow": invitation_flow,
        "has_email_invite": invitation_flow in ("email", "both"),
        "has_link_invite": invitation_flow in ("link", "both"),
        "has_billing": is_feature_enabled(config, "billing"),
    }


# ---------------------------------------------------------------------------
# RBAC
# ---------------------------------------------------------------------------


def build_rbac_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    model = as_str(options.get("model"), "role-based")
    return {
        "model": model,
        "roles": as_list(options.get("roles"), "admin,editor,viewer"),
        "resources": as_list(options.get("resources")),
        "is_role_based": model == "role-based",
        "is_permission_based": model == "permission-based",
    }


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


def build_notifications_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    channels = as_list(options.get("channels"), "email,in-app")
    return {
        "channels": channels,
        "email_provider": as_str(options.get("email_provider"), "resend"),
        "realtime": as_bool(options.get("realtime")),
        "has_email": "email" in channels,
        "has_in_app": "in-app" in channels,
        "has_push": "push" in channels,
        "has_webhook": "webhook" in channels,
    }


# ---------------------------------------------------------------------------
# Onboarding
# ---------------------------------------------------------------------------


def build_onboarding_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    steps = as_list(options.get("steps"), "profile,workspace,invite")
    return {
        "steps": steps,
        "step_count": len(steps),
        "checklist": as_bool(options.get("checklist"), True),
        "guided_tour": as_bool(options.get("guided_tour")),
    }


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


def build_analytics_context(options: Options, config: Mapping[str, Any]) -> dict[str, Any]:
    provider = as_str(options.get("provider"), "posthog")
    return {
        "provider": provider,
        "server_side": as_bool(options.get("server_side")),
        "gdpr": as_bool(options.get("gdpr"), True),
        "is_posthog": provider == "posthog",
        "is_mixpanel": provider == "mixpanel",
        "is_plausible": provider == "plausible",
        "is_custom": provider == "custom",
    }


SAAS_FEATURES = [
    Feature("add-auth", "auth", build_auth_context, "auth",
            summary="Authentication with NextAuth.js"),
    Feature("add-billing", "billing", build_billing_context, "billing",
            summary="Subscription billing"),
    Feature("add-multi-tenancy", "multi-tenancy", build_multi_tenancy_context, "multi-tenancy",
            summary="Tenant isolation and resolution"),
    Feature("add-teams", "teams", build_teams_context, "teams",
            summary="Team membership and invitations"),
    Feature("add-rbac", "rbac", build_rbac_context, "rbac",
            summary="Role-based access control"),
    Feature("add-notifications", "notifications", build_notifications_context, "notifications",
            summary="Email and in-app notifications"),
    Feature("add-onboarding", "onboarding", build_onboarding_context, "onboarding",
            summary="User onboarding flow"),
    Feature("add-analytics", "analytics", build_analytics_context, "analytics",
            summary="Product analytics"),
]
