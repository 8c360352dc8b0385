"""
Permissions Catalog Configuration
Defines the action catalog, the project roles, the subscription plans and the
default plan/role permission matrix.
Used by the seed script to populate/update the permission tables.
"""

# Well-known role names. Identity only: hierarchy is decided by priority.
ROLE_OWNER = "OWNER"
ROLE_ADMIN = "ADMIN"
ROLE_MEMBER = "MEMBER"

# Priority strictly increases with privilege
ROLES = {
    ROLE_OWNER: {
        "priority": 3,
        "description": "Full control over the project. Can perform all actions including deletion."
    },
    ROLE_ADMIN: {
        "priority": 2,
        "description": "Can manage members and settings, but cannot delete the project."
    },
    ROLE_MEMBER: {
        "priority": 1,
        "description": "Standard access. Can view the project and its members."
    }
}

# Action catalog grouped by category: slug -> display name
ACTIONS = {
    "project": {
        "project.view": "View Project",
        "project.update": "Update Project",
        "project.delete": "Delete Project",
    },
    "members": {
        "members.view": "View Members",
        "members.invite": "Invite Member",
        "members.remove": "Remove Member",
        "members.update_role": "Update Member Role",
    },
    "invitations": {
        "invitations.view": "View Invitations",
        "invitations.cancel": "Cancel Invitation",
    },
    "settings": {
        "settings.view": "View Settings",
        "settings.update": "Update Settings",
    },
    "billing": {
        "billing.view": "View Billing",
        "billing.update": "Update Billing",
    },
    "dashboard": {
        "dashboard.view": "View Dashboard",
        "dashboard.view_advanced": "View Advanced Dashboard",
    }
}

ACTION_DESCRIPTIONS = {
    "project.view": "View project information",
    "project.update": "Update project name and details",
    "project.delete": "Delete the project and transfer ownership",
    "members.view": "View project members",
    "members.invite": "Invite new members to the project",
    "members.remove": "Remove members from the project",
    "members.update_role": "Change member roles",
    "invitations.view": "View pending project invitations",
    "invitations.cancel": "Cancel pending project invitations",
    "settings.view": "View project settings",
    "settings.update": "Update project settings",
    "billing.view": "View billing information",
    "billing.update": "Change the project subscription",
    "dashboard.view": "View project dashboard",
    "dashboard.view_advanced": "View advanced dashboard statistics",
}

PLANS = {
    "free": {
        "display_name": "Free",
        "description": "Free plan with limited features. Perfect for getting started.",
        "disabled_actions": ["dashboard.view_advanced"]
    },
    "pro": {
        "display_name": "Pro",
        "description": "Pro plan with advanced features. Perfect for growing teams.",
        "disabled_actions": []
    },
    "business": {
        "display_name": "Business",
        "description": "Business plan with every feature enabled.",
        "disabled_actions": []
    }
}

# Actions each role may perform (within whatever the plan enables)
ROLE_ACTIONS = {
    ROLE_OWNER: "*",
    ROLE_ADMIN: [
        "project.view", "project.update",
        "members.view", "members.invite", "members.remove", "members.update_role",
        "invitations.view", "invitations.cancel",
        "settings.view", "settings.update",
        "billing.view",
        "dashboard.view", "dashboard.view_advanced",
    ],
    ROLE_MEMBER: [
        "project.view", "members.view", "settings.view", "dashboard.view",
    ]
}


def all_action_slugs():
    return [slug for actions in ACTIONS.values() for slug in actions]


def get_permission_matrix():
    """
    Returns the seed data as plain records.
    Format: {
        "actions": [{"slug": "members.invite", "name": "...", "description": "...", "category": "members"}, ...],
        "roles": [{"name": "OWNER", "priority": 3, "description": "..."}, ...],
        "plans": [{"name": "free", "display_name": "Free", "description": "...", "is_active": True}, ...],
        "plan_actions": {"free": {"members.invite": True, ...}, ...},
        "role_actions": {"free": {"OWNER": ["members.invite", ...], ...}, ...}
    }
    """
    actions = []
    for category, category_actions in ACTIONS.items():
        for slug, name in category_actions.items():
            actions.append({
                "slug": slug,
                "name": name,
                "description": ACTION_DESCRIPTIONS.get(slug),
                "category": category
            })

    roles = [
        {"name": name, "priority": config["priority"], "description": config["description"]}
        for name, config in ROLES.items()
    ]

    plans = []
    plan_actions = {}
    role_actions = {}
    slugs = all_action_slugs()
    for plan_name, plan_config in PLANS.items():
        plans.append({
            "name": plan_name,
            "display_name": plan_config["display_name"],
            "description": plan_config["description"],
            "is_active": True
        })
        enabled = [s for s in slugs if s not in plan_config["disabled_actions"]]
        plan_actions[plan_name] = {s: s in enabled for s in slugs}

        # Role rows are only seeded for actions the plan enables
        role_actions[plan_name] = {}
        for role_name, allowed in ROLE_ACTIONS.items():
            role_slugs = slugs if allowed == "*" else allowed
            role_actions[plan_name][role_name] = sorted(s for s in role_slugs if s in enabled)

    return {
        "actions": actions,
        "roles": roles,
        "plans": plans,
        "plan_actions": plan_actions,
        "role_actions": role_actions
    }


# Export the matrix for use in seed scripts
PERMISSION_MATRIX = get_permission_matrix()
