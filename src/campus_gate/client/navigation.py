"""
campus_gate.client.navigation

Back-office navigation filtered by the effective role.

Responsibilities:
- Declare the admin sidebar categories and their links.
- Select the categories visible to an effective role (simulation included).
"""

from __future__ import annotations

from dataclasses import dataclass

from campus_gate.auth.roles import Role


@dataclass(frozen=True, slots=True)
class MenuItem:
    title: str
    url: str


@dataclass(frozen=True, slots=True)
class MenuCategory:
    title: str
    items: tuple[MenuItem, ...]
    superadmin_only: bool = False


ALL_CATEGORIES: tuple[MenuCategory, ...] = (
    MenuCategory(
        "Développement",
        (
            MenuItem("Demandes", "/admin/developpement"),
            MenuItem("Résolues", "/admin/developpement/resolues"),
            MenuItem("Archives", "/admin/developpement/archives"),
            MenuItem("Corbeille", "/admin/developpement/corbeille"),
        ),
    ),
    MenuCategory(
        "Formations",
        (
            MenuItem("Catalogue", "/admin/formations"),
            MenuItem("Sessions", "/admin/sessions"),
            MenuItem("Formateurs", "/admin/formateurs"),
            MenuItem("Clients", "/admin/clients"),
            MenuItem("Facturation", "/admin/facturation"),
            MenuItem("Analyse besoins", "/admin/analyse-besoins"),
            MenuItem("Satisfaction", "/admin/satisfaction"),
            MenuItem("Organismes", "/admin/organisations"),
        ),
    ),
    MenuCategory(
        "Contenu",
        (
            MenuItem("Articles", "/admin/articles"),
            MenuItem("FAQ", "/admin/faq"),
            MenuItem("Médias", "/admin/media"),
        ),
    ),
    MenuCategory(
        "Communication",
        (
            MenuItem("Messages", "/admin/contacts"),
            MenuItem("Notifications", "/admin/notifications"),
            MenuItem("Emails", "/admin/email-stats"),
            MenuItem("Templates", "/admin/email-templates"),
            MenuItem("Chatbot", "/admin/chat-flows"),
            MenuItem("Stats Chat", "/admin/chat-analytics"),
        ),
    ),
    MenuCategory(
        "Administration",
        (
            MenuItem("Utilisateurs", "/admin/users"),
            MenuItem("BPF", "/admin/bpf"),
            MenuItem("Automation", "/admin/automation"),
            MenuItem("Catégories", "/admin/categories"),
            MenuItem("Cat. Documents", "/admin/categories-documents"),
            MenuItem("Paramètres", "/admin/settings"),
        ),
    ),
    MenuCategory(
        "Système",
        (
            MenuItem("Rôles & Permissions", "/admin/roles"),
            MenuItem("Sécurité", "/admin/security"),
            MenuItem("Cookies RGPD", "/admin/cookies"),
            MenuItem("Redirections", "/admin/redirects"),
        ),
        superadmin_only=True,
    ),
)

ORG_MANAGER_CATEGORIES: tuple[MenuCategory, ...] = (
    MenuCategory(
        "Formations",
        (
            MenuItem("Mes formations", "/admin/formations"),
            MenuItem("Sessions", "/admin/sessions"),
            MenuItem("Formateurs", "/admin/formateurs"),
            MenuItem("Clients", "/admin/clients"),
            MenuItem("Facturation", "/admin/facturation"),
            MenuItem("Analyse besoins", "/admin/analyse-besoins"),
        ),
    ),
)

MODERATOR_CATEGORIES: tuple[MenuCategory, ...] = (
    MenuCategory(
        "Contenu",
        (
            MenuItem("Articles", "/admin/articles"),
            MenuItem("FAQ", "/admin/faq"),
            MenuItem("Médias", "/admin/media"),
        ),
    ),
    MenuCategory(
        "Communication",
        (
            MenuItem("Messages", "/admin/contacts"),
            MenuItem("Notifications", "/admin/notifications"),
        ),
    ),
)


def admin_menu(role: Role | None) -> tuple[MenuCategory, ...]:
    """Categories shown in the sidebar for `role` (pass the effective role)."""
    if role is Role.superadmin:
        return ALL_CATEGORIES
    if role is Role.admin:
        return tuple(c for c in ALL_CATEGORIES if not c.superadmin_only)
    if role is Role.org_manager:
        return ORG_MANAGER_CATEGORIES
    if role is Role.moderator:
        return MODERATOR_CATEGORIES
    return ()


# --- Module Notes -----------------------------------------------------------
# Display only. Org managers see the Formateurs link although the edge gate sends
# them back to /admin; the gate, not this menu, decides access.
