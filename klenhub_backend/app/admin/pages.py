import html

COMING_SOON = "This feature is coming soon..."

# page -> (segment -> title, default title)
PLACEHOLDER_PAGES: dict[str, tuple[dict[str, str], str]] = {
    "content": (
        {
            "pages": "Pages",
            "blog": "Blog Posts",
            "media": "Media Library",
        },
        "Content Management",
    ),
    "marketing": (
        {
            "discounts": "Discounts",
            "promotions": "Promotions",
            "email": "Email Marketing",
        },
        "Marketing",
    ),
    "settings": (
        {
            "general": "General Settings",
            "users": "User Management",
        },
        "Settings",
    ),
}


def last_segment(path: str) -> str:
    # "/admin/content/" -> "", same as the router's own view of the URL
    return path.rsplit("/", 1)[-1]


def resolve_title(page: str, path: str) -> str:
    titles, default = PLACEHOLDER_PAGES[page]
    return titles.get(last_segment(path), default)


def render_placeholder(title: str) -> str:
    return (
        '<div class="admin-page">\n'
        f"  <h1>{html.escape(title)}</h1>\n"
        '  <div class="admin-card">\n'
        f"    <p>{COMING_SOON}</p>\n"
        "  </div>\n"
        "</div>\n"
    )
