# routes_pages.py — server-rendered pages behind a three-state gate (public / logged in / admin)
from datetime import date
from flask import Blueprint, render_template, redirect, request, url_for, abort, current_app
from guards import current_user
from models_donations import total_donations
from models_events import events_in_month
from models_rooms import Room

bp_pages = Blueprint("pages", __name__)

PUBLIC, LOGIN, ADMIN = "public", "login", "admin"

# path -> (title, access)
PAGES = {
    "/":             ("Home", PUBLIC),
    "/about":        ("About Us", PUBLIC),
    "/rentals":      ("Rentals", PUBLIC),
    "/rooms":        ("Our Rooms", PUBLIC),
    "/events":       ("Events", PUBLIC),
    "/booking":      ("Book a Room", PUBLIC),
    "/fundraising":  ("Fundraising", PUBLIC),
    "/contact":      ("Contact", PUBLIC),
    "/auth":         ("Sign In", PUBLIC),
    "/dashboard":    ("My Dashboard", LOGIN),
    "/profile":      ("My Profile", LOGIN),
    "/admin/events":                 ("Manage Events", ADMIN),
    "/admin/site-images":            ("Site Images", ADMIN),
    "/admin/users":                  ("Users", ADMIN),
    "/admin/contact-messages":       ("Contact Messages", ADMIN),
    "/admin/bookings":               ("Bookings", ADMIN),
    "/admin/donations":              ("Donations", ADMIN),
    "/admin/newsletter-subscribers": ("Newsletter Subscribers", ADMIN),
    "/admin/compose-newsletter":     ("Compose Newsletter", ADMIN),
}

BANNER_HIDDEN_UNDER = ("/admin", "/dashboard", "/profile")

def show_banner(path: str) -> bool:
    return not any(p in path for p in BANNER_HIDDEN_UNDER)

def gate(access: str, path: str):
    """None when the current visitor may see the page, otherwise the redirect to send."""
    if access == PUBLIC:
        return None
    user = current_user()
    if user is None:
        return redirect(url_for("pages.auth_page", next=path))
    if access == ADMIN and not user.is_admin:
        return redirect("/dashboard")
    return None

def _page_context(path: str) -> dict:
    if path in ("/rentals", "/rooms", "/booking"):
        return {"rooms": Room.query.order_by(Room.id).all()}
    if path == "/events":
        today = date.today()
        return {"events": events_in_month(today.year, today.month)}
    if path == "/fundraising":
        return {"total": total_donations(), "goal": current_app.config["DONATION_GOAL"]}
    return {}

def render_page(path: str):
    title, access = PAGES[path]
    blocked = gate(access, path)
    if blocked is not None:
        return blocked
    return render_template("page.html", title=title, path=path, user=current_user(),
                           show_banner=show_banner(path), admin_pages=_admin_nav(), **_page_context(path))

def _admin_nav():
    return [(p, t) for p, (t, a) in PAGES.items() if a == ADMIN]

@bp_pages.get("/auth")
def auth_page():
    # already signed in: go where the gate sent them from
    if current_user() is not None:
        nxt = request.args.get("next") or "/dashboard"
        return redirect(nxt if nxt.startswith("/") and not nxt.startswith("//") else "/dashboard")
    return render_page("/auth")

@bp_pages.get("/")
@bp_pages.get("/<path:subpath>")
def page(subpath: str = ""):
    path = "/" + subpath.rstrip("/")
    if path.startswith("/api/") or path not in PAGES:
        abort(404)
    return render_page(path)
