"""FastAPI application factory: reader pages, public API and admin API."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

from fastapi import APIRouter, Depends, FastAPI, Form, Header, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates
from loguru import logger
from pydantic import BaseModel, ValidationError, field_validator

from bloghub.analytics.service import category_distribution, views_and_likes_chart
from bloghub.articles.content import render_content
from bloghub.articles.forms import ArticleForm
from bloghub.articles.service import categories_of, filter_and_sort, search_articles, status_counts
from bloghub.auth.service import PasswordChangeForm, SessionRegistry
from bloghub.backend.client import BackendClient
from bloghub.comments.service import CommentForm, ReplyForm, _check_email, preview, search_comments
from bloghub.config.app import AppConfig
from bloghub.errors import AuthenticationError, BackendError, NotFoundError
from bloghub.models import Admin, SiteSettings
from bloghub.notifications import Notifier
from bloghub.services import Services
from bloghub.settings.service import ThemeSettingsForm
from bloghub.storage.theme import THEME_COLORS


class LoginRequest(BaseModel):
    username: str
    password: str


class AdminReplyRequest(BaseModel):
    password: str
    content: str


class ContactForm(BaseModel):
    name: str
    email: str
    message: str

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        if len(value.strip()) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value.strip()

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("message")
    @classmethod
    def _message(cls, value: str) -> str:
        if len(value.strip()) < 10:
            raise ValueError("Message must be at least 10 characters")
        return value.strip()


def create_app(
    config: AppConfig,
    client: BackendClient | None = None,
    sessions: SessionRegistry | None = None,
) -> FastAPI:
    """Build the site. ``client`` defaults to one built from ``config.backend``."""

    if client is None:
        if config.backend is None:
            raise ValueError("Backend is not configured; add a [backend] block with url and anon_key")
        client = BackendClient(config.backend)

    web_config = config.web
    sessions = sessions or SessionRegistry(web_config.session_ttl_minutes * 60)
    templates = Jinja2Templates(directory=str(_templates_dir()))

    app = FastAPI(
        title="BlogHub API",
        description="Public reader and admin console for the BlogHub platform.",
        version="0.1.0",
    )
    app.state.sessions = sessions

    def get_services(request: Request) -> Services:
        notifier = Notifier()
        request.state.notifier = notifier
        return Services.from_client(client, notifier)

    require_admin = _build_admin_dependency(sessions, web_config.session_header)

    def _messages(request: Request) -> list[dict[str, str]]:
        notifier: Notifier | None = getattr(request.state, "notifier", None)
        return [item.to_dict() for item in notifier.drain()] if notifier else []

    def _ok(request: Request, **payload: Any) -> dict[str, Any]:
        return {**payload, "messages": _messages(request)}

    def _site_settings(services: Services) -> SiteSettings:
        try:
            return services.settings.get()
        except BackendError as exc:
            logger.warning("Falling back to default appearance: {}", exc)
            return SiteSettings()

    def _render(
        request: Request, template: str, context: dict[str, Any], services: Services, status_code: int = 200
    ) -> HTMLResponse:
        settings = _site_settings(services)
        base = {
            "site_title": web_config.title,
            "theme": settings.default_theme,
            "theme_color": settings.default_theme_color,
            "messages": _messages(request),
        }
        return templates.TemplateResponse(request, template, {**base, **context}, status_code=status_code)

    # -- errors -----------------------------------------------------------------

    @app.exception_handler(BackendError)
    async def backend_error_handler(request: Request, exc: BackendError) -> Response:
        status_code = 404 if isinstance(exc, NotFoundError) else status.HTTP_502_BAD_GATEWAY
        if not request.url.path.startswith("/api") and web_config.enabled:
            return templates.TemplateResponse(
                request,
                "error.html",
                {
                    "site_title": web_config.title,
                    "theme": "system",
                    "theme_color": "default",
                    "messages": _messages(request),
                    "status_code": status_code,
                    "detail": "Page not found" if status_code == 404 else "The blog is temporarily unavailable",
                },
                status_code=status_code,
            )
        return JSONResponse({"detail": exc.message, "messages": _messages(request)}, status_code=status_code)

    @app.exception_handler(AuthenticationError)
    async def auth_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
        return JSONResponse(
            {"detail": str(exc), "messages": _messages(request)},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            {"detail": [{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()]},
            status_code=422,
        )

    @app.get("/health", summary="Health Check", tags=["Monitoring"])
    async def health_check() -> dict[str, str]:
        """Check if the API is running."""
        return {"status": "ok"}

    # -- reader pages -----------------------------------------------------------

    if web_config.enabled:

        @app.get("/", response_class=HTMLResponse, include_in_schema=False)
        def home(request: Request, services: Services = Depends(get_services)) -> HTMLResponse:
            recent = services.articles.recent(3)
            return _render(
                request,
                "home.html",
                {
                    "tagline": web_config.tagline,
                    "featured": recent[0] if recent else None,
                    "others": recent[1:],
                },
                services,
            )

        @app.get("/articles", response_class=HTMLResponse, include_in_schema=False)
        def articles_page(
            request: Request,
            q: str = "",
            category: str | None = None,
            services: Services = Depends(get_services),
        ) -> HTMLResponse:
            articles = services.articles.list_published()
            return _render(
                request,
                "articles.html",
                {
                    "articles": search_articles(articles, q, category),
                    "categories": categories_of(articles),
                    "q": q,
                    "selected_category": category,
                },
                services,
            )

        @app.get("/articles/{slug}", response_class=HTMLResponse, include_in_schema=False)
        def article_page(
            request: Request,
            slug: str,
            all_comments: bool = False,
            services: Services = Depends(get_services),
        ) -> HTMLResponse:
            article = services.articles.get_by_slug(slug)
            rendered = render_content(article.content)
            comments = services.comments.list_for_article(article.id)
            shown, has_more = preview(comments, all_comments)
            try:
                like_count = services.likes.count(article.id)
            except BackendError as exc:
                logger.error("Error fetching like count: {}", exc)
                like_count = 0
            return _render(
                request,
                "article.html",
                {
                    "article": article,
                    "body": rendered.html,
                    "headings": rendered.headings,
                    "comments": shown,
                    "comment_total": len(comments),
                    "has_more_comments": has_more,
                    "show_all_comments": all_comments,
                    "like_count": like_count,
                    "related": services.articles.related(article),
                },
                services,
            )

        @app.get("/about", response_class=HTMLResponse, include_in_schema=False)
        def about(request: Request, services: Services = Depends(get_services)) -> HTMLResponse:
            return _render(request, "about.html", {"about": web_config.about}, services)

        @app.get("/contact", response_class=HTMLResponse, include_in_schema=False)
        def contact(request: Request, services: Services = Depends(get_services)) -> HTMLResponse:
            return _render(
                request, "contact.html", {"contact_email": web_config.contact_email, "errors": []}, services
            )

        @app.post("/contact", response_class=HTMLResponse, include_in_schema=False)
        def contact_submit(
            request: Request,
            name: str = Form(""),
            email: str = Form(""),
            message: str = Form(""),
            services: Services = Depends(get_services),
        ) -> HTMLResponse:
            errors = _contact_errors(name, email, message)
            if not errors:
                logger.info("Contact message received from {}", email)
                services.notifier.success("Message sent! We'll get back to you as soon as possible.")
            return _render(
                request,
                "contact.html",
                {"contact_email": web_config.contact_email, "errors": errors},
                services,
                status_code=422 if errors else 200,
            )

    # -- public API -------------------------------------------------------------

    api = APIRouter(prefix="/api", tags=["Reader"])

    @api.get("/articles")
    def list_articles(
        q: str = "",
        category: str | None = None,
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        articles = services.articles.list_published()
        return {
            "articles": [article.to_dict() for article in search_articles(articles, q, category)],
            "categories": categories_of(articles),
        }

    @api.get("/articles/{slug}")
    def get_article(slug: str, services: Services = Depends(get_services)) -> dict[str, Any]:
        article = services.articles.get_by_slug(slug)
        rendered = render_content(article.content)
        return {
            "article": article.to_dict(),
            "html": rendered.html,
            "headings": [
                {"level": h.level, "text": h.text, "anchor": h.anchor} for h in rendered.headings
            ],
        }

    @api.get("/articles/{slug}/related")
    def get_related(slug: str, count: int = 2, services: Services = Depends(get_services)) -> dict[str, Any]:
        article = services.articles.get_by_slug(slug, count_view=False)
        return {"articles": [item.to_dict() for item in services.articles.related(article, count)]}

    @api.get("/articles/{article_id}/likes")
    def get_likes(article_id: str, services: Services = Depends(get_services)) -> dict[str, Any]:
        return {"count": services.likes.count(article_id)}

    @api.post("/articles/{article_id}/likes")
    def like(request: Request, article_id: str, services: Services = Depends(get_services)) -> dict[str, Any]:
        return _ok(request, count=services.likes.like(article_id), liked=True)

    @api.delete("/articles/{article_id}/likes")
    def unlike(request: Request, article_id: str, services: Services = Depends(get_services)) -> dict[str, Any]:
        return _ok(request, count=services.likes.unlike(article_id), liked=False)

    @api.get("/articles/{article_id}/comments")
    def get_comments(article_id: str, services: Services = Depends(get_services)) -> dict[str, Any]:
        comments = services.comments.list_for_article(article_id)
        return {"total": len(comments), "comments": [comment.to_dict() for comment in comments]}

    @api.post("/articles/{article_id}/comments", status_code=201)
    def post_comment(
        request: Request, article_id: str, form: CommentForm, services: Services = Depends(get_services)
    ) -> dict[str, Any]:
        comment = services.comments.post_comment(article_id, form)
        return _ok(request, comment=comment.to_dict())

    @api.post("/comments/{comment_id}/replies", status_code=201)
    def post_reply(
        request: Request, comment_id: str, form: ReplyForm, services: Services = Depends(get_services)
    ) -> dict[str, Any]:
        reply = services.comments.post_reply(comment_id, form)
        return _ok(request, reply=reply.to_dict())

    @api.get("/settings/theme")
    def public_theme(services: Services = Depends(get_services)) -> dict[str, Any]:
        settings = _site_settings(services)
        return {"default_theme": settings.default_theme, "default_theme_color": settings.default_theme_color}

    app.include_router(api)

    # -- admin API --------------------------------------------------------------

    admin_api = APIRouter(prefix="/api/admin", tags=["Admin"])

    @admin_api.post("/login")
    def login(request: Request, body: LoginRequest, services: Services = Depends(get_services)) -> dict[str, Any]:
        admin = services.auth.login(body.username, body.password)
        token = sessions.issue(admin)
        return _ok(request, token=token, admin=admin.to_dict(), header=web_config.session_header)

    @admin_api.post("/logout")
    def logout(
        token: str | None = Header(default=None, alias=web_config.session_header),
        _: Admin = Depends(require_admin),
    ) -> dict[str, str]:
        if token:
            sessions.revoke(token)
        return {"status": "logged_out"}

    @admin_api.get("/me")
    def me(admin: Admin = Depends(require_admin)) -> dict[str, Any]:
        return {"admin": admin.to_dict()}

    @admin_api.get("/articles")
    def admin_articles(
        status_filter: str = Query("all", alias="status", pattern="^(all|published|draft)$"),
        q: str = "",
        sort: str = Query("newest", pattern="^(newest|oldest|views|title)$"),
        _: Admin = Depends(require_admin),
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        try:
            articles = services.articles.list_all()
        except BackendError:
            services.notifier.error("Failed to load articles")
            raise
        selected = filter_and_sort(articles, status_filter, q, sort)  # type: ignore[arg-type]
        return {
            "articles": [article.to_dict() for article in selected],
            "found": len(selected),
            "counts": status_counts(articles),
        }

    @admin_api.post("/articles", status_code=201)
    def create_article(
        request: Request,
        form: ArticleForm,
        _: Admin = Depends(require_admin),
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        article = services.articles.create(form)
        return _ok(request, article=article.to_dict())

    @admin_api.get("/articles/{article_id}")
    def admin_article(
        article_id: str,
        _: Admin = Depends(require_admin),
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        article = services.articles.get(article_id)
        return {"article": article.to_dict(), "tags": ", ".join(article.tags)}

    @admin_api.put("/articles/{article_id}")
    def update_article(
        request: Request,
        article_id: str,
        form: ArticleForm,
        _: Admin = Depends(require_admin),
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        article = services.articles.update(article_id, form)
        return _ok(request, article=article.to_dict())

    @admin_api.delete("/articles/{article_id}")
    def delete_article(
        request: Request,
        article_id: str,
        _: Admin = Depends(require_admin),
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        services.articles.delete(article_id)
        return _ok(request, deleted=article_id)

    @admin_api.get("/comments")
    def admin_comments(
        q: str = "",
        _: Admin = Depends(require_admin),
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        comments = services.comments.list_all()
        selected = search_comments(comments, q)
        return {"total": len(comments), "comments": [comment.to_dict() for comment in selected]}

    @admin_api.post("/comments/{comment_id}/reply", status_code=201)
    def admin_reply(
        request: Request,
        comment_id: str,
        body: AdminReplyRequest,
        admin: Admin = Depends(require_admin),
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        if not body.content.strip():
            raise HTTPException(status_code=422, detail="Reply content is required")
        reply = services.comments.admin_reply(admin, body.password, comment_id, body.content)
        return _ok(request, reply=reply.to_dict())

    @admin_api.delete("/comments/{comment_id}")
    def delete_comment(
        request: Request,
        comment_id: str,
        _: Admin = Depends(require_admin),
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        services.comments.delete(comment_id)
        return _ok(request, deleted=comment_id)

    @admin_api.get("/dashboard")
    def dashboard(_: Admin = Depends(require_admin), services: Services = Depends(get_services)) -> dict[str, Any]:
        return services.analytics.dashboard().to_dict()

    @admin_api.get("/analytics")
    def analytics(
        time_range: str = Query("all", alias="range", pattern="^(all|7days|30days)$"),
        _: Admin = Depends(require_admin),
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        report = services.analytics.report(time_range)
        return {
            **report.to_dict(),
            "views_and_likes": views_and_likes_chart(report),
            "categories": category_distribution(report),
        }

    @admin_api.get("/settings/theme")
    def admin_theme(_: Admin = Depends(require_admin), services: Services = Depends(get_services)) -> dict[str, Any]:
        return {"settings": services.settings.get().to_dict(), "colors": list(THEME_COLORS)}

    @admin_api.put("/settings/theme")
    def update_theme(
        request: Request,
        form: ThemeSettingsForm,
        _: Admin = Depends(require_admin),
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        settings = services.settings.update(form)
        return _ok(request, settings=settings.to_dict())

    @admin_api.post("/password")
    def change_password(
        request: Request,
        form: PasswordChangeForm,
        admin: Admin = Depends(require_admin),
        services: Services = Depends(get_services),
    ) -> dict[str, Any]:
        services.auth.change_password(admin, form)
        return _ok(request, status="updated")

    app.include_router(admin_api)
    return app


def _contact_errors(name: str, email: str, message: str) -> list[str]:
    try:
        ContactForm(name=name, email=email, message=message)
    except ValidationError as exc:
        return [str(err.get("ctx", {}).get("error") or err["msg"]) for err in exc.errors()]
    return []


def _templates_dir() -> Path:
    """Return the directory containing HTML templates."""
    return Path(__file__).resolve().parent / "templates"


def _build_admin_dependency(sessions: SessionRegistry, header_name: str) -> Callable[..., Any]:
    """Return a dependency that resolves the session header to an :class:`Admin`."""

    async def _require_admin(
        token: str | None = Header(default=None, alias=header_name),
    ) -> Admin:
        if token is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Missing session token.",
            )
        admin = sessions.resolve(token)
        if admin is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired session token.",
            )
        return admin

    return _require_admin


__all__ = ["create_app"]
