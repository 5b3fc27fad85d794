import asyncio
import hashlib
import hmac
import json
import logging
from typing import Any, Dict

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from .checker import check
from .config import Settings, get_settings, setup_logging
from .errors import DiffParseError, SourceError
from .models import CheckReport
from .report import build_report
from .sources import GitHubPullRequestSource

# ==========================
# Settings & Logging
# ==========================

setup_logging(get_settings().log_level)

logger = logging.getLogger("changelog-checker")

PR_ACTIONS = {"opened", "synchronize", "reopened", "edited"}

app = FastAPI(title="Changelog Checker Webhook")

# ==========================
# Helpers
# ==========================


def verify_github_signature(
    body: bytes,
    signature_header: str | None,
    secret: str | None,
) -> None:
    """
    Verify X-Hub-Signature-256 from GitHub webhook.
    """
    if not secret:
        logger.warning("No webhook secret configured - skipping signature verification")
        return

    if not signature_header:
        raise HTTPException(status_code=401, detail="Missing signature")

    try:
        sha_name, signature = signature_header.split("=", 1)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid signature format")

    if sha_name != "sha256":
        raise HTTPException(status_code=400, detail="Unsupported hash algorithm")

    mac = hmac.new(secret.encode("utf-8"), msg=body, digestmod=hashlib.sha256)
    expected = mac.hexdigest()

    if not hmac.compare_digest(expected, signature):
        logger.warning("Invalid webhook signature")
        raise HTTPException(status_code=401, detail="Invalid signature")


def run_pull_request_check(repo: str, pr_number: int, settings: Settings) -> CheckReport:
    """
    Check the changelog of one pull request with the configured policy.
    """
    source = GitHubPullRequestSource(
        repo=repo,
        pr_number=pr_number,
        changelog_path=settings.changelog_path,
        api_url=settings.github_api_url,
        token=settings.github_token,
        timeout=settings.http_timeout,
        user_agent=settings.user_agent,
    )
    with source:
        entries = check(source)

    return build_report(entries, strict=settings.strict, unreleased=settings.unreleased_categories)


async def check_or_http_error(repo: str, pr_number: int, settings: Settings) -> CheckReport:
    try:
        return await asyncio.to_thread(run_pull_request_check, repo, pr_number, settings)
    except DiffParseError as e:
        logger.exception("Failed to parse changelog diff")
        raise HTTPException(status_code=422, detail=str(e)) from e
    except SourceError as e:
        logger.exception("Failed to fetch changelog changes")
        raise HTTPException(status_code=502, detail=str(e)) from e


# ==========================
# Routes
# ==========================

@app.get("/")
async def root():
    return {"status": "ok", "app": "changelog-checker"}


@app.get("/repos/{owner}/{repo}/pulls/{pr_number}/changelog")
async def get_changelog_check(
    owner: str,
    repo: str,
    pr_number: int,
    settings: Settings = Depends(get_settings),
):
    report = await check_or_http_error(f"{owner}/{repo}", pr_number, settings)
    return report.model_dump(by_alias=True)


@app.post("/webhook")
async def webhook(
    request: Request,
    x_github_event: str = Header(None, alias="X-GitHub-Event"),
    x_hub_signature_256: str = Header(None, alias="X-Hub-Signature-256"),
    settings: Settings = Depends(get_settings),
):
    raw_body = await request.body()

    verify_github_signature(raw_body, x_hub_signature_256, settings.github_webhook_secret)

    try:
        payload: Dict[str, Any] = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        logger.exception("Invalid JSON payload")
        raise HTTPException(status_code=400, detail="Invalid JSON")

    logger.info("Webhook received: %s", x_github_event)

    if x_github_event == "ping":
        return JSONResponse({"msg": "pong"})

    if x_github_event != "pull_request":
        logger.info("Unhandled event: %s", x_github_event)
        return JSONResponse({"msg": f"unhandled event {x_github_event}"})

    action = payload.get("action")
    if action not in PR_ACTIONS:
        logger.info("Ignoring PR action: %s", action)
        return JSONResponse({"msg": f"ignored action {action}"})

    try:
        repo = payload["repository"]["full_name"]
        pr_number = int(payload["pull_request"]["number"])
    except (KeyError, TypeError, ValueError):
        logger.error("Pull request payload without repository or number")
        raise HTTPException(status_code=400, detail="Missing repository or pull request number")

    logger.info("Checking changelog of %s#%d", repo, pr_number)
    report = await check_or_http_error(repo, pr_number, settings)

    return JSONResponse(report.model_dump(mode="json", by_alias=True))
