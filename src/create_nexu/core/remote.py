"""Download the latest template from the upstream GitHub repository."""

from __future__ import annotations

import logging
import os
import ssl
import zipfile
from pathlib import Path

import httpx
import truststore

from create_nexu.core.constants import REPO_BRANCH, REPO_URL
from create_nexu.errors import RemoteTemplateError

logger = logging.getLogger(__name__)

ARCHIVE_URL = "https://codeload.github.com/{repo}/zip/refs/heads/{branch}"


def _github_token(cli_token: str | None = None) -> str | None:
    """Return sanitized GitHub token (argument takes precedence) or None."""
    return ((cli_token or os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN") or "").strip()) or None


def _github_auth_headers(cli_token: str | None = None) -> dict:
    """Return Authorization header dict only when a non-empty token exists."""
    token = _github_token(cli_token)
    return {"Authorization": f"Bearer {token}"} if token else {}


def _default_client() -> httpx.Client:
    ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    return httpx.Client(verify=ssl_context)


def _extract(zip_path: Path, dest: Path) -> Path:
    """Extract *zip_path* into *dest* and return the template root.

    GitHub archives wrap everything in a single ``<repo>-<branch>/`` folder;
    that folder becomes the root.
    """
    try:
        with zipfile.ZipFile(zip_path, "r") as zip_ref:
            zip_ref.extractall(dest)
    except zipfile.BadZipFile as exc:
        raise RemoteTemplateError(f"Downloaded template is not a valid archive: {exc}") from exc

    extracted = [item for item in dest.iterdir() if item != zip_path]
    if len(extracted) == 1 and extracted[0].is_dir():
        return extracted[0]
    return dest


def download_template(
    dest: Path,
    repo: str = REPO_URL,
    branch: str = REPO_BRANCH,
    *,
    client: httpx.Client | None = None,
    token: str | None = None,
) -> Path:
    """Download ``repo@branch`` into *dest* and return the extracted root.

    Raises:
        RemoteTemplateError: On HTTP errors, transport failures or a corrupt archive.
    """
    url = ARCHIVE_URL.format(repo=repo, branch=branch)
    client = client or _default_client()
    dest.mkdir(parents=True, exist_ok=True)
    zip_path = dest / "template.zip"

    logger.debug("Downloading %s", url)
    try:
        with client.stream(
            "GET",
            url,
            timeout=60,
            follow_redirects=True,
            headers=_github_auth_headers(token),
        ) as response:
            if response.status_code != 200:
                raise RemoteTemplateError(
                    f"Download of {repo}@{branch} failed with HTTP {response.status_code}",
                    remediation="Check the repository and branch name, or retry without --remote.",
                )
            with open(zip_path, "wb") as handle:
                for chunk in response.iter_bytes(chunk_size=8192):
                    handle.write(chunk)
    except httpx.HTTPError as exc:
        raise RemoteTemplateError(
            f"Could not reach GitHub: {exc}",
            remediation="Check your network connection, or retry without --remote.",
        ) from exc

    root = _extract(zip_path, dest)
    zip_path.unlink(missing_ok=True)
    return root


__all__ = ["ARCHIVE_URL", "download_template"]
