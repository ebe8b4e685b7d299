from __future__ import annotations

import json
import os
import shutil
import ssl
import subprocess
import urllib.error
import urllib.request
from pathlib import Path
from typing import Callable, Optional

import certifi

from . import __version__

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_LOOKUP_TIMEOUT_S = 30


class GhCliLookup:
    """Resolve commit authors through an authenticated `gh` CLI."""

    def __init__(self, owner: str, repo: str, *, timeout_s: int = DEFAULT_LOOKUP_TIMEOUT_S, gh: str = "gh") -> None:
        self.owner = owner
        self.repo = repo
        self.timeout_s = timeout_s
        self.gh = gh

    def __call__(self, commit_id: str) -> Optional[str]:
        proc = subprocess.run(
            [self.gh, "api", f"repos/{self.owner}/{self.repo}/commits/{commit_id}", "--jq", ".author.login"],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=self.timeout_s,
        )
        if proc.returncode != 0:
            return None
        login = proc.stdout.strip()
        if not login or login == "null":
            return None
        return login


class GithubApiLookup:
    """Resolve commit authors through the GitHub REST API."""

    def __init__(
        self,
        owner: str,
        repo: str,
        *,
        api_url: str = DEFAULT_API_URL,
        token: str = "",
        timeout_s: int = DEFAULT_LOOKUP_TIMEOUT_S,
        ca_bundle_path: str = "",
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.api_url = (api_url or DEFAULT_API_URL).strip().rstrip("/")
        self.token = (token or "").strip()
        self.timeout_s = timeout_s
        self.ca_bundle_path = ca_bundle_path
        self._ctx: ssl.SSLContext | None = None

    def commit_url(self, commit_id: str) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/commits/{commit_id}"

    def _context(self) -> ssl.SSLContext | None:
        if not self.api_url.startswith("https://"):
            return None
        if self._ctx is None:
            self._ctx = _ssl_context(ca_bundle_path=self.ca_bundle_path)
        return self._ctx

    def __call__(self, commit_id: str) -> Optional[str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": f"git-owners/{__version__}",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        req = urllib.request.Request(self.commit_url(commit_id), method="GET", headers=headers)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_s, context=self._context()) as resp:
                body = resp.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            if e.code in (404, 422):
                return None
            payload_s = ""
            try:
                payload_s = e.read().decode("utf-8", errors="replace")
            except Exception:
                payload_s = ""
            raise RuntimeError(f"commit lookup failed: HTTP {e.code}: {payload_s[:500]}") from e
        except urllib.error.URLError as e:
            msg = f"commit lookup failed: {e}"
            if _is_cert_verify_error(e):
                msg = msg + "\n" + _cert_verify_hint(ca_bundle_path=self.ca_bundle_path)
            raise RuntimeError(msg) from e
        return login_from_commit_payload(body)


def login_from_commit_payload(body: str) -> Optional[str]:
    try:
        obj = json.loads(body) if body else {}
    except ValueError:
        return None
    if not isinstance(obj, dict):
        return None
    author = obj.get("author")
    if not isinstance(author, dict):
        return None
    login = str(author.get("login") or "").strip()
    return login or None


def github_token() -> str:
    for k in ("GITHUB_TOKEN", "GH_TOKEN"):
        v = (os.environ.get(k) or "").strip()
        if v:
            return v
    return ""


def make_lookup(
    owner: str,
    repo: str,
    *,
    backend: str = "auto",
    api_url: str = DEFAULT_API_URL,
    timeout_s: int = DEFAULT_LOOKUP_TIMEOUT_S,
    ca_bundle_path: str = "",
) -> Callable[[str], Optional[str]]:
    b = (backend or "auto").strip().lower()
    if b == "auto":
        b = "gh" if shutil.which("gh") else "api"
    if b == "gh":
        return GhCliLookup(owner, repo, timeout_s=timeout_s)
    if b == "api":
        return GithubApiLookup(
            owner,
            repo,
            api_url=api_url,
            token=github_token(),
            timeout_s=timeout_s,
            ca_bundle_path=ca_bundle_path,
        )
    raise ValueError(f"Unknown github backend: {backend!r} (expected auto, gh or api)")


def _ssl_context(*, ca_bundle_path: str) -> ssl.SSLContext:
    cafile, capath = _resolve_ca_paths(ca_bundle_path)
    if cafile or capath:
        return ssl.create_default_context(cafile=cafile, capath=capath)
    return ssl.create_default_context()


def _resolve_ca_paths(explicit: str) -> tuple[str | None, str | None]:
    p = (explicit or "").strip()
    if p:
        path = Path(p).expanduser()
        if path.is_dir():
            return None, str(path)
        return str(path), None

    for k in ("SSL_CERT_FILE", "REQUESTS_CA_BUNDLE", "CURL_CA_BUNDLE"):
        v = (os.environ.get(k) or "").strip()
        if not v:
            continue
        path = Path(v).expanduser()
        if path.is_dir():
            return None, str(path)
        return str(path), None

    vp = ssl.get_default_verify_paths()
    for cand in (vp.cafile, vp.openssl_cafile):
        if cand and Path(cand).exists():
            return cand, None
    for cand in (vp.capath, vp.openssl_capath):
        if cand and Path(cand).is_dir():
            return None, cand

    where = certifi.where()
    if where and Path(where).exists():
        return where, None
    return None, None


def _is_cert_verify_error(e: urllib.error.URLError) -> bool:
    reason = getattr(e, "reason", None)
    if isinstance(reason, ssl.SSLCertVerificationError):
        return True
    s = str(e)
    return "CERTIFICATE_VERIFY_FAILED" in s or "certificate verify failed" in s.lower()


def _cert_verify_hint(*, ca_bundle_path: str) -> str:
    parts = [
        "Hint: HTTPS certificate verification failed (client does not trust the issuer).",
        "If this is a private CA, set `ca_bundle_path` in the git-owners config or SSL_CERT_FILE.",
    ]
    if (ca_bundle_path or "").strip():
        parts.append(f"Using ca_bundle_path={str(Path(ca_bundle_path).expanduser())!r}.")
    return " ".join(parts)
