"""Pytest configuration and shared fixtures."""

from typing import Callable, Dict, List, Optional

import httpx
import pytest

from marketintel.config import Settings
from marketintel.core.exceptions import PublishError
from marketintel.scrapers.utils.rate_limiter import PolitenessThrottle


# ============================================================================
# SAMPLE PAGES
# ============================================================================

PINTEREST_HTML = """
<html><body>
  <img src="https://i.pinimg.com/avatars/user_1.jpg" alt="Profile picture of a kawaii artist">
  <img src="https://i.pinimg.com/236x/a.jpg" alt="KAWAII Art cat coloring page">
  <img src="https://i.pinimg.com/236x/b.jpg" alt="short">
  <img src="https://i.pinimg.com/236x/c.jpg" alt="">
  <img src="https://i.pinimg.com/236x/d.jpg">
  <img src="https://i.pinimg.com/236x/e.jpg" alt="Pastel fantasy mandalas for adults">
</body></html>
"""

ETSY_SEARCH_HTML = """
<html><body>
  <div data-listing-id="1">
    <a href="/listing/1/kawaii-coloring">link</a>
    <h3> Kawaii Animals Coloring Book </h3>
    <span class="currency-value">$4.50</span>
    <p class="shop-name">CuteShop</p>
    <span class="reviews">(87 reviews)</span>
  </div>
  <div data-listing-id="2">
    <a href="https://www.etsy.com/listing/2/fantasy">link</a>
    <div class="title">Fantasy Coloring Pages</div>
    <span data-price="12.00"></span>
    <span data-shop="DragonInk"></span>
  </div>
  <div data-listing-id="3">
    <a href="/listing/3/no-title">link</a>
    <span class="currency-value">9.99</span>
  </div>
  <div data-listing-id="4">
    <a href="/listing/4/mandala">link</a>
    <span data-title="Mandala Printable"></span>
    <span class="currency-value">free</span>
  </div>
</body></html>
"""

ETSY_SHOP_HTML = """
<html><body>
  <span class="shop-sales">12,345 Sales</span>
  <span class="stars-svg" aria-label="4.9 out of 5 stars"></span>
  <span class="rating">4.8</span>
  <span class="shop-open-date">On Etsy since 2017</span>
</body></html>
"""


def listing_html(count: int, prefix: str = "Listing") -> str:
    """Search page with ``count`` titled listings priced 1.00, 2.00, ..."""
    items = "".join(
        f'<div data-listing-id="{i}"><a href="/listing/{i}"></a>'
        f'<h3>{prefix} {i}</h3><span class="currency-value">{i}.00</span></div>'
        for i in range(1, count + 1)
    )
    return f"<html><body>{items}</body></html>"


# ============================================================================
# HTTP FAKES
# ============================================================================

def route_transport(routes: Dict[str, object], calls: Optional[List[str]] = None) -> httpx.MockTransport:
    """MockTransport answering by URL path prefix.

    A route value is either an HTML string (200) or an exception class
    raised as a network error.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(str(request.url))
        for prefix, answer in routes.items():
            if request.url.path.startswith(prefix):
                if isinstance(answer, type) and issubclass(answer, Exception):
                    raise answer("simulated network failure", request=request)
                if isinstance(answer, int):
                    return httpx.Response(answer, text="error", request=request)
                return httpx.Response(200, text=answer, request=request)
        return httpx.Response(404, text="not found", request=request)

    return httpx.MockTransport(handler)


@pytest.fixture
def failing_transport() -> httpx.MockTransport:
    """Every request fails with a connection error."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("simulated network failure", request=request)

    return httpx.MockTransport(handler)


# ============================================================================
# SETTINGS / THROTTLE
# ============================================================================

@pytest.fixture
def make_settings(tmp_path) -> Callable[..., Settings]:
    """Settings isolated from the environment and .env files."""

    def _make(**overrides) -> Settings:
        values = dict(
            MODE="test",
            GITHUB_ENABLED=False,
            GITHUB_OWNER="",
            REPO_ROOT=tmp_path,
            REQUEST_DELAY_SECONDS=0,
            MAX_RETRIES=1,
        )
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture
def throttle() -> PolitenessThrottle:
    return PolitenessThrottle(0)


# ============================================================================
# GIT FAKE
# ============================================================================

class FakeGit:
    """Records git calls; failures are configured per step."""

    def __init__(self, changes: Optional[List[str]] = None, fail_on: Optional[str] = None, repo: bool = True):
        self.changes = [" M reports/daily/report.md"] if changes is None else changes
        self.fail_on = fail_on
        self.repo = repo
        self.calls: List[tuple] = []

    def _call(self, step: str, *args):
        self.calls.append((step, *args))
        if self.fail_on == step:
            raise PublishError(step, "simulated git failure")

    def is_repo(self) -> bool:
        return self.repo

    def status(self) -> List[str]:
        self._call("status")
        return list(self.changes)

    def add_all(self) -> None:
        self._call("add")

    def commit(self, message: str) -> None:
        self._call("commit", message)

    def push(self, remote: str, branch: str) -> None:
        self._call("push", remote, branch)

    def init(self) -> None:
        self._call("init")

    def add_remote(self, name: str, url: str) -> None:
        self._call("remote", name, url)

    @property
    def repo_root(self):
        return "/fake"

    def steps(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()
