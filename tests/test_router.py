import pytest

from erlen.router import HTTP_METHODS
from erlen.router import RedirectMatch
from erlen.router import RouteMatch
from erlen.router import Router
from erlen.types import InvalidMethod


def handler(context, params):
    return None


def other_handler(context, params):
    return None


@pytest.fixture
def router() -> Router:
    return Router()


# --- registration -------------------------------------------------------------
@pytest.mark.parametrize("method", HTTP_METHODS)
def test_register_each_method(router: Router, method: str) -> None:
    router.add(method, "/test", handler)
    match = router.match(method, "/test")
    assert isinstance(match, RouteMatch)
    assert match.handler is handler


def test_method_is_normalized_on_registration(router: Router) -> None:
    router.add(" get ", "/test", handler)
    assert isinstance(router.match("GET", "/test"), RouteMatch)


@pytest.mark.parametrize("method", ["INVALID_METHOD", "CONNECT", "TRACE", ""])
def test_invalid_method_rejected(router: Router, method: str) -> None:
    with pytest.raises(InvalidMethod, match="Invalid HTTP method"):
        router.add(method, "/test", handler)
    assert router.routes == {}


def test_invalid_method_is_value_error(router: Router) -> None:
    with pytest.raises(ValueError):
        router.add("FETCH", "/test", handler)


# --- matching -----------------------------------------------------------------
def test_extracts_params(router: Router) -> None:
    """Placeholders come back as a name -> string mapping."""
    router.add("GET", "/users/[id]/posts/[slug]", handler)
    match = router.match("GET", "/users/42/posts/hello-world")
    assert isinstance(match, RouteMatch)
    assert match.params == {"id": "42", "slug": "hello-world"}
    assert list(match.params) == ["id", "slug"]


def test_extracts_multiple_params(router: Router) -> None:
    router.add("GET", "/files/[folder]/[file]", handler)
    match = router.match("GET", "/files/docs/report-2024")
    assert isinstance(match, RouteMatch)
    assert match.params == {"folder": "docs", "file": "report-2024"}


def test_trailing_slash_ignored(router: Router) -> None:
    router.add("GET", "/users/[id]", handler)
    assert router.match("GET", "/users/42/") == router.match("GET", "/users/42")
    assert router.match("GET", "/users/42") is not None


def test_first_registered_route_wins(router: Router) -> None:
    router.add("GET", "/users/[id]", handler)
    router.add("GET", "/users/[name]", other_handler)
    router.add("GET", "/users/me", other_handler)
    match = router.match("GET", "/users/me")
    assert isinstance(match, RouteMatch)
    assert match.handler is handler
    assert match.params == {"id": "me"}


def test_duplicate_template_kept_as_shadowed_candidate(router: Router) -> None:
    router.add("GET", "/dup", handler)
    router.add("GET", "/dup/", other_handler)
    assert len(router.routes["GET"]) == 2
    match = router.match("GET", "/dup")
    assert isinstance(match, RouteMatch)
    assert match.handler is handler


def test_route_middleware_returned_in_order(router: Router) -> None:
    def a(context, next, params):
        return next(context, params)

    def b(context, next, params):
        return next(context, params)

    router.add("GET", "/mw", handler, [a, b])
    match = router.match("GET", "/mw")
    assert isinstance(match, RouteMatch)
    assert match.middleware == (a, b)


def test_unknown_method_is_no_match(router: Router) -> None:
    router.add("GET", "/x", handler)
    assert router.match("POST", "/x") is None


def test_unknown_route_is_no_match(router: Router) -> None:
    router.add("GET", "/test", handler)
    assert router.match("GET", "/other") is None


def test_empty_router_is_no_match(router: Router) -> None:
    assert router.match("GET", "/") is None


def test_match_is_deterministic(router: Router) -> None:
    router.add("GET", "/a/[x]", handler)
    router.redirect("/old", "/new")
    for path in ("/a/1", "/old", "/missing"):
        assert router.match("GET", path) == router.match("GET", path)


# --- redirects ----------------------------------------------------------------
def test_permanent_and_temporary_redirects(router: Router) -> None:
    router.redirect("/perm", "/new-perm", permanent=True)
    router.redirect("/temp", "/new-temp")
    assert router.match("GET", "/perm") == RedirectMatch("/new-perm", 301)
    assert router.match("GET", "/temp") == RedirectMatch("/new-temp", 302)


def test_redirect_source_normalized(router: Router) -> None:
    router.redirect("/source/", "/target")
    assert router.match("GET", "/source") == RedirectMatch("/target", 302)
    assert router.match("GET", "/source/") == RedirectMatch("/target", 302)


def test_redirect_matches_any_method(router: Router) -> None:
    router.redirect("/old", "/new")
    assert router.match("DELETE", "/old") == RedirectMatch("/new", 302)


def test_redirect_beats_route(router: Router) -> None:
    router.add("GET", "/same", handler)
    router.redirect("/same", "/elsewhere")
    assert router.match("GET", "/same") == RedirectMatch("/elsewhere", 302)


def test_first_redirect_wins(router: Router) -> None:
    router.redirect("/a", "/first")
    router.redirect("/a", "/second")
    assert router.match("GET", "/a") == RedirectMatch("/first", 302)


def test_redirect_is_exact_match(router: Router) -> None:
    router.redirect("/a", "/b")
    assert router.match("GET", "/a/c") is None
