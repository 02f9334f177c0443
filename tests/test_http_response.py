from reactor_http.http_response import HttpResponse


def test_default_status():
    rsp = HttpResponse()
    assert rsp.status == 200
    assert rsp.redirect_flag is False
    assert rsp.body == b""


def test_status_from_constructor():
    assert HttpResponse(404).status == 404


def test_set_content_str_and_type():
    rsp = HttpResponse()
    rsp.set_content("hello", "text/plain")
    assert rsp.body == b"hello"
    assert rsp.get_header("Content-Type") == "text/plain"


def test_set_content_bytes():
    rsp = HttpResponse()
    rsp.set_content(b"\x00\x01", "application/octet-stream")
    assert rsp.body == b"\x00\x01"


def test_header_keeps_first_value():
    rsp = HttpResponse()
    rsp.set_header("Server", "a")
    rsp.set_header("Server", "b")
    assert rsp.get_header("Server") == "a"
    assert rsp.has_header("Server")
    assert rsp.get_header("Missing") == ""
    assert not rsp.has_header("Missing")


def test_redirect_default_status():
    rsp = HttpResponse()
    rsp.set_redirect("/login")
    assert rsp.status == 302
    assert rsp.redirect_flag is True
    assert rsp.redirect_url == "/login"


def test_redirect_custom_status():
    rsp = HttpResponse()
    rsp.set_redirect("/new", 301)
    assert rsp.status == 301


def test_set_cookie_defaults():
    rsp = HttpResponse()
    rsp.set_cookie("session", "token")
    assert rsp.get_header("Set-Cookie") == "session=token; Path=/; Max-Age=86400; HttpOnly"


def test_set_cookie_without_http_only():
    rsp = HttpResponse()
    rsp.set_cookie("session", "token", "/app", 60, False)
    assert rsp.get_header("Set-Cookie") == "session=token; Path=/app; Max-Age=60"


def test_should_close():
    rsp = HttpResponse()
    assert rsp.should_close() is True
    rsp.set_header("Connection", "keep-alive")
    assert rsp.should_close() is False


def test_reset():
    rsp = HttpResponse(500)
    rsp.set_content("x", "text/plain")
    rsp.set_redirect("/y")
    rsp.reset()
    assert rsp.status == 200
    assert rsp.body == b""
    assert rsp.headers == {}
    assert rsp.redirect_flag is False
    assert rsp.redirect_url == ""