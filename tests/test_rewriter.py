import pytest

from staticdomains.base_path import BasePath, resolve_base_path
from staticdomains.config import RewriteConfig
from staticdomains.protocols import DomainAssigner
from staticdomains.rewriter import RewriteSession, RoundRobinCursor, file_extension
from staticdomains.scanner import MatchedAttribute


def make_session(config=None, request_path="/blog/post", html="", scheme="http"):
    base = resolve_base_path("www.site.com", request_path, html, scheme=scheme)
    return RewriteSession(config or RewriteConfig(), base)


def attr(value, name="src"):
    return MatchedAttribute(attribute_name=name, raw_value=value, start=0, end=0)


def test_file_extension():
    assert file_extension("http://www.site.com/img/Photo.JPG") == "jpg"
    assert file_extension("/a.b/c") == ""
    assert file_extension("archive.tar.gz") == "gz"
    assert file_extension("font.%57OFF") == "woff"


def test_cursor_cycles_and_wraps():
    cursor = RoundRobinCursor()
    assert cursor.current == 0
    assert [cursor.advance(3) for _ in range(7)] == [1, 2, 3, 1, 2, 3, 1]


def test_cursor_wraps_when_maximum_shrinks():
    cursor = RoundRobinCursor(current=4)
    assert cursor.advance(2) == 1


def test_relative_path_end_to_end():
    session = make_session()
    assert session.resolve("../img/photo.jpg") == "http://www.site.com/img/photo.jpg"
    assert session.rewrite(attr("../img/photo.jpg")) == (
        'src="http://media.site.com/img/photo.jpg"'
    )


def test_relative_path_in_request_directory():
    session = make_session()
    assert session.rewrite_url("style.css") == "http://css.site.com/blog/style.css"
    assert session.rewrite_url("./js/app.js") == "http://js.site.com/blog/js/app.js"


def test_parent_segments_never_climb_past_host():
    session = make_session()
    assert session.resolve("../../../../logo.png") == "http://www.site.com/logo.png"


def test_absolute_path_uses_page_domain():
    session = make_session()
    assert session.resolve("/img/a.gif") == "http://www.site.com/img/a.gif"
    assert session.rewrite(attr("/img/a.gif", "href")) == (
        'href="http://media.site.com/img/a.gif"'
    )


def test_absolute_url_keeps_path_but_changes_domain():
    session = make_session()
    raw = "http://cdn.example.com/x/../img.jpg"
    assert session.resolve(raw) == raw
    assert session.rewrite_url(raw) == "http://media.cdn.example.com/x/../img.jpg"
    assert session.rewrite_url("HTTP://WWW.other.com/a.css") == (
        "http://css.other.com/a.css"
    )


def test_https_and_protocol_relative_urls():
    session = make_session(scheme="https")
    assert session.rewrite_url("https://www.other.com/a.js") == "https://js.other.com/a.js"
    assert session.rewrite_url("//static.other.com/a.png") == (
        "https://media.static.other.com/a.png"
    )
    assert session.rewrite_url("/a.png") == "https://media.site.com/a.png"


def test_host_without_www_gets_label_prefix():
    base = BasePath(domain="http://site.com", base_path="http://site.com/")
    session = RewriteSession(RewriteConfig(), base)
    assert session.rewrite_url("a.jpg") == "http://media.site.com/a.jpg"


def test_fixed_extension_never_uses_round_robin():
    config = RewriteConfig().add_file_type("pdf")
    session = make_session(config)
    labels = []
    for value in ["a.pdf", "b.jpg", "c.pdf", "d.JPG", "e.pdf"]:
        url = session.rewrite_url(value)
        labels.append(url.split("://", 1)[1].split(".", 1)[0])
    assert labels == ["1", "media", "2", "media", "3"]
    assert session.cursor.current == 3


def test_round_robin_sequence():
    config = RewriteConfig({"pdf": None}, max_static_domains=4)
    session = make_session(config)
    labels = [session.get_static_domain(f"/doc{i}.pdf") for i in range(10)]
    assert labels == ["1", "2", "3", "4", "1", "2", "3", "4", "1", "2"]
    for i in range(len(labels) - 3):
        assert len(set(labels[i : i + 4])) == 4


def test_unknown_extension_uses_round_robin():
    session = make_session()
    assert session.get_static_domain("http://www.site.com/file.xyz") == "1"
    assert session.get_static_domain("http://www.site.com/noext") == "2"


def test_each_rewrite_advances_cursor_once():
    config = RewriteConfig({"pdf": None}, max_static_domains=2)
    session = make_session(config)
    assert session.rewrite_url("http://www.a.com/x.pdf") == "http://1.a.com/x.pdf"
    assert session.rewrite_url("http://www.a.com/y.pdf") == "http://2.a.com/y.pdf"
    assert session.rewrite_url("http://www.a.com/z.pdf") == "http://1.a.com/z.pdf"


def test_sessions_do_not_share_cursor():
    config = RewriteConfig({"pdf": None})
    first = make_session(config)
    second = make_session(config)
    assert first.get_static_domain("a.pdf") == "1"
    assert first.get_static_domain("b.pdf") == "2"
    assert second.get_static_domain("c.pdf") == "1"


def test_base_tag_changes_resolution():
    html = '<head><base href="/assets/"></head>'
    session = make_session(html=html)
    assert session.rewrite_url("img/logo.png") == "http://media.site.com/assets/img/logo.png"


def test_attribute_name_case_is_kept():
    session = make_session()
    assert session(attr("/a.css", "HREF")) == 'HREF="http://css.site.com/a.css"'


def test_session_is_a_domain_assigner():
    assert isinstance(make_session(), DomainAssigner)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("../img/photo.jpg", "http://media.site.com/img/photo.jpg"),
        ("/img/photo.jpg", "http://media.site.com/img/photo.jpg"),
        ("img/photo.jpg", "http://media.site.com/blog/img/photo.jpg"),
        ("http://www.site.com/img/photo.jpg", "http://media.site.com/img/photo.jpg"),
    ],
)
def test_reference_classifications(raw, expected):
    assert make_session().rewrite_url(raw) == expected


def test_url_without_http_prefix_is_left_alone():
    base = BasePath(domain="ftp://files.site.com", base_path="ftp://files.site.com/")
    session = RewriteSession(RewriteConfig({"pdf": None}), base)
    assert session.rewrite_url("a.pdf") == "ftp://files.site.com/a.pdf"
    assert session.rewrite_url("/go/http://www.x.com/b.pdf") == (
        "ftp://files.site.com/go/http://www.x.com/b.pdf"
    )
    assert session.cursor.current == 0


def test_only_leading_host_is_replaced():
    session = make_session(RewriteConfig({"pdf": None}))
    assert session.rewrite_url("http://www.a.com/r/http://www.b.com/x.pdf") == (
        "http://1.a.com/r/http://www.b.com/x.pdf"
    )


def test_custom_assigner_chooses_labels():
    class ByFolder:
        def __init__(self):
            self.calls = []

        def get_static_domain(self, path):
            self.calls.append(path)
            return path.rsplit("/", 2)[-2]

    assigner = ByFolder()
    assert isinstance(assigner, DomainAssigner)
    base = resolve_base_path("www.site.com", "/", "")
    session = RewriteSession(RewriteConfig(), base, assigner=assigner)
    assert session.rewrite_url("/thumbs/a.jpg") == "http://thumbs.site.com/thumbs/a.jpg"
    assert session.rewrite(attr("docs/b.pdf", "href")) == (
        'href="http://docs.site.com/docs/b.pdf"'
    )
    assert assigner.calls == [
        "http://www.site.com/thumbs/a.jpg",
        "http://www.site.com/docs/b.pdf",
    ]
    assert session.cursor.current == 0
