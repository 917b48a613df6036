"""Tests for articles.py"""

import pytest

from articlehost.core.articles import (
    TITLE_MAX_LEN,
    Article,
    ArticleLoader,
    ArticleNotFound,
    ArticleReadError,
    extract_title,
    strip_tags,
)


@pytest.fixture
def articles_dir(tmp_path):
    d = tmp_path / "articles"
    d.mkdir()
    return d


class TestExtractTitle:
    """Tests for splitting the <h1> header off a fragment."""

    def test_nested_tags(self):
        title, rest = extract_title("<h1>Foo<b>Bar</b></h1>REST")
        assert title == "<h1>Foo<b>Bar</b></h1>"
        assert rest == "REST"

    def test_text_before_header_is_dropped(self):
        title, rest = extract_title("<p>intro</p><h1>T</h1><p>body</p>")
        assert title == "<h1>T</h1>"
        assert rest == "<p>body</p>"

    def test_no_header(self):
        assert extract_title("<p>No title here</p>") is None

    def test_unclosed_header(self):
        assert extract_title("<h1>Never closed") is None

    def test_close_marker_outside_window(self):
        markup = "<h1>" + "x" * TITLE_MAX_LEN + "</h1>rest"
        assert extract_title(markup) is None

    def test_close_marker_at_window_edge(self):
        # The whole closing marker must fit in the window
        text = "x" * (TITLE_MAX_LEN - len("</h1>"))
        title, rest = extract_title("<h1>" + text + "</h1>rest")
        assert title == "<h1>" + text + "</h1>"
        assert rest == "rest"

    def test_only_first_header_used(self):
        title, rest = extract_title("<h1>One</h1><h1>Two</h1>")
        assert title == "<h1>One</h1>"
        assert rest == "<h1>Two</h1>"


class TestStripTags:
    """Tests for the two-state tag scan."""

    def test_nested(self):
        assert strip_tags("<h1>Foo<b>Bar</b></h1>") == "FooBar"

    def test_attributes(self):
        assert strip_tags('<h1 class="t">A <a href="/x">link</a></h1>') == "A link"

    def test_plain_text(self):
        assert strip_tags("plain") == "plain"

    def test_empty(self):
        assert strip_tags("") == ""

    def test_stray_close_bracket_outside_tag_is_kept(self):
        # Literal brackets break the precondition; a lone ">" outside a tag passes through
        assert strip_tags("a>b") == "a>b"


class TestArticleLoader:
    """Tests for ArticleLoader."""

    def test_load_with_title(self, articles_dir):
        (articles_dir / "101.html").write_text("<h1>Foo<b>Bar</b></h1>REST", encoding="utf-8")
        article = ArticleLoader(articles_dir).load("101.html")

        assert isinstance(article, Article)
        assert article.title == "<h1>Foo<b>Bar</b></h1>"
        assert article.title_without_tags == "FooBar"
        assert article.content == "REST"
        assert article.identifier_without_extension == "101"

    def test_load_without_title(self, articles_dir, caplog):
        raw = "<p>Just a body</p>"
        (articles_dir / "notitle.html").write_text(raw, encoding="utf-8")

        with caplog.at_level("WARNING"):
            article = ArticleLoader(articles_dir).load("notitle.html")

        assert article.title == ""
        assert article.title_without_tags == ""
        assert article.content == raw
        assert "notitle" in caplog.text

    def test_content_is_trusted_markup(self, articles_dir):
        (articles_dir / "a.html").write_text("<h1>T</h1><script>x()</script>", encoding="utf-8")
        article = ArticleLoader(articles_dir).load("a.html")
        # Markup is not escaped again when rendered
        assert hasattr(article.content, "__html__")
        assert article.content.__html__() == "<script>x()</script>"

    def test_repeated_loads_identical(self, articles_dir):
        (articles_dir / "a.html").write_text("<h1>T</h1><p>same</p>", encoding="utf-8")
        loader = ArticleLoader(articles_dir)
        assert loader.load("a.html").content == loader.load("a.html").content

    def test_identifier_without_html_extension(self, articles_dir):
        (articles_dir / "notes").write_text("<h1>N</h1>", encoding="utf-8")
        assert ArticleLoader(articles_dir).load("notes").identifier_without_extension == "notes"

    def test_missing_file(self, articles_dir):
        with pytest.raises(ArticleNotFound) as exc_info:
            ArticleLoader(articles_dir).load("missing.html")
        assert exc_info.value.identifier == "missing.html"

    def test_directory_is_read_error(self, articles_dir):
        (articles_dir / "res").mkdir()
        with pytest.raises(ArticleReadError):
            ArticleLoader(articles_dir).load("res")

    def test_undecodable_file_is_read_error(self, articles_dir):
        (articles_dir / "bad.html").write_bytes(b"<h1>\xff\xfe</h1>")
        with pytest.raises(ArticleReadError):
            ArticleLoader(articles_dir).load("bad.html")
