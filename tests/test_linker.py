"""Tests for linker.inject_links."""

from bs4 import BeautifulSoup

from app.services.linker import LINK_CLASS, inject_links

_MAP = {"SEO": "/blog-tools.html"}


def _anchors(html: str):
    return BeautifulSoup(html, "html.parser").find_all("a")


class TestInjectLinks:
    def test_wraps_keyword(self):
        result = inject_links("<p>Try our SEO service.</p>", _MAP)
        assert result == '<p>Try our <a href="/blog-tools.html" class="internal-link">SEO</a> service.</p>'

    def test_case_insensitive_keeps_original_text(self):
        result = inject_links("<p>Good seo matters.</p>", _MAP)
        anchors = _anchors(result)
        assert len(anchors) == 1
        assert anchors[0].get_text() == "seo"
        assert anchors[0]["href"] == "/blog-tools.html"
        assert anchors[0]["class"] == [LINK_CLASS]

    def test_first_occurrence_only(self):
        result = inject_links("<p>SEO here.</p><p>SEO there.</p>", _MAP)
        assert len(_anchors(result)) == 1
        assert result.endswith("<p>SEO there.</p>")

    def test_whole_word_only(self):
        html = "<p>SEOTools and MySEO are brands.</p>"
        assert inject_links(html, _MAP) == html

    def test_existing_anchor_not_nested(self):
        html = '<p><a href="https://example.com">SEO tips</a></p>'
        result = inject_links(html, _MAP)
        assert result == html

    def test_links_occurrence_outside_existing_anchor(self):
        html = '<p><a href="https://example.com">SEO tips</a> and more SEO.</p>'
        anchors = _anchors(inject_links(html, _MAP))
        assert len(anchors) == 2
        assert anchors[0]["href"] == "https://example.com"
        assert anchors[0].find("a") is None
        assert anchors[1]["href"] == "/blog-tools.html"

    def test_attribute_values_untouched(self):
        html = '<p><img alt="SEO chart" src="/seo.png"> Read on.</p>'
        result = inject_links(html, _MAP)
        assert result == html

    def test_attribute_untouched_when_text_linked(self):
        html = '<p title="SEO">Learn SEO.</p>'
        soup = BeautifulSoup(inject_links(html, _MAP), "html.parser")
        assert soup.p["title"] == "SEO"
        assert soup.p.a.get_text() == "SEO"

    def test_skips_code_blocks(self):
        html = "<pre><code>SEO = True</code></pre><p>SEO</p>"
        anchors = _anchors(inject_links(html, _MAP))
        assert len(anchors) == 1
        assert anchors[0].parent.name == "p"

    def test_no_double_wrap_across_rules(self):
        link_map = {"SEO": "/seo.html", "SEO tools": "/tools.html"}
        anchors = _anchors(inject_links("<p>Compare SEO tools today.</p>", link_map))
        assert len(anchors) == 1
        assert anchors[0]["href"] == "/tools.html"
        assert anchors[0].get_text() == "SEO tools"

    def test_multiple_keywords(self):
        link_map = {"SEO": "/seo.html", "blog": "/blog.html"}
        anchors = _anchors(inject_links("<p>Start a blog with good SEO.</p>", link_map))
        assert sorted(a["href"] for a in anchors) == ["/blog.html", "/seo.html"]

    def test_keyword_with_regex_characters(self):
        anchors = _anchors(inject_links("<p>Learn C++ today.</p>", {"C++": "/cpp.html"}))
        assert len(anchors) == 1
        assert anchors[0].get_text() == "C++"

    def test_nested_markup_preserved(self):
        html = "<ul><li><strong>SEO</strong> basics</li></ul>"
        soup = BeautifulSoup(inject_links(html, _MAP), "html.parser")
        assert soup.ul.li.strong.a.get_text() == "SEO"
        assert "basics" in soup.ul.li.get_text()

    def test_no_match_returns_input_unchanged(self):
        html = "<p>Caf&eacute; &amp; bakery</p>"
        assert inject_links(html, _MAP) is html

    def test_empty_inputs(self):
        assert inject_links("", _MAP) == ""
        assert inject_links("<p>SEO</p>", {}) == "<p>SEO</p>"
        assert inject_links("<p>SEO</p>", None) == "<p>SEO</p>"
