"""Unit tests for regex-based markup rewrites."""

import json
import re

import pytest

from seokit import markup
from seokit.settings import SchemaOptions


class TestRewriteImageReferences:
    """Test .jpg/.png/... -> .webp reference rewriting."""

    @pytest.mark.parametrize("before,after", [
        ('<img src="a/photo.jpg">', '<img src="a/photo.webp">'),
        ("url('bg.PNG')", "url('bg.webp')"),
        ("url(bg.jpeg)", "url(bg.webp)"),
        ('"anim.gif?v=2"', '"anim.webp?v=2"'),
        ("see pic.jpg#top", "see pic.webp#top"),
        ("![x](img.png)", "![x](img.webp)"),
        ("last.jpg", "last.webp"),
    ])
    def test_terminated_references(self, before, after):
        assert markup.rewrite_image_references(before) == after

    def test_srcset_descriptor_kept(self):
        html = '<source srcset="img/photo.jpg 2x, img/small.png 480w">'
        assert markup.rewrite_image_references(html) == '<source srcset="img/photo.webp 2x, img/small.webp 480w">'

    @pytest.mark.parametrize("text", ["photo.jpgx", "file.pngs", "a.jpg_backup"])
    def test_not_a_reference(self, text):
        """An extension followed by more name characters is left alone."""
        assert markup.rewrite_image_references(text) == text

    def test_idempotent(self):
        html = '<img src="a.jpg"><img srcset="b.png 1x">'
        once = markup.rewrite_image_references(html)
        assert markup.rewrite_image_references(once) == once


class TestImgAttributes:
    """Test lazy loading and alt injection."""

    def test_lazy_loading_added(self):
        out, n = markup.add_lazy_loading('<img src="a.webp"><img src="b.webp" />')
        assert n == 2
        assert out == '<img src="a.webp" loading="lazy"><img src="b.webp" loading="lazy" />'

    def test_lazy_loading_respects_existing(self):
        html = '<img loading="eager" src="a.webp"><IMG SRC="b.webp">'
        out, n = markup.add_lazy_loading(html)
        assert n == 1
        assert out.startswith('<img loading="eager" src="a.webp">')
        assert 'loading="lazy"' in out

    def test_lazy_loading_idempotent(self):
        once, _ = markup.add_lazy_loading('<img src="a.webp">')
        twice, n = markup.add_lazy_loading(once)
        assert n == 0
        assert twice == once

    @pytest.mark.parametrize("html", ['<img src="a.webp" loading>', '<img loading src="a.webp">', '<img loading = "eager">'])
    def test_bare_or_spaced_loading_counts_as_present(self, html):
        out, n = markup.add_lazy_loading(html)
        assert n == 0
        assert out == html

    def test_tag_name_case_kept(self):
        out, n = markup.add_lazy_loading('<IMG SRC="a.webp">')
        assert n == 1
        assert out == '<IMG SRC="a.webp" loading="lazy">'

    def test_data_attribute_is_not_loading(self):
        out, n = markup.add_lazy_loading('<img data-loading="x" src="a.webp">')
        assert n == 1

    def test_alt_numbered_in_document_order(self):
        html = '<img src="a.webp"><img alt="Keep" src="b.webp"><img src="c.webp">'
        out, n = markup.add_alt_attributes(html)
        assert n == 2
        assert out == '<img src="a.webp" alt="img-1"><img alt="Keep" src="b.webp"><img src="c.webp" alt="img-2">'

    @pytest.mark.parametrize("html", ['<img src="a.webp" alt>', '<img alt src="a.webp" />'])
    def test_bare_alt_counts_as_present(self, html):
        out, n = markup.add_alt_attributes(html)
        assert n == 0
        assert out == html

    def test_alt_keeps_tag_name_case(self):
        out, _ = markup.add_alt_attributes('<Img src="a.webp"/>')
        assert out == '<Img src="a.webp" alt="img-1"/>'

    def test_alt_idempotent(self):
        once, _ = markup.add_alt_attributes('<img src="a.webp">')
        twice, n = markup.add_alt_attributes(once)
        assert n == 0
        assert twice == once


class TestSchema:
    """Test page classification, schema building and injection."""

    @pytest.fixture
    def options(self):
        return SchemaOptions(
            site_name="Acme",
            base_url="https://acme.com",
            logo_url="https://acme.com/logo.webp",
            default_author="Staff",
            default_description="Default description",
            social_profiles=("https://x.com/acme",),
            contact_point={"@type": "ContactPoint", "contactType": "Sales", "telephone": "1", "email": ""},
        )

    @pytest.mark.parametrize("name,folder,kinds", [
        ("index.html", ".", ["website"]),
        ("post.html", ".", ["website", "blog"]),
        ("index.html", "blog", ["website", "blog"]),
        ("about.html", ".", ["website", "organization"]),
        ("shop.html", ".", ["website", "product"]),
        ("blog-product.html", ".", ["website", "blog", "product"]),
    ])
    def test_classify(self, name, folder, kinds):
        assert markup.classify_page(name, folder) == kinds

    def test_website(self, options):
        schema = markup.build_schema("<title>Home</title>", "index.html", ".", options)
        assert schema["@type"] == "WebSite"
        assert schema["name"] == "Acme"
        assert schema["description"] == "Default description"
        assert "potentialAction" not in schema

    def test_website_with_search_form(self, options):
        schema = markup.build_schema('<form action="/search">', "index.html", ".", options)
        assert schema["potentialAction"]["target"] == "https://acme.com/search?q={search_term_string}"

    def test_blog_posting(self, options):
        html = ('<title>Hello</title><meta name="description" content="Intro">'
                '<time datetime="2024-05-01">May</time>')
        schema = markup.build_schema(html, "post.html", ".", options)
        assert schema["@type"] == "BlogPosting"
        assert schema["headline"] == "Hello"
        assert schema["description"] == "Intro"
        assert schema["datePublished"] == "2024-05-01"
        assert schema["author"]["name"] == "Staff"
        assert schema["publisher"]["name"] == "Acme"

    def test_organization(self, options):
        schema = markup.build_schema("<title>About</title>", "about.html", ".", options)
        assert schema["@type"] == "Organization"
        assert schema["sameAs"] == ["https://x.com/acme"]
        assert schema["contactPoint"][0]["contactType"] == "Sales"

    def test_product_needs_price(self, options):
        """Without a price the product heuristic keeps the earlier candidate."""
        schema = markup.build_schema("<title>Shop</title>", "shop.html", ".", options)
        assert schema["@type"] == "WebSite"

    def test_last_match_wins(self, options):
        html = '<title>Mug</title><img src="mug.webp" alt="Blue mug"> only $12.50'
        schema = markup.build_schema(html, "post.html", "shop", options)
        assert schema["@type"] == "Product"
        assert schema["name"] == "Blue mug"
        assert schema["offers"]["price"] == "12.50"
        assert schema["offers"]["priceCurrency"] == "USD"

    def test_has_json_ld(self):
        assert markup.has_json_ld('<script type="application/ld+json">{}</script>')
        assert markup.has_json_ld("<SCRIPT id='x' type='application/ld+json'>")
        assert not markup.has_json_ld('<script type="text/javascript">')

    def test_inject_before_first_head_close(self):
        html = "<html><head><title>x</title></head><body></body></html>"
        out = markup.inject_schema(html, {"@type": "WebSite"})

        assert out.count("application/ld+json") == 1
        assert out.index("application/ld+json") < out.index("</head>")
        block = re.search(r'<script type="application/ld\+json">\n(.*?)\n</script>', out, re.DOTALL)
        assert json.loads(block.group(1)) == {"@type": "WebSite"}

    def test_inject_without_head(self):
        assert markup.inject_schema("<p>fragment</p>", {"@type": "WebSite"}) is None
