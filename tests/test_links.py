"""Tests for core/links.py"""
import pytest
from nexus_games_mcp.core.links import classify_link, clean_label, extract_links


def _anchor(url: str, label: str) -> str:
    return (
        f'<p style="text-align: center;"><a href="{url}" target="_blank" rel="nofollow">'
        f"<strong>{label}</strong></a></p>"
    )


ALT1 = "&lt;&lt;&lt; Alternatif: Link1 &gt;&gt;&gt;"
ALT2 = "&lt;&lt;&lt; Alternatif: Link2 &gt;&gt;&gt;"
ALT3 = "&lt;&lt;&lt; Alternatif: Link3 &gt;&gt;&gt;"
TORRENT = "&lt;&lt;&lt; Torrent: İndir &gt;&gt;&gt;"


def test_single_alternatif_link():
    links = extract_links(_anchor("https://pixeldrain.com/u/abc123", ALT1))
    assert len(links) == 1
    link = links[0]
    assert link.kind == "direct1"
    assert link.url == "https://pixeldrain.com/u/abc123"
    assert link.available is True
    assert link.label == "<<< Alternatif: Link1 >>>"


def test_multiple_links_keep_order():
    html = "<hr />".join([
        _anchor("https://pixeldrain.com/u/abc123", ALT1),
        _anchor("https://www.mediafire.com/folder/test", ALT2),
        _anchor("https://drive.google.com/file/d/xyz/view", ALT3),
    ])
    links = extract_links(html)
    assert [l.kind for l in links] == ["direct1", "direct2", "direct3"]
    assert [l.url for l in links] == [
        "https://pixeldrain.com/u/abc123",
        "https://www.mediafire.com/folder/test",
        "https://drive.google.com/file/d/xyz/view",
    ]


def test_torrent_label():
    links = extract_links(_anchor("https://www.dosyadrive.vip/magnet", TORRENT))
    assert links[0].kind == "torrent"
    assert links[0].label == "<<< Torrent: İndir >>>"


def test_torrent_label_beats_turbobit_url():
    assert classify_link("<<< Torrent: İndir >>>", "https://turbobit.net/x.html") == "torrent"


def test_turbobit_url_beats_alternatif_label():
    links = extract_links(_anchor("https://turbobit.net/test123.html", ALT1))
    assert links[0].kind == "turbobit"


@pytest.mark.parametrize("label, url, kind", [
    ("İndir", "https://pixeldrain.com/u/1", "pixeldrain"),
    ("İndir", "https://www.mediafire.com/file/1", "mediafire"),
    ("İndir", "https://drive.google.com/file/d/1", "googledrive"),
    ("İndir", "https://example.com/files/game.TORRENT", "torrent"),
    ("İndir", "https://example.com/files/game.zip", "direct"),
    ("Alternatif", "https://pixeldrain.com/u/1", "direct"),
    ("Alternatif: Link 2", "https://pixeldrain.com/u/1", "direct2"),
    ("Alternatif: Link9", "https://pixeldrain.com/u/1", "direct"),
])
def test_classification(label, url, kind):
    assert classify_link(label, url) == kind


def test_classification_is_deterministic():
    kinds = {classify_link("<<< Alternatif: Link1 >>>", "https://pixeldrain.com/u/1") for _ in range(10)}
    assert kinds == {"direct1"}


def test_del_wrapped_link_is_unavailable():
    html = (
        '<p><del><a href="https://pixeldrain.com/u/dead">' + ALT1 + "</a></del></p>"
        '<p><a href="https://pixeldrain.com/u/live">' + ALT2 + "</a></p>"
    )
    links = extract_links(html)
    assert [(l.url, l.available) for l in links] == [
        ("https://pixeldrain.com/u/dead", False),
        ("https://pixeldrain.com/u/live", True),
    ]


def test_del_inside_anchor_is_unavailable():
    html = '<a href="https://pixeldrain.com/u/x"><del>' + ALT1 + "</del></a>"
    assert extract_links(html)[0].available is False


def test_decodes_entities_in_label():
    html = '<a href="https://test.com"><strong>Test &#8211; Special &amp; Chars &lt;&gt;</strong></a>'
    assert extract_links(html)[0].label == "Test - Special & Chars <>"


def test_empty_label_discarded():
    html = '<a href="https://example.com/x"><img src="https://example.com/i.png" /></a>'
    assert extract_links(html) == []


def test_relative_and_fragment_urls_ignored():
    html = '<a href="#top">Top</a><a href="/category/pc">PC</a>'
    assert extract_links(html) == []


def test_unterminated_anchor_not_matched():
    assert extract_links('<a href="https://pixeldrain.com/u/x">Link1') == []


def test_no_links():
    assert extract_links("<p>No downloads here</p>") == []
    assert extract_links("") == []


def test_attribute_order_and_case():
    html = '<A target="_blank" HREF=\'https://www.mediafire.com/f\'>Mirror</A>'
    links = extract_links(html)
    assert len(links) == 1
    assert links[0].kind == "mediafire"
    assert links[0].label == "Mirror"


def test_clean_label_collapses_whitespace():
    assert clean_label("\n\t<strong>  &lt;&lt;&lt; Alternatif:&nbsp; Link1 &gt;&gt;&gt;  </strong>\n") == (
        "<<< Alternatif: Link1 >>>"
    )


def test_real_post_sample():
    html = """
    <p style="text-align: center;"><a href="https://pixeldrain.com/u/zUZKteW2" target="_blank" rel="nofollow"><strong>&lt;&lt;&lt; Alternatif: Link1 &gt;&gt;&gt;</strong></a></p>
    <hr />
    <p style="text-align: center;"><a href="https://www.mediafire.com/folder/307soqnli4zvg/Documents" target="_blank" rel="nofollow"><strong>&lt;&lt;&lt; Alternatif: Link2 &gt;&gt;&gt;</strong></a></p>
    <hr />
    <p style="text-align: center;"><del><strong>&lt;&lt;&lt; Alternatif: Link3 &gt;&gt;&gt;</strong></del></p>
    <hr />
    <p style="text-align: center;"><del><strong>&lt;&lt;&lt; Torrent: İndir &gt;&gt;&gt;</strong></del></p>
    """
    links = extract_links(html)
    available = [l for l in links if l.available]
    assert [(l.kind, l.url) for l in available] == [
        ("direct1", "https://pixeldrain.com/u/zUZKteW2"),
        ("direct2", "https://www.mediafire.com/folder/307soqnli4zvg/Documents"),
    ]
    # The struck-through entries have no <a href>, so they produce nothing
    assert len(links) == 2
