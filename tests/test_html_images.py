from __future__ import annotations

from pathlib import Path

import httpx

from report_mailer.html_images import embed_images


def _transport(calls: list[str]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        if request.url.path.endswith("missing.png"):
            return httpx.Response(404)
        return httpx.Response(200, content=b"GIF89a", headers={"content-type": "image/gif"})

    return httpx.MockTransport(handler)


def test_html_without_images_is_unchanged(tmp_path: Path):
    html_text = "<html><body><h1>Report</h1></body></html>"
    result = embed_images(html_text, tmp_path)
    assert result.html == html_text
    assert result.images == ()


def test_relative_image_is_inlined_once(tmp_path: Path):
    (tmp_path / "img").mkdir()
    (tmp_path / "img" / "chart.png").write_bytes(b"png-bytes")
    html_text = '<div><img src="img/chart.png" alt="a"><img alt="b" src=\'img/chart.png\'></div>'

    result = embed_images(html_text, tmp_path)

    (image,) = result.images
    assert (image.maintype, image.subtype) == ("image", "png")
    assert image.data == b"png-bytes"
    assert image.filename == "chart.png"
    assert result.html.count(f'"cid:{image.cid}"') == 2
    assert 'alt="a"' in result.html


def test_missing_file_keeps_original_src(tmp_path: Path):
    html_text = '<p><img src="nowhere.png"></p>'
    result = embed_images(html_text, tmp_path)
    assert result.html == html_text
    assert result.images == ()


def test_cid_and_data_sources_are_left_alone(tmp_path: Path):
    html_text = '<p><img src="cid:logo"><img src="data:image/png;base64,AAAA"></p>'
    result = embed_images(html_text, tmp_path)
    assert result.html == html_text


def test_remote_images_are_downloaded(tmp_path: Path):
    calls: list[str] = []
    html_text = (
        '<p><img src="https://cdn.example.com/logo.gif">'
        '<img src="https://cdn.example.com/missing.png"></p>'
    )

    result = embed_images(html_text, tmp_path, http_transport=_transport(calls))

    assert calls == ["https://cdn.example.com/logo.gif", "https://cdn.example.com/missing.png"]
    (image,) = result.images
    assert (image.maintype, image.subtype) == ("image", "gif")
    assert image.filename == "logo.gif"
    assert f'src="cid:{image.cid}"' in result.html
    assert 'src="https://cdn.example.com/missing.png"' in result.html


def test_file_url_is_resolved(tmp_path: Path):
    image_path = tmp_path / "plot.jpg"
    image_path.write_bytes(b"jpeg")
    result = embed_images(f'<img src="{image_path.as_uri()}">', Path("/nonexistent"))
    (image,) = result.images
    assert image.subtype == "jpeg"


def test_src_text_inside_other_attributes_is_not_confused(tmp_path: Path):
    (tmp_path / "a.png").write_bytes(b"png")
    html_text = '<p><img alt=\'see src="b.png" here\' src="a.png"></p>'

    result = embed_images(html_text, tmp_path)

    (image,) = result.images
    assert f'src="cid:{image.cid}"' in result.html
    assert 'src="a.png"' not in result.html
    assert "see src=" in result.html


def test_full_document_keeps_head_and_body(tmp_path: Path):
    (tmp_path / "a.png").write_bytes(b"png")
    html_text = "<!DOCTYPE html><html><head><title>Run</title></head><body><img src=\"a.png\"></body></html>"

    result = embed_images(html_text, tmp_path)

    (image,) = result.images
    assert "<title>Run</title>" in result.html
    assert f'<img src="cid:{image.cid}">' in result.html


def test_text_around_fragment_is_preserved(tmp_path: Path):
    (tmp_path / "a.png").write_bytes(b"png")
    result = embed_images('Results: <img src="a.png"> done', tmp_path)
    (image,) = result.images
    assert result.html == f'Results: <img src="cid:{image.cid}"> done'
