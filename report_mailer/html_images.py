from __future__ import annotations

import logging
import mimetypes
import re
from dataclasses import dataclass
from email.utils import make_msgid
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import httpx
from lxml import etree, html

from .config import IMAGE_FETCH_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

_DOCUMENT_RE = re.compile(r"<html\b|<!doctype", flags=re.IGNORECASE)
_SKIP_SCHEMES = ("cid:", "data:")
_CID_DOMAIN = "report-mailer"


@dataclass(frozen=True)
class InlineImage:
    cid: str
    data: bytes
    maintype: str
    subtype: str
    filename: str


@dataclass(frozen=True)
class EmbeddedHtml:
    html: str
    images: Tuple[InlineImage, ...] = ()


def embed_images(
    html_text: str,
    base_dir: Path,
    *,
    http_transport: httpx.BaseTransport | None = None,
) -> EmbeddedHtml:
    """
    Turn <img src> references into inline parts referenced by cid.

    Relative sources resolve against base_dir, http(s) sources are downloaded.
    Anything that cannot be loaded keeps its original src. When nothing is
    embedded the HTML is returned unchanged.
    """
    parsed = _parse(html_text)
    if parsed is None:
        return EmbeddedHtml(html=html_text)
    root, is_document = parsed

    # 同じ画像は一度だけ埋め込む（順序は維持）
    by_source: Dict[str, List[html.HtmlElement]] = {}
    for img in root.iter("img"):
        src = (img.get("src") or "").strip()
        if not src or src.lower().startswith(_SKIP_SCHEMES):
            continue
        by_source.setdefault(src, []).append(img)
    if not by_source:
        return EmbeddedHtml(html=html_text)

    images: List[InlineImage] = []
    with httpx.Client(
        timeout=IMAGE_FETCH_TIMEOUT_SECONDS,
        follow_redirects=True,
        transport=http_transport,
    ) as client:
        for src, elements in by_source.items():
            image = _load_image(src, base_dir, client)
            if image is None:
                continue
            images.append(image)
            for img in elements:
                img.set("src", f"cid:{image.cid}")

    if not images:
        return EmbeddedHtml(html=html_text)

    logger.info("Embedded %s inline image(s) into the HTML body", len(images))
    return EmbeddedHtml(html=_serialize(root, is_document), images=tuple(images))


def _parse(html_text: str) -> Optional[Tuple[html.HtmlElement, bool]]:
    if not html_text.strip():
        return None
    is_document = _DOCUMENT_RE.search(html_text) is not None
    try:
        if is_document:
            return html.document_fromstring(html_text), True
        return html.fragment_fromstring(html_text, create_parent="div"), False
    except (etree.ParserError, ValueError) as exc:
        logger.warning("Could not parse HTML body for images: %s", exc)
        return None


def _serialize(root: html.HtmlElement, is_document: bool) -> str:
    if is_document:
        return html.tostring(root.getroottree(), encoding="unicode")
    # drop the wrapper div added while parsing the fragment
    return (root.text or "") + "".join(html.tostring(child, encoding="unicode") for child in root)


def _load_image(src: str, base_dir: Path, client: httpx.Client) -> Optional[InlineImage]:
    parsed = urlparse(src)
    scheme = parsed.scheme.lower()
    if scheme in ("http", "https"):
        return _fetch_remote(src, client)

    if scheme == "file":
        path = Path(url2pathname(parsed.path))
    elif len(scheme) > 1:
        logger.warning("Unsupported image source %s; leaving it as is", src)
        return None
    else:
        path = base_dir / unquote(parsed.path if parsed.path else src)

    try:
        data = path.read_bytes()
    except OSError as exc:
        logger.warning("Could not read image %s: %s", path, exc)
        return None
    content_type = mimetypes.guess_type(path.name)[0]
    return _inline_image(data, content_type, path.name)


def _fetch_remote(url: str, client: httpx.Client) -> Optional[InlineImage]:
    logger.info("Fetching image: %s", url)
    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("Could not fetch image %s: %s", url, exc)
        return None
    filename = Path(urlparse(url).path).name or "image"
    content_type = response.headers.get("content-type") or mimetypes.guess_type(filename)[0]
    return _inline_image(response.content, content_type, filename)


def _inline_image(data: bytes, content_type: str | None, filename: str) -> InlineImage:
    maintype, subtype = _split_content_type(content_type)
    cid = make_msgid(domain=_CID_DOMAIN)[1:-1]
    return InlineImage(cid=cid, data=data, maintype=maintype, subtype=subtype, filename=filename)


def _split_content_type(content_type: str | None) -> Tuple[str, str]:
    if not content_type:
        return "application", "octet-stream"
    essence = content_type.split(";", 1)[0].strip().lower()
    if "/" not in essence:
        return "application", "octet-stream"
    maintype, subtype = essence.split("/", 1)
    return maintype, subtype
