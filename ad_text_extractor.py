#!/usr/bin/env python3
"""
Ad Text Extractor
Rebuilds the rendered inner text of a Naver search-ad results page from its
HTML and collects the thumbnail images of every ad container.
"""

import html as html_module
import re

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

from ad_text_cleanup import BLOCK_MARKER, AdTextCleaner

INVISIBLE_TAGS = ['script', 'style', 'noscript']
LINE_BREAK_TAGS = {'br', 'hr'}
BLOCK_TAGS = {
    'address', 'article', 'aside', 'blockquote', 'body', 'caption', 'center',
    'dd', 'details', 'dialog', 'dir', 'div', 'dl', 'dt', 'fieldset',
    'figcaption', 'figure', 'footer', 'form', 'h1', 'h2', 'h3', 'h4', 'h5',
    'h6', 'header', 'hgroup', 'html', 'legend', 'li', 'main', 'menu', 'nav',
    'ol', 'p', 'pre', 'section', 'summary', 'table', 'tbody', 'td', 'tfoot',
    'th', 'thead', 'tr', 'ul',
}
SKIPPED_STRINGS = (Comment, Doctype, Declaration, CData, ProcessingInstruction)
WHITESPACE_RUN = re.compile(r'\s+')

# Thumbnail lookup defaults, overridable through naver_ad_config
THUMBNAIL_SELECTORS = {
    'ad_container': 'li.lst',
    'thumbnail_container': 'div.thumb_area',
    'thumbnail_image': 'img.thumb_img',
}
IMAGE_URL_ATTRIBUTES = ('src', 'data-src', 'data-lazy-src', 'data-original')
THUMBNAILS_PER_AD = 3

_cleaner = AdTextCleaner()


def _parse_document(html_content):
    """Parse HTML and drop subtrees that never render."""
    soup = BeautifulSoup(html_content or "", 'html.parser')
    for tag in soup.find_all(INVISIBLE_TAGS):
        # Nested matches go away with their decomposed parent
        if not tag.decomposed:
            tag.decompose()
    return soup


def _has_only_element_children(tag):
    """
    True when a block has two or more element children and no text of its own.

    Such children are laid out as blocks on the page even when their tag
    name is inline (styled spans and anchors).
    """
    elements = 0
    for child in tag.children:
        if isinstance(child, Tag):
            elements += 1
        elif isinstance(child, NavigableString) and not isinstance(child, SKIPPED_STRINGS):
            if child.strip():
                return False
    return elements >= 2


def _walk(node, as_block=False):
    if isinstance(node, NavigableString):
        if isinstance(node, SKIPPED_STRINGS):
            return ""
        return WHITESPACE_RUN.sub(' ', str(node))
    if not isinstance(node, Tag):
        return ""

    name = (node.name or "").lower()
    if name in LINE_BREAK_TAGS:
        return BLOCK_MARKER

    is_block = as_block or name in BLOCK_TAGS
    promote = is_block and _has_only_element_children(node)
    inner = ''.join(_walk(child, promote) for child in node.children)
    if is_block:
        return BLOCK_MARKER + inner + BLOCK_MARKER
    return inner


def extract_linear_text(html_content):
    """
    Extract text laid out the way a browser exposes element.innerText.

    Args:
        html_content (str): Raw HTML document

    Returns:
        str: Linear Text, or "" when nothing could be extracted
    """
    try:
        soup = _parse_document(html_content)
        root = soup.body or soup
        return _cleaner.post_process_text(_walk(root))
    except Exception as e:
        print(f"[naver-ad] innerText extraction failed: {e}")
        return ""


def extract_raw_text(html_content):
    """
    Less normalized text variant used for raw export and as a fallback.

    Every text node goes on its own line; only line endings, no-break spaces
    and runs of blank lines are normalized.
    """
    try:
        soup = _parse_document(html_content)
        root = soup.body or soup
        text = root.get_text('\n')
    except Exception as e:
        print(f"[naver-ad] raw text extraction failed: {e}")
        return ""

    text = text.replace('\r\n', '\n').replace('\r', '\n').replace('\xa0', ' ')
    text = '\n'.join(line.rstrip() for line in text.split('\n'))
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()


def strip_tags_text(html_content):
    """
    Regex-only fallback for documents the tree walk could not handle.
    """
    if not html_content:
        return ""

    text = re.sub(r'<!--.*?-->', '', html_content, flags=re.DOTALL)
    text = re.sub(
        r'<(script|style|noscript)\b[^>]*>.*?</\1\s*>',
        '',
        text,
        flags=re.DOTALL | re.IGNORECASE,
    )
    text = re.sub(r'<br\s*/?>', '\n', text, flags=re.IGNORECASE)
    block_names = '|'.join(sorted(BLOCK_TAGS))
    text = re.sub(rf'</(?:{block_names})\s*>', '\n', text, flags=re.IGNORECASE)
    text = re.sub(r'<[^>]+>', '', text)
    text = html_module.unescape(text)

    lines = [WHITESPACE_RUN.sub(' ', line).strip() for line in text.split('\n')]
    text = '\n'.join(lines)
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()


def _image_url(img, attributes):
    for attribute in attributes:
        value = (img.get(attribute) or "").strip()
        # data: URIs are lazy-load placeholders
        if value and not value.startswith('data:'):
            return value
    return ""


def _collect_image_urls(container, attributes):
    urls = []
    for img in container.find_all('img'):
        url = _image_url(img, attributes)
        if url:
            urls.append(url)
    return urls


def _identity_ancestor(tag):
    """Nearest ancestor carrying an id or data-* attribute."""
    for parent in tag.parents:
        if not isinstance(parent, Tag) or parent.name == '[document]':
            break
        attrs = parent.attrs or {}
        if attrs.get('id'):
            return parent
        if any(key.startswith('data-') for key in attrs):
            return parent
    return None


def _thumbnails_by_container(soup, selectors, attributes):
    thumbnails = []
    for container in soup.select(selectors['ad_container']):
        urls = []
        for thumb_area in container.select(selectors['thumbnail_container']):
            urls.extend(_collect_image_urls(thumb_area, attributes))
        thumbnails.append(urls)
    return thumbnails


def _thumbnails_by_ancestor(soup, selectors, attributes):
    groups = {}
    for thumb_area in soup.select(selectors['thumbnail_container']):
        anchor = _identity_ancestor(thumb_area)
        key = id(anchor) if anchor is not None else id(thumb_area)
        groups.setdefault(key, []).extend(_collect_image_urls(thumb_area, attributes))
    return list(groups.values())


def _thumbnails_by_chunks(soup, selectors, attributes, chunk_size):
    urls = []
    for img in soup.select(selectors['thumbnail_image']):
        url = _image_url(img, attributes)
        if url:
            urls.append(url)
    return [urls[i:i + chunk_size] for i in range(0, len(urls), chunk_size)]


def extract_thumbnail_images(html_content, selectors=None, attributes=None,
                             chunk_size=THUMBNAILS_PER_AD):
    """
    Collect thumbnail image URLs for every ad container, in document order.

    Strategies are tried in order until one yields at least one URL:
    container-scoped thumbnail areas, thumbnail areas grouped by their nearest
    identified ancestor, then flat thumbnail images chunked per ad.

    Returns:
        tuple: (list of URL lists, debug dict)
    """
    selectors = {**THUMBNAIL_SELECTORS, **(selectors or {})}
    attributes = tuple(attributes or IMAGE_URL_ATTRIBUTES)
    debug = {'strategy': None, 'attempts': {}}

    try:
        soup = _parse_document(html_content)
    except Exception as e:
        print(f"[naver-ad] thumbnail extraction failed: {e}")
        debug['error'] = str(e)
        return [], debug

    strategies = [
        ('container', lambda: _thumbnails_by_container(soup, selectors, attributes)),
        ('ancestor', lambda: _thumbnails_by_ancestor(soup, selectors, attributes)),
        ('chunked', lambda: _thumbnails_by_chunks(soup, selectors, attributes, chunk_size)),
    ]
    for name, strategy in strategies:
        thumbnails = strategy()
        debug['attempts'][name] = {
            'blocks': len(thumbnails),
            'images': sum(len(urls) for urls in thumbnails),
        }
        if any(thumbnails):
            debug['strategy'] = name
            return thumbnails, debug

    return [], debug


def extract_thumbnails(html_content, selectors=None):
    thumbnails, _ = extract_thumbnail_images(html_content, selectors=selectors)
    return thumbnails


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 2 or sys.argv[1] in ['--help', '-h']:
        print("Usage: python ad_text_extractor.py HTML_FILE")
        sys.exit(0)

    with open(sys.argv[1], 'r', encoding='utf-8') as f:
        page = f.read()

    print(extract_linear_text(page))
    print()
    thumbnails, debug = extract_thumbnail_images(page)
    print(f"Thumbnail strategy: {debug['strategy']}")
    for index, urls in enumerate(thumbnails, 1):
        print(f"  block {index}: {len(urls)} images")
