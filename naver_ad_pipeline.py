#!/usr/bin/env python3
"""
Naver Ad Pipeline
Fetches the search-ad results page for a keyword, rebuilds its rendered text
and parses it into structured ad records.
"""

import json
import os
import time
from datetime import datetime

from ad_block_parser import AdBlockParser
from ad_text_cleanup import build_line_stream
from ad_text_extractor import (
    extract_linear_text,
    extract_raw_text,
    extract_thumbnail_images,
    strip_tags_text,
)
from naver_ad_config import load_config
from naver_ad_fetcher import build_search_url, fetch_naver_ad_html

# Tried in order until one returns text
TEXT_EXTRACTION_STRATEGIES = [
    ('innerText', extract_linear_text),
    ('outerTextRaw', extract_raw_text),
    ('stripTags', strip_tags_text),
]


def extract_text_with_fallback(html_content, strategies=None):
    """
    Returns:
        tuple: (text, strategy name), or ("", "") when every strategy is empty
    """
    for name, strategy in strategies or TEXT_EXTRACTION_STRATEGIES:
        text = strategy(html_content)
        if text:
            return text, name
        print(f"[naver-ad] {name} extraction returned empty text")
    return "", ""


def collect_naver_ads(keyword, html=None, config=None, session=None):
    """
    Run the whole collection for one keyword.

    Args:
        keyword (str): Search keyword
        html (str): Page HTML; fetched when omitted
        config (dict): Configuration, see naver_ad_config
        session: requests-compatible session used for the fetch

    Returns:
        dict: html, innerText, outerTextRaw, results and debug details

    Raises:
        ValueError: keyword is empty
        NaverAdFetchError: the page could not be downloaded
    """
    if not keyword or not keyword.strip():
        raise ValueError("keyword 파라미터가 필요합니다.")

    config = config or load_config()
    print(f"[naver-ad] incoming keyword={keyword}")

    if html is None:
        fetched = fetch_naver_ad_html(keyword, session=session, config=config)
        url, status, content_type, html = fetched
        print(f"[naver-ad] fetched html status={status} length={len(html)} content-type={content_type}")
    else:
        url, status, content_type = build_search_url(keyword, config), None, None

    inner_text, text_source = extract_text_with_fallback(html)
    outer_text_raw = extract_raw_text(html)
    print(f"[naver-ad] innerText length={len(inner_text)} source={text_source or 'none'}")
    if text_source != 'innerText':
        print(f"Warning: innerText empty after extract. html head snippet={html[:500]!r}")

    thumbnail_config = config['thumbnails']
    thumbnails, thumbnail_debug = extract_thumbnail_images(
        html,
        selectors=thumbnail_config['selectors'],
        attributes=thumbnail_config['image_attributes'],
        chunk_size=thumbnail_config['chunk_size'],
    )
    print(f"[naver-ad] thumbnail blocks={len(thumbnails)} strategy={thumbnail_debug['strategy']}")

    lines = build_line_stream(inner_text)
    parser = AdBlockParser(keyword, thumbnails)
    results = parser.parse_lines(lines)
    print(f"[naver-ad] parsed results count={len(results)} (dropped {parser.stats['dropped']})")
    if parser.stats['anchors'] != len(thumbnails):
        print(
            f"Warning: {parser.stats['anchors']} ad blocks but {len(thumbnails)} "
            f"thumbnail groups, images may be misaligned"
        )

    return {
        'keyword': keyword,
        'html': html,
        'innerText': inner_text,
        'outerTextRaw': outer_text_raw,
        'results': results,
        'debug': {
            'url': url,
            'status': status,
            'htmlLength': len(html),
            'innerTextLength': len(inner_text),
            'outerTextRawLength': len(outer_text_raw),
            'textSource': text_source,
            'contentType': content_type,
            'thumbnails': thumbnail_debug,
            'lineCount': len(lines),
            'anchorCount': parser.stats['anchors'],
            'candidateCount': parser.stats['candidates'],
            'droppedCount': parser.stats['dropped'],
        },
    }


def write_summary_log(collection, elapsed_time, logs_dir="logs"):
    """Append one summary line to the monthly log"""
    now = datetime.now()
    month_dir = os.path.join(logs_dir, now.strftime("%Y-%m"))
    os.makedirs(month_dir, exist_ok=True)

    summary_log_path = os.path.join(month_dir, "naver_ad_summary.log")
    debug = collection['debug']
    log_entry = (
        f"{now.strftime('%Y-%m-%d %H:%M:%S')} | "
        f"Keyword: {collection['keyword']} | "
        f"Text source: {debug['textSource'] or 'none'} | "
        f"Anchors: {debug['anchorCount']} | "
        f"Candidates: {debug['candidateCount']} | "
        f"Records: {len(collection['results'])} | "
        f"Time: {elapsed_time:.2f}s\n"
    )

    with open(summary_log_path, "a", encoding="utf-8") as f:
        f.write(log_entry)
    return summary_log_path


def print_usage():
    print("Naver Ad Pipeline - Collects search-ad records for a keyword")
    print("")
    print("Usage: python naver_ad_pipeline.py KEYWORD [--html-file PATH] [--output PATH] [--save-raw PATH]")
    print("")
    print("Parameters:")
    print("  KEYWORD             Search keyword")
    print("  --html-file PATH    (optional): Parse a saved page instead of fetching")
    print("  --output PATH       (optional): Write records as JSON")
    print("  --save-raw PATH     (optional): Write the raw text variant")


def main(argv):
    if not argv or argv[0] in ['--help', '-h']:
        print_usage()
        return 0

    keyword = argv[0]
    html_file = None
    output_path = None
    raw_path = None

    i = 1
    while i < len(argv):
        arg = argv[i]
        if arg in ['--html-file', '--output', '--save-raw']:
            if i + 1 >= len(argv):
                print(f"Error: {arg} requires a path")
                return 1
            value = argv[i + 1]
            if arg == '--html-file':
                html_file = value
            elif arg == '--output':
                output_path = value
            else:
                raw_path = value
            i += 1
        else:
            print(f"Error: Unknown argument '{arg}'")
            print_usage()
            return 1
        i += 1

    html = None
    if html_file:
        with open(html_file, 'r', encoding='utf-8') as f:
            html = f.read()

    config = load_config()
    start_time = time.time()
    collection = collect_naver_ads(keyword, html=html, config=config)
    elapsed = time.time() - start_time

    if output_path:
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(collection['results'], f, indent=2, ensure_ascii=False)
        print(f"Records written to {output_path}")
    if raw_path:
        with open(raw_path, 'w', encoding='utf-8') as f:
            f.write(collection['outerTextRaw'])
        print(f"Raw text written to {raw_path}")

    print(f"\n=== Naver Ad Summary ===")
    print(f"Keyword: {keyword}")
    print(f"Ad blocks found: {collection['debug']['anchorCount']}")
    print(f"Records kept: {len(collection['results'])}")
    for record in collection['results']:
        print(f"  {record['rank']}. {record['brand']['name'] or '-'} ({record['brand']['domain']}) {record['adText']['title']}")
    print(f"Total time: {elapsed:.2f} seconds")

    write_summary_log(collection, elapsed, logs_dir=config['logs_dir'])
    return 0


if __name__ == "__main__":
    import sys
    from naver_ad_fetcher import NaverAdFetchError

    try:
        sys.exit(main(sys.argv[1:]))
    except NaverAdFetchError as e:
        print(f"Error: {e}")
        sys.exit(2)
