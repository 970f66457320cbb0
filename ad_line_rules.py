#!/usr/bin/env python3
"""
Ad Line Rules
Fixed markers and per-line predicates used to recognise fields in the
rendered text of a Naver search-ad results page.
"""

import re

# Fixed markers as they appear in the rendered page
NAVERPAY_MARKER = "네이버페이"
NAVERPAY_LOGIN_PHRASES = (
    "네이버 로그인",
    "로그인하고 포인트 받기",
)
NAVERPAY_SERVICE_MARKERS = (
    "서비스 안내",
    "서비스 설명",
)
REGISTER_BUSINESS_PROMPT = "내 업체 등록하기"
DURATION_MARKER = "광고집행기간"
SLIDER_NAV_LABELS = frozenset([
    "이전",
    "다음",
    "이전 슬라이드",
    "다음 슬라이드",
])
PAGINATION_LABELS = frozenset([
    "이전페이지",
    "다음페이지",
])

PROMOTION_MIN_LENGTH = 7

# "3개월", "12개월 이상"
DURATION_VALUE_PATTERN = re.compile(r'\d+\s*개월(?:\s*이상)?')

# acme.co.kr, https://www.acme.com/shop, 예시.한국
DOMAIN_LINE_PATTERN = re.compile(
    r'(?:https?://)?'
    r'(?:[^\W_][\w-]*\.)+'
    r'[^\W\d_]{2,}'
    r'(?:/\S*)?'
)

# Domain token used when splitting fused text; ASCII TLD and path only so the
# match stops at adjacent Korean text
INLINE_DOMAIN_TOKEN = (
    r'(?:https?://)?'
    r'(?:[0-9A-Za-z가-힣-]+\.)+'
    r'[A-Za-z]{2,}'
    r'(?:/[!-~]*)?'
    r'(?![!-~])'
)

REVIEW_COUNT_PATTERN = re.compile(r'리뷰\s*[\d,]+')
PRICE_PATTERN = re.compile(r'(?:₩\s*[\d,]+|[\d,]*\d\s*원)')
PAGE_NUMBER_PATTERN = re.compile(r'\d+')


def is_domain_line(line):
    """True when the whole line is a site domain or URL (a block anchor)."""
    return bool(DOMAIN_LINE_PATTERN.fullmatch(line.strip()))


def is_noise_line(line):
    """Bare page numbers and pagination controls never reach segmentation."""
    return bool(PAGE_NUMBER_PATTERN.fullmatch(line)) or line in PAGINATION_LABELS


def is_payment_line(line):
    if NAVERPAY_MARKER in line:
        return True
    return any(phrase in line for phrase in NAVERPAY_LOGIN_PHRASES)


def is_service_description_line(line):
    return any(marker in line for marker in NAVERPAY_SERVICE_MARKERS)


def is_duration_marker(line):
    return DURATION_MARKER in line


def is_duration_value(line):
    return bool(DURATION_VALUE_PATTERN.fullmatch(line.strip()))


def is_duration_line(line):
    """Marker line or marker-less duration value."""
    return is_duration_marker(line) or is_duration_value(line)


def is_slider_nav(line):
    return line in SLIDER_NAV_LABELS


def is_review_count(line):
    return bool(REVIEW_COUNT_PATTERN.search(line))


def is_price_link(line):
    return bool(PRICE_PATTERN.search(line))


def is_control_token(line):
    """
    Lines that belong to the page chrome rather than to ad content.

    A control token must never become a brand name or a thumbnail caption.
    """
    if line == NAVERPAY_MARKER or line == REGISTER_BUSINESS_PROMPT:
        return True
    if is_duration_line(line):
        return True
    return is_slider_nav(line)


def is_promotion_text(line):
    if len(line) < PROMOTION_MIN_LENGTH:
        return False
    return not (is_slider_nav(line) or is_duration_line(line))


def classify_map_line(line):
    """
    Classify a line from the map-tag region.

    Returns:
        str: 'review', 'price', 'slider' or 'tag'
    """
    if is_slider_nav(line):
        return 'slider'
    if is_review_count(line):
        return 'review'
    if is_price_link(line):
        return 'price'
    return 'tag'


def split_duration_line(line):
    """
    Split a marker line into the text following the marker.

    "광고집행기간 6개월" -> "6개월", "광고집행기간" -> ""
    """
    _, _, rest = line.partition(DURATION_MARKER)
    return rest.strip().lstrip(':').strip()
