#!/usr/bin/env python3
"""
Ad Block Parser
Segments the line stream of a Naver search-ad results page into one
structured record per advertisement.

Every ad starts at its domain line. Fields carry no explicit delimiters, so
each block is walked with a forward-only cursor and an ordered list of
recognition steps:

1. brand name      - the line before the domain, unless it is a control token
2. payment flag    - 네이버페이 marker or login prompt right after the domain
3. title / desc    - next two lines, unconditionally
4. promotion text  - next line if long enough and not a marker
5. site links      - everything up to a slider label or the duration marker
6. slider labels   - skipped
7. map region      - map tags, visitor review, price link up to the duration
8. run period      - inline after the marker, on the next line, or marker-less
9. captions        - remaining lines that are not control tokens
10. images         - positional lookup in the thumbnail map
"""

from ad_line_rules import (
    classify_map_line,
    is_control_token,
    is_domain_line,
    is_duration_line,
    is_duration_marker,
    is_duration_value,
    is_payment_line,
    is_promotion_text,
    is_service_description_line,
    is_slider_nav,
    split_duration_line,
)
from ad_text_cleanup import build_line_stream

REQUIRED_FIELDS = (
    ('brand', 'domain'),
    ('adText', 'title'),
    ('adText', 'desc'),
    ('meta', 'adRunPeriod', 'label'),
)


def new_ad_record(keyword, rank=0):
    """Empty record with every field present."""
    return {
        'keyword': keyword,
        'rank': rank,
        'brand': {'name': "", 'domain': ""},
        'payments': {'naverpay': "N"},
        'adText': {'title': "", 'desc': ""},
        'assets': {
            'promotionText': "",
            'sitelinkText': [],
            'naverMapTag': [],
            'visitorReview': "",
            'naverMapPriceLink': "",
            'thumbNailText': [],
            'thumbNailImages': [],
        },
        'meta': {'adRunPeriod': {'label': ""}},
    }


def _field(record, path):
    value = record
    for key in path:
        value = value.get(key, "") if isinstance(value, dict) else ""
    return value


def is_complete_record(record):
    return all(_field(record, path) for path in REQUIRED_FIELDS)


def find_anchor_indices(lines):
    return [index for index, line in enumerate(lines) if is_domain_line(line)]


class AdBlockParser:
    def __init__(self, keyword, thumbnails_by_block=None):
        """
        Args:
            keyword (str): Search keyword, copied into every record
            thumbnails_by_block (list): Image URL lists, aligned by block index
        """
        self.keyword = keyword
        self.thumbnails_by_block = list(thumbnails_by_block or [])
        self.stats = {
            'anchors': 0,
            'candidates': 0,
            'dropped': 0,
            'records': 0,
        }

    def _brand_index(self, lines, anchors, block_index):
        anchor = anchors[block_index]
        index = anchor - 1
        if index < 0:
            return None
        if block_index > 0 and index <= anchors[block_index - 1]:
            return None
        # A control token here is the tail of the previous block
        if is_control_token(lines[index]):
            return None
        return index

    def block_spans(self, lines, anchors):
        """
        Returns:
            list: (brand_index or None, anchor_index, end_index) per block
        """
        brand_indices = [
            self._brand_index(lines, anchors, k) for k in range(len(anchors))
        ]
        spans = []
        for k, anchor in enumerate(anchors):
            if k + 1 < len(anchors):
                next_brand = brand_indices[k + 1]
                end = next_brand if next_brand is not None else anchors[k + 1]
            else:
                end = len(lines)
            spans.append((brand_indices[k], anchor, end))
        return spans

    def _thumbnail_images(self, block_index):
        if block_index < len(self.thumbnails_by_block):
            return list(self.thumbnails_by_block[block_index] or [])
        return []

    def parse_block(self, lines, span, block_index):
        brand_index, anchor, end = span
        record = new_ad_record(self.keyword, rank=block_index + 1)
        assets = record['assets']

        if brand_index is not None:
            record['brand']['name'] = lines[brand_index]
        record['brand']['domain'] = lines[anchor]

        cursor = anchor + 1

        if cursor < end and is_payment_line(lines[cursor]):
            record['payments']['naverpay'] = "Y"
            cursor += 1
            if cursor < end and is_service_description_line(lines[cursor]):
                cursor += 1

        if cursor < end:
            record['adText']['title'] = lines[cursor]
            cursor += 1
        if cursor < end:
            record['adText']['desc'] = lines[cursor]
            cursor += 1

        if cursor < end and is_promotion_text(lines[cursor]):
            assets['promotionText'] = lines[cursor]
            cursor += 1

        while cursor < end and not (is_slider_nav(lines[cursor]) or is_duration_line(lines[cursor])):
            assets['sitelinkText'].append(lines[cursor])
            cursor += 1

        while cursor < end and is_slider_nav(lines[cursor]):
            cursor += 1

        while cursor < end and not is_duration_line(lines[cursor]):
            line = lines[cursor]
            kind = classify_map_line(line)
            if kind == 'review':
                if not assets['visitorReview']:
                    assets['visitorReview'] = line
            elif kind == 'price':
                if not assets['naverMapPriceLink']:
                    assets['naverMapPriceLink'] = line
            elif kind == 'tag':
                assets['naverMapTag'].append(line)
            cursor += 1

        if cursor < end:
            line = lines[cursor]
            if is_duration_marker(line):
                inline_label = split_duration_line(line)
                cursor += 1
                if inline_label:
                    record['meta']['adRunPeriod']['label'] = inline_label
                elif cursor < end:
                    record['meta']['adRunPeriod']['label'] = lines[cursor]
                    cursor += 1
            elif is_duration_value(line):
                record['meta']['adRunPeriod']['label'] = line
                cursor += 1

        while cursor < end:
            if not is_control_token(lines[cursor]):
                assets['thumbNailText'].append(lines[cursor])
            cursor += 1

        assets['thumbNailImages'] = self._thumbnail_images(block_index)
        return record

    def segment(self, lines):
        """
        Build one candidate record per domain line, before validation.
        """
        lines = tuple(lines)
        anchors = find_anchor_indices(lines)
        spans = self.block_spans(lines, anchors)
        candidates = [
            self.parse_block(lines, span, block_index)
            for block_index, span in enumerate(spans)
        ]
        self.stats['anchors'] = len(anchors)
        self.stats['candidates'] = len(candidates)
        return candidates

    def parse_lines(self, lines):
        """
        Segment, drop incomplete records, then renumber ranks 1..N.
        """
        candidates = self.segment(lines)
        records = [record for record in candidates if is_complete_record(record)]
        for rank, record in enumerate(records, 1):
            record['rank'] = rank

        self.stats['dropped'] = len(candidates) - len(records)
        self.stats['records'] = len(records)
        return records

    def parse_text(self, text):
        return self.parse_lines(build_line_stream(text))


def parse_naver_ad_text(text, keyword, thumbnails_by_block=None):
    """
    Parse Linear Text into validated, ranked ad records.

    Args:
        text (str): Linear Text of the results page
        keyword (str): Search keyword echoed into each record
        thumbnails_by_block (list): Image URL lists per ad container

    Returns:
        list: Ad record dicts
    """
    return AdBlockParser(keyword, thumbnails_by_block).parse_text(text)


def parse_ad_lines(lines, keyword, thumbnails_by_block=None):
    return AdBlockParser(keyword, thumbnails_by_block).parse_lines(lines)
