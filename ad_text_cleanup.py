#!/usr/bin/env python3
"""
Ad Text Cleanup
Normalizes linearized page text and turns it into the line stream consumed by
the ad block parser.
"""

import re

from ad_line_rules import DURATION_MARKER, INLINE_DOMAIN_TOKEN, is_noise_line

# Block boundary marker emitted by the tree walk, never present in page text
BLOCK_MARKER = "\x00"


class AdTextCleaner:
    def __init__(self):
        # Applied in order; each entry is (pattern, replacement)
        self.layout_patterns = {
            # Markers with only inter-tag spaces between them are one boundary
            'boundaries': [
                (re.compile(BLOCK_MARKER + r'(?:[ \t]*' + BLOCK_MARKER + ')*'), '\n'),
            ],
            'blank_lines': [
                (re.compile(r'\n{3,}'), '\n\n'),  # Max 1 blank line in a row
            ],
        }

        self.split_patterns = {
            # "Acme acme.co.kr" -> domain on its own line
            'domain_before': [
                (re.compile(r'[ \t]+(?=' + INLINE_DOMAIN_TOKEN + ')'), '\n'),
            ],
            # "acme.co.kr 네이버페이" -> break after the domain
            'domain_after': [
                (re.compile('(' + INLINE_DOMAIN_TOKEN + r')[ \t]*(?=\S)'), r'\1\n'),
            ],
            # "광고집행기간 3개월" -> label on the next line
            'duration_marker': [
                (re.compile('(' + re.escape(DURATION_MARKER) + r')[ \t]*(?=\S)'), r'\1\n'),
            ],
        }

    def _apply(self, text, pattern_groups):
        for patterns in pattern_groups.values():
            for pattern, replacement in patterns:
                text = pattern.sub(replacement, text)
        return text

    def post_process_text(self, text):
        """
        Turn the raw output of the tree walk into Linear Text.

        Args:
            text (str): Walk output, possibly containing block markers

        Returns:
            str: One logical line per rendered line, at most one blank line
            in a row, no whitespace-only lines
        """
        if not text:
            return ""

        text = self._apply(text, {'boundaries': self.layout_patterns['boundaries']})
        text = '\n'.join(line.strip() for line in text.split('\n'))
        text = self._apply(text, {'blank_lines': self.layout_patterns['blank_lines']})
        text = text.strip('\n')

        text = self._apply(text, self.split_patterns)

        # Drop whitespace-only lines produced by the splits
        lines = [line for line in text.split('\n') if line == '' or line.strip()]
        return '\n'.join(lines)

    def build_line_stream(self, text):
        """
        Split Linear Text into trimmed, non-empty, non-noise lines.

        Returns:
            tuple: immutable line stream
        """
        lines = []
        for line in (text or "").split('\n'):
            line = line.strip()
            if not line:
                continue
            if is_noise_line(line):
                continue
            lines.append(line)
        return tuple(lines)

    def get_cleanup_stats(self, original_text, cleaned_text):
        """Generate statistics about text cleaning"""
        original_lines = len([l for l in original_text.split('\n') if l.strip()])
        cleaned_lines = len([l for l in cleaned_text.split('\n') if l.strip()])
        stream_lines = len(self.build_line_stream(cleaned_text))

        return {
            'original_lines': original_lines,
            'cleaned_lines': cleaned_lines,
            'stream_lines': stream_lines,
            'noise_lines_removed': cleaned_lines - stream_lines,
        }


_default_cleaner = AdTextCleaner()


def normalize_linear_text(text):
    return _default_cleaner.post_process_text(text)


def build_line_stream(text):
    return _default_cleaner.build_line_stream(text)


if __name__ == "__main__":
    cleaner = AdTextCleaner()

    sample = (
        "\x00\x00  스마트 안경  \x00\x00\x00 Acme acme.co.kr 네이버페이 \x00"
        "Buy Now\x00Great deals here\x00\x00 \x00광고집행기간 3개월\x00"
    )

    print("=== Testing linear text cleanup ===")
    cleaned = cleaner.post_process_text(sample)
    print(cleaned)
    print()
    print("Line stream:")
    for line in cleaner.build_line_stream(cleaned):
        print(f"  {line}")
