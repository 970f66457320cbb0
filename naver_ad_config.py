#!/usr/bin/env python3
"""
Naver Ad Collector Configuration
Built-in defaults, optionally overridden by a YAML file.
"""

import copy
import os

import yaml

CONFIG_FILE = "naver_ad_config.yaml"
CONFIG_ENV_VAR = "NAVER_AD_CONFIG"

DEFAULT_CONFIG = {
    'request': {
        'url_template': "https://ad.search.naver.com/search.naver?where=ad&query={query}",
        'timeout': 15,
        'headers': {
            'User-Agent': (
                "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
            ),
            'Accept-Language': "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
            'Accept': "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            'Referer': "https://www.naver.com/",
            'Accept-Charset': "utf-8",
        },
    },
    'thumbnails': {
        'selectors': {
            'ad_container': "li.lst",
            'thumbnail_container': "div.thumb_area",
            'thumbnail_image': "img.thumb_img",
        },
        'image_attributes': ['src', 'data-src', 'data-lazy-src', 'data-original'],
        'chunk_size': 3,
    },
    'llm': {
        'api_key_env': "GEMINI_API_KEY",
        'morpheme_model': "gemini-2.5-flash",
        'insight_model': "gemini-2.5-pro",
        'creative_model': "gemini-2.5-pro",
        'max_output_tokens': 4096,
    },
    'logs_dir': "logs",
}


def merge_config(base, override):
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path=None):
    """
    Load configuration, falling back to defaults.

    Args:
        path (str): YAML file; defaults to $NAVER_AD_CONFIG or naver_ad_config.yaml

    Returns:
        dict: Complete configuration
    """
    path = path or os.environ.get(CONFIG_ENV_VAR) or CONFIG_FILE
    if not os.path.exists(path):
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"Warning: Could not load config {path}: {e}")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(user_config, dict):
        print(f"Warning: Ignoring config {path}: top level must be a mapping")
        return copy.deepcopy(DEFAULT_CONFIG)

    return merge_config(DEFAULT_CONFIG, user_config)
