#!/usr/bin/env python3
"""
Naver Ad Fetcher
Downloads the search-ad results page for a keyword.
"""

from collections import namedtuple
from urllib.parse import quote

import requests

from naver_ad_config import load_config

FetchResult = namedtuple('FetchResult', ['url', 'status', 'content_type', 'html'])


class NaverAdFetchError(Exception):
    """The results page could not be downloaded."""

    def __init__(self, message, status_code=None, url=""):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


def build_search_url(keyword, config=None):
    config = config or load_config()
    template = config['request']['url_template']
    return template.format(query=quote(keyword, safe=''))


class NaverAdFetcher:
    def __init__(self, config=None, session=None):
        self.config = config or load_config()
        self.session = session or requests.Session()
        self.session.headers.update(self.config['request']['headers'])
        self.timeout = self.config['request']['timeout']

    def fetch(self, keyword):
        """
        Download the results page for a keyword.

        Returns:
            FetchResult: url, HTTP status, content type and decoded HTML

        Raises:
            NaverAdFetchError: on transport errors and non-2xx responses
        """
        url = build_search_url(keyword, self.config)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NaverAdFetchError(f"페이지 요청 실패: {e}", url=url) from e

        if not response.ok:
            raise NaverAdFetchError(
                f"페이지 요청 실패: {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        # The page is always UTF-8 even when the header omits the charset
        if not response.encoding or response.encoding.lower() == 'iso-8859-1':
            response.encoding = 'utf-8'

        return FetchResult(
            url=url,
            status=response.status_code,
            content_type=response.headers.get('content-type', ""),
            html=response.text,
        )


def fetch_naver_ad_html(keyword, session=None, config=None):
    return NaverAdFetcher(config=config, session=session).fetch(keyword)
