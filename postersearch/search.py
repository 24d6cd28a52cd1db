#!/usr/bin/env python3.13
from __future__ import annotations
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

from postersearch.nntp_client import NNTPClient
from postersearch.poster_filter import PosterFilter
from postersearch.settings import SearchConfig

LOGGER = logging.getLogger("postersearch.search")


@dataclass
class SearchResult:
    articles: list[bytes] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.articles)


@contextmanager
def open_session(config: SearchConfig, purpose: str = "session") -> Iterator[NNTPClient]:
    """Connect, read the greeting, and authenticate when credentials are complete.

    The connection is released on every exit path; QUIT is sent best-effort.
    """
    client = NNTPClient(config.server, config.port, use_ssl=config.use_ssl, timeout=config.timeout)
    greeting = client.connect()
    LOGGER.info("%s opened on %s:%s: %s", purpose, config.server, config.port, greeting.strip())
    try:
        if config.has_credentials:
            client.auth(config.username, config.password)
        yield client
    finally:
        client.quit()
        LOGGER.info("%s closed", purpose)


def resolve_groups(config: SearchConfig) -> list[str]:
    if config.group and "*" not in config.group:
        return [config.group]
    with open_session(config, purpose="listing session") as client:
        groups = client.list_groups(config.group)
    LOGGER.info("resolved %d groups for pattern %r", len(groups), config.group)
    return groups


def scan_group(client: NNTPClient, group: str, poster_filter: PosterFilter) -> list[str]:
    selected = client.group(group)
    if selected is None:
        return []
    _count, first, last, _name = selected
    records = client.xover(first, last)
    matched = [record["article"] for record in records if poster_filter.matches(record)]
    LOGGER.info("%s: %d of %d overview records matched", group, len(matched), len(records))
    return matched


def fetch_articles(config: SearchConfig, groups: list[str], poster_filter: PosterFilter) -> list[bytes]:
    articles = []
    with open_session(config, purpose="fetch session") as client:
        for group in groups:
            for article_id in scan_group(client, group, poster_filter):
                articles.append(client.article(group, article_id))
    return articles


def run(config: SearchConfig) -> SearchResult:
    if not config.poster.strip():
        raise ValueError("poster filter must not be empty")
    poster_filter = PosterFilter.build(config.poster, days=config.days, exact=config.exact)
    groups = resolve_groups(config)
    articles = fetch_articles(config, groups, poster_filter)
    return SearchResult(articles=articles, groups=groups)
