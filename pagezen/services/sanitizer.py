import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable

from bs4 import BeautifulSoup, Comment

logger = logging.getLogger(__name__)

# Key under which removed HTML comments are reported
COMMENTS_KEY = "<!-- -->"

# Ordered CSS selectors for subtrees that never belong to article content.
# Each rule is applied to the live tree after the previous ones.
REMOVAL_RULES = (
    # Scripts and styles
    "script",
    "style",
    "noscript",
    # Navigation and page chrome
    "nav",
    "header",
    "footer",
    ".navigation",
    ".nav",
    ".menu",
    # Advertisements and social media
    ".ad",
    ".ads",
    ".advertisement",
    ".social",
    ".share",
    ".sharing",
    ".social-share",
    ".social-media",
    ".twitter",
    ".facebook",
    ".instagram",
    # Comments and related content
    ".comments",
    ".comment",
    ".related",
    ".recommended",
    ".suggestions",
    # Tracking and analytics
    ".analytics",
    ".tracking",
    ".pixel",
    # Cookie notices and popups
    ".cookie",
    ".gdpr",
    ".popup",
    ".modal",
    ".overlay",
    # Subscription and newsletter boxes
    ".subscribe",
    ".newsletter",
    ".signup",
    ".email-signup",
    # Breadcrumbs and taxonomy lists
    ".breadcrumb",
    ".breadcrumbs",
    ".tags",
    ".categories",
    # Embedded players
    ".video-player",
    ".embed",
    "iframe[src*='youtube']",
    "iframe[src*='vimeo']",
    # Sidebars and widgets by substring
    "[class*='sidebar']",
    "[class*='widget']",
    "[id*='sidebar']",
    "[id*='widget']",
    # Subscription/contact forms; site search stays
    "form:not(.search-form)",
    # Elements hidden with inline CSS
    "[style*='display:none']",
    "[style*='display: none']",
    "[style*='visibility:hidden']",
    "[style*='visibility: hidden']",
)


@dataclass
class RemovalReport:
    """Nodes removed by :func:`prune`, keyed by rule in application order."""

    counts: Dict[str, int] = field(default_factory=dict)
    total: int = 0

    def add(self, rule: str, count: int) -> None:
        if count:
            self.counts[rule] = self.counts.get(rule, 0) + count
            self.total += count


def prune(soup: BeautifulSoup, rules: Iterable[str] = REMOVAL_RULES) -> RemovalReport:
    """Remove every subtree of *soup* matching one of *rules*, in place.

    A node nested inside an earlier match of the same rule goes away with
    its ancestor and is not counted twice.  Running :func:`prune` again on
    its own output removes nothing.
    """
    report = RemovalReport()

    for rule in rules:
        removed = 0
        for tag in soup.select(rule):
            if tag.decomposed:
                continue
            tag.decompose()
            removed += 1
        if removed:
            logger.debug("Removed unwanted elements: selector=%s count=%d", rule, removed)
        report.add(rule, removed)

    # HTML comments may carry conditional markup or debugging leftovers
    comments = soup.find_all(string=lambda text: isinstance(text, Comment))
    for comment in comments:
        comment.extract()
    report.add(COMMENTS_KEY, len(comments))

    if report.total:
        logger.info("Total unwanted elements removed: %d", report.total)

    return report
