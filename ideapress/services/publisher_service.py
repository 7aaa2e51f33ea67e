"""
Publisher service for pushing articles to dev.to and Hashnode.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from ideapress.models.publication import PublishRequest, PublishResult
from ideapress.utils.logger import logger
from ideapress.utils.constants import DEVTO_API_URL, HASHNODE_API_URL, REQUEST_TIMEOUT

HASHNODE_PUBLISH_MUTATION = """
mutation PublishPost($input: PublishPostInput!) {
  publishPost(input: $input) {
    post {
      id
      title
      url
      slug
    }
  }
}
"""


class PlatformError(Exception):
    """A single platform refused the article."""


def tag_slug(tag: str) -> str:
    return re.sub(r"\s+", "-", tag.strip().lower())


class PublisherService:
    """Publishes an article to each requested platform and reports per-platform results."""

    def __init__(
        self,
        devto_api_key: Optional[str] = None,
        hashnode_api_key: Optional[str] = None,
        hashnode_publication_id: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = REQUEST_TIMEOUT,
    ):
        self.devto_api_key = devto_api_key
        self.hashnode_api_key = hashnode_api_key
        self.hashnode_publication_id = hashnode_publication_id
        self.session = session or requests.Session()
        self.timeout = timeout

    def publish(self, request: PublishRequest) -> List[PublishResult]:
        """
        Publish to every platform in ``request.platforms``.

        Failures are reported in the returned results rather than raised, so one
        platform being down does not hide success on another.
        """
        publishers = {
            "devto": self.publish_to_devto,
            "hashnode": self.publish_to_hashnode,
        }
        results = []
        for platform in request.platforms:
            try:
                article = publishers[platform](request)
                logger.info(f"Published '{request.title}' to {platform}")
                results.append(PublishResult(platform=platform, success=True, article=article))
            except (PlatformError, requests.RequestException) as e:
                logger.error(f"Failed to publish to {platform}: {e}")
                results.append(PublishResult(platform=platform, success=False, error=str(e)))
        return results

    def publish_to_devto(self, request: PublishRequest) -> Dict[str, Any]:
        if not self.devto_api_key:
            raise PlatformError("DEV_TO_API_KEY not configured")

        response = self.session.post(
            DEVTO_API_URL,
            headers={
                "Content-Type": "application/json",
                "api-key": self.devto_api_key,
            },
            json={
                "article": {
                    "title": request.title,
                    "body_markdown": request.content,
                    "tags": request.tags,
                    "published": not request.is_draft,
                }
            },
            timeout=self.timeout,
        )
        if not response.ok:
            raise PlatformError(f"dev.to returned {response.status_code}: {response.text}")
        return response.json()

    def publish_to_hashnode(self, request: PublishRequest) -> Dict[str, Any]:
        if not self.hashnode_api_key:
            raise PlatformError("HASHNODE_API_KEY not configured")

        post_input: Dict[str, Any] = {
            "title": request.title,
            "contentMarkdown": request.content,
            "tags": [{"name": tag, "slug": tag_slug(tag)} for tag in request.tags],
            "publicationId": self.hashnode_publication_id,
        }
        if not request.is_draft:
            post_input["publishedAt"] = datetime.now(timezone.utc).isoformat()

        response = self.session.post(
            HASHNODE_API_URL,
            headers={
                "Content-Type": "application/json",
                "Authorization": self.hashnode_api_key,
            },
            json={"query": HASHNODE_PUBLISH_MUTATION, "variables": {"input": post_input}},
            timeout=self.timeout,
        )
        if not response.ok:
            raise PlatformError(f"Hashnode returned {response.status_code}: {response.text}")

        result = response.json()
        if result.get("errors"):
            raise PlatformError(f"Hashnode errors: {result['errors']}")
        post = ((result.get("data") or {}).get("publishPost") or {}).get("post")
        if not post:
            raise PlatformError(f"Hashnode returned no post: {result}")
        return post
