"""
WordPress REST API client for Mapster location posts, their ACF popup
fields and the map category taxonomy
"""

import html
import logging
from typing import Any, Dict, Iterable, List, Optional

import requests
from requests.auth import HTTPBasicAuth

from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    RateLimitError,
    WordPressAPIError,
)
from .models import LocationPost
from .retry import with_retry

logger = logging.getLogger(__name__)

PER_PAGE = 100


class WordPressClient:
    """
    Thin wrapper around ``/wp-json/wp/v2`` using application password auth.

    Every request goes through ``_request``, which retries connection
    errors, timeouts and 429 responses with exponential backoff and turns
    unexpected status codes into ``WordPressAPIError``.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        app_password: str,
        timeout: int = 30,
        max_retries: int = 3,
        retry_min_wait: float = 2.0,
        retry_max_wait: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.api_url = f"{self.base_url}/wp-json/wp/v2"
        self.username = username
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_min_wait = retry_min_wait
        self.retry_max_wait = retry_max_wait
        self.session = session or requests.Session()
        self.session.auth = HTTPBasicAuth(username, app_password)

    @classmethod
    def from_settings(cls, settings) -> "WordPressClient":
        settings.require_credentials()
        return cls(
            settings.wp_url,
            settings.wp_user_final,
            settings.wp_pass_final,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
        )

    def close(self):
        self.session.close()

    # ------------------------------------------------------------------
    # transport

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        response = self.session.request(
            method,
            f"{self.api_url}/{path.lstrip('/')}",
            timeout=self.timeout,
            **kwargs,
        )
        if response.status_code == 429:
            retry_after = response.headers.get('Retry-After')
            raise RateLimitError(
                f"Rate limited on {method} {path}",
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        return response

    def _request(self, method: str, path: str, expected=(200,), **kwargs) -> requests.Response:
        send = with_retry(
            max_attempts=self.max_retries,
            min_wait=self.retry_min_wait,
            max_wait=self.retry_max_wait,
        )(self._send)
        response = send(method, path, **kwargs)

        if response.status_code in expected:
            return response
        if response.status_code == 401:
            raise AuthenticationError(f"WordPress rejected credentials for '{self.username}'")
        raise WordPressAPIError(
            response.status_code,
            self._error_message(response),
            response_body=response.text[:500],
        )

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.reason or 'unexpected response'
        if isinstance(payload, dict) and payload.get('message'):
            return str(payload['message'])
        return response.reason or 'unexpected response'

    # ------------------------------------------------------------------
    # users

    def get_current_user(self) -> Dict[str, Any]:
        """Return the authenticated user (edit context, includes capabilities)"""
        try:
            response = self._request('GET', 'users/me', params={'context': 'edit'})
        except WordPressAPIError as e:
            if e.status_code == 403:
                raise AuthenticationError(f"WordPress refused user lookup for '{self.username}'") from e
            raise
        return response.json()

    def require_capability(self, capability: str) -> Dict[str, Any]:
        """Return the current user, raising AuthorizationError without ``capability``"""
        user = self.get_current_user()
        capabilities = user.get('capabilities') or {}
        if not capabilities.get(capability):
            raise AuthorizationError(user.get('slug') or self.username, capability)
        return user

    # ------------------------------------------------------------------
    # post types and posts

    def get_post_type_rest_base(self, post_type: str) -> str:
        response = self._request('GET', f"types/{post_type}")
        return response.json().get('rest_base') or post_type

    def list_published_posts(self, rest_base: str) -> List[LocationPost]:
        """Fetch every published post of a post type, following X-WP-TotalPages"""
        posts = []
        page = 1
        while True:
            response = self._request(
                'GET',
                rest_base,
                params={
                    'status': 'publish',
                    'per_page': PER_PAGE,
                    'page': page,
                    'context': 'edit',
                    '_fields': 'id,title,status,acf',
                },
            )
            batch = response.json()
            if not batch:
                break
            posts.extend(self._to_location_post(item) for item in batch)

            total_pages = int(response.headers.get('X-WP-TotalPages', 1))
            if page >= total_pages:
                break
            page += 1

        logger.info(f"📊 Found {len(posts)} published posts at /{rest_base}")
        return posts

    def get_post(self, rest_base: str, post_id: int) -> LocationPost:
        response = self._request(
            'GET',
            f"{rest_base}/{post_id}",
            params={'context': 'edit', '_fields': 'id,title,status,acf'},
        )
        return self._to_location_post(response.json())

    @staticmethod
    def _to_location_post(item: Dict[str, Any]) -> LocationPost:
        title = item.get('title')
        if isinstance(title, dict):
            # raw is only present in the edit context
            text = title.get('raw')
            if text is None:
                text = html.unescape(title.get('rendered') or '')
        else:
            text = title or ''
        return LocationPost(
            id=item['id'],
            title=text,
            status=item.get('status') or 'publish',
            has_acf='acf' in item,
        )

    def update_acf_fields(self, rest_base: str, post_id: int, acf: Dict[str, Any]) -> Dict[str, Any]:
        """Write ACF values onto a post"""
        response = self._request('POST', f"{rest_base}/{post_id}", json={'acf': acf})
        return response.json()

    # ------------------------------------------------------------------
    # taxonomies and terms

    def get_taxonomy(self, taxonomy: str) -> Optional[Dict[str, Any]]:
        """Return the taxonomy object, or None when it is not registered"""
        try:
            response = self._request('GET', f"taxonomies/{taxonomy}")
        except WordPressAPIError as e:
            if e.status_code == 404:
                return None
            raise
        return response.json()

    def find_term(self, rest_base: str, slug: str) -> Optional[Dict[str, Any]]:
        response = self._request('GET', rest_base, params={'slug': slug, 'per_page': 1})
        terms = response.json()
        return terms[0] if terms else None

    def create_term(self, rest_base: str, name: str, slug: str) -> Dict[str, Any]:
        response = self._request(
            'POST', rest_base, expected=(200, 201), json={'name': name, 'slug': slug}
        )
        return response.json()

    def set_post_terms(
        self,
        rest_base: str,
        post_id: int,
        taxonomy_rest_base: str,
        term_ids: Iterable[int],
    ) -> Dict[str, Any]:
        """Replace the post's terms in a taxonomy"""
        response = self._request(
            'POST',
            f"{rest_base}/{post_id}",
            json={taxonomy_rest_base: [int(term_id) for term_id in term_ids]},
        )
        return response.json()
