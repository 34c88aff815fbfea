"""
Batch update of Mapster location popups

For every published location post:
1. Look up the address/contact record whose name equals the post title
2. Write the composed popup description and popup settings into ACF
3. Assign the configured map category
"""

import logging
import time
from datetime import datetime
from typing import Dict, Iterable, List, Optional

import requests

from .config import Settings
from .exceptions import (
    AcfUnavailableError,
    AuthenticationError,
    AuthorizationError,
    DataUnavailable,
    MapsterPopupError,
    RateLimitError,
    WordPressAPIError,
)
from .models import LocationPost, PopupFields, Record, UpdateResult
from .records import load_records, match_description
from .wordpress import WordPressClient

logger = logging.getLogger(__name__)


class PopupUpdater:
    def __init__(self, client: WordPressClient, settings: Settings,
                 field_keys: Optional[Dict[str, str]] = None):
        self.client = client
        self.settings = settings
        self.field_keys = field_keys or settings.field_key_table()
        self.post_rest_base: Optional[str] = None
        # resolved once per run; None means tagging is skipped
        self._term_target: Optional[Dict[str, object]] = None
        self._term_resolved = False

    def run(self, dry_run: bool = False, limit: Optional[int] = None,
            post_ids: Optional[Iterable[int]] = None) -> UpdateResult:
        """Update every published location and return the run's counts"""
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        self._term_target = None
        self._term_resolved = False
        result = UpdateResult(dry_run=dry_run, start_time=datetime.now())
        try:
            self._run(result, dry_run, limit, post_ids)
        except (AuthenticationError, AuthorizationError, AcfUnavailableError) as e:
            logger.error(f"❌ {e}")
            result.aborted = True
            result.abort_reason = str(e)
        except (MapsterPopupError, requests.RequestException) as e:
            logger.error(f"❌ Could not enumerate locations: {e}")
            result.aborted = True
            result.abort_reason = str(e)
        finally:
            result.end_time = datetime.now()
        return result

    def _run(self, result: UpdateResult, dry_run: bool, limit: Optional[int],
             post_ids: Optional[Iterable[int]]):
        self.client.require_capability(self.settings.required_capability)

        self.post_rest_base = (
            self.settings.post_type_rest_base
            or self.client.get_post_type_rest_base(self.settings.post_type)
        )

        if post_ids:
            posts = self._fetch_posts(post_ids, result)
        else:
            posts = self.client.list_published_posts(self.post_rest_base)

        if not posts:
            if not result.failed:
                logger.warning("⚠️ No mapster locations found.")
            return

        if not any(post.has_acf for post in posts):
            raise AcfUnavailableError(
                f"ACF fields are not exposed for post type '{self.settings.post_type}'; "
                "enable 'Show in REST API' on the popup field group."
            )

        if limit is not None:
            posts = posts[:limit]

        records = self._load_records()
        result.records_loaded = len(records)

        delay = self.settings.request_delay_ms / 1000.0
        for index, post in enumerate(posts):
            if index and delay:
                time.sleep(delay)
            self.update_post(post, records, result, dry_run=dry_run)

        logger.info(
            f"✅ Finished updating all locations. "
            f"{result.updated}/{result.total} updated, {result.unmatched} without a record, "
            f"{result.failed} failed."
        )

    def _load_records(self) -> List[Record]:
        try:
            return load_records(self.settings.data_file)
        except DataUnavailable as e:
            logger.error(f"❌ {e}; popups will get an empty body")
            return []

    def _fetch_posts(self, post_ids: Iterable[int], result: UpdateResult) -> List[LocationPost]:
        """Fetch the requested posts, keeping published ones; a failed fetch is counted"""
        posts = []
        for post_id in post_ids:
            try:
                post = self.client.get_post(self.post_rest_base, post_id)
            except (WordPressAPIError, RateLimitError, requests.RequestException) as e:
                logger.error(f"❌ Could not fetch post ID {post_id}: {e}")
                result.total += 1
                result.failed += 1
                result.errors.append({'post_id': post_id, 'title': None, 'error': str(e)})
                continue
            if post.status != 'publish':
                logger.warning(f"⚠️ Skipping post ID {post_id}: status is '{post.status}', not 'publish'")
                result.skipped += 1
                continue
            posts.append(post)
        return posts

    def build_popup_fields(self, post: LocationPost, body: str) -> PopupFields:
        return PopupFields(
            style_id=self.settings.popup_style_id,
            header=post.title,
            image_source=self.settings.popup_image_source,
            body=body,
            button_action=self.settings.popup_button_action,
            open_trigger=self.settings.popup_open_trigger,
            button_text=self.settings.popup_button_text,
        )

    def update_post(self, post: LocationPost, records: List[Record],
                    result: UpdateResult, dry_run: bool = False):
        """Write the popup and category of one post; failures are recorded, not raised"""
        result.total += 1
        description, matched = match_description(records, post.title)
        if matched:
            result.matched += 1
        else:
            result.unmatched += 1

        fields = self.build_popup_fields(post, description)

        if dry_run:
            logger.info(f"Would update post ID {post.id} ({post.title!r}): {description!r}")
            return

        try:
            self.client.update_acf_fields(
                self.post_rest_base, post.id, fields.to_acf(self.field_keys)
            )
        except (MapsterPopupError, requests.RequestException) as e:
            logger.error(f"❌ Failed to update post ID {post.id}: {e}")
            result.failed += 1
            result.errors.append({'post_id': post.id, 'title': post.title, 'error': str(e)})
            return

        result.updated += 1
        logger.info(f"✅ Updated post ID: {post.id}")

        if self.assign_category(post.id):
            result.tagged += 1

    def _resolve_term(self) -> Optional[Dict[str, object]]:
        """Find or create the category term, once per run"""
        if self._term_resolved:
            return self._term_target
        self._term_resolved = True

        taxonomy = self.settings.taxonomy
        slug = self.settings.category_slug

        tax = self.client.get_taxonomy(taxonomy)
        if tax is None:
            logger.error(f"❌ Taxonomy '{taxonomy}' does not exist.")
            return None
        rest_base = tax.get('rest_base') or taxonomy

        term = self.client.find_term(rest_base, slug)
        if term is None:
            try:
                term = self.client.create_term(rest_base, slug.capitalize(), slug)
            except WordPressAPIError as e:
                logger.error(f"❌ Failed to create term '{slug}': {e}")
                return None
            logger.info(f"✅ Created new term '{slug}' ({term['id']}) in taxonomy '{taxonomy}'.")

        self._term_target = {'rest_base': rest_base, 'term_id': int(term['id'])}
        return self._term_target

    def assign_category(self, post_id: int) -> bool:
        """Replace the post's map categories with the configured term"""
        taxonomy = self.settings.taxonomy
        slug = self.settings.category_slug
        try:
            target = self._resolve_term()
            if target is None:
                return False
            self.client.set_post_terms(
                self.post_rest_base, post_id, target['rest_base'], [target['term_id']]
            )
        except (MapsterPopupError, requests.RequestException) as e:
            self._term_resolved = self._term_target is not None
            logger.error(f"❌ Failed to assign term '{slug}' to post {post_id}: {e}")
            return False

        logger.info(f"✅ Assigned taxonomy '{taxonomy}' = '{slug}' to post {post_id}.")
        return True
