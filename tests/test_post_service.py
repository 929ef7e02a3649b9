"""Tests for bloghub.services.posts: ownership policy, partial updates, pagination, view counts, comments."""

import unittest

from bloghub.core.roles import Role
from bloghub.models import Comment, Post
from bloghub.schemas.post import PostCreate, PostUpdate
from bloghub.services import posts as post_service
from bloghub.services.categories import create_category
from bloghub.services.errors import (
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)
from tests._db import fast_bcrypt, make_session_factory, make_user


class PostServiceTestCase(unittest.TestCase):
    """Fresh database with an author, another user and an admin."""

    def setUp(self) -> None:
        patcher = fast_bcrypt()
        patcher.start()
        self.addCleanup(patcher.stop)
        self.db = make_session_factory()()
        self.addCleanup(self.db.close)
        self.author = make_user(self.db, "alice")
        self.other = make_user(self.db, "bob")
        self.admin = make_user(self.db, "root", role=Role.ADMIN)

    def _create(self, **fields: object) -> Post:
        data = {"title": "Hello", "content": "First post body"}
        data.update(fields)
        return post_service.create_post(self.db, self.author, PostCreate(**data))


class TestCreatePost(PostServiceTestCase):
    def test_author_is_creator(self) -> None:
        post = self._create(tags=["python", "web"], is_published=True)
        self.assertEqual(post.author_id, self.author.id)
        self.assertEqual(post.author.username, "alice")
        self.assertEqual(post.tags, ["python", "web"])
        self.assertTrue(post.is_published)
        self.assertEqual(post.view_count, 0)
        self.assertEqual(post.comments, [])

    def test_defaults_to_unpublished(self) -> None:
        self.assertFalse(self._create().is_published)

    def test_title_and_content_required(self) -> None:
        for fields in ({"title": None}, {"content": None}, {"title": "   "}, {"content": ""}):
            with self.subTest(fields=fields):
                with self.assertRaises(ValidationFailedError):
                    self._create(**fields)
        self.assertEqual(self.db.query(Post).count(), 0)

    def test_excerpt_derived_when_missing(self) -> None:
        long_body = "word " * 100
        post = self._create(content=long_body)
        self.assertTrue(post.excerpt.endswith("..."))
        self.assertLessEqual(len(post.excerpt), post_service.EXCERPT_MAX_LEN + 3)

    def test_excerpt_kept_when_provided(self) -> None:
        self.assertEqual(self._create(excerpt="Short summary").excerpt, "Short summary")

    def test_tags_deduplicated(self) -> None:
        post = self._create(tags="a, b, a, , c")
        self.assertEqual(post.tags, ["a", "b", "c"])

    def test_unknown_category_rejected(self) -> None:
        with self.assertRaises(ValidationFailedError):
            self._create(category=999)

    def test_category_attached(self) -> None:
        category = create_category(self.db, "Python")
        post = self._create(category=category.id)
        self.assertEqual(post.category.name, "Python")


class TestDeriveExcerpt(unittest.TestCase):
    def test_short_content_unchanged(self) -> None:
        self.assertEqual(post_service.derive_excerpt("  a\n\nb  "), "a b")

    def test_truncates(self) -> None:
        self.assertEqual(post_service.derive_excerpt("abcdefgh", max_len=4), "abcd...")


class TestOwnershipPolicy(PostServiceTestCase):
    """Only the author may update or delete; admin override only when enabled."""

    def test_non_author_cannot_update_or_delete(self) -> None:
        post = self._create()
        with self.assertRaises(ForbiddenError):
            post_service.update_post(self.db, self.other, post.id, PostUpdate(title="Hijacked"))
        with self.assertRaises(ForbiddenError):
            post_service.delete_post(self.db, self.other, post.id)
        self.db.expire_all()
        self.assertEqual(self.db.get(Post, post.id).title, "Hello")

    def test_admin_without_override_is_forbidden(self) -> None:
        post = self._create()
        with self.assertRaises(ForbiddenError):
            post_service.update_post(self.db, self.admin, post.id, PostUpdate(title="Moderated"))
        with self.assertRaises(ForbiddenError):
            post_service.delete_post(self.db, self.admin, post.id)

    def test_admin_with_override_may_update_and_delete(self) -> None:
        post = self._create()
        post_id = post.id
        updated = post_service.update_post(
            self.db, self.admin, post.id, PostUpdate(title="Moderated"), allow_admin_override=True
        )
        self.assertEqual(updated.title, "Moderated")
        self.assertEqual(updated.author_id, self.author.id)

        post_service.delete_post(self.db, self.admin, post_id, allow_admin_override=True)
        self.assertIsNone(self.db.get(Post, post_id))

    def test_override_does_not_help_regular_users(self) -> None:
        post = self._create()
        with self.assertRaises(ForbiddenError):
            post_service.update_post(
                self.db, self.other, post.id, PostUpdate(title="x"), allow_admin_override=True
            )

    def test_can_modify_post_predicate(self) -> None:
        post = self._create()
        self.assertTrue(post_service.can_modify_post(post, self.author))
        self.assertFalse(post_service.can_modify_post(post, self.other))
        self.assertFalse(post_service.can_modify_post(post, None))
        self.assertFalse(post_service.can_modify_post(post, self.admin))
        self.assertTrue(post_service.can_modify_post(post, self.admin, allow_admin_override=True))

    def test_missing_post_is_not_found_before_policy(self) -> None:
        with self.assertRaises(NotFoundError):
            post_service.update_post(self.db, self.other, 12345, PostUpdate(title="x"))
        with self.assertRaises(NotFoundError):
            post_service.delete_post(self.db, self.other, 12345)


class TestPartialUpdate(PostServiceTestCase):
    def test_absent_fields_keep_prior_values(self) -> None:
        post = self._create(excerpt="Summary", tags=["a"], is_published=True)
        updated = post_service.update_post(
            self.db, self.author, post.id, PostUpdate(content="New body")
        )
        self.assertEqual(updated.content, "New body")
        self.assertEqual(updated.title, "Hello")
        self.assertEqual(updated.excerpt, "Summary")
        self.assertEqual(updated.tags, ["a"])
        self.assertTrue(updated.is_published)

    def test_explicit_false_unpublishes(self) -> None:
        post = self._create(is_published=True)
        updated = post_service.update_post(
            self.db, self.author, post.id, PostUpdate.model_validate({"isPublished": False})
        )
        self.assertFalse(updated.is_published)

    def test_empty_tags_clear(self) -> None:
        post = self._create(tags=["a", "b"])
        updated = post_service.update_post(self.db, self.author, post.id, PostUpdate(tags=[]))
        self.assertEqual(updated.tags, [])

    def test_blank_title_rejected(self) -> None:
        post = self._create()
        with self.assertRaises(ValidationFailedError):
            post_service.update_post(self.db, self.author, post.id, PostUpdate(title=" "))

    def test_author_unchanged(self) -> None:
        post = self._create()
        updated = post_service.update_post(self.db, self.author, post.id, PostUpdate(title="T2"))
        self.assertEqual(updated.author_id, self.author.id)

    def test_derived_excerpt_follows_new_content(self) -> None:
        post = self._create(content="Original body")
        self.assertEqual(post.excerpt, "Original body")
        updated = post_service.update_post(
            self.db, self.author, post.id, PostUpdate(content="Rewritten body")
        )
        self.assertEqual(updated.excerpt, "Rewritten body")

    def test_excerpt_in_same_patch_wins(self) -> None:
        post = self._create()
        updated = post_service.update_post(
            self.db, self.author, post.id, PostUpdate(content="New", excerpt="Hand written")
        )
        self.assertEqual(updated.excerpt, "Hand written")


class TestListPosts(PostServiceTestCase):
    def test_pagination_counts(self) -> None:
        for i in range(25):
            self._create(title=f"Post {i}")
        posts, total = post_service.list_posts(self.db, page=2, limit=10)
        self.assertEqual(len(posts), 10)
        self.assertEqual(total, 25)
        self.assertEqual(post_service.page_count(total, 10), 3)
        last_page, _ = post_service.list_posts(self.db, page=3, limit=10)
        self.assertEqual(len(last_page), 5)

    def test_newest_first(self) -> None:
        first = self._create(title="First")
        second = self._create(title="Second")
        posts, _ = post_service.list_posts(self.db)
        self.assertEqual([p.id for p in posts], [second.id, first.id])

    def test_category_filter(self) -> None:
        news = create_category(self.db, "News")
        self._create(title="In news", category=news.id)
        self._create(title="Uncategorized")
        posts, total = post_service.list_posts(self.db, category_id=news.id)
        self.assertEqual(total, 1)
        self.assertEqual(posts[0].title, "In news")

    def test_empty(self) -> None:
        posts, total = post_service.list_posts(self.db, page=1, limit=10)
        self.assertEqual((posts, total), ([], 0))
        self.assertEqual(post_service.page_count(0, 10), 0)

    def test_rejects_non_positive_page(self) -> None:
        with self.assertRaises(ValidationFailedError):
            post_service.list_posts(self.db, page=0)


class TestGetPostViewCount(PostServiceTestCase):
    def test_each_fetch_increments_by_one(self) -> None:
        post = self._create()
        for expected in (1, 2, 3):
            self.assertEqual(post_service.get_post(self.db, post.id).view_count, expected)

    def test_missing_post(self) -> None:
        with self.assertRaises(NotFoundError):
            post_service.get_post(self.db, 404)


class TestComments(PostServiceTestCase):
    def test_any_user_can_comment(self) -> None:
        post = self._create()
        post_service.add_comment(self.db, self.other, post.id, "Nice post")
        updated = post_service.add_comment(self.db, self.author, post.id, "Thanks")
        self.assertEqual([c.content for c in updated.comments], ["Nice post", "Thanks"])
        self.assertEqual(updated.comments[0].author.username, "bob")

    def test_comment_on_missing_post(self) -> None:
        self._create()
        with self.assertRaises(NotFoundError):
            post_service.add_comment(self.db, self.other, 999, "Hello?")
        self.assertEqual(self.db.query(Post).count(), 1)
        self.assertEqual(self.db.query(Comment).count(), 0)

    def test_blank_comment_rejected(self) -> None:
        post = self._create()
        with self.assertRaises(ValidationFailedError):
            post_service.add_comment(self.db, self.other, post.id, "  ")

    def test_delete_removes_comments(self) -> None:
        post = self._create()
        post_service.add_comment(self.db, self.other, post.id, "First!")
        post_service.delete_post(self.db, self.author, post.id)
        self.assertEqual(self.db.query(Comment).count(), 0)


if __name__ == "__main__":
    unittest.main()
