# content/tests/test_content.py

from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from content.models import POLICY_SLUGS, Announcement, Banner, BlogPost, Page
from permissions.roles import ROLE_MANAGER, ROLE_SUPPORT

User = get_user_model()


def make_post(title, **extra):
    data = {"content": "Body", "category": "Cat Care", "author": "Team"}
    data.update(extra)
    return BlogPost.objects.create(title=title, **data)


class BlogPostModelTests(TestCase):
    def test_slug_is_generated_and_unique(self):
        a = make_post("Feeding Your Kitten")
        b = make_post("Feeding Your Kitten")
        self.assertEqual(a.slug, "feeding-your-kitten")
        self.assertEqual(b.slug, "feeding-your-kitten-2")

    def test_published_at_set_once(self):
        post = make_post("Litter Training 101")
        self.assertIsNone(post.published_at)

        post.status = BlogPost.STATUS_PUBLISHED
        post.save()
        first = post.published_at
        self.assertIsNotNone(first)

        post.status = BlogPost.STATUS_DRAFT
        post.save()
        post.status = BlogPost.STATUS_PUBLISHED
        post.save()
        self.assertEqual(post.published_at, first)


class PublicContentApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_only_published_posts_are_listed(self):
        make_post("Draft Post")
        make_post("Dog Walking", status=BlogPost.STATUS_PUBLISHED, category="Dog Care")
        make_post("Grooming", status=BlogPost.STATUS_PUBLISHED, is_featured=True)

        res = self.client.get("/api/content/blog/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 2)

        res = self.client.get("/api/content/blog/", {"category": "dog care"})
        self.assertEqual([p["title"] for p in res.data["results"]], ["Dog Walking"])

        res = self.client.get("/api/content/blog/", {"featured": "true"})
        self.assertEqual([p["title"] for p in res.data["results"]], ["Grooming"])

    def test_post_detail_hides_drafts(self):
        draft = make_post("Secret")
        live = make_post("Public", status=BlogPost.STATUS_PUBLISHED)

        self.assertEqual(self.client.get(f"/api/content/blog/{draft.slug}/").status_code, status.HTTP_404_NOT_FOUND)
        res = self.client.get(f"/api/content/blog/{live.slug}/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["content"], "Body")

    def test_pages(self):
        Page.objects.create(slug="return-policy", title="Returns", body="7 days")
        Page.objects.create(slug="old-policy", title="Old", is_published=False)

        res = self.client.get("/api/content/pages/return-policy/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["body"], "7 days")

        res = self.client.get("/api/content/pages/old-policy/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.data["error"]["code"], "PAGE_NOT_FOUND")

    def test_active_announcements_and_banners(self):
        Announcement.objects.create(text="Free delivery over 100!")
        Announcement.objects.create(text="Old news", is_active=False)
        Banner.objects.create(image_url="/b2.jpg", sort_order=2)
        Banner.objects.create(image_url="/b1.jpg", sort_order=1)
        Banner.objects.create(image_url="/off.jpg", is_active=False)

        res = self.client.get("/api/content/announcements/")
        self.assertEqual([a["text"] for a in res.data], ["Free delivery over 100!"])

        res = self.client.get("/api/content/banners/")
        self.assertEqual([b["image_url"] for b in res.data], ["/b1.jpg", "/b2.jpg"])


class StaffContentApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(email="editor@example.com", password="x", role=ROLE_MANAGER)

    def test_requires_content_capability(self):
        support = User.objects.create_user(email="support@example.com", password="x", role=ROLE_SUPPORT)
        self.client.force_authenticate(user=support)
        res = self.client.post("/api/content/manage/announcements/", {"text": "Hi"})
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_manager_publishes_post(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(
            "/api/content/manage/blog/",
            {
                "title": "Choosing Cat Litter",
                "content": "Clumping vs silica",
                "category": "Cat Care",
                "author": "Editor",
                "tags": ["cat", "litter"],
                "status": "published",
            },
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED, res.data)
        self.assertEqual(res.data["slug"], "choosing-cat-litter")
        self.assertIsNotNone(res.data["published_at"])

    def test_manager_edits_page_by_slug(self):
        Page.objects.create(slug="shipping-policy", title="Shipping", body="old")
        self.client.force_authenticate(user=self.manager)

        res = self.client.patch("/api/content/manage/pages/shipping-policy/", {"body": "new"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(Page.objects.get(slug="shipping-policy").body, "new")


class SeedPagesCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        Page.objects.create(slug="return-policy", title="Custom", body="keep me")

        call_command("seed_pages", stdout=StringIO())
        call_command("seed_pages", stdout=StringIO())

        self.assertEqual(Page.objects.filter(slug__in=POLICY_SLUGS).count(), len(POLICY_SLUGS))
        self.assertEqual(Page.objects.get(slug="return-policy").body, "keep me")
