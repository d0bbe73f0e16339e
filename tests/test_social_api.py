"""
API tests for likes, tweets and the owner dashboard (routes/social.py).

Tests cover:
- Like toggles on videos, comments and tweets
- Liked-videos listing
- Tweet CRUD with ownership
- Dashboard totals
"""

import threading
import uuid

from auth.session_manager import Identity
from controllers import likes as like_controller
from db.session import SessionLocal

from conftest import API


class TestLikes:
    """Tests for /likes."""

    def test_video_like_toggles(self, client, make_user, make_video):
        alice, bob = make_user("alice"), make_user("bob")
        video = make_video(alice)
        url = f"{API}/likes/toggle/v/{video['id']}"

        assert client.post(url, headers=bob.headers).json()["data"] == {"liked": True}
        detail = client.get(f"{API}/videos/{video['id']}").json()["data"]["video"]
        assert detail["likesCount"] == 1

        assert client.post(url, headers=bob.headers).json()["data"] == {"liked": False}
        detail = client.get(f"{API}/videos/{video['id']}").json()["data"]["video"]
        assert detail["likesCount"] == 0

    def test_liked_videos_listing(self, client, make_user, make_video):
        alice, bob = make_user("alice"), make_user("bob")
        video = make_video(alice, title="Great")
        client.post(f"{API}/likes/toggle/v/{video['id']}", headers=bob.headers)

        videos = client.get(f"{API}/likes/videos", headers=bob.headers).json()["data"]["videos"]
        assert [v["title"] for v in videos] == ["Great"]
        assert videos[0]["owner"]["username"] == "alice"

    def test_liked_videos_hide_unpublished_from_others(self, client, make_user, make_video):
        alice, bob = make_user("alice"), make_user("bob")
        video = make_video(alice, title="Draft")
        own = make_video(alice, title="Mine")
        for item in (video, own):
            client.post(f"{API}/likes/toggle/v/{item['id']}", headers=alice.headers)
        client.post(f"{API}/likes/toggle/v/{video['id']}", headers=bob.headers)
        client.patch(f"{API}/videos/toggle-publish/{video['id']}", headers=alice.headers)

        bob_liked = client.get(f"{API}/likes/videos", headers=bob.headers).json()["data"]["videos"]
        assert bob_liked == []

        alice_liked = client.get(f"{API}/likes/videos", headers=alice.headers).json()["data"]["videos"]
        assert sorted(v["title"] for v in alice_liked) == ["Draft", "Mine"]

    def test_comment_like(self, client, make_user, make_video):
        alice, bob = make_user("alice"), make_user("bob")
        video = make_video(alice)
        comment = client.post(
            f"{API}/comments/{video['id']}", json={"content": "nice"}, headers=bob.headers
        ).json()["data"]["comment"]

        response = client.post(f"{API}/likes/toggle/c/{comment['id']}", headers=alice.headers)
        assert response.json()["data"] == {"liked": True}

        listing = client.get(f"{API}/comments/{video['id']}").json()["data"]["comments"]
        assert listing["items"][0]["likesCount"] == 1

    def test_concurrent_unlikes_both_succeed(self, client, make_user, make_video):
        """Test that two simultaneous toggles on a liked video never fail."""
        alice, bob = make_user("alice"), make_user("bob")
        video = make_video(alice)
        client.post(f"{API}/likes/toggle/v/{video['id']}", headers=bob.headers)
        actor = Identity(user_id=uuid.UUID(bob.id), username=bob.username)
        barrier = threading.Barrier(2)
        outcomes = []
        lock = threading.Lock()

        def attempt():
            session = SessionLocal()
            try:
                barrier.wait()
                response = like_controller.toggle_video_like(session, actor, uuid.UUID(video["id"]))
                outcome = response.data["liked"]
            except Exception as e:
                outcome = repr(e)
            finally:
                session.close()
            with lock:
                outcomes.append(outcome)

        threads = [threading.Thread(target=attempt) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert sorted(outcomes, key=str) == [False, True]

    def test_unknown_target(self, client, make_user):
        bob = make_user("bob")
        response = client.post(f"{API}/likes/toggle/t/{uuid.uuid4()}", headers=bob.headers)
        assert response.status_code == 404


class TestTweets:
    """Tests for /tweets."""

    def test_create_and_list(self, client, make_user):
        alice = make_user("alice")
        created = client.post(f"{API}/tweets", json={"content": "Hello"}, headers=alice.headers)
        assert created.status_code == 200

        tweets = client.get(f"{API}/tweets/user/{alice.id}").json()["data"]["tweets"]
        assert [t["content"] for t in tweets] == ["Hello"]
        assert tweets[0]["likesCount"] == 0

    def test_empty_content_rejected(self, client, make_user):
        alice = make_user("alice")
        response = client.post(f"{API}/tweets", json={"content": ""}, headers=alice.headers)
        assert response.status_code == 400

    def test_only_owner_edits_and_deletes(self, client, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        tweet = client.post(
            f"{API}/tweets", json={"content": "Mine"}, headers=alice.headers
        ).json()["data"]["tweet"]
        url = f"{API}/tweets/{tweet['id']}"

        assert client.patch(url, json={"content": "Ours"}, headers=bob.headers).status_code == 403
        assert client.delete(url, headers=bob.headers).status_code == 403

        edited = client.patch(url, json={"content": "Still mine"}, headers=alice.headers)
        assert edited.json()["data"]["tweet"]["content"] == "Still mine"
        assert client.delete(url, headers=alice.headers).status_code == 200
        assert client.get(f"{API}/tweets/user/{alice.id}").json()["data"]["tweets"] == []


class TestDashboard:
    """Tests for /dashboard."""

    def test_stats(self, client, make_user, make_video):
        alice, bob = make_user("alice"), make_user("bob")
        first = make_video(alice)
        make_video(alice, published=False)
        client.post(f"{API}/videos/{first['id']}/views")
        client.post(f"{API}/videos/{first['id']}/views")
        client.post(f"{API}/likes/toggle/v/{first['id']}", headers=bob.headers)
        client.post(f"{API}/subscription/c/{alice.id}", headers=bob.headers)

        stats = client.get(f"{API}/dashboard/stats", headers=alice.headers).json()["data"]
        assert stats == {
            "totalVideos": 2,
            "totalViews": 2,
            "totalSubscribers": 1,
            "totalLikes": 1,
        }

    def test_channel_videos_include_unpublished(self, client, make_user, make_video):
        alice = make_user("alice")
        make_video(alice, title="Draft", published=False)

        videos = client.get(f"{API}/dashboard/videos", headers=alice.headers).json()["data"]["videos"]
        assert [v["title"] for v in videos] == ["Draft"]

    def test_requires_authentication(self, client):
        assert client.get(f"{API}/dashboard/stats").status_code == 401
