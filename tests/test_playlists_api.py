"""
API tests for the playlist endpoints (routes/playlists.py).

Tests cover:
- Creation validation
- Set-like add and remove
- Owner-only edits
- Detail and per-user listings
"""

import uuid

from conftest import API


class TestCreatePlaylist:
    """Tests for POST /playlists."""

    def test_create(self, client, make_user, make_playlist):
        alice = make_user("alice")
        playlist = make_playlist(alice, name="Watch later")

        assert playlist["name"] == "Watch later"
        assert playlist["videos"] == []
        assert playlist["ownerId"] == alice.id

    def test_name_and_description_required(self, client, make_user):
        alice = make_user("alice")
        response = client.post(f"{API}/playlists", json={"name": "Only name"}, headers=alice.headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Playlist name and description are both required"


class TestPlaylistVideos:
    """Tests for add/remove video."""

    def test_adding_twice_keeps_one_entry(self, client, make_user, make_video, make_playlist):
        alice = make_user("alice")
        video = make_video(alice)
        playlist = make_playlist(alice)
        url = f"{API}/playlists/add/{video['id']}/{playlist['id']}"

        first = client.patch(url, headers=alice.headers)
        second = client.patch(url, headers=alice.headers)

        assert first.status_code == second.status_code == 200
        assert second.json()["data"]["playlist"]["videos"] == [video["id"]]
        detail = client.get(f"{API}/playlists/{playlist['id']}").json()["data"]["playlist"]
        assert detail["videoCount"] == 1

    def test_videos_keep_insertion_order(self, client, make_user, make_video, make_playlist):
        alice = make_user("alice")
        first, second = make_video(alice, title="First"), make_video(alice, title="Second")
        playlist = make_playlist(alice)

        for video in (second, first):
            client.patch(f"{API}/playlists/add/{video['id']}/{playlist['id']}", headers=alice.headers)

        listed = client.get(f"{API}/playlists/user/{alice.id}").json()["data"]["playlists"]
        assert listed[0]["videoCount"] == 2
        response = client.patch(
            f"{API}/playlists/remove/{first['id']}/{playlist['id']}", headers=alice.headers
        )
        assert response.json()["data"]["playlist"]["videos"] == [second["id"]]

    def test_add_unknown_video(self, client, make_user, make_playlist):
        alice = make_user("alice")
        playlist = make_playlist(alice)

        response = client.patch(
            f"{API}/playlists/add/{uuid.uuid4()}/{playlist['id']}", headers=alice.headers
        )
        assert response.status_code == 404

    def test_stranger_cannot_add(self, client, make_user, make_video, make_playlist):
        alice, bob = make_user("alice"), make_user("bob")
        playlist = make_playlist(alice)
        video = make_video(bob)

        response = client.patch(
            f"{API}/playlists/add/{video['id']}/{playlist['id']}", headers=bob.headers
        )
        assert response.status_code == 403

    def test_deleted_video_leaves_playlist(self, client, make_user, make_video, make_playlist):
        alice = make_user("alice")
        video = make_video(alice)
        playlist = make_playlist(alice)
        client.patch(f"{API}/playlists/add/{video['id']}/{playlist['id']}", headers=alice.headers)

        client.delete(f"{API}/videos/{video['id']}", headers=alice.headers)
        detail = client.get(f"{API}/playlists/{playlist['id']}").json()["data"]["playlist"]
        assert detail["videoCount"] == 0


class TestPlaylistMutations:
    """Tests for PATCH/DELETE /playlists/{id}."""

    def test_owner_renames(self, client, make_user, make_playlist):
        alice = make_user("alice")
        playlist = make_playlist(alice)

        response = client.patch(
            f"{API}/playlists/{playlist['id']}", json={"name": "Renamed"}, headers=alice.headers
        )
        assert response.json()["data"]["playlist"]["name"] == "Renamed"

    def test_stranger_cannot_delete(self, client, make_user, make_playlist):
        alice, bob = make_user("alice"), make_user("bob")
        playlist = make_playlist(alice)

        response = client.delete(f"{API}/playlists/{playlist['id']}", headers=bob.headers)
        assert response.status_code == 403

    def test_owner_deletes(self, client, make_user, make_playlist):
        alice = make_user("alice")
        playlist = make_playlist(alice)

        assert client.delete(f"{API}/playlists/{playlist['id']}", headers=alice.headers).status_code == 200
        assert client.get(f"{API}/playlists/{playlist['id']}").status_code == 404

    def test_listing_for_unknown_user(self, client):
        assert client.get(f"{API}/playlists/user/{uuid.uuid4()}").status_code == 404
