"""Tests for posts, likes, bookmarks and comments."""

import os

import cloudinary.exceptions
import cloudinary.uploader
from bson.objectid import ObjectId

from support import create_post, image, register


# =============================================================================
# Create post
# =============================================================================


class TestCreatePost:
    def test_uploads_images_and_links_author(self, client, db, uploads):
        alice_id, alice = register(client, "alice")

        res = create_post(client, alice, caption="first shot", images=[image("a.png"), image("b.jpg", "image/jpeg")])
        post = res.get_json()["data"]

        assert res.status_code == 201
        assert post["caption"] == "first shot"
        assert post["images"] == [
            "https://res.cloudinary.com/demo/image/upload/v1/img1.png",
            "https://res.cloudinary.com/demo/image/upload/v1/img2.png",
        ]
        assert post["author"]["userName"] == "alice"
        assert db.users.find_one({"_id": ObjectId(alice_id)})["posts"] == [ObjectId(post["_id"])]
        assert all(options["folder"] == "insta/images/postImages" for _, options in uploads)

    def test_temp_files_are_removed(self, app, client, uploads):
        _, alice = register(client, "alice")

        create_post(client, alice)

        assert not os.path.exists(uploads[0][0])
        assert os.listdir(app.config["UPLOAD_FOLDER"]) == []

    def test_zero_images_rejected_before_any_write(self, client, db, uploads):
        _, alice = register(client, "alice")

        res = create_post(client, alice, images=[])

        assert res.status_code == 400
        assert res.get_json()["message"] == "No image found"
        assert uploads == []
        assert db.posts.count_documents({}) == 0

    def test_at_most_ten_images(self, client, db, uploads):
        _, alice = register(client, "alice")

        res = create_post(client, alice, images=[image(f"{i}.png") for i in range(11)])

        assert res.status_code == 400
        assert uploads == []
        assert db.posts.count_documents({}) == 0

    def test_unsupported_type_uploads_nothing(self, client, db, uploads):
        _, alice = register(client, "alice")

        res = create_post(client, alice, images=[image("ok.png"), image("notes.txt", "text/plain")])

        assert res.status_code == 400
        assert res.get_json()["message"] == "File type not supported!"
        assert uploads == []

    def test_oversized_image_uploads_nothing(self, app, client, db, uploads):
        app.config["MAX_IMAGE_SIZE"] = 1024
        _, alice = register(client, "alice")

        res = create_post(client, alice, images=[image("small.png"), image("big.png", padding=4096)])

        assert res.status_code == 400
        assert res.get_json()["message"] == "Image is larger than 1 KB"
        assert uploads == []
        assert db.posts.count_documents({}) == 0
        assert os.listdir(app.config["UPLOAD_FOLDER"]) == []

    def test_request_over_content_limit(self, app, client, db, uploads):
        app.config["MAX_CONTENT_LENGTH"] = 2048
        _, alice = register(client, "alice")

        res = create_post(client, alice, images=[image("big.png", padding=8192)])

        assert res.status_code == 413
        assert res.get_json() == {
            "success": False,
            "message": "Uploaded file is too large",
            "status": 413,
            "data": None,
            "error": True,
        }
        assert uploads == []
        assert db.posts.count_documents({}) == 0

    def test_image_host_failure(self, client, db, monkeypatch):
        def broken(path, **options):
            raise cloudinary.exceptions.Error("quota exceeded")

        monkeypatch.setattr(cloudinary.uploader, "upload", broken)
        _, alice = register(client, "alice")

        res = create_post(client, alice)

        assert res.status_code == 502
        assert res.get_json()["message"] == "Image upload failed"
        assert db.posts.count_documents({}) == 0

    def test_requires_login(self, client):
        res = create_post(client, {})

        assert res.status_code == 401


# =============================================================================
# Listings
# =============================================================================


class TestListPosts:
    def test_newest_first_with_pagination(self, client):
        _, alice = register(client, "alice")
        for caption in ("one", "two", "three"):
            create_post(client, alice, caption=caption)

        res = client.get("/api/v1/post/all-posts?limit=2")
        captions = [p["caption"] for p in res.get_json()["data"]]
        rest = client.get("/api/v1/post/all-posts?limit=2&offset=2").get_json()["data"]

        assert captions == ["three", "two"]
        assert [p["caption"] for p in rest] == ["one"]

    def test_bad_limit(self, client):
        res = client.get("/api/v1/post/all-posts?limit=0")

        assert res.status_code == 400

    def test_user_posts(self, client):
        _, alice = register(client, "alice")
        _, bob = register(client, "bob")
        create_post(client, alice, caption="alice's")
        create_post(client, bob, caption="bob's")

        data = client.get("/api/v1/post/user-posts/bob").get_json()["data"]

        assert [p["caption"] for p in data] == ["bob's"]
        assert client.get("/api/v1/post/user-posts/nobody").status_code == 404


# =============================================================================
# Likes and bookmarks
# =============================================================================


class TestLikes:
    def test_like_toggles(self, client, db):
        _, alice = register(client, "alice")
        bob_id, bob = register(client, "bob")
        post_id = create_post(client, alice).get_json()["data"]["_id"]

        first = client.put(f"/api/v1/post/like-unlike/{post_id}", headers=bob)
        assert first.get_json()["data"] == {"liked": True, "likesCount": 1}
        assert db.posts.find_one({"_id": ObjectId(post_id)})["likes"] == [ObjectId(bob_id)]

        second = client.put(f"/api/v1/post/like-unlike/{post_id}", headers=bob)
        assert second.get_json()["data"] == {"liked": False, "likesCount": 0}
        assert db.posts.find_one({"_id": ObjectId(post_id)})["likes"] == []

    def test_unknown_post(self, client):
        _, alice = register(client, "alice")

        missing = client.put(f"/api/v1/post/like-unlike/{ObjectId()}", headers=alice)
        malformed = client.put("/api/v1/post/like-unlike/not-an-id", headers=alice)

        assert missing.status_code == 404
        assert malformed.status_code == 400

    def test_alice_posts_bob_likes(self, client):
        alice_id, alice = register(client, "alice")
        bob_id, bob = register(client, "bob")
        post_id = create_post(client, alice).get_json()["data"]["_id"]
        client.put(f"/api/v1/post/like-unlike/{post_id}", headers=bob)

        posts = client.get("/api/v1/post/all-posts", headers=bob).get_json()["data"]

        assert len(posts) == 1
        assert posts[0]["author"]["_id"] == alice_id
        assert posts[0]["likes"] == [bob_id]
        assert posts[0]["likedByMe"] is True

    def test_liked_by_me_needs_a_token(self, app, client):
        _, alice = register(client, "alice")
        post_id = create_post(client, alice).get_json()["data"]["_id"]
        client.put(f"/api/v1/post/like-unlike/{post_id}", headers=alice)

        anonymous = app.test_client().get("/api/v1/post/all-posts").get_json()["data"]

        assert anonymous[0]["likesCount"] == 1
        assert anonymous[0]["likedByMe"] is False


class TestBookmarks:
    def test_bookmark_toggles(self, client, db):
        alice_id, alice = register(client, "alice")
        post_id = create_post(client, alice).get_json()["data"]["_id"]

        first = client.put(f"/api/v1/post/bookmark/{post_id}", headers=alice)
        assert first.get_json()["data"] == {"bookmarked": True}
        assert db.users.find_one({"_id": ObjectId(alice_id)})["bookmarks"] == [ObjectId(post_id)]

        second = client.put(f"/api/v1/post/bookmark/{post_id}", headers=alice)
        assert second.get_json()["data"] == {"bookmarked": False}
        assert db.users.find_one({"_id": ObjectId(alice_id)})["bookmarks"] == []


# =============================================================================
# Comments
# =============================================================================


class TestComments:
    def test_add_and_list(self, client, db):
        _, alice = register(client, "alice")
        _, bob = register(client, "bob")
        post_id = create_post(client, alice).get_json()["data"]["_id"]

        first = client.post(f"/api/v1/post/{post_id}/comments", json={"text": "nice"}, headers=bob)
        client.post(f"/api/v1/post/{post_id}/comments", json={"text": "thanks"}, headers=alice)

        assert first.status_code == 201
        comment_id = first.get_json()["data"]["_id"]
        assert ObjectId(comment_id) in db.posts.find_one({"_id": ObjectId(post_id)})["comments"]

        listed = client.get(f"/api/v1/post/{post_id}/comments").get_json()["data"]
        assert [(c["author"]["userName"], c["text"]) for c in listed] == [("bob", "nice"), ("alice", "thanks")]

    def test_text_required(self, client, db):
        _, alice = register(client, "alice")
        post_id = create_post(client, alice).get_json()["data"]["_id"]

        res = client.post(f"/api/v1/post/{post_id}/comments", json={"text": "  "}, headers=alice)

        assert res.status_code == 400
        assert res.get_json()["message"] == "Comment text is required"
        assert db.comments.count_documents({}) == 0

    def test_comment_on_missing_post(self, client):
        _, alice = register(client, "alice")

        res = client.post(f"/api/v1/post/{ObjectId()}/comments", json={"text": "hello?"}, headers=alice)

        assert res.status_code == 404
