"""Request helpers shared by the API tests."""

import io

PASSWORD = "Sup3rSecret!"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def image(name="photo.png", content_type="image/png", padding=0):
    return (io.BytesIO(PNG_BYTES + b"\x00" * padding), name, content_type)


def signup(client, user_name, email=None, full_name=None, password=PASSWORD):
    return client.post(
        "/api/v1/auth/signup",
        json={
            "email": email or f"{user_name}@example.com",
            "password": password,
            "userName": user_name,
            "fullName": full_name or user_name.title(),
        },
    )


def login(client, email, password=PASSWORD):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


def register(client, user_name):
    """Sign up and log in; returns ``(user_id, headers)`` for authenticated calls."""
    created = signup(client, user_name)
    assert created.status_code == 201, created.get_json()
    logged_in = login(client, f"{user_name}@example.com")
    assert logged_in.status_code == 200, logged_in.get_json()
    token = logged_in.get_json()["data"]["accessToken"]
    return created.get_json()["data"]["_id"], {"Authorization": f"Bearer web@{token}"}


def create_post(client, headers, caption="hello", images=None):
    return client.post(
        "/api/v1/post/create-post",
        data={"caption": caption, "image": images if images is not None else [image()]},
        headers=headers,
        content_type="multipart/form-data",
    )
