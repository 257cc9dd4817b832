import io

from shared.utils.enums import UploadFolder


def test_serves_stored_image(client, store):
    reference = store.save(io.BytesIO(b"image-bytes"), "a.png")
    name = reference.rsplit("/", 1)[1]

    response = client.get(f"/uploads/{name}")

    assert response.status_code == 200
    assert response.content == b"image-bytes"


def test_serves_images_from_public_folders(client, store):
    reference = store.save(io.BytesIO(b"logo"), "a.png", UploadFolder.LOGOS.value)

    response = client.get("/" + reference)

    assert response.status_code == 200
    assert response.content == b"logo"


def test_missing_image_is_not_found(client):
    response = client.get("/uploads/missing.png")

    assert response.status_code == 404
    assert response.json() == {"status": 404, "message": "Image not found"}


def test_unknown_folder_is_not_found(client, store):
    response = client.get("/uploads/private/secret.png")

    assert response.status_code == 404


def test_health_uses_envelope(client):
    response = client.get("/api/health")

    assert response.json() == {"status": 200, "message": "healthy"}
