"""
API tests for the video endpoints.
"""

from google.cloud import firestore

from joe_learn.main import INTERNAL_ERROR_MESSAGE


class TestCreateVideo:
    """POST /api/upload-video"""

    def test_creates_record(self, client, video_payload):
        response = client.post("/api/upload-video", json=video_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["id"]
        assert body["title"] == "Fractions, part 1"
        assert body["teacher"] == "Mr. Joe"
        assert body["subject"] == "Maths"
        assert body["public_id"] == "joe-learn-videos/frac1"
        assert body["duration"] == 312.5
        assert body["views"] == 0
        assert body["completions"] == 0
        assert isinstance(body["createdAt"], str)

    def test_zero_duration_is_accepted(self, client, video_payload):
        response = client.post("/api/upload-video", json={**video_payload, "duration": 0})

        assert response.status_code == 201
        assert response.json()["duration"] == 0

    def test_missing_duration_is_rejected_and_not_stored(self, client, video_payload):
        del video_payload["duration"]

        response = client.post("/api/upload-video", json=video_payload)

        assert response.status_code == 400
        assert response.json() == {"message": "Missing required video data."}
        assert client.get("/api/videos").json() == []

    def test_empty_teacher_is_rejected(self, client, video_payload):
        response = client.post("/api/upload-video", json={**video_payload, "teacherName": ""})
        assert response.status_code == 400

    def test_empty_body_is_rejected(self, client):
        response = client.post("/api/upload-video")

        assert response.status_code == 400
        assert response.json() == {"message": "Missing required video data."}

    def test_wrongly_typed_field_is_a_client_error(self, client, video_payload):
        response = client.post("/api/upload-video", json={**video_payload, "duration": "long"})

        assert response.status_code == 400
        assert "message" in response.json()


class TestListVideos:
    """GET /api/videos"""

    def test_newest_first(self, client, video_payload):
        for title in ("one", "two", "three"):
            client.post("/api/upload-video", json={**video_payload, "title": title})

        response = client.get("/api/videos")

        assert response.status_code == 200
        assert [video["title"] for video in response.json()] == ["three", "two", "one"]

    def test_partial_record_does_not_break_listing(self, client, metadata_store, video_payload):
        """A stored video missing ``subject`` is listed as it is."""
        client.post("/api/upload-video", json=video_payload)
        metadata_store.collection("videos").add({
            "title": "Old lesson",
            "teacher": "Mr. Joe",
            "url": "https://example.com/old.mp4",
            "public_id": "joe-learn-videos/old",
            "duration": 42,
            "createdAt": firestore.SERVER_TIMESTAMP,
        })

        response = client.get("/api/videos")

        assert response.status_code == 200
        videos = response.json()
        assert [video["title"] for video in videos] == ["Old lesson", "Fractions, part 1"]
        assert videos[0]["subject"] is None
        assert videos[0]["views"] == 0

    def test_ids_are_distinct(self, client, video_payload):
        ids = {
            client.post("/api/upload-video", json=video_payload).json()["id"]
            for _ in range(3)
        }
        assert len(ids) == 3

    def test_store_failure_is_a_generic_500(self, services, client):
        class BrokenStore:
            def collection(self, name):
                raise RuntimeError("firestore unavailable")

        services.metadata_store = BrokenStore()

        response = client.get("/api/videos")

        assert response.status_code == 500
        assert response.json() == {"message": INTERNAL_ERROR_MESSAGE}
        assert "firestore" not in response.text


class TestVideoCounters:
    """POST /api/videos/{id}/view and /complete"""

    def test_views_increase_by_exactly_k(self, client, video_payload):
        video_id = client.post("/api/upload-video", json=video_payload).json()["id"]

        for _ in range(3):
            response = client.post(f"/api/videos/{video_id}/view")
            assert response.status_code == 200
            assert response.json() == {"message": "View count updated successfully."}

        video = client.get("/api/videos").json()[0]
        assert video["views"] == 3
        assert video["completions"] == 0

    def test_complete_increments_completions(self, client, video_payload):
        video_id = client.post("/api/upload-video", json=video_payload).json()["id"]

        response = client.post(f"/api/videos/{video_id}/complete")

        assert response.status_code == 200
        assert response.json() == {"message": "Completion count updated successfully."}
        assert client.get("/api/videos").json()[0]["completions"] == 1

    def test_unknown_video_is_a_500(self, client):
        """Increments are blind; a missing video isn't distinguished."""
        response = client.post("/api/videos/does-not-exist/view")

        assert response.status_code == 500
        assert response.json() == {"message": INTERNAL_ERROR_MESSAGE}
