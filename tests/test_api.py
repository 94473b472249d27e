import pytest
from fastapi.testclient import TestClient

from clipscout.api import routes
from clipscout.api.app import app
from clipscout.llm.client import AIQuotaExceededError
from clipscout.models.transcript import TimedSegment, Transcript
from clipscout.transcript.metadata import VideoMetadataError
from clipscout.transcript.youtube import TranscriptUnavailableError


VIDEO_URL = "https://www.youtube.com/watch?v=abc123XYZ_0"
VIDEO_ID = "abc123XYZ_0"

TRANSCRIPT = (
    "Why is this 1 secret so amazing? "
    "Here is the biggest mistake people make. "
    "We walked to the shop and bought some bread. "
    "But wait, there's even more to this story."
)


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


def _headers(user_id):
    return {"X-User-Id": user_id}


def _fake_info(url):
    return {
        "title": "A great video",
        "description": "Original description",
        "duration": 0,
        "thumbnail": "https://img.example/thumb.jpg",
        "author": "Someone",
        "view_count": 42,
        "upload_date": "2024-01-31",
    }


def _fake_transcript(video_id, languages):
    segments = [TimedSegment(offset_ms=0, text="x"), TimedSegment(offset_ms=118000, text="y", duration_ms=2000)]
    return Transcript(video_id=video_id, text=TRANSCRIPT, segments=segments, language="en")


@pytest.fixture
def fake_youtube(monkeypatch):
    monkeypatch.setattr(routes, "get_video_info", _fake_info)
    monkeypatch.setattr(routes, "fetch_transcript", _fake_transcript)


def _store_video(client, user_id, url=VIDEO_URL):
    response = client.post("/v1/videos/transcript", json={"url": url}, headers=_headers(user_id))
    assert response.status_code == 200
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_requires_user_header(client):
    assert client.get("/v1/videos").status_code == 401
    assert client.post("/v1/videos/clips", json={"title": "t", "transcript": "x"}).status_code == 401


def test_transcript_rejects_invalid_url(client):
    response = client.post("/v1/videos/transcript", json={"url": "https://vimeo.com/1"}, headers=_headers("u-invalid"))
    assert response.status_code == 400


def test_transcript_is_fetched_and_stored(client, fake_youtube):
    data = _store_video(client, "u-transcript")

    assert data["video_id"] == VIDEO_ID
    assert data["full_transcript"] == TRANSCRIPT
    assert data["full_transcript_length"] == len(TRANSCRIPT)
    assert data["metadata"]["title"] == "A great video"
    # Duration missing from metadata is taken from the captions
    assert data["metadata"]["duration"] == 120

    video = client.get(f"/v1/videos/{VIDEO_ID}", headers=_headers("u-transcript")).json()
    assert video["transcript"] == TRANSCRIPT
    assert video["has_transcript"] is True
    assert video["has_clips"] is False


def test_transcript_refetch_updates_existing_video(client, fake_youtube):
    _store_video(client, "u-refetch")
    _store_video(client, "u-refetch")

    stats = client.get("/v1/videos/stats", headers=_headers("u-refetch")).json()
    assert stats == {"total_videos": 1, "total_clips": 0}


def test_transcript_unavailable(client, monkeypatch):
    def no_captions(video_id, languages):
        raise TranscriptUnavailableError("no captions")

    monkeypatch.setattr(routes, "get_video_info", _fake_info)
    monkeypatch.setattr(routes, "fetch_transcript", no_captions)

    response = client.post("/v1/videos/transcript", json={"url": VIDEO_URL}, headers=_headers("u-nocaptions"))
    assert response.status_code == 400
    assert "captions" in response.json()["detail"]


def test_transcript_metadata_failure(client, monkeypatch):
    def private_video(url):
        raise VideoMetadataError("private")

    monkeypatch.setattr(routes, "get_video_info", private_video)

    response = client.post("/v1/videos/transcript", json={"url": VIDEO_URL}, headers=_headers("u-private"))
    assert response.status_code == 400


def test_clips_without_api_key_use_heuristics(client, fake_youtube, no_api_key):
    user = "u-clips"
    _store_video(client, user)

    response = client.post(
        "/v1/videos/clips",
        json={"title": "A great video", "transcript": TRANSCRIPT, "duration": 120, "video_id": VIDEO_ID},
        headers=_headers(user),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total_clips"] == 3
    assert data["high_viral_potential"] == 1
    assert [c["hook_score"] for c in data["clips"]] == [7, 2, 2]
    assert all(0 <= c["start_time"] <= c["end_time"] <= 120 for c in data["clips"])

    video = client.get(f"/v1/videos/{VIDEO_ID}", headers=_headers(user)).json()
    assert video["clips_count"] == 3
    assert video["clips"][0]["hook_score"] == 7
    assert video["clips"][0]["transcript"] == "Why is this 1 secret so amazing?"


def test_clips_replace_previous_set(client, fake_youtube, no_api_key):
    user = "u-replace"
    _store_video(client, user)
    body = {"title": "A great video", "transcript": TRANSCRIPT, "duration": 120, "video_id": VIDEO_ID}

    client.post("/v1/videos/clips", json=body, headers=_headers(user))
    client.post("/v1/videos/clips", json={**body, "max_clips": 1}, headers=_headers(user))

    video = client.get(f"/v1/videos/{VIDEO_ID}", headers=_headers(user)).json()
    assert video["clips_count"] == 1
    assert client.get("/v1/videos/stats", headers=_headers(user)).json()["total_clips"] == 1


def test_clips_are_scoped_to_user(client, fake_youtube, no_api_key):
    _store_video(client, "u-owner")
    _store_video(client, "u-other")
    body = {"title": "A great video", "transcript": TRANSCRIPT, "duration": 120, "video_id": VIDEO_ID}

    client.post("/v1/videos/clips", json=body, headers=_headers("u-owner"))

    other = client.get(f"/v1/videos/{VIDEO_ID}", headers=_headers("u-other")).json()
    assert other["clips_count"] == 0


def test_clips_with_zero_cap(client, no_api_key):
    response = client.post(
        "/v1/videos/clips",
        json={"title": "t", "transcript": TRANSCRIPT, "max_clips": 0},
        headers=_headers("u-zero"),
    )
    assert response.status_code == 200
    assert response.json()["clips"] == []
    assert response.json()["message"] == "No viral clip opportunities found in this video"


def test_clips_require_title_and_transcript(client):
    response = client.post("/v1/videos/clips", json={"title": "t"}, headers=_headers("u-missing"))
    assert response.status_code == 400


def test_clips_quota_exceeded(client, monkeypatch):
    def over_quota(*args, **kwargs):
        raise AIQuotaExceededError("quota")

    monkeypatch.setattr(routes, "enhance_clips", over_quota)

    response = client.post(
        "/v1/videos/clips",
        json={"title": "t", "transcript": TRANSCRIPT},
        headers=_headers("u-quota"),
    )
    assert response.status_code == 429


def test_summary_is_saved(client, fake_youtube, monkeypatch):
    user = "u-summary"
    _store_video(client, user)
    monkeypatch.setattr(routes, "generate_summary", lambda *args: "A short summary.")

    response = client.post(
        "/v1/videos/summary",
        json={"title": "A great video", "transcript": TRANSCRIPT, "video_id": VIDEO_ID},
        headers=_headers(user),
    )

    assert response.status_code == 200
    assert response.json() == {"summary": "A short summary.", "word_count": 3, "character_count": 16}
    video = client.get(f"/v1/videos/{VIDEO_ID}", headers=_headers(user)).json()
    assert video["summary"] == "A short summary."
    assert video["has_summary"] is True


def test_summary_without_api_key(client, no_api_key):
    response = client.post(
        "/v1/videos/summary",
        json={"title": "A great video", "transcript": TRANSCRIPT},
        headers=_headers("u-nokey"),
    )
    assert response.status_code == 500
    assert response.json()["detail"] == "AI API key not configured"


def test_description_requires_context(client):
    response = client.post("/v1/videos/description", json={"title": "A great video"}, headers=_headers("u-desc"))
    assert response.status_code == 400


def test_description_for_unknown_video_still_returns(client, monkeypatch):
    monkeypatch.setattr(routes, "generate_description", lambda *args: "Watch this.")

    response = client.post(
        "/v1/videos/description",
        json={"title": "A great video", "summary": "A summary", "video_id": "missing"},
        headers=_headers("u-desc2"),
    )
    assert response.status_code == 200
    assert response.json() == {"description": "Watch this.", "character_count": 11}


def test_keywords_with_hashtags(client, fake_youtube, monkeypatch):
    user = "u-keywords"
    _store_video(client, user)
    monkeypatch.setattr(routes, "generate_keywords", lambda *args: ["python tips", "coding"])

    response = client.post(
        "/v1/videos/keywords",
        json={"title": "A great video", "transcript": TRANSCRIPT, "video_id": VIDEO_ID},
        headers=_headers(user),
    )

    data = response.json()
    assert data["keywords"] == ["python tips", "coding"]
    assert data["keyword_count"] == 2
    assert data["formatted_keywords"] == "python tips, coding"
    assert data["hashtags"] == ["#pythontips", "#coding"]
    video = client.get(f"/v1/videos/{VIDEO_ID}", headers=_headers(user)).json()
    assert video["keywords"] == ["python tips", "coding"]


def test_history_and_unknown_video(client, fake_youtube):
    user = "u-history"
    _store_video(client, user, "https://youtu.be/first000001")
    _store_video(client, user, "https://youtu.be/second00002")

    videos = client.get("/v1/videos", headers=_headers(user)).json()
    assert {v["video_id"] for v in videos} == {"first000001", "second00002"}
    assert len(client.get("/v1/videos?limit=1", headers=_headers(user)).json()) == 1

    response = client.get("/v1/videos/nope", headers=_headers(user))
    assert response.status_code == 404
