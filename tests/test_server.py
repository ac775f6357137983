import io

import pytest

import backend.models
import models
from backend.server import create_app

from conftest import png_bytes


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def _upload(image, **form):
    data = {"image": (io.BytesIO(png_bytes(image)), "image.png")}
    data.update(form)
    return data


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_count_endpoint(client, three_squares_image):
    response = client.post(
        "/api/analyze/count",
        data=_upload(three_squares_image, min_area="5", threshold_mode="otsu"),
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["mode"] == "count"
    assert body["result"]["count"] == 3
    assert body["report"] == "Count ≈ 3"
    assert body["image"].startswith("data:image/png;base64,")


def test_d86_endpoint(client, square_image):
    response = client.post(
        "/api/analyze/d86",
        data=_upload(square_image, hx="100", hy="100", energy_ratio="86"),
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    body = response.get_json()
    assert body["result"]["shape"] == "Circle"
    assert body["report"].startswith("Analysis Result (86% Energy):")


def test_unparseable_form_values_use_defaults(client, three_squares_image):
    response = client.post(
        "/api/analyze/count",
        data=_upload(three_squares_image, min_area="lots", blur_kernel=""),
        content_type="multipart/form-data",
    )
    assert response.status_code == 200
    assert response.get_json()["result"]["count"] == 3


def test_black_image_is_structured_error(client, black_image):
    response = client.post(
        "/api/analyze/d86",
        data=_upload(black_image),
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert response.get_json()["error"]["kind"] == "EmptyImageError"


def test_out_of_range_config(client, square_image):
    response = client.post(
        "/api/analyze/d86",
        data=_upload(square_image, energy_ratio="250"),
        content_type="multipart/form-data",
    )
    assert response.status_code == 400
    assert response.get_json()["error"]["kind"] == "InvalidConfigError"


def test_missing_upload(client):
    response = client.post("/api/analyze/count", data={}, content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json()["error"]["kind"] == "ImageLoadError"


def test_unknown_mode(client):
    response = client.post("/api/analyze/histogram", data={}, content_type="multipart/form-data")
    assert response.status_code == 404


def test_health_lists_core_modes(client):
    assert backend.models.AnalysisMode is models.AnalysisMode
    modes = client.get("/health").get_json()["modes"]
    assert modes == [mode.value for mode in models.AnalysisMode]
